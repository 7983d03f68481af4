"""Choosing a beverage and redeeming a pre-payment auth code."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, Protocol

from dvmkit.auth import AuthCodeManager
from dvmkit.beverage import Beverage, BeverageManager
from dvmkit.dto import DVMInfo, ResponseStock
from dvmkit.exceptions import DVMInfoError, InvalidError, NotFoundError

MIN_BEVERAGE_ID = 1
MAX_BEVERAGE_ID = 20
MAX_AUTH_ATTEMPTS = 3


class _StockSource(Protocol):
    def has_enough_stock(self, beverage_id: int, quantity: int) -> bool: ...


class _Peers(Protocol):
    def request_beverage_stock_to_others(self, beverage_id: int, quantity: int) -> list[ResponseStock]: ...


class _Locator(Protocol):
    def calculate_nearest(self, responses: Iterable[ResponseStock]) -> DVMInfo: ...


class SelectBeverageController:
    """Checks a selection against local stock and finds another machine if it falls short."""

    def __init__(self, location_manager: _Locator, beverage_manager: _StockSource, socket_manager: _Peers) -> None:
        self._location_manager = location_manager
        self._beverage_manager = beverage_manager
        self._socket_manager = socket_manager

    def select_beverage(self, beverage_id: int, quantity: int) -> None:
        """Return if stock suffices; otherwise raise DVMInfoError naming the nearest machine."""
        if not MIN_BEVERAGE_ID <= beverage_id <= MAX_BEVERAGE_ID:
            raise InvalidError("음료 아이디는 1~20 사이의 값이어야 합니다.")
        if quantity <= 0:
            raise InvalidError("quantity는 1 이상이어야 합니다.")

        try:
            has_stock = self._beverage_manager.has_enough_stock(beverage_id, quantity)
        except NotFoundError:
            raise InvalidError(f"존재하지 않는 beverageId 입니다: {beverage_id}") from None
        if has_stock:
            return

        responses = self._socket_manager.request_beverage_stock_to_others(beverage_id, quantity)
        raise DVMInfoError(self._location_manager.calculate_nearest(responses))


class EnterAuthCodeController:
    """Hands out a pre-paid beverage for a valid auth code, allowing three attempts."""

    def __init__(
        self,
        beverage_manager: BeverageManager,
        auth_code_manager: AuthCodeManager,
        reader: Callable[[str], str] = input,
    ) -> None:
        self._beverage_manager = beverage_manager
        self._auth_code_manager = auth_code_manager
        self._reader = reader

    def enter_auth_code(self, auth_code: str) -> Beverage:
        """Redeem ``auth_code``, asking again on failure; InvalidError after three failures."""
        for attempt in range(1, MAX_AUTH_ATTEMPTS + 1):
            try:
                self._auth_code_manager.validate_auth_code(auth_code)
                beverage_id = self._auth_code_manager.get_beverage_id(auth_code)
                self._auth_code_manager.delete_auth_code(auth_code)
                return self._beverage_manager.get_beverage(beverage_id)
            except NotFoundError:
                if attempt == MAX_AUTH_ATTEMPTS:
                    break
                print(
                    f"[{attempt}번째 실패] 유효하지 않은 인증 코드입니다. 다시 입력해주세요: ",
                    end="",
                    file=sys.stderr,
                    flush=True,
                )
                auth_code = self.input_auth_code()
        raise InvalidError("인증코드를 3회 모두 실패했습니다.")

    def input_auth_code(self) -> str:
        return self._reader("")