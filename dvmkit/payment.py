"""Card payment at this machine and pre-payment for stock held by another machine."""

from __future__ import annotations

import sys
from typing import Callable, Protocol

from dvmkit.auth import AuthCodeManager
from dvmkit.beverage import Beverage, BeverageManager
from dvmkit.credit import Bank, CreditCard
from dvmkit.exceptions import (
    FailedToPrePaymentError,
    InvalidError,
    NotEnoughBalanceError,
    NotFoundError,
)

MAX_CARD_ATTEMPTS = 3
CARD_PROMPT = "카드 번호를 입력하세요: "


class CardNotFoundError(Exception):
    def __init__(self, message: str = "카드 조회 3회 모두 실패하였습니다.") -> None:
        super().__init__(message)


class InsufficientBalanceError(Exception):
    def __init__(self, message: str = "잔액이 부족합니다.") -> None:
        super().__init__(message)


class BeverageReductionError(Exception):
    def __init__(self, message: str = "음료 재고 차감에 실패했습니다.") -> None:
        super().__init__(message)


class _PrePaymentPeer(Protocol):
    def request_pre_payment(self, beverage_id: int, quantity: int, auth_code: str, dst_id: int) -> bool: ...


class RequestPaymentController:
    """Charges a card for beverages taken from this machine's stock."""

    def __init__(
        self,
        beverage_manager: BeverageManager,
        bank: Bank,
        reader: Callable[[str], str] = input,
    ) -> None:
        self._beverage_manager = beverage_manager
        self._bank = bank
        self._reader = reader

    def _find_card(self) -> CreditCard | None:
        for attempt in range(1, MAX_CARD_ATTEMPTS + 1):
            card_number = self.input_card_number()
            if not card_number:
                print("카드 번호를 입력하지 않았습니다. 다시 입력하세요.")
                continue
            print(f"CARD NUMBER{card_number}")
            try:
                return self._bank.request_card(card_number)
            except NotFoundError:
                if attempt < MAX_CARD_ATTEMPTS:
                    print(
                        f"[{attempt}번 실패] 올바르지 않은 카드번호입니다. 다시 입력하세요.",
                        file=sys.stderr,
                    )
        return None

    def enter_card_number(self, beverage_id: int, quantity: int) -> Beverage:
        """Read a card, charge it and take the stock; returns the purchased beverage."""
        beverage = self._beverage_manager.get_beverage(beverage_id)
        price = beverage.price * quantity

        card = self._find_card()
        if card is None:
            raise CardNotFoundError()
        if not card.validate_balance(price):
            raise InsufficientBalanceError()
        if not self._beverage_manager.reduce_quantity(beverage_id, quantity):
            raise BeverageReductionError()

        card.reduce_balance(price)
        self._bank.save_credit_card(card)
        return self._beverage_manager.get_beverage(beverage_id)

    def input_card_number(self) -> str:
        return self._reader(CARD_PROMPT)


class RequestPrePaymentController:
    """Charges a card for beverages reserved at another machine and returns the auth code."""

    def __init__(
        self,
        auth_code_manager: AuthCodeManager,
        bank: Bank,
        socket_manager: _PrePaymentPeer,
        beverage_manager: BeverageManager,
        reader: Callable[[str], str] = input,
    ) -> None:
        self._auth_code_manager = auth_code_manager
        self._bank = bank
        self._socket_manager = socket_manager
        self._beverage_manager = beverage_manager
        self._reader = reader

    def enter_pre_pay_intention(self, intention: bool) -> None:
        if not intention:
            raise InvalidError("Invalid intention")
        print("선결제 의사를 확인했습니다.")
        print("선결제를 진행합니다.")

    def enter_card_number(self, beverage: Beverage, quantity: int, dst_id: int) -> str:
        """Pay for ``quantity`` of ``beverage`` at machine ``dst_id``; InvalidError after three bad cards."""
        for _ in range(MAX_CARD_ATTEMPTS):
            card_number = self.input_card_number()
            if not card_number:
                print("카드 번호를 입력하지 않았습니다. 다시 입력하세요.")
                continue
            print(f"CARD NUMBER{card_number}")
            try:
                card = self._bank.request_card(card_number)
            except NotFoundError as exc:
                print(f"{exc} 다시 입력하세요.")
                continue

            price = beverage.price * quantity
            if not card.validate_balance(price):
                raise NotEnoughBalanceError("카드 잔액이 부족합니다.")

            auth_code = self._auth_code_manager.generate_auth_code()
            if not self._socket_manager.request_pre_payment(beverage.id, quantity, auth_code, dst_id):
                raise FailedToPrePaymentError("해당 음료는 선결제를 할 수 없습니다.")

            card.reduce_balance(price)
            self._bank.save_credit_card(card)
            return auth_code

        print("카드번호 3회 실패")
        raise InvalidError("카드 번호 3회 실패")

    def input_card_number(self) -> str:
        return self._reader(CARD_PROMPT)