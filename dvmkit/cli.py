"""Interactive console for a vending machine that cooperates with its peers."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, Mapping, Sequence

from dvmkit.auth import AuthCodeManager
from dvmkit.beverage import Beverage, BeverageManager
from dvmkit.credit import Bank
from dvmkit.exceptions import (
    DVMInfoError,
    FailedToPrePaymentError,
    FileOpenError,
    InvalidError,
    NotEnoughBalanceError,
    NotFoundError,
)
from dvmkit.location import LocationManager
from dvmkit.network import SocketManager
from dvmkit.payment import (
    BeverageReductionError,
    CardNotFoundError,
    InsufficientBalanceError,
    RequestPaymentController,
    RequestPrePaymentController,
)
from dvmkit.responders import ResponsePrePaymentController, ResponseStockController
from dvmkit.selection import EnterAuthCodeController, SelectBeverageController

MENU: dict[int, tuple[str, int]] = {
    1: ("콜라", 1200),
    2: ("사이다", 1100),
    3: ("녹차", 1600),
    4: ("홍차", 1300),
    5: ("밀크티", 1400),
    6: ("탄산수", 2000),
    7: ("보리차", 2500),
    8: ("캔커피", 2600),
    9: ("물", 1500),
    10: ("에너지드링크", 1700),
    11: ("유자차", 1800),
    12: ("식혜", 1900),
    13: ("아이스티", 2000),
    14: ("딸기주스", 2100),
    15: ("오렌지주스", 2200),
    16: ("포도주스", 2300),
    17: ("이온음료", 2400),
    18: ("아메리카노", 2500),
    19: ("핫초코", 2600),
    20: ("카페라떼", 2700),
}

STOCKED_IDS = range(7)
MAX_QUANTITY_ATTEMPTS = 3


def is_integer(text: str) -> bool:
    """True for a non-empty string of ASCII digits only."""
    return bool(text) and text.isascii() and text.isdigit()


def build_beverage_manager(
    menu: Mapping[int, tuple[str, int]], stocked_ids: Iterable[int]
) -> BeverageManager:
    """Stock every menu item; stocked ids hold ``id + 10`` units, the rest none."""
    stocked = set(stocked_ids)
    manager = BeverageManager()
    for beverage_id, (name, price) in menu.items():
        stock = beverage_id + 10 if beverage_id in stocked else 0
        manager.add_beverage(Beverage(beverage_id, name, stock, price))
    return manager


def _print_menu(menu: Mapping[int, tuple[str, int]]) -> None:
    print("===============================")
    print(f"| {'ID':<2} | {'상품명':<12} | {'가격  |':>7}")
    print("-------------------------------")
    for beverage_id, (name, price) in menu.items():
        print(f"| {beverage_id:>2} | {name:<13}| {price:>5}₩ |")
    print("===============================")


class _Console:
    """One customer-facing session over the machine's controllers."""

    def __init__(
        self,
        beverage_manager: BeverageManager,
        select: SelectBeverageController,
        pre_payment: RequestPrePaymentController,
        enter_auth: EnterAuthCodeController,
        payment: RequestPaymentController,
    ) -> None:
        self._beverages = beverage_manager
        self._select = select
        self._pre_payment = pre_payment
        self._enter_auth = enter_auth
        self._payment = payment
        self._beverage_id = -1
        self._quantity = -1

    def run(self) -> int:
        try:
            return self._loop()
        except EOFError:
            return 0

    def _loop(self) -> int:
        while True:
            _print_menu(MENU)
            menu_text = input("메뉴를 선택하세요 (1: 음료 선택, 2: 선결제 코드 입력, 0: 종료): ")
            if not is_integer(menu_text):
                print("잘못된 메뉴 입니다. 정수를 입력하세요. (0, 1, 2)")
                continue
            choice = int(menu_text)
            if not 0 <= choice <= 2:
                print("잘못된 메뉴입니다. 범위를 확인하세요. (0 ~ 2)")
                continue
            if choice == 0:
                print("프로그램을 종료합니다.")
                return 0
            if choice == 2:
                self._redeem_auth_code()
                continue
            try:
                if not self._choose_beverage():
                    continue
            except FileOpenError as exc:
                print(exc, file=sys.stderr)
                return 1
            try:
                self._pay()
            except FileOpenError as exc:
                print(exc, file=sys.stderr)
                return 1

    def _redeem_auth_code(self) -> None:
        auth_code = input("인증 코드를 입력하세요: ")
        try:
            beverage = self._enter_auth.enter_auth_code(auth_code)
        except InvalidError as exc:
            print(exc)
            return
        print(f"인증 코드 확인 성공! 음료를 받으세요 : {beverage.id}")

    def _read_quantity(self, beverage: Beverage) -> None:
        for _ in range(MAX_QUANTITY_ATTEMPTS):
            if beverage.stock > 0:
                prompt = f"수량을 입력하세요 (1~{beverage.stock}): "
            else:
                prompt = "수량을 입력하세요 (재고 없음, 선결제 진행): "
            quantity_text = input(prompt)
            if not is_integer(quantity_text):
                print(f"잘못된 음료 아이디 입력입니다. 정수를 입력하세요. (1~{beverage.stock})")
                continue
            self._quantity = int(quantity_text)
            return

    def _choose_beverage(self) -> bool:
        """Run the selection step; True when the flow should go on to payment."""
        try:
            id_text = input("음료 아이디를 입력하세요 (1~20): ")
            if not is_integer(id_text):
                print("잘못된 음료 아이디 입력입니다. 정수를 입력하세요. (1 ~ 20)")
                return False
            self._beverage_id = int(id_text)
            beverage = self._beverages.get_beverage(self._beverage_id)
            self._read_quantity(beverage)
            self._select.select_beverage(self._beverage_id, self._quantity)
        except NotFoundError as exc:
            print(f"{exc}음료를 찾을 수 없습니다. 다시 입력하세요.")
            return False
        except InvalidError as exc:
            print(f"{exc} 다시 입력하세요.")
            return False
        except DVMInfoError as info:
            return self._pre_pay(info)
        return True

    def _pre_pay(self, info: DVMInfoError) -> bool:
        nearest = info.nearest
        print("음료 선결제")
        print(
            f"가장 가까운 DVM 정보: DvmId = {nearest.pre_payment_dvm_id}, "
            f"위치 = ({nearest.x}, {nearest.y})"
        )
        intention_text = input("선결제 의사를 입력하세요 (1: 선결제 진행, 0: 선결제 진행 안함): ")
        if not is_integer(intention_text):
            print("잘못된 의사입니다. 정수를 입력하세요. (0 ~ 1)")
            return False
        intention = int(intention_text)
        if not 0 <= intention <= 1:
            print("잘못된 의사입니다. 다시 입력하세요. (0 ~ 1)")
            return False
        try:
            self._pre_payment.enter_pre_pay_intention(intention == 1)
            beverage = self._beverages.get_beverage(self._beverage_id)
            auth_code = self._pre_payment.enter_card_number(
                beverage, self._quantity, nearest.pre_payment_dvm_id
            )
        except InvalidError:
            return False
        except (NotEnoughBalanceError, FailedToPrePaymentError) as exc:
            print(f"{exc} 다시 입력하세요.")
            return False
        except OSError as exc:
            print(f"{exc} 다시 입력하세요.")
            return False
        print(f"선결제 성공: {auth_code}")
        return True

    def _pay(self) -> None:
        print("음료 결제")
        try:
            beverage = self._payment.enter_card_number(self._beverage_id, self._quantity)
        except (CardNotFoundError, InsufficientBalanceError, BeverageReductionError) as exc:
            print(exc)
            return
        print(f"결제 성공: {beverage.id}")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="dvmkit", description="Run a vending machine console.")
    parser.add_argument("src_id", type=int, help="id of this machine")
    parser.add_argument("server_port", type=int, help="port this machine listens on")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    auth_code_manager = AuthCodeManager()
    bank = Bank()
    beverage_manager = build_beverage_manager(MENU, STOCKED_IDS)
    location_manager = LocationManager(0, 0)

    with SocketManager(args.src_id, args.server_port) as socket_manager:
        select = SelectBeverageController(location_manager, beverage_manager, socket_manager)
        pre_payment = RequestPrePaymentController(
            auth_code_manager, bank, socket_manager, beverage_manager
        )
        enter_auth = EnterAuthCodeController(beverage_manager, auth_code_manager)
        payment = RequestPaymentController(beverage_manager, bank)
        socket_manager.set_controller(
            ResponseStockController(location_manager, beverage_manager),
            ResponsePrePaymentController(beverage_manager, auth_code_manager),
        )

        auth_code_manager.save_auth_code(1, 2, "AB123")

        console = _Console(beverage_manager, select, pre_payment, enter_auth, payment)
        return console.run()


if __name__ == "__main__":
    sys.exit(main())