from collections import deque

import pytest

from dvmkit.auth import AuthCodeManager
from dvmkit.beverage import Beverage, BeverageManager
from dvmkit.dto import DVMInfo, ResponseStock
from dvmkit.exceptions import DVMInfoError, InvalidError, NotFoundError
from dvmkit.location import LocationManager
from dvmkit.selection import EnterAuthCodeController, SelectBeverageController


class StubBeverageManager:
    def __init__(self, stock_available=True, throw_not_found=False):
        self.stock_available = stock_available
        self.throw_not_found = throw_not_found

    def has_enough_stock(self, beverage_id, quantity):
        if self.throw_not_found:
            raise NotFoundError("음료 정보 없음")
        return self.stock_available


class StubSocketManager:
    def __init__(self, responses=()):
        self.responses = list(responses)
        self.requests = []

    def request_beverage_stock_to_others(self, beverage_id, quantity):
        self.requests.append((beverage_id, quantity))
        return list(self.responses)


class StubLocationManager:
    def __init__(self, nearest):
        self.nearest = nearest

    def calculate_nearest(self, responses):
        return self.nearest


def scripted(inputs):
    queue = deque(inputs)

    def read(prompt=""):
        if not queue:
            raise RuntimeError("No more mock auth codes")
        return queue.popleft()

    return read


def test_enough_stock_returns_without_asking_peers():
    sockets = StubSocketManager()
    controller = SelectBeverageController(
        StubLocationManager(DVMInfo()), StubBeverageManager(True, False), sockets
    )
    assert controller.select_beverage(5, 2) is None
    assert sockets.requests == []


@pytest.mark.parametrize("beverage_id", [0, 21])
def test_beverage_id_out_of_range(beverage_id):
    controller = SelectBeverageController(
        StubLocationManager(DVMInfo()), StubBeverageManager(), StubSocketManager()
    )
    with pytest.raises(InvalidError):
        controller.select_beverage(beverage_id, 1)


@pytest.mark.parametrize("quantity", [0, -5])
def test_quantity_must_be_positive(quantity):
    controller = SelectBeverageController(
        StubLocationManager(DVMInfo()), StubBeverageManager(), StubSocketManager()
    )
    with pytest.raises(InvalidError):
        controller.select_beverage(1, quantity)


def test_missing_beverage_becomes_invalid_error():
    controller = SelectBeverageController(
        StubLocationManager(DVMInfo()), StubBeverageManager(False, True), StubSocketManager()
    )
    with pytest.raises(InvalidError, match="존재하지 않는 beverageId 입니다: 3"):
        controller.select_beverage(3, 1)


def test_short_stock_raises_nearest_dvm():
    expected = DVMInfo(0, 0, 42)
    sockets = StubSocketManager()
    controller = SelectBeverageController(
        StubLocationManager(expected), StubBeverageManager(False, False), sockets
    )
    with pytest.raises(DVMInfoError) as info:
        controller.select_beverage(7, 3)
    assert info.value.nearest == expected
    assert sockets.requests == [(7, 3)]


def test_short_stock_with_real_managers_picks_closest_responder():
    beverages = BeverageManager()
    beverages.add_beverage(Beverage(4, "홍차", 0, 1300))
    far = ResponseStock(4, 1, 5, 5, src_id=1)
    near = ResponseStock(4, 1, 1, 1, src_id=2)
    controller = SelectBeverageController(
        LocationManager(0, 0), beverages, StubSocketManager([far, near])
    )
    with pytest.raises(DVMInfoError) as info:
        controller.select_beverage(4, 1)
    assert info.value.nearest == DVMInfo(1, 1, 2)


@pytest.fixture
def auth_setup():
    beverages = BeverageManager()
    beverages.add_beverage(Beverage(1, "콜라", 1000, 10))
    beverages.add_beverage(Beverage(2, "사이다", 1000, 10))
    auth = AuthCodeManager()
    auth.save_auth_code(1, 3, "ABC12")
    return beverages, auth


def test_valid_code_returns_beverage(auth_setup):
    beverages, auth = auth_setup
    controller = EnterAuthCodeController(beverages, auth, scripted([]))
    assert controller.enter_auth_code("ABC12").id == 1
    with pytest.raises(NotFoundError):
        auth.validate_auth_code("ABC12")


def test_three_wrong_codes_raise_invalid(auth_setup):
    beverages, auth = auth_setup
    controller = EnterAuthCodeController(beverages, auth, scripted(["WRONG1", "WRONG2", "WRONG3"]))
    with pytest.raises(InvalidError):
        controller.enter_auth_code("INVALID_CODE")


def test_correct_code_on_retry_succeeds(auth_setup):
    beverages, auth = auth_setup
    controller = EnterAuthCodeController(beverages, auth, scripted(["WRONG1", "ABC12"]))
    assert controller.enter_auth_code("INVALID_CODE").id == 1


def test_input_auth_code_uses_reader(auth_setup):
    beverages, auth = auth_setup
    controller = EnterAuthCodeController(beverages, auth, scripted(["XYZ99"]))
    assert controller.input_auth_code() == "XYZ99"