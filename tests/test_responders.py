import pytest

from dvmkit.auth import AuthCodeManager
from dvmkit.beverage import Beverage, BeverageManager
from dvmkit.exceptions import NotFoundError
from dvmkit.location import LocationManager
from dvmkit.responders import ResponsePrePaymentController, ResponseStockController


@pytest.fixture
def beverages():
    manager = BeverageManager()
    manager.add_beverage(Beverage(1, "콜라", 5, 1200))
    manager.add_beverage(Beverage(2, "사이다", 0, 1100))
    return manager


def test_stock_response_carries_machine_location(beverages):
    controller = ResponseStockController(LocationManager(3, -4), beverages)
    response = controller.response_beverage_stock(1, 2)
    assert (response.x, response.y) == (3, -4)
    assert (response.item_code, response.item_num) == (1, 2)
    assert response.msg_type == "resp_stock"


def test_stock_response_serialises_coordinates(beverages):
    controller = ResponseStockController(LocationManager(7, 8), beverages)
    data = controller.response_beverage_stock(9, 1).to_dict()
    assert data["msg_content"]["coor_x"] == 7
    assert data["msg_content"]["coor_y"] == 8


def test_pre_pay_reserves_stock_and_saves_code(beverages):
    auth = AuthCodeManager()
    controller = ResponsePrePaymentController(beverages, auth)
    response = controller.response_pre_pay(1, 2, "AB123")
    assert response.availability is True
    assert response.msg_type == "resp_prepay"
    assert auth.get_beverage_id("AB123") == 1
    assert beverages.has_enough_stock(1, 3)
    assert not beverages.has_enough_stock(1, 4)


def test_pre_pay_without_stock_is_refused(beverages):
    auth = AuthCodeManager()
    controller = ResponsePrePaymentController(beverages, auth)
    response = controller.response_pre_pay(2, 1, "AB123")
    assert response.availability is False
    with pytest.raises(NotFoundError):
        auth.validate_auth_code("AB123")


def test_pre_pay_negative_quantity_is_refused(beverages):
    controller = ResponsePrePaymentController(beverages, AuthCodeManager())
    assert controller.response_pre_pay(1, -1, "AB123").availability is False


def test_pre_pay_unknown_beverage_raises(beverages):
    controller = ResponsePrePaymentController(beverages, AuthCodeManager())
    with pytest.raises(NotFoundError):
        controller.response_pre_pay(99, 1, "AB123")