"""Answers this machine gives to stock and pre-payment requests from other machines."""

from __future__ import annotations

from dvmkit.auth import AuthCodeManager
from dvmkit.beverage import BeverageManager
from dvmkit.dto import ResponsePrePayment, ResponseStock
from dvmkit.location import LocationManager


class ResponseStockController:
    """Builds the stock response, which carries this machine's coordinates."""

    def __init__(self, location_manager: LocationManager, beverage_manager: BeverageManager) -> None:
        self._location_manager = location_manager
        self._beverage_manager = beverage_manager

    def response_beverage_stock(self, beverage_id: int, quantity: int) -> ResponseStock:
        location = self._location_manager.get_location()
        return ResponseStock(beverage_id, quantity, location.x, location.y)


class ResponsePrePaymentController:
    """Reserves stock for another machine's customer under the given auth code."""

    def __init__(self, beverage_manager: BeverageManager, auth_code_manager: AuthCodeManager) -> None:
        self._beverage_manager = beverage_manager
        self._auth_code_manager = auth_code_manager

    def response_pre_pay(self, beverage_id: int, quantity: int, auth_code: str) -> ResponsePrePayment:
        """Take the stock and store the code; raises NotFoundError for an unknown beverage."""
        self._beverage_manager.get_beverage(beverage_id)
        reduced = self._beverage_manager.reduce_quantity(beverage_id, quantity)
        if reduced:
            self._auth_code_manager.save_auth_code(beverage_id, quantity, auth_code)
        return ResponsePrePayment(beverage_id, quantity, reduced)