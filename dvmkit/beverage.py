"""Beverages and the machine's local stock."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from dvmkit.exceptions import NotFoundError

_MISSING_BEVERAGE = "beverageId에 해당하는 음료가 없습니다."


@dataclass
class Beverage:
    id: int = 0
    name: str = "name"
    stock: int = 0
    price: int = 0

    def has_enough_stock(self, quantity: int) -> bool:
        return self.stock >= quantity

    def reduce_quantity(self, quantity: int) -> bool:
        """Take ``quantity`` out of stock; False if negative or more than held."""
        if quantity < 0 or self.stock < quantity:
            return False
        self.stock -= quantity
        return True


class BeverageManager:
    """Holds the beverages of this machine, keyed by id."""

    def __init__(self) -> None:
        self._beverages: dict[int, Beverage] = {}

    def _find(self, beverage_id: int) -> Beverage:
        try:
            return self._beverages[beverage_id]
        except KeyError:
            raise NotFoundError(_MISSING_BEVERAGE) from None

    def has_enough_stock(self, beverage_id: int, quantity: int) -> bool:
        return self._find(beverage_id).has_enough_stock(quantity)

    def reduce_quantity(self, beverage_id: int, quantity: int) -> bool:
        return self._find(beverage_id).reduce_quantity(quantity)

    def get_beverage(self, beverage_id: int) -> Beverage:
        """Return a copy of the stored beverage."""
        return dataclasses.replace(self._find(beverage_id))

    def add_beverage(self, beverage: Beverage) -> None:
        """Add a beverage; one already stored under the same id is kept."""
        self._beverages.setdefault(beverage.id, dataclasses.replace(beverage))