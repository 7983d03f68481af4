"""Networked beverage vending machine with card payment and pre-payment."""

__version__ = "0.1.0"