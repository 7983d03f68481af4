"""Errors raised by the vending machine domain."""

from __future__ import annotations

from dvmkit.dto import DVMInfo


class DVMError(RuntimeError):
    """Base class for all vending machine errors."""


class NotFoundError(DVMError):
    def __init__(self, message: str) -> None:
        super().__init__("Not Found: " + message)


class InvalidError(DVMError):
    def __init__(self, message: str) -> None:
        super().__init__("Invalid: " + message)


class DuplicateError(DVMError):
    def __init__(self, message: str) -> None:
        super().__init__("Duplicate: " + message)


class NotEnoughStockError(DVMError):
    pass


class NotEnoughBalanceError(DVMError):
    pass


class FailedToPrePaymentError(DVMError):
    pass


class DVMInfoError(DVMError):
    """Signals that stock must come from another machine, described by ``nearest``."""

    def __init__(self, nearest: DVMInfo) -> None:
        super().__init__("Nearest DVM information available")
        self.nearest = nearest


class FileOpenError(DVMError):
    def __init__(self, message: str) -> None:
        super().__init__("File Open Error: " + message)