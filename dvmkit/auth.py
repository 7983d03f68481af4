"""Storage and generation of pre-payment authentication codes."""

from __future__ import annotations

import secrets
import string

from dvmkit.exceptions import NotFoundError

AUTH_CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
AUTH_CODE_LENGTH = 5


class AuthCodeManager:
    """Maps auth codes to the (beverage id, quantity) they were issued for."""

    def __init__(self) -> None:
        self._codes: dict[str, tuple[int, int]] = {}

    def _lookup(self, auth_code: str) -> tuple[int, int]:
        try:
            return self._codes[auth_code]
        except KeyError:
            raise NotFoundError("Auth code not found") from None

    def validate_auth_code(self, auth_code: str) -> bool:
        self._lookup(auth_code)
        return True

    def get_beverage_id(self, auth_code: str) -> int:
        return self._lookup(auth_code)[0]

    def save_auth_code(self, beverage_id: int, quantity: int, auth_code: str) -> None:
        """Store a code; an existing entry for the same code is kept."""
        self._codes.setdefault(auth_code, (beverage_id, quantity))

    def delete_auth_code(self, auth_code: str) -> None:
        self._lookup(auth_code)
        del self._codes[auth_code]

    def generate_auth_code(self) -> str:
        return "".join(secrets.choice(AUTH_CODE_ALPHABET) for _ in range(AUTH_CODE_LENGTH))