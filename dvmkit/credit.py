"""Credit cards and the file-backed bank that stores their balances."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from dvmkit.exceptions import FileOpenError, InvalidError, NotEnoughBalanceError, NotFoundError

logger = logging.getLogger(__name__)

CARD_DB_NAME = "card_db.txt"
CARD_DB_TEMP_NAME = "card_db_temp.txt"

# A record is a card number followed by an integer balance; anything after is ignored.
_RECORD = re.compile(r"\s*(\S+)\s+([+-]?\d+)")


def _parse_record(line: str) -> tuple[str, int] | None:
    match = _RECORD.match(line)
    if match is None:
        return None
    return match.group(1), int(match.group(2))


@dataclass
class CreditCard:
    card_number: str
    balance: int

    def validate_balance(self, price: int) -> bool:
        return price <= self.balance

    def reduce_balance(self, price: int) -> None:
        if price < 0:
            raise InvalidError("Price cannot be negative")
        if self.balance < price:
            raise NotEnoughBalanceError("잔액이 부족합니다.")
        self.balance -= price

    def is_valid(self) -> bool:
        return bool(self.card_number)


class Bank:
    """Looks up and stores cards in ``card_db.txt``.

    The database lives in ``directory``, or in the current working directory
    at the time of each call when no directory is given.
    """

    def __init__(self, directory: str | os.PathLike[str] | None = None) -> None:
        self._directory = Path(directory) if directory is not None else None

    def _base(self) -> Path:
        return self._directory if self._directory is not None else Path.cwd()

    @property
    def db_path(self) -> Path:
        return self._base() / CARD_DB_NAME

    def request_card(self, card_number: str) -> CreditCard:
        path = self.db_path
        try:
            with path.open(encoding="utf-8") as db:
                lines = db.read().splitlines()
        except OSError:
            raise FileOpenError(f"카드 DB 파일 열기 실패 : {path}") from None

        for line in lines:
            record = _parse_record(line)
            if record is None:
                continue
            stored_number, balance = record
            if stored_number == card_number:
                logger.info("[Bank] 카드 조회 성공: %s (잔액: %d)", stored_number, balance)
                return CreditCard(stored_number, balance)

        logger.info("[Bank] 해당 카드 번호 없음: %s", card_number)
        raise NotFoundError(f"해당 카드 번호 없음 : {card_number}")

    def save_credit_card(self, credit_card: CreditCard) -> None:
        """Write the card's balance, replacing its record or appending a new one."""
        path = self.db_path
        temp_path = self._base() / CARD_DB_TEMP_NAME
        try:
            with path.open(encoding="utf-8") as db:
                lines = db.read().splitlines()
        except OSError:
            logger.error("[Bank] 카드 데이터 파일 열기 실패 (읽기 또는 쓰기)")
            return

        updated = False
        output: list[str] = []
        for line in lines:
            record = _parse_record(line)
            if record is not None and record[0] == credit_card.card_number:
                output.append(f"{record[0]} {credit_card.balance}")
                updated = True
            else:
                output.append(line)
        if not updated:
            output.append(f"{credit_card.card_number} {credit_card.balance}")

        try:
            with temp_path.open("w", encoding="utf-8") as temp:
                temp.writelines(f"{line}\n" for line in output)
        except OSError:
            logger.error("[Bank] 카드 데이터 파일 열기 실패 (읽기 또는 쓰기)")
            return
        os.replace(temp_path, path)