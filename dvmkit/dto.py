"""Messages exchanged between vending machines, and nearest-machine info."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


def _int_field(data: Mapping[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {value!r}")
    return value


def _str_field(data: Mapping[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {value!r}")
    return value


def _bool_field(data: Mapping[str, Any], key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean, got {value!r}")
    return value


def _content(data: Mapping[str, Any]) -> Mapping[str, Any]:
    content = data["msg_content"]
    if not isinstance(content, Mapping):
        raise TypeError(f"msg_content must be an object, got {content!r}")
    return content


@dataclass(frozen=True)
class DVMInfo:
    """Position and id of the machine chosen for a pre-payment."""

    x: int = 0
    y: int = 0
    pre_payment_dvm_id: int = 0


@dataclass
class RequestStock:
    """A stock query broadcast to other machines."""

    item_code: int
    item_num: int
    src_id: int = 0
    dst_id: int = 0
    msg_type: str = "req_stock"

    def to_dict(self) -> dict[str, Any]:
        return {
            "msg_type": self.msg_type,
            "src_id": self.src_id,
            "dst_id": self.dst_id,
            "msg_content": {"item_code": self.item_code, "item_num": self.item_num},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RequestStock:
        content = _content(data)
        return cls(
            item_code=_int_field(content, "item_code"),
            item_num=_int_field(content, "item_num"),
            src_id=_int_field(data, "src_id"),
            dst_id=_int_field(data, "dst_id"),
            msg_type=_str_field(data, "msg_type"),
        )


@dataclass
class ResponseStock:
    """A machine's answer to a stock query, carrying its coordinates."""

    item_code: int
    item_num: int
    coor_x: int
    coor_y: int
    src_id: int = 0
    dst_id: int = 0
    msg_type: str = "resp_stock"

    @property
    def x(self) -> int:
        return self.coor_x

    @property
    def y(self) -> int:
        return self.coor_y

    def set_src_and_dst(self, src_id: int, dst_id: int) -> None:
        self.src_id = src_id
        self.dst_id = dst_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "msg_type": self.msg_type,
            "src_id": self.src_id,
            "dst_id": self.dst_id,
            "msg_content": {
                "item_code": self.item_code,
                "item_num": self.item_num,
                "coor_x": self.coor_x,
                "coor_y": self.coor_y,
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResponseStock:
        content = _content(data)
        return cls(
            item_code=_int_field(content, "item_code"),
            item_num=_int_field(content, "item_num"),
            coor_x=_int_field(content, "coor_x"),
            coor_y=_int_field(content, "coor_y"),
            src_id=_int_field(data, "src_id"),
            dst_id=_int_field(data, "dst_id"),
            msg_type=_str_field(data, "msg_type"),
        )


@dataclass
class RequestPrePayment:
    """A request asking another machine to reserve stock under an auth code."""

    item_code: int
    item_num: int
    cert_code: str
    src_id: int = 0
    dst_id: int = 0
    msg_type: str = "req_prepay"

    def to_dict(self) -> dict[str, Any]:
        return {
            "msg_type": self.msg_type,
            "src_id": self.src_id,
            "dst_id": self.dst_id,
            "msg_content": {
                "item_code": self.item_code,
                "item_num": self.item_num,
                "cert_code": self.cert_code,
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RequestPrePayment:
        content = _content(data)
        return cls(
            item_code=_int_field(content, "item_code"),
            item_num=_int_field(content, "item_num"),
            cert_code=_str_field(content, "cert_code"),
            src_id=_int_field(data, "src_id"),
            dst_id=_int_field(data, "dst_id"),
            msg_type=_str_field(data, "msg_type"),
        )


@dataclass
class ResponsePrePayment:
    """The answer to a pre-payment request: whether stock was reserved."""

    item_code: int
    item_num: int
    availability: bool
    src_id: int = 0
    dst_id: int = 0
    msg_type: str = "resp_prepay"

    def set_src_and_dst(self, src_id: int, dst_id: int) -> None:
        self.src_id = src_id
        self.dst_id = dst_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "msg_type": self.msg_type,
            "src_id": self.src_id,
            "dst_id": self.dst_id,
            "msg_content": {
                "item_code": self.item_code,
                "item_num": self.item_num,
                "availability": self.availability,
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResponsePrePayment:
        content = _content(data)
        return cls(
            item_code=_int_field(content, "item_code"),
            item_num=_int_field(content, "item_num"),
            availability=_bool_field(content, "availability"),
            src_id=_int_field(data, "src_id"),
            dst_id=_int_field(data, "dst_id"),
            msg_type=_str_field(data, "msg_type"),
        )