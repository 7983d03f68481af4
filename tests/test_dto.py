import json

import pytest

from dvmkit.dto import (
    DVMInfo,
    RequestPrePayment,
    RequestStock,
    ResponsePrePayment,
    ResponseStock,
)


def test_dvm_info_defaults_are_zero():
    info = DVMInfo()
    assert (info.x, info.y, info.pre_payment_dvm_id) == (0, 0, 0)


def test_request_stock_to_dict_layout():
    message = RequestStock(3, 2, src_id=1, dst_id=0)
    assert message.to_dict() == {
        "msg_type": "req_stock",
        "src_id": 1,
        "dst_id": 0,
        "msg_content": {"item_code": 3, "item_num": 2},
    }


def test_request_stock_round_trip_through_json():
    message = RequestStock(7, 4, src_id=2, dst_id=5)
    restored = RequestStock.from_dict(json.loads(json.dumps(message.to_dict())))
    assert restored == message


def test_response_stock_layout_and_accessors():
    message = ResponseStock(1, 2, -3, 9)
    message.set_src_and_dst(11, 12)
    assert message.x == -3
    assert message.y == 9
    assert message.to_dict() == {
        "msg_type": "resp_stock",
        "src_id": 11,
        "dst_id": 12,
        "msg_content": {"item_code": 1, "item_num": 2, "coor_x": -3, "coor_y": 9},
    }


def test_response_stock_round_trip():
    message = ResponseStock(5, 6, 7, 8)
    message.set_src_and_dst(3, 4)
    assert ResponseStock.from_dict(message.to_dict()) == message


def test_request_pre_payment_layout_and_round_trip():
    message = RequestPrePayment(15, 10, "AB123", src_id=1, dst_id=2)
    data = message.to_dict()
    assert data["msg_type"] == "req_prepay"
    assert data["msg_content"] == {"item_code": 15, "item_num": 10, "cert_code": "AB123"}
    assert RequestPrePayment.from_dict(data) == message


def test_response_pre_payment_layout_and_round_trip():
    message = ResponsePrePayment(15, 10, True)
    message.set_src_and_dst(2, 1)
    data = message.to_dict()
    assert data["msg_type"] == "resp_prepay"
    assert data["src_id"] == 2
    assert data["dst_id"] == 1
    assert data["msg_content"]["availability"] is True
    assert ResponsePrePayment.from_dict(data) == message


def test_from_dict_missing_key_raises():
    data = RequestStock(1, 1, 1, 0).to_dict()
    del data["msg_content"]["item_num"]
    with pytest.raises(KeyError):
        RequestStock.from_dict(data)


def test_from_dict_wrong_type_raises():
    data = ResponsePrePayment(1, 1, False).to_dict()
    data["msg_content"]["availability"] = "yes"
    with pytest.raises(TypeError):
        ResponsePrePayment.from_dict(data)


def test_from_dict_rejects_string_number():
    data = ResponseStock(1, 1, 0, 0).to_dict()
    data["src_id"] = "1"
    with pytest.raises(TypeError):
        ResponseStock.from_dict(data)