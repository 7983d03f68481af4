import string

import pytest

from dvmkit.auth import AuthCodeManager
from dvmkit.exceptions import NotFoundError


@pytest.fixture
def manager():
    m = AuthCodeManager()
    m.save_auth_code(1, 2, "ABC12")
    m.save_auth_code(2, 5, "ABC34")
    return m


def test_validate_registered_codes(manager):
    assert manager.validate_auth_code("ABC12") is True
    assert manager.validate_auth_code("ABC34") is True


@pytest.mark.parametrize("code", ["INVALID999", ""])
def test_validate_unknown_code_raises(manager, code):
    with pytest.raises(NotFoundError):
        manager.validate_auth_code(code)


def test_get_beverage_id_registered(manager):
    assert manager.get_beverage_id("ABC12") == 1
    assert manager.get_beverage_id("ABC34") == 2


@pytest.mark.parametrize("code", ["INVALID999", ""])
def test_get_beverage_id_unknown_raises(manager, code):
    with pytest.raises(NotFoundError):
        manager.get_beverage_id(code)


def test_generated_code_length_is_five(manager):
    assert len(manager.generate_auth_code()) == 5


def test_generated_code_is_alphanumeric(manager):
    allowed = set(string.ascii_letters + string.digits)
    for _ in range(50):
        assert set(manager.generate_auth_code()) <= allowed


def test_delete_registered_code(manager):
    manager.delete_auth_code("ABC12")
    with pytest.raises(NotFoundError):
        manager.validate_auth_code("ABC12")
    with pytest.raises(NotFoundError):
        manager.get_beverage_id("ABC12")


def test_delete_unknown_code_raises(manager):
    with pytest.raises(NotFoundError):
        manager.delete_auth_code("NO_SUCH_CODE")


def test_save_new_code_then_lookup(manager):
    manager.save_auth_code(7, 3, "XYZ99")
    assert manager.validate_auth_code("XYZ99") is True
    assert manager.get_beverage_id("XYZ99") == 7


def test_delete_one_keeps_other(manager):
    manager.delete_auth_code("ABC12")
    assert manager.validate_auth_code("ABC34") is True
    assert manager.get_beverage_id("ABC34") == 2


def test_save_duplicate_keeps_original(manager):
    manager.save_auth_code(9, 9, "ABC12")
    assert manager.get_beverage_id("ABC12") == 1