import pytest

from daogen.model import GenError
from daogen.naming import (
    check_struct_name,
    del_pointer_sym,
    get_package_name,
    get_pure_name,
    get_struct_name,
    is_capitalize,
    is_end,
    uncapitalize,
)


def test_is_capitalize():
    assert is_capitalize("User")
    assert not is_capitalize("user")
    assert not is_capitalize("")


@pytest.mark.parametrize("ch", ["a", "Z", "5", "-", "_", "."])
def test_is_end_false(ch):
    assert not is_end(ch)


@pytest.mark.parametrize("ch", [" ", ")", ",", "'", "é"])
def test_is_end_true(ch):
    assert is_end(ch)


def test_pointer_and_package_names():
    assert del_pointer_sym("**model.User") == "model.User"
    assert get_package_name("*model.User") == "model"
    assert get_struct_name("model.User") == "User"
    assert get_pure_name("*User") == "u"


def test_uncapitalize():
    assert uncapitalize("User") == "user"
    assert uncapitalize("") == ""


@pytest.mark.parametrize("name", ["User", "", "User_Info2"])
def test_check_struct_name_ok(name):
    assert check_struct_name(name) is None


@pytest.mark.parametrize(
    "name,message",
    [
        ("User-Info", "invalid character"),
        ("Usér", "invalid character"),
        ("User\n", "invalid character"),
        ("user", "initial capital"),
        ("_User", "initial capital"),
    ],
)
def test_check_struct_name_errors(name, message):
    with pytest.raises(GenError, match=message):
        check_struct_name(name)