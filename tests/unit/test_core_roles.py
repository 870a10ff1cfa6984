import pytest

from usersync.core.resolver import UserRecord
from usersync.core.roles import derive_role


def user_with(**attributes):
    return UserRecord(id="u1", attributes=attributes)


def test_app_role_is_upper_cased():
    assert derive_role(user_with(app_role=["admin"])) == "ADMIN"


def test_first_value_wins():
    assert derive_role(user_with(app_role=["organizer", "admin"])) == "ORGANIZER"


def test_missing_attribute_defaults_to_user():
    assert derive_role(user_with()) == "USER"


@pytest.mark.parametrize("value", [[""], ["   "], ["\t\n"], []])
def test_blank_attribute_defaults_to_user(value):
    assert derive_role(user_with(app_role=value)) == "USER"


def test_other_attributes_ignored():
    assert derive_role(user_with(department=["sales"])) == "USER"
