import pytest

from user_service.core.exceptions import ValidationError
from user_service.utils.validators import ValidationUtils, is_valid_email, require_fields


@pytest.mark.parametrize("email", [
    "ana@x.com",
    "first.last@mail.example.org",
    "a+tag@sub.domain.io",
])
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize("email", [
    "",
    "ana",
    "ana@x",
    "@x.com",
    "ana@.com",
    "ana@x.",
    "ana @x.com",
    "ana@x.com\n",
    "ana@@x.com",
    "ana@x@y.com",
    None,
    42,
])
def test_invalid_emails(email):
    assert not is_valid_email(email)


def test_require_fields_passes_when_all_present():
    require_fields({"a": "1", "b": "x"}, ["a", "b"])


def test_require_fields_lists_every_missing_field():
    with pytest.raises(ValidationError) as exc:
        require_fields({"first_name": "Ana", "last_name": "", "email": None}, ["first_name", "last_name", "email", "password"])

    assert exc.value.status_code == 400
    missing = [e["field"] for e in exc.value.details["field_errors"]]
    assert missing == ["last_name", "email", "password"]


def test_whitespace_only_counts_as_missing():
    with pytest.raises(ValidationError):
        require_fields({"first_name": "   "}, ["first_name"])


def test_password_over_bcrypt_limit_is_rejected():
    ValidationUtils.validate_password("x" * 72)
    with pytest.raises(ValidationError):
        ValidationUtils.validate_password("x" * 73)


def test_password_limit_counts_bytes_not_characters():
    # "é" is two bytes in UTF-8
    with pytest.raises(ValidationError):
        ValidationUtils.validate_password("é" * 37)
