# tests/test_validators.py
from datetime import date

import pytest
from dateutil.relativedelta import relativedelta

from app.services.errors import InputError
from app.utils import validators

TODAY = date(2026, 10, 19)
BIO = "Long enough bio text."


@pytest.mark.parametrize("email", ["user@example.com", "First.Last+tag@sub.domain.io", "A_B%c@x-y.org"])
def test_accepts_well_formed_emails(email):
    assert validators.looks_like_email(email)


@pytest.mark.parametrize("email", ["", "plain", "no-at.example.com", "user@domain", "user@domain.c", "a b@x.com", "user@@x.com"])
def test_rejects_malformed_emails(email):
    assert not validators.looks_like_email(email)


def test_normalize_email_trims_and_lowercases():
    assert validators.normalize_email("  Someone@Example.COM ") == "someone@example.com"


def test_validate_signup_checks_password_length():
    with pytest.raises(InputError, match="at least 6 characters"):
        validators.validate_signup("user@example.com", "12345")
    validators.validate_signup("user@example.com", "123456")


def test_parse_date_tries_formats_in_order():
    assert validators.parse_date("15/06/1990", validators.COMPLETION_DATE_FORMATS) == date(1990, 6, 15)
    assert validators.parse_date("1990-06-15", validators.COMPLETION_DATE_FORMATS) == date(1990, 6, 15)
    assert validators.parse_date("06/15/1990", validators.COMPLETION_DATE_FORMATS) is None
    assert validators.parse_date("06/15/1990", validators.UPDATE_DATE_FORMATS) == date(1990, 6, 15)
    assert validators.parse_date("not a date", validators.UPDATE_DATE_FORMATS) is None


def test_age_bounds_are_inclusive():
    assert validators.is_valid_age(TODAY - relativedelta(years=13), TODAY)
    assert not validators.is_valid_age(TODAY - relativedelta(years=13) + relativedelta(days=1), TODAY)
    assert validators.is_valid_age(TODAY - relativedelta(years=120), TODAY)
    assert not validators.is_valid_age(TODAY - relativedelta(years=121), TODAY)


def test_profile_rules_accept_valid_profile():
    validators.validate_profile_rules("Music", "Cooking", BIO, born=date(1990, 6, 15), today=TODAY)


def test_profile_rules_reject_equal_skills():
    with pytest.raises(InputError, match="cannot be the same"):
        validators.validate_profile_rules("Music", "Music", BIO)


def test_profile_rules_reject_unknown_skills():
    with pytest.raises(InputError, match="Invalid primary skill"):
        validators.validate_profile_rules("Juggling", "Music", BIO)
    with pytest.raises(InputError, match="Invalid skill to learn"):
        validators.validate_profile_rules("Music", "Juggling", BIO)


def test_profile_rules_bound_bio_length():
    with pytest.raises(InputError, match="at least 10"):
        validators.validate_profile_rules("Music", "Art", "short")
    with pytest.raises(InputError, match="less than 1000"):
        validators.validate_profile_rules("Music", "Art", "x" * 1001)
    with pytest.raises(InputError, match="cannot be empty"):
        validators.validate_profile_rules("Music", "Art", "   ")


def test_profile_rules_reject_too_young():
    with pytest.raises(InputError, match="between 13 and 120"):
        validators.validate_profile_rules("Music", "Art", BIO, born=date(2020, 1, 1), today=TODAY)
