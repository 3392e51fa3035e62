import re

import pytest

from vatcheck import ConfigurationError, VatNumberValidator, is_valid
from vatcheck.config import VatCheckConfig
from vatcheck.engine.validator import CheckResult


@pytest.fixture
def validator():
    return VatNumberValidator()


def two_digits(s: str) -> bool:
    return re.fullmatch(r"\d\d", s) is not None


# ---- Concrete scenarios ----

def test_austrian_number_valid(validator):
    assert validator.is_valid("ATU37675002")


def test_austrian_number_wrong_check_digit(validator):
    assert not validator.is_valid("ATU37675003")


def test_separators_and_case_ignored(validator):
    assert validator.is_valid("  at u 37675002 ")


def test_unknown_prefix_rejected(validator):
    assert not validator.is_valid("XX1234567")


def test_hook_accepts_unmatched_number():
    assert VatNumberValidator(extra_vat=two_digits).is_valid("11")
    assert not VatNumberValidator().is_valid("11")


def test_none_is_valid():
    assert VatNumberValidator().is_valid(None)
    assert VatNumberValidator(extra_vat=lambda s: False).is_valid(None)


# ---- Short-circuits and hook ----

def test_empty_string_is_valid(validator):
    assert validator.is_valid("")


def test_blank_string_is_checked(validator):
    # Only None/"" skip validation; whitespace normalizes to "" and matches nothing.
    assert not validator.is_valid("   ")


def test_hook_not_called_for_empty_values():
    calls = []
    v = VatNumberValidator(extra_vat=lambda s: calls.append(s) or False)
    v.is_valid(None)
    v.is_valid("")
    assert calls == []


def test_hook_receives_normalized_value():
    seen = []

    def hook(s):
        seen.append(s)
        return False

    assert VatNumberValidator(extra_vat=hook).is_valid("at u 376-750.02")
    assert seen == ["ATU37675002"]


def test_hook_overrides_failing_checksum():
    v = VatNumberValidator(extra_vat=lambda s: s == "ATU37675003")
    assert v.is_valid("ATU37675003")


def test_hook_false_falls_through_to_table():
    v = VatNumberValidator(extra_vat=lambda s: False)
    assert v.is_valid("DE136695976")
    assert not v.is_valid("DE136695977")


@pytest.mark.parametrize("hook", ["module:callable", 42, ["f"]])
def test_non_callable_hook_fails_at_construction(hook):
    with pytest.raises(ConfigurationError):
        VatNumberValidator(extra_vat=hook)


# ---- Robustness ----

@pytest.mark.parametrize(
    "raw",
    ["A", "AT", "ATU", "!!!", "ÄÖÜ", "IE7)12345A", "IE7*12345A", "CH", "RO1", "de" * 40, "\x00"],
)
def test_never_raises_for_user_input(validator, raw):
    assert validator.is_valid(raw) in (True, False)


# ---- Reporting helpers ----

def test_check_reports_country(validator):
    r = validator.check(" fr 40 303 265 045 ")
    assert r == CheckResult(" fr 40 303 265 045 ", "FR40303265045", "FR", True)


def test_check_unmatched(validator):
    r = validator.check("XX1")
    assert r.country is None and r.valid is False


def test_validate_many(validator):
    results = validator.validate_many(["ATU37675002", "ATU37675003", None])
    assert [r.valid for r in results] == [True, False, True]


def test_module_level_helper():
    assert is_valid("DK13585628")
    assert not is_valid("DK13585627")
    assert is_valid("11", extra_vat=two_digits)


# ---- Config ----

def test_from_config_restricts_countries():
    v = VatNumberValidator.from_config(VatCheckConfig(countries=["DE"]))
    assert v.is_valid("DE136695976")
    assert not v.is_valid("ATU37675002")


def test_from_config_resolves_hook():
    v = VatNumberValidator.from_config(VatCheckConfig(extra_vat="builtins:str.isdigit"))
    assert v.is_valid("11")
    assert not v.is_valid("1A")


def test_from_config_bad_hook():
    with pytest.raises(ConfigurationError):
        VatNumberValidator.from_config(VatCheckConfig(extra_vat="math:pi"))


def test_non_ascii_lookalike_letters_rejected(validator):
    assert validator.is_valid("it00743110157")
    assert not validator.is_valid("ıt00743110157")
