import pytest

from vatcheck.detect.normalize import normalize


def test_strips_whitespace_and_uppercases():
    assert normalize("  at u 37675002 ") == "ATU37675002"


def test_strips_dashes_and_dots():
    assert normalize("de-136.695.976") == "DE136695976"


def test_mixed_separator_runs_collapse_to_nothing():
    assert normalize("NL 0044.95-445 \t\nB01") == "NL004495445B01"


def test_other_punctuation_is_kept():
    # Only whitespace, '-' and '.' are separators.
    assert normalize("ie7*12345a") == "IE7*12345A"
    assert normalize("GB/980/780/684") == "GB/980/780/684"


@pytest.mark.parametrize(
    "raw",
    ["", "ATU37675002", " at-u.376 750 02 ", "...---", "ß-straße", "x y", "CHE-123.456.788 mwst"],
)
def test_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


def test_only_ascii_letters_are_upper_cased():
    # Dotless i and long s must not turn into I and S.
    assert normalize("ıt00743110157") == "ıT00743110157"
    assert normalize("ſe556188840401") == "ſE556188840401"
    assert normalize("és") == "éS"


def test_only_ascii_whitespace_is_a_separator():
    assert normalize("AT\u00a0U37675002") == "AT\u00a0U37675002"
    assert normalize("AT\u2003U 376\t750\x0b02") == "AT\u2003U37675002"
