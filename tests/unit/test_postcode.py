import pytest

from postcode_finder.common.postcode import format_postcode, is_valid_uk_unit_postcode, normalise_identifier


def test_normalise_strips_whitespace_and_uppercases():
    assert normalise_identifier("kt22 8dn") == "KT228DN"
    assert normalise_identifier("  KT22\t8DN \n") == "KT228DN"


def test_normalise_spaced_and_compact_forms_match():
    assert normalise_identifier("kt22 8dn") == normalise_identifier("KT228DN")


@pytest.mark.parametrize("raw", ["kt22 8dn", "KT228DN", "  sw1a 2aa ", "", "a b\tc", "ÄbC d"])
def test_normalise_is_idempotent(raw):
    once = normalise_identifier(raw)
    assert normalise_identifier(once) == once


def test_normalise_handles_none():
    assert normalise_identifier(None) == ""


def test_format_postcode_happy_path():
    assert format_postcode("kt228dn") == "KT22 8DN"
    assert format_postcode(" m1 1ae ") == "M1 1AE"


def test_format_postcode_removes_punctuation():
    assert format_postcode("kt22-8dn") == "KT22 8DN"


def test_format_postcode_rejects_invalid():
    assert format_postcode(None) is None
    assert format_postcode("   ") is None
    assert format_postcode("ABC") is None
    assert format_postcode("12345") is None
    assert format_postcode("KT22 8DNXX") is None


def test_validator_accepts_unit_regex():
    assert is_valid_uk_unit_postcode("KT22 8DN")
    assert not is_valid_uk_unit_postcode("KT228DN")
