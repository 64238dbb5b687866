from datetime import date

import pytest

from studyvault.services.date_normalizer import normalize_date


@pytest.mark.parametrize("yy", ["00", "09", "25", "99"])
def test_two_digit_year_is_prefixed_with_20(yy):
    assert normalize_date(f"3/7/{yy}", "Fall 2031") == f"20{yy}-03-07"


def test_four_digit_year_is_kept():
    assert normalize_date("12/1/2024", "Spring 2026") == "2024-12-01"


def test_missing_year_comes_from_term():
    assert normalize_date("3/5", "Spring 2026") == "2026-03-05"


def test_trailing_slash_uses_term_year():
    assert normalize_date("3/10/", "Fall 2024") == "2024-03-10"


def test_missing_year_without_term_uses_current_year():
    assert normalize_date("3/5", "Unknown Term", today=date(2027, 1, 15)) == "2027-03-05"


def test_calendar_values_are_not_validated():
    assert normalize_date("13/40", "Summer 2025") == "2025-13-40"


@pytest.mark.parametrize("token", ["", "2025", "March"])
def test_tokens_without_month_and_day_return_none(token):
    assert normalize_date(token, "Spring 2025") is None
