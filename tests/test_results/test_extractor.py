"""Tests for zkpass_verifier.results.extractor — age and name extraction."""
from __future__ import annotations

import datetime

import pytest

from zkpass_verifier.results.extractor import (
    age_on,
    extract_age,
    extract_name,
    interpret_age,
    parse_birth_date,
    unwrap_disclosed,
)

_MID_JUNE = datetime.date(2025, 6, 15)


def _wrapped(value: object) -> dict[str, object]:
    return {"disclose": {"result": value}}


class TestUnwrap:
    def test_wrapped_value(self) -> None:
        assert unwrap_disclosed(_wrapped(20)) == 20

    def test_scalar_passes_through(self) -> None:
        assert unwrap_disclosed("Ana") == "Ana"

    def test_mapping_without_result_passes_through(self) -> None:
        value = {"disclose": {}}
        assert unwrap_disclosed(value) is value


class TestAgeOn:
    def test_birthday_passed(self) -> None:
        assert age_on(datetime.date(2000, 1, 1), _MID_JUNE) == 25

    def test_birthday_not_yet_reached(self) -> None:
        assert age_on(datetime.date(2000, 1, 1), datetime.date(2024, 12, 31)) == 24

    def test_on_the_birthday(self) -> None:
        """The birthday counts as the completed year: 2000-01-01 is 25 on 2025-01-01, not 24."""
        assert age_on(datetime.date(2000, 1, 1), datetime.date(2025, 1, 1)) == 25

    def test_same_month_earlier_day(self) -> None:
        assert age_on(datetime.date(1990, 6, 20), _MID_JUNE) == 34


class TestParseBirthDate:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1990-05-05", datetime.date(1990, 5, 5)),
            ("1990-05-05T00:00:00Z", datetime.date(1990, 5, 5)),
            ("1990-5-5", datetime.date(1990, 5, 5)),
            ("1990-5-15T08:30:00Z", datetime.date(1990, 5, 15)),
            ("1990/05/05", datetime.date(1990, 5, 5)),
            ("05/20/1990", datetime.date(1990, 5, 20)),
        ],
    )
    def test_formats(self, text: str, expected: datetime.date) -> None:
        assert parse_birth_date(text) == expected

    def test_garbage(self) -> None:
        assert parse_birth_date("not-a-date") is None


class TestInterpretAge:
    def test_integer(self) -> None:
        assert interpret_age(20) == 20

    def test_float_truncated(self) -> None:
        assert interpret_age(20.9) == 20

    def test_numeric_string(self) -> None:
        assert interpret_age(" 21 ") == 21

    def test_bool_rejected(self) -> None:
        assert interpret_age(True) is None

    def test_negative_rejected(self) -> None:
        assert interpret_age(-3) is None

    def test_future_birth_date_rejected(self) -> None:
        assert interpret_age("2030-01-01", _MID_JUNE) is None

    def test_unparseable_string(self) -> None:
        assert interpret_age("twenty") is None

    def test_nan_rejected(self) -> None:
        assert interpret_age(float("nan")) is None


class TestExtractAge:
    def test_wrapped_age(self) -> None:
        assert extract_age({"age": _wrapped(20)}) == 20

    def test_plain_age(self) -> None:
        assert extract_age({"age": 42}) == 42

    def test_date_of_birth_without_wrapper(self) -> None:
        assert extract_age({"dateOfBirth": "1990-05-05"}, _MID_JUNE) == 35

    def test_date_of_birth_before_birthday(self) -> None:
        assert extract_age({"dateOfBirth": "1990-05-05"}, datetime.date(2025, 5, 4)) == 34

    def test_iso_birth_date_around_new_year(self) -> None:
        assert extract_age({"dateOfBirth": "2000-01-01"}, _MID_JUNE) == 25
        assert extract_age({"dateOfBirth": "2000-01-01"}, datetime.date(2024, 12, 31)) == 24

    def test_birth_date_key(self) -> None:
        assert extract_age({"birthDate": _wrapped("2000-06-16")}, _MID_JUNE) == 24

    def test_age_key_takes_priority(self) -> None:
        assert extract_age({"age": 19, "dateOfBirth": "1950-01-01"}, _MID_JUNE) == 19

    def test_unreadable_age_falls_back_to_date_of_birth(self) -> None:
        payload = {"age": _wrapped("unknown"), "dateOfBirth": "2000-01-01"}
        assert extract_age(payload, _MID_JUNE) == 25

    def test_no_recognised_key(self) -> None:
        assert extract_age({"nationality": "NLD"}) is None

    def test_empty_payload(self) -> None:
        assert extract_age({}) is None

    def test_non_mapping_payload(self) -> None:
        assert extract_age(["age", 20]) is None  # type: ignore[arg-type]

    def test_uses_today_by_default(self) -> None:
        today = datetime.date.today()
        birth = f"{today.year - 30:04d}-01-01"
        assert extract_age({"dateOfBirth": birth}) == 30


class TestExtractName:
    def test_firstname(self) -> None:
        assert extract_name({"firstname": "Ana"}) == "Ana"

    def test_priority_order(self) -> None:
        payload = {"givenName": "D", "given_name": "C", "firstName": "B", "firstname": "A"}
        assert extract_name(payload) == "A"

    def test_given_name_fallback(self) -> None:
        assert extract_name({"given_name": _wrapped("Ana")}) == "Ana"

    def test_name_key_last(self) -> None:
        assert extract_name({"name": "Ana"}) == "Ana"

    def test_structured_first(self) -> None:
        assert extract_name({"name": _wrapped({"first": "Ana", "last": "Silva"})}) == "Ana"

    def test_structured_given(self) -> None:
        assert extract_name({"firstName": {"given": "Ana"}}) == "Ana"

    def test_structured_without_usable_field_moves_on(self) -> None:
        payload = {"firstname": {"last": "Silva"}, "name": "Ana"}
        assert extract_name(payload) == "Ana"

    def test_empty_string_skipped(self) -> None:
        assert extract_name({"firstname": "", "givenName": "Ana"}) == "Ana"

    def test_not_normalized(self) -> None:
        assert extract_name({"firstname": " ANA "}) == " ANA "

    def test_missing(self) -> None:
        assert extract_name({"age": 30}) is None

    def test_non_string_value(self) -> None:
        assert extract_name({"firstname": 7}) is None
