"""Tests for zkpass_verifier.session.validation — validate_first_name."""
from __future__ import annotations

import pytest

from zkpass_verifier.session.validation import NameValidationError, validate_first_name


class TestValidateFirstName:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Ana", "Ana"),
            ("  Ana  ", "Ana"),
            ("Mary Ann", "Mary Ann"),
            ("Jean-Luc", "Jean-Luc"),
            ("O'Neil", "O'Neil"),
            ("J.", "J."),
            ("Zoë", "Zoë"),
            ("Ángel", "Ángel"),
        ],
    )
    def test_accepts_and_trims(self, raw: str, expected: str) -> None:
        assert validate_first_name(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
    def test_empty_rejected(self, raw: str) -> None:
        with pytest.raises(NameValidationError, match="Please enter your first name"):
            validate_first_name(raw)

    @pytest.mark.parametrize("raw", ["Ana3", "R2-D2", "Ana!", "<b>Ana</b>", "Ana_Maria", "李"])
    def test_disallowed_characters_rejected(self, raw: str) -> None:
        with pytest.raises(NameValidationError, match="can only contain letters"):
            validate_first_name(raw)

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_first_name("")
