"""Tests for zkpass_verifier.session.outcome — issuer hand-off parameters."""
from __future__ import annotations

from typing import Any

import pytest

from zkpass_verifier.disclosure.kinds import VerificationKind
from zkpass_verifier.session.outcome import StatusUpdate, VerificationOutcome
from zkpass_verifier.session.state import SessionState, Severity


def _outcome(**overrides: Any) -> VerificationOutcome:
    fields: dict[str, Any] = {
        "session_id": "s-1",
        "kind": VerificationKind.AGE_AND_NAME,
        "state": SessionState.SUCCEEDED,
        "success": True,
        "age_verified": True,
        "name_verified": True,
        "age_years": 30,
        "name": "Ana",
    }
    fields.update(overrides)
    return VerificationOutcome(**fields)


class TestIssuerParameters:
    def test_full_success(self) -> None:
        assert _outcome().issuer_parameters() == {"verified_name": "Ana", "verified_age": "true"}

    def test_age_only_kind(self) -> None:
        outcome = _outcome(kind=VerificationKind.AGE, name_verified=False, name=None)
        assert outcome.issuer_parameters() == {"verified_age": "true"}

    def test_partial_yields_nothing(self) -> None:
        outcome = _outcome(
            state=SessionState.PARTIALLY_VERIFIED, success=False, partial=True, name_verified=False, name=None
        )
        assert outcome.issuer_parameters() == {}


class TestIssuerRedirectUrl:
    def test_appends_query(self) -> None:
        url = _outcome().issuer_redirect_url("https://issuer.example/claims")
        assert url == "https://issuer.example/claims?verified_name=Ana&verified_age=true"

    def test_extends_existing_query(self) -> None:
        url = _outcome(kind=VerificationKind.AGE, name_verified=False, name=None).issuer_redirect_url(
            "https://issuer.example/claims?lang=en"
        )
        assert url == "https://issuer.example/claims?lang=en&verified_age=true"

    def test_name_is_url_encoded(self) -> None:
        url = _outcome(name="Jean Luc").issuer_redirect_url("https://issuer.example/")
        assert url is not None
        assert "verified_name=Jean+Luc" in url

    def test_none_when_not_successful(self) -> None:
        outcome = _outcome(state=SessionState.FAILED, success=False)
        assert outcome.issuer_redirect_url("https://issuer.example/") is None


class TestModels:
    def test_status_update_default_severity(self) -> None:
        update = StatusUpdate(state=SessionState.BUILDING_REQUEST, message="Generating request...")
        assert update.severity is Severity.INFO

    def test_outcome_serializes_enum_values(self) -> None:
        data = _outcome().model_dump(mode="json")
        assert data["kind"] == "both"
        assert data["state"] == "succeeded"

    @pytest.mark.parametrize("state", [SessionState.REJECTED, SessionState.ERRORED])
    def test_defaults_for_non_result_outcomes(self, state: SessionState) -> None:
        outcome = VerificationOutcome(session_id="s", kind=VerificationKind.AGE, state=state)
        assert outcome.success is False
        assert outcome.age_years is None
        assert outcome.issuer_parameters() == {}
