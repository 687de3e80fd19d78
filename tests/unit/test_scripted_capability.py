"""Tests for zkpass_verifier.simulation — ScriptedProofCapability."""
from __future__ import annotations

import urllib.parse

import pytest

from zkpass_verifier.capability import (
    CapabilityUnavailable,
    RequestCreationFailed,
    RequestMetadata,
    UnsupportedAttribute,
)
from zkpass_verifier.events import EventType, LifecycleEvent
from zkpass_verifier.simulation import (
    ScriptedProofCapability,
    rejection_script,
    standard_script,
    unavailable_factory,
)

_METADATA = RequestMetadata(
    purpose="Verify you are 18 or older",
    scope="age-verification",
    display_name="Verifier",
)


class TestScripts:
    def test_standard_script_order(self) -> None:
        script = standard_script(result={"age": 30})
        assert [e.event_type for e in script] == [
            EventType.REQUEST_RECEIVED,
            EventType.GENERATING_PROOF,
            EventType.PROOF_GENERATED,
            EventType.RESULT,
        ]
        assert script[-1].verified is True

    def test_rejection_script_ends_in_reject(self) -> None:
        assert rejection_script()[-1].event_type is EventType.REJECT


class TestRequests:
    @pytest.mark.asyncio
    async def test_disclose_records_attempts(self) -> None:
        capability = ScriptedProofCapability(accepted_keys={"age"})
        handle = await capability.create_request(_METADATA)
        assert handle.disclose("age") is handle
        with pytest.raises(UnsupportedAttribute) as exc_info:
            handle.disclose("firstname")
        assert exc_info.value.key == "firstname"
        assert handle.attempted == ["age", "firstname"]
        assert handle.disclosed == ["age"]

    @pytest.mark.asyncio
    async def test_finalize_builds_url(self) -> None:
        capability = ScriptedProofCapability(base_url="https://verify.example/r")
        handle = await capability.create_request(_METADATA)
        handle.disclose("age")
        finalized = handle.finalize()
        parsed = urllib.parse.urlparse(finalized.url)
        query = urllib.parse.parse_qs(parsed.query)
        assert finalized.url.startswith("https://verify.example/r?")
        assert query == {"id": ["1"], "scope": ["age-verification"], "disclose": ["age"]}
        assert finalized.events is handle.stream

    @pytest.mark.asyncio
    async def test_request_ids_increment(self) -> None:
        capability = ScriptedProofCapability()
        first = await capability.create_request(_METADATA)
        second = await capability.create_request(_METADATA)
        assert (first.request_id, second.request_id) == (1, 2)
        assert capability.last_request is second

    @pytest.mark.asyncio
    async def test_fail_create(self) -> None:
        capability = ScriptedProofCapability(fail_create=True)
        with pytest.raises(RequestCreationFailed):
            await capability.create_request(_METADATA)

    @pytest.mark.asyncio
    async def test_factory_returns_capability(self) -> None:
        capability = ScriptedProofCapability()
        assert await capability.factory()() is capability

    @pytest.mark.asyncio
    async def test_unavailable_factory(self) -> None:
        with pytest.raises(CapabilityUnavailable, match="offline"):
            await unavailable_factory("offline")()


class TestPlay:
    @pytest.mark.asyncio
    async def test_play_onto_latest_stream(self) -> None:
        capability = ScriptedProofCapability(script=rejection_script())
        handle = await capability.create_request(_METADATA)
        finalized = handle.finalize()
        await capability.play()
        events = [event async for event in finalized.events]
        assert [e.event_type for e in events] == [EventType.REQUEST_RECEIVED, EventType.REJECT]

    @pytest.mark.asyncio
    async def test_play_stops_when_stream_finished(self) -> None:
        script = [LifecycleEvent.error("x"), LifecycleEvent.reject()]
        capability = ScriptedProofCapability(script=script)
        handle = await capability.create_request(_METADATA)
        finalized = handle.finalize()
        await capability.play(finalized.events)
        events = [event async for event in finalized.events]
        assert [e.event_type for e in events] == [EventType.ERROR]

    @pytest.mark.asyncio
    async def test_play_without_request_raises(self) -> None:
        with pytest.raises(RuntimeError):
            await ScriptedProofCapability().play()

    def test_metadata_to_dict(self) -> None:
        data = _METADATA.to_dict()
        assert data["scope"] == "age-verification"
        assert data["displayName"] == "Verifier"
