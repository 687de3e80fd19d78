"""Tests for zkpass_verifier.events — LifecycleEvent and ProofEventStream."""
from __future__ import annotations

import asyncio

import pytest

from zkpass_verifier.events import EventType, LifecycleEvent, ProofEventStream


async def _collect(stream: ProofEventStream) -> list[LifecycleEvent]:
    return [event async for event in stream]


class TestLifecycleEvent:
    @pytest.mark.parametrize(
        "event, terminal",
        [
            (LifecycleEvent.request_received(), False),
            (LifecycleEvent.generating_proof(), False),
            (LifecycleEvent.proof_generated("p"), False),
            (LifecycleEvent.verification_result(True, {}), True),
            (LifecycleEvent.reject(), True),
            (LifecycleEvent.error("boom"), True),
        ],
    )
    def test_terminal_flags(self, event: LifecycleEvent, terminal: bool) -> None:
        assert event.is_terminal is terminal

    def test_result_copies_payload(self) -> None:
        payload = {"age": 30}
        event = LifecycleEvent.verification_result(True, payload)
        payload["age"] = 12
        assert event.result == {"age": 30}
        assert event.event_type is EventType.RESULT

    def test_result_defaults_to_empty_payload(self) -> None:
        assert LifecycleEvent.verification_result(False).result == {}

    def test_proof_generated_carries_name(self) -> None:
        assert LifecycleEvent.proof_generated("age-proof").name == "age-proof"


class TestProofEventStream:
    @pytest.mark.asyncio
    async def test_iteration_stops_after_terminal(self) -> None:
        stream = ProofEventStream()
        stream.emit(LifecycleEvent.request_received())
        stream.emit(LifecycleEvent.reject())
        events = await _collect(stream)
        assert [e.event_type for e in events] == [EventType.REQUEST_RECEIVED, EventType.REJECT]
        assert stream.finished is True

    def test_emit_after_terminal_dropped(self) -> None:
        stream = ProofEventStream()
        assert stream.emit(LifecycleEvent.error("x")) is True
        assert stream.emit(LifecycleEvent.verification_result(True)) is False

    @pytest.mark.asyncio
    async def test_close_ends_iteration(self) -> None:
        stream = ProofEventStream()
        stream.emit(LifecycleEvent.request_received())
        stream.close()
        events = await _collect(stream)
        assert len(events) == 1
        assert stream.emit(LifecycleEvent.reject()) is False

    def test_close_is_idempotent(self) -> None:
        stream = ProofEventStream()
        stream.close()
        stream.close()
        assert stream.finished is True

    @pytest.mark.asyncio
    async def test_consumer_waits_for_producer(self) -> None:
        stream = ProofEventStream()
        consumer = asyncio.ensure_future(_collect(stream))
        await asyncio.sleep(0)
        assert not consumer.done()
        stream.emit(LifecycleEvent.generating_proof())
        stream.emit(LifecycleEvent.verification_result(True, {"age": 20}))
        events = await asyncio.wait_for(consumer, timeout=1.0)
        assert events[-1].result == {"age": 20}
