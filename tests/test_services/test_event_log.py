"""Tests for the append-only audit event log."""

from __future__ import annotations

from fund_escrow.domain.enums import EscrowStatus, EventType
from fund_escrow.services.event_log import EventLog


class TestEventLog:
    def test_record_assigns_sequence(self) -> None:
        log = EventLog()
        first = log.record(0, EventType.ESCROW_CREATED, None, EscrowStatus.LOCKED, "ST1TEST", 0)
        second = log.record(0, EventType.FUNDS_RELEASED, EscrowStatus.LOCKED, EscrowStatus.RELEASED, "ST3ORACLE", 5)
        assert (first.sequence, second.sequence) == (0, 1)
        assert first.metadata == {}

    def test_get_by_escrow_filters_in_order(self) -> None:
        log = EventLog()
        log.record(0, EventType.ESCROW_CREATED, None, EscrowStatus.LOCKED, "a", 0)
        log.record(1, EventType.ESCROW_CREATED, None, EscrowStatus.LOCKED, "a", 1)
        log.record(None, EventType.ESCROW_FEE_CHANGED, None, None, "admin", 2)
        log.record(0, EventType.ESCROW_REFUNDED, EscrowStatus.LOCKED, EscrowStatus.REFUNDED, "admin", 3)

        assert [evt.event_type for evt in log.get_by_escrow(0)] == [
            EventType.ESCROW_CREATED,
            EventType.ESCROW_REFUNDED,
        ]
        assert len(log) == 4
        assert len(log.all()) == 4

    def test_to_dict_serializes_timestamp(self) -> None:
        evt = EventLog().record(0, EventType.ESCROW_CREATED, None, EscrowStatus.LOCKED, "a", 0, {"x": 1})
        data = evt.to_dict()
        assert data["metadata"] == {"x": 1}
        assert isinstance(data["created_at"], str)
