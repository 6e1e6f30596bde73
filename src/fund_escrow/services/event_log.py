"""Append-only audit event log.

Holds one EscrowEvent per committed ledger mutation. Events are never updated
or deleted; ``record`` is the only write operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fund_escrow.domain.models import EscrowEvent

if TYPE_CHECKING:
    from fund_escrow.domain.enums import EscrowStatus, EventType


class EventLog:
    """In-memory audit trail for escrow lifecycle and configuration changes."""

    def __init__(self) -> None:
        self._events: list[EscrowEvent] = []

    def record(
        self,
        escrow_id: int | None,
        event_type: EventType,
        old_status: EscrowStatus | None,
        new_status: EscrowStatus | None,
        actor: str,
        block_height: int,
        metadata: dict | None = None,
    ) -> EscrowEvent:
        """Append a new audit event. This is the ONLY write operation allowed."""
        evt = EscrowEvent(
            sequence=len(self._events),
            event_type=event_type,
            escrow_id=escrow_id,
            old_status=old_status,
            new_status=new_status,
            actor=actor,
            block_height=block_height,
            metadata=metadata or {},
        )
        self._events.append(evt)
        return evt

    def get_by_escrow(self, escrow_id: int) -> list[EscrowEvent]:
        """Fetch all events for an escrow in chronological order."""
        return [evt for evt in self._events if evt.escrow_id == escrow_id]

    def all(self) -> list[EscrowEvent]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)
