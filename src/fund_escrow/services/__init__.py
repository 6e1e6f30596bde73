"""Application services — use case orchestration."""

from fund_escrow.services.escrow_service import EscrowService
from fund_escrow.services.event_log import EventLog
from fund_escrow.services.settlement import InMemorySettlement

__all__ = ["EscrowService", "EventLog", "InMemorySettlement"]
