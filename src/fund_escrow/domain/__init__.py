"""Domain layer — pure business logic with zero framework dependencies."""

from fund_escrow.domain.enums import (
    ErrorCode,
    EscrowStatus,
    EventType,
    VerificationMethod,
)
from fund_escrow.domain.exceptions import (
    EscrowLedgerError,
    EscrowNotFoundError,
    EscrowValidationError,
    InvalidEscrowStateError,
    NotAuthorizedError,
    SettlementError,
)
from fund_escrow.domain.ledger import EscrowLedger, LedgerSnapshot
from fund_escrow.domain.models import (
    CallContext,
    EscrowEvent,
    EscrowRecord,
    EscrowUpdateRecord,
    LedgerConfig,
    LedgerReceipt,
    TransferRequest,
)
from fund_escrow.domain.settlement_protocol import SettlementCollaborator
from fund_escrow.domain.state_machine import (
    EscrowStateMachine,
    TransitionNotAllowed,
    validate_transition,
)

__all__ = [
    "ErrorCode",
    "EscrowStatus",
    "EventType",
    "VerificationMethod",
    "EscrowLedgerError",
    "EscrowNotFoundError",
    "EscrowValidationError",
    "InvalidEscrowStateError",
    "NotAuthorizedError",
    "SettlementError",
    "EscrowLedger",
    "LedgerSnapshot",
    "CallContext",
    "EscrowEvent",
    "EscrowRecord",
    "EscrowUpdateRecord",
    "LedgerConfig",
    "LedgerReceipt",
    "TransferRequest",
    "SettlementCollaborator",
    "EscrowStateMachine",
    "TransitionNotAllowed",
    "validate_transition",
]
