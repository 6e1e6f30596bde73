"""Domain enumerations for the Fund Escrow ledger.

These enums define the canonical states, verification methods, audit event
types and error codes used throughout the system.
They are framework-agnostic (no pydantic, no structlog imports).
"""

import enum


class EscrowStatus(enum.StrEnum):
    """Lifecycle states of an escrow record.

    State transitions are enforced by the EscrowStateMachine guard.
    See domain/state_machine.py for the transition table.
    """

    LOCKED = "locked"
    RELEASED = "released"
    REFUNDED = "refunded"


class VerificationMethod(enum.StrEnum):
    """How the delivery-verified signal is expected to be produced upstream."""

    ORACLE = "oracle"
    MULTISIG = "multisig"
    VOTE = "vote"


class EventType(enum.StrEnum):
    """Types of audit events recorded in the service event log.

    Every committed mutation produces exactly one event.
    """

    # Lifecycle events
    ESCROW_CREATED = "ESCROW_CREATED"
    ESCROW_UPDATED = "ESCROW_UPDATED"

    # Settlement events
    FUNDS_RELEASED = "FUNDS_RELEASED"
    ESCROW_REFUNDED = "ESCROW_REFUNDED"

    # Configuration events
    ADMIN_CHANGED = "ADMIN_CHANGED"
    MAX_ESCROWS_CHANGED = "MAX_ESCROWS_CHANGED"
    ESCROW_FEE_CHANGED = "ESCROW_FEE_CHANGED"


class ErrorCode(enum.IntEnum):
    """Fixed failure taxonomy. Numbering is stable and shared with hosts."""

    NOT_AUTHORIZED = 100
    INVALID_PROPOSAL_ID = 101
    INVALID_AMOUNT = 102
    INVALID_VENDOR = 103
    ESCROW_ALREADY_EXISTS = 104
    ESCROW_NOT_FOUND = 105
    INVALID_TIMESTAMP = 106
    FUNDS_LOCKED = 107
    FUNDS_RELEASED = 108
    VERIFICATION_FAILED = 109
    INVALID_VERIFIER = 110
    INSUFFICIENT_BALANCE = 111
    TRANSFER_FAILED = 112
    INVALID_STATUS = 113
    EXPIRED_ESCROW = 114
    INVALID_QUORUM = 115
    INVALID_DEADLINE = 116
    INVALID_DESCRIPTION = 117
    MAX_ESCROWS_EXCEEDED = 118
    INVALID_UPDATE_PARAM = 119
    UPDATE_NOT_ALLOWED = 120
    INVALID_REFUND_REASON = 121
    INVALID_VERIFICATION_METHOD = 122
    INVALID_MULTISIG_COUNT = 123
    INVALID_ORACLE = 124

    @property
    def kind(self) -> str:
        """CamelCase kind name, e.g. ``InvalidQuorum``."""
        return "".join(part.capitalize() for part in self.name.split("_"))
