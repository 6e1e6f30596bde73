"""Domain records for the escrow ledger.

Plain dataclasses with no framework imports. Records handed out by the ledger
are frozen; the ledger replaces them wholesale on every mutation so callers
never observe a half-applied change.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

from fund_escrow.domain.enums import EscrowStatus, EventType, VerificationMethod

DEFAULT_ADMIN_PRINCIPAL = "ST1ADMIN"
DEFAULT_MAX_ESCROWS = 1000
DEFAULT_ESCROW_FEE = 500
DEFAULT_ESCROW_HOLDER = "contract"
DEFAULT_REFUND_POOL = "contribution-manager"


@dataclass(frozen=True)
class CallContext:
    """Who is calling and at which block height.

    Attributes:
        caller: Identity of the principal invoking the operation.
        block_height: Current time/block counter used for deadline checks.
    """

    caller: str
    block_height: int = 0


@dataclass(frozen=True)
class TransferRequest:
    """A single value movement for the settlement collaborator to apply."""

    amount: int
    sender: str
    recipient: str

    def to_dict(self) -> dict:
        return {"amount": self.amount, "from": self.sender, "to": self.recipient}


@dataclass(frozen=True)
class EscrowRecord:
    """One locked-fund agreement.

    Attributes:
        proposal_id: External reference to the funded proposal.
        amount: Locked amount in minor currency units.
        vendor: Recipient of released funds.
        locked_at: Block height at creation.
        deadline: Block height at which the escrow expires for release.
        status: Current lifecycle status.
        quorum: Required approval percentage, in (0, 100].
        description: Human-readable purpose, 1-200 chars.
        verification_method: How the verified signal is produced upstream.
        multisig_count: Required signers, in (1, 10].
        oracle: Identity of the attesting oracle.
        creator: Identity that created and funded the escrow.
        verifier: Reserved for verifier assignment; never set by the ledger.
        refund_reason: Set only when the escrow is refunded.
    """

    proposal_id: int
    amount: int
    vendor: str
    locked_at: int
    deadline: int
    status: EscrowStatus
    quorum: int
    description: str
    verification_method: VerificationMethod
    multisig_count: int
    oracle: str
    creator: str
    verifier: str | None = None
    refund_reason: str | None = None

    @property
    def is_locked(self) -> bool:
        return self.status == EscrowStatus.LOCKED


@dataclass(frozen=True)
class EscrowUpdateRecord:
    """The most recent amount/deadline amendment of an escrow."""

    update_amount: int
    update_deadline: int
    update_timestamp: int
    updater: str


@dataclass
class LedgerConfig:
    """Admin-mutable configuration owned by a single ledger instance."""

    next_escrow_id: int = 0
    max_escrows: int = DEFAULT_MAX_ESCROWS
    escrow_fee: int = DEFAULT_ESCROW_FEE
    admin_principal: str = DEFAULT_ADMIN_PRINCIPAL
    escrow_holder: str = DEFAULT_ESCROW_HOLDER
    refund_pool: str = DEFAULT_REFUND_POOL


@dataclass(frozen=True)
class LedgerReceipt:
    """Successful outcome of a mutating ledger operation.

    Attributes:
        value: The new escrow ID for creation, True otherwise.
        transfers: Transfer requests emitted by the operation, in order.
    """

    value: Any
    transfers: tuple[TransferRequest, ...] = ()


@dataclass(frozen=True)
class EscrowEvent:
    """One entry of the append-only audit trail."""

    sequence: int
    event_type: EventType
    escrow_id: int | None
    old_status: EscrowStatus | None
    new_status: EscrowStatus | None
    actor: str
    block_height: int
    metadata: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data
