"""Pydantic schemas for read-only ledger views.

These schemas define the shapes a host hands to its own callers. They are
separate from the domain dataclasses to keep serialization concerns out of
the ledger core.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from fund_escrow.domain.enums import EscrowStatus, EventType, VerificationMethod
from fund_escrow.domain.models import (
    EscrowEvent,
    EscrowRecord,
    EscrowUpdateRecord,
    LedgerConfig,
    TransferRequest,
)


class TransferResponse(BaseModel):
    """One emitted transfer request."""

    model_config = ConfigDict(from_attributes=True)

    amount: int = Field(gt=0)
    sender: str
    recipient: str

    @classmethod
    def from_transfer(cls, transfer: TransferRequest) -> TransferResponse:
        return cls.model_validate(transfer)


class EscrowUpdateResponse(BaseModel):
    """Most recent amendment of an escrow."""

    model_config = ConfigDict(from_attributes=True)

    update_amount: int
    update_deadline: int
    update_timestamp: int
    updater: str


class EscrowResponse(BaseModel):
    """Response schema for an escrow record."""

    escrow_id: int
    proposal_id: int
    amount: int
    vendor: str
    creator: str
    locked_at: int
    deadline: int
    status: EscrowStatus
    verifier: str | None
    quorum: int
    description: str
    verification_method: VerificationMethod
    multisig_count: int
    oracle: str
    refund_reason: str | None
    last_update: EscrowUpdateResponse | None = None

    @classmethod
    def from_record(
        cls,
        escrow_id: int,
        record: EscrowRecord,
        update: EscrowUpdateRecord | None = None,
    ) -> EscrowResponse:
        return cls(
            escrow_id=escrow_id,
            **dataclasses.asdict(record),
            last_update=EscrowUpdateResponse.model_validate(update) if update else None,
        )


class LedgerStatusResponse(BaseModel):
    """Lightweight ledger-wide status."""

    escrow_count: int = Field(description="Total escrows ever created")
    max_escrows: int
    escrow_fee: int
    admin_principal: str

    @classmethod
    def from_config(cls, config: LedgerConfig) -> LedgerStatusResponse:
        return cls(
            escrow_count=config.next_escrow_id,
            max_escrows=config.max_escrows,
            escrow_fee=config.escrow_fee,
            admin_principal=config.admin_principal,
        )


class EscrowEventResponse(BaseModel):
    """Response schema for an audit event."""

    model_config = ConfigDict(from_attributes=True)

    sequence: int
    event_type: EventType
    escrow_id: int | None
    old_status: EscrowStatus | None
    new_status: EscrowStatus | None
    actor: str
    block_height: int
    metadata: dict
    created_at: datetime

    @classmethod
    def from_event(cls, event: EscrowEvent) -> EscrowEventResponse:
        return cls.model_validate(event)
