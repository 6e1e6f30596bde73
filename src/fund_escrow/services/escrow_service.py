"""Escrow Service — transactional host around the escrow ledger.

This is the application layer that coordinates between:
    - Domain ledger (validation + state transitions)
    - Settlement collaborator (moves value)
    - Event log (audit trail)

Each mutating call snapshots the ledger, runs the ledger operation, then
hands the emitted transfers to settlement as one batch. If settlement
rejects the batch the ledger is restored to its snapshot, so ledger state and
balances commit together or not at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from fund_escrow.domain.enums import EscrowStatus, EventType
from fund_escrow.domain.exceptions import (
    EscrowLedgerError,
    EscrowNotFoundError,
    SettlementError,
)
from fund_escrow.logging_config import get_logger
from fund_escrow.schemas.escrow import (
    EscrowEventResponse,
    EscrowResponse,
    LedgerStatusResponse,
    TransferResponse,
)
from fund_escrow.services.event_log import EventLog

if TYPE_CHECKING:
    from collections.abc import Callable

    from fund_escrow.domain.ledger import EscrowLedger
    from fund_escrow.domain.models import CallContext, LedgerReceipt
    from fund_escrow.domain.settlement_protocol import SettlementCollaborator

logger = get_logger(__name__)


class EscrowService:
    """Manages the escrow lifecycle against a ledger and a settlement backend."""

    def __init__(
        self,
        ledger: EscrowLedger,
        settlement: SettlementCollaborator,
        events: EventLog | None = None,
    ) -> None:
        self._ledger = ledger
        self._settlement = settlement
        self._events = events if events is not None else EventLog()

    # ------------------------------------------------------------------
    # Escrow Creation
    # ------------------------------------------------------------------

    def create_escrow(
        self,
        ctx: CallContext,
        proposal_id: int,
        amount: int,
        vendor: str,
        deadline: int,
        quorum: int,
        description: str,
        verification_method: str,
        multisig_count: int,
        oracle: str,
    ) -> LedgerReceipt:
        """Create and fund a new escrow in LOCKED state."""
        receipt = self._commit(
            ctx,
            "create_escrow",
            lambda: self._ledger.create_escrow(
                ctx,
                proposal_id=proposal_id,
                amount=amount,
                vendor=vendor,
                deadline=deadline,
                quorum=quorum,
                description=description,
                verification_method=verification_method,
                multisig_count=multisig_count,
                oracle=oracle,
            ),
        )
        escrow_id = receipt.value
        self._events.record(
            escrow_id=escrow_id,
            event_type=EventType.ESCROW_CREATED,
            old_status=None,
            new_status=EscrowStatus.LOCKED,
            actor=ctx.caller,
            block_height=ctx.block_height,
            metadata={"proposal_id": proposal_id, "amount": amount, "vendor": vendor},
        )
        logger.info("escrow.created", escrow_id=escrow_id, amount=amount, vendor=vendor)
        return receipt

    # ------------------------------------------------------------------
    # Amendment
    # ------------------------------------------------------------------

    def update_escrow(
        self,
        ctx: CallContext,
        escrow_id: int,
        new_amount: int,
        new_deadline: int,
    ) -> LedgerReceipt:
        """Amend amount and deadline of a locked escrow."""
        receipt = self._commit(
            ctx,
            "update_escrow",
            lambda: self._ledger.update_escrow(ctx, escrow_id, new_amount, new_deadline),
        )
        self._events.record(
            escrow_id=escrow_id,
            event_type=EventType.ESCROW_UPDATED,
            old_status=EscrowStatus.LOCKED,
            new_status=EscrowStatus.LOCKED,
            actor=ctx.caller,
            block_height=ctx.block_height,
            metadata={"amount": new_amount, "deadline": new_deadline},
        )
        logger.info(
            "escrow.updated", escrow_id=escrow_id, amount=new_amount, deadline=new_deadline
        )
        return receipt

    # ------------------------------------------------------------------
    # Release / Refund
    # ------------------------------------------------------------------

    def verify_and_release(self, ctx: CallContext, escrow_id: int, verified: bool) -> LedgerReceipt:
        """Release funds to the vendor once delivery has been verified."""
        receipt = self._commit(
            ctx,
            "verify_and_release",
            lambda: self._ledger.verify_and_release(ctx, escrow_id, verified),
        )
        self._events.record(
            escrow_id=escrow_id,
            event_type=EventType.FUNDS_RELEASED,
            old_status=EscrowStatus.LOCKED,
            new_status=EscrowStatus.RELEASED,
            actor=ctx.caller,
            block_height=ctx.block_height,
            metadata={"amount": receipt.transfers[0].amount},
        )
        logger.info("escrow.released", escrow_id=escrow_id)
        return receipt

    def refund_escrow(self, ctx: CallContext, escrow_id: int, reason: str) -> LedgerReceipt:
        """Refund a locked escrow into the refund pool."""
        receipt = self._commit(
            ctx,
            "refund_escrow",
            lambda: self._ledger.refund_escrow(ctx, escrow_id, reason),
        )
        self._events.record(
            escrow_id=escrow_id,
            event_type=EventType.ESCROW_REFUNDED,
            old_status=EscrowStatus.LOCKED,
            new_status=EscrowStatus.REFUNDED,
            actor=ctx.caller,
            block_height=ctx.block_height,
            metadata={"reason": reason, "amount": receipt.transfers[0].amount},
        )
        logger.info("escrow.refunded", escrow_id=escrow_id, reason=reason)
        return receipt

    # ------------------------------------------------------------------
    # Admin configuration
    # ------------------------------------------------------------------

    def set_admin_principal(self, ctx: CallContext, new_admin: str) -> LedgerReceipt:
        previous = self._ledger.config.admin_principal
        receipt = self._commit(
            ctx, "set_admin_principal", lambda: self._ledger.set_admin_principal(ctx, new_admin)
        )
        self._record_config_event(ctx, EventType.ADMIN_CHANGED, previous, new_admin)
        return receipt

    def set_max_escrows(self, ctx: CallContext, new_max: int) -> LedgerReceipt:
        previous = self._ledger.config.max_escrows
        receipt = self._commit(
            ctx, "set_max_escrows", lambda: self._ledger.set_max_escrows(ctx, new_max)
        )
        self._record_config_event(ctx, EventType.MAX_ESCROWS_CHANGED, previous, new_max)
        return receipt

    def set_escrow_fee(self, ctx: CallContext, new_fee: int) -> LedgerReceipt:
        previous = self._ledger.config.escrow_fee
        receipt = self._commit(
            ctx, "set_escrow_fee", lambda: self._ledger.set_escrow_fee(ctx, new_fee)
        )
        self._record_config_event(ctx, EventType.ESCROW_FEE_CHANGED, previous, new_fee)
        return receipt

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def get_escrow(self, escrow_id: int) -> EscrowResponse:
        """Get an escrow view or raise."""
        record = self._ledger.get_escrow(escrow_id)
        if record is None:
            raise EscrowNotFoundError(escrow_id)
        return EscrowResponse.from_record(
            escrow_id, record, self._ledger.get_escrow_update(escrow_id)
        )

    def get_status(self) -> LedgerStatusResponse:
        return LedgerStatusResponse.from_config(self._ledger.config)

    def get_transfers(self) -> list[TransferResponse]:
        """Every transfer the ledger has committed, oldest first."""
        return [TransferResponse.from_transfer(t) for t in self._ledger.transfer_log]

    def get_events(self, escrow_id: int | None = None) -> list[EscrowEventResponse]:
        """Get the audit trail, for one escrow or for the whole ledger."""
        events = self._events.all() if escrow_id is None else self._events.get_by_escrow(escrow_id)
        return [EscrowEventResponse.from_event(evt) for evt in events]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _commit(
        self,
        ctx: CallContext,
        operation: str,
        action: Callable[[], LedgerReceipt],
    ) -> LedgerReceipt:
        """Run a ledger operation and settle its transfers, all-or-nothing."""
        with structlog.contextvars.bound_contextvars(
            caller=ctx.caller, block_height=ctx.block_height
        ):
            snapshot = self._ledger.snapshot()
            try:
                receipt = action()
            except EscrowLedgerError as exc:
                logger.warning(
                    "escrow.rejected", operation=operation, error=exc.kind, code=exc.code
                )
                raise

            if not receipt.transfers:
                return receipt

            try:
                self._settlement.apply_all(receipt.transfers)
            except SettlementError as exc:
                self._ledger.restore(snapshot)
                logger.error(
                    "escrow.settlement_rolled_back",
                    operation=operation,
                    error=exc.kind,
                    code=exc.code,
                    message=exc.message,
                )
                raise
            return receipt

    def _record_config_event(
        self, ctx: CallContext, event_type: EventType, previous: object, new: object
    ) -> None:
        self._events.record(
            escrow_id=None,
            event_type=event_type,
            old_status=None,
            new_status=None,
            actor=ctx.caller,
            block_height=ctx.block_height,
            metadata={"previous": previous, "new": new},
        )
        logger.info("ledger.config_changed", change=event_type, previous=previous, new=new)
