"""Escrow Ledger — deterministic state machine over escrow records.

Every operation validates its preconditions in a fixed order (first failure
wins), then mutates state and returns a LedgerReceipt carrying the transfer
requests it emitted. Validation never mutates: on any raised error the ledger
is exactly as it was before the call.

The ledger does not move value. Transfer requests are outputs for a
settlement collaborator; if settlement fails later, nothing here is rolled
back. Hosts that need all-or-nothing commits use snapshot()/restore().
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from fund_escrow.domain.enums import ErrorCode, EscrowStatus, VerificationMethod
from fund_escrow.domain.exceptions import (
    EscrowNotFoundError,
    EscrowValidationError,
    ExpiredEscrowError,
    InvalidEscrowStateError,
    InvalidUpdateParamError,
    MaxEscrowsExceededError,
    NotAuthorizedError,
    VerificationFailedError,
)
from fund_escrow.domain.models import (
    CallContext,
    EscrowRecord,
    EscrowUpdateRecord,
    LedgerConfig,
    LedgerReceipt,
    TransferRequest,
)
from fund_escrow.domain.state_machine import EscrowStateMachine

MAX_DESCRIPTION_LENGTH = 200
MAX_REFUND_REASON_LENGTH = 100
MAX_QUORUM = 100
MIN_MULTISIG_COUNT = 1  # exclusive
MAX_MULTISIG_COUNT = 10


@dataclass(frozen=True)
class LedgerSnapshot:
    records: dict[int, EscrowRecord]
    updates: dict[int, EscrowUpdateRecord]
    config: LedgerConfig
    transfer_log: tuple[TransferRequest, ...]


class EscrowLedger:
    """Owns escrow records, their update audit and the ledger configuration."""

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self._config = config if config is not None else LedgerConfig()
        self._records: dict[int, EscrowRecord] = {}
        self._updates: dict[int, EscrowUpdateRecord] = {}
        self._transfer_log: list[TransferRequest] = []

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
        """Lock ``amount`` from the caller and return the new escrow ID."""
        config = self._config
        if config.next_escrow_id >= config.max_escrows:
            raise MaxEscrowsExceededError(config.max_escrows)
        if proposal_id <= 0:
            raise EscrowValidationError(ErrorCode.INVALID_PROPOSAL_ID, "proposal_id", proposal_id)
        if amount <= 0:
            raise EscrowValidationError(ErrorCode.INVALID_AMOUNT, "amount", amount)
        if vendor == ctx.caller:
            raise EscrowValidationError(ErrorCode.INVALID_VENDOR, "vendor", vendor)
        if deadline <= ctx.block_height:
            raise EscrowValidationError(ErrorCode.INVALID_DEADLINE, "deadline", deadline)
        if quorum <= 0 or quorum > MAX_QUORUM:
            raise EscrowValidationError(ErrorCode.INVALID_QUORUM, "quorum", quorum)
        if not description or len(description) > MAX_DESCRIPTION_LENGTH:
            raise EscrowValidationError(ErrorCode.INVALID_DESCRIPTION, "description", description)
        if verification_method not in {m.value for m in VerificationMethod}:
            raise EscrowValidationError(
                ErrorCode.INVALID_VERIFICATION_METHOD, "verification_method", verification_method
            )
        if multisig_count <= MIN_MULTISIG_COUNT or multisig_count > MAX_MULTISIG_COUNT:
            raise EscrowValidationError(ErrorCode.INVALID_MULTISIG_COUNT, "multisig_count", multisig_count)
        if oracle == ctx.caller:
            raise EscrowValidationError(ErrorCode.INVALID_ORACLE, "oracle", oracle)

        transfers = []
        # TransferRequest amounts are strictly positive; a zero fee moves nothing.
        if config.escrow_fee > 0:
            transfers.append(TransferRequest(config.escrow_fee, ctx.caller, config.admin_principal))
        transfers.append(TransferRequest(amount, ctx.caller, config.escrow_holder))

        escrow_id = config.next_escrow_id
        self._records[escrow_id] = EscrowRecord(
            proposal_id=proposal_id,
            amount=amount,
            vendor=vendor,
            locked_at=ctx.block_height,
            deadline=deadline,
            status=EscrowStatus.LOCKED,
            quorum=quorum,
            description=description,
            verification_method=VerificationMethod(verification_method),
            multisig_count=multisig_count,
            oracle=oracle,
            creator=ctx.caller,
        )
        config.next_escrow_id += 1
        return self._emit(escrow_id, transfers)

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
        """Overwrite amount and deadline of a locked escrow (admin only)."""
        record = self._get_record_or_raise(escrow_id)
        self._require_admin(ctx, "update escrow")
        if new_amount <= 0:
            raise EscrowValidationError(ErrorCode.INVALID_AMOUNT, "amount", new_amount)
        if new_deadline <= ctx.block_height:
            raise EscrowValidationError(ErrorCode.INVALID_DEADLINE, "deadline", new_deadline)
        if not record.is_locked:
            raise InvalidEscrowStateError(
                escrow_id, record.status, "update", ErrorCode.UPDATE_NOT_ALLOWED
            )

        self._records[escrow_id] = dataclasses.replace(
            record, amount=new_amount, deadline=new_deadline
        )
        self._updates[escrow_id] = EscrowUpdateRecord(
            update_amount=new_amount,
            update_deadline=new_deadline,
            update_timestamp=ctx.block_height,
            updater=ctx.caller,
        )
        return self._emit(True, [])

    # ------------------------------------------------------------------
    # Settlement transitions
    # ------------------------------------------------------------------

    def verify_and_release(self, ctx: CallContext, escrow_id: int, verified: bool) -> LedgerReceipt:
        """Release the locked amount to the vendor.

        ``verified`` is trusted as given; the record's quorum, multisig count
        and oracle are not consulted here.
        """
        record = self._get_record_or_raise(escrow_id)
        sm = self._guard(escrow_id, record, "release")
        if ctx.block_height >= record.deadline:
            raise ExpiredEscrowError(escrow_id, record.deadline, ctx.block_height)
        if not verified:
            raise VerificationFailedError(escrow_id)

        sm.release()
        new_status = EscrowStatus(sm.status)
        self._records[escrow_id] = dataclasses.replace(record, status=new_status)
        return self._emit(
            True,
            [TransferRequest(record.amount, self._config.escrow_holder, record.vendor)],
        )

    def refund_escrow(self, ctx: CallContext, escrow_id: int, reason: str) -> LedgerReceipt:
        """Return the locked amount to the refund pool (admin only)."""
        record = self._get_record_or_raise(escrow_id)
        self._require_admin(ctx, "refund escrow")
        sm = self._guard(escrow_id, record, "refund")
        if not reason or len(reason) > MAX_REFUND_REASON_LENGTH:
            raise EscrowValidationError(ErrorCode.INVALID_REFUND_REASON, "reason", reason)

        sm.refund()
        new_status = EscrowStatus(sm.status)
        self._records[escrow_id] = dataclasses.replace(
            record, status=new_status, refund_reason=reason
        )
        return self._emit(
            True,
            [TransferRequest(record.amount, self._config.escrow_holder, self._config.refund_pool)],
        )

    # ------------------------------------------------------------------
    # Admin configuration
    # ------------------------------------------------------------------

    def set_admin_principal(self, ctx: CallContext, new_admin: str) -> LedgerReceipt:
        self._require_admin(ctx, "set admin principal")
        self._config.admin_principal = new_admin
        return self._emit(True, [])

    def set_max_escrows(self, ctx: CallContext, new_max: int) -> LedgerReceipt:
        self._require_admin(ctx, "set max escrows")
        if new_max <= 0:
            raise InvalidUpdateParamError("max_escrows", new_max)
        self._config.max_escrows = new_max
        return self._emit(True, [])

    def set_escrow_fee(self, ctx: CallContext, new_fee: int) -> LedgerReceipt:
        self._require_admin(ctx, "set escrow fee")
        if new_fee < 0:
            raise InvalidUpdateParamError("escrow_fee", new_fee)
        self._config.escrow_fee = new_fee
        return self._emit(True, [])

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def get_escrow(self, escrow_id: int) -> EscrowRecord | None:
        return self._records.get(escrow_id)

    def get_escrow_update(self, escrow_id: int) -> EscrowUpdateRecord | None:
        return self._updates.get(escrow_id)

    def get_escrow_count(self) -> int:
        """Total escrows ever created (not the number currently locked)."""
        return self._config.next_escrow_id

    @property
    def config(self) -> LedgerConfig:
        return self._config

    @property
    def transfer_log(self) -> list[TransferRequest]:
        """Every transfer emitted by a successful operation, oldest first."""
        return list(self._transfer_log)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        """Capture the full ledger state (records are frozen, so dicts copy shallowly)."""
        return LedgerSnapshot(
            records=dict(self._records),
            updates=dict(self._updates),
            config=dataclasses.replace(self._config),
            transfer_log=tuple(self._transfer_log),
        )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self._records = dict(snapshot.records)
        self._updates = dict(snapshot.updates)
        # Restore config in place; callers may hold a reference to it.
        for f in dataclasses.fields(LedgerConfig):
            setattr(self._config, f.name, getattr(snapshot.config, f.name))
        self._transfer_log = list(snapshot.transfer_log)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_record_or_raise(self, escrow_id: int) -> EscrowRecord:
        record = self._records.get(escrow_id)
        if record is None:
            raise EscrowNotFoundError(escrow_id)
        return record

    def _require_admin(self, ctx: CallContext, operation: str) -> None:
        if ctx.caller != self._config.admin_principal:
            raise NotAuthorizedError(ctx.caller, operation)

    def _guard(self, escrow_id: int, record: EscrowRecord, event_name: str) -> EscrowStateMachine:
        """Return a state machine ready to fire ``event_name``.

        Raises FundsReleased if the record is already finalized.
        """
        sm = EscrowStateMachine(current_status=record.status)
        if event_name not in sm.get_allowed_events():
            raise InvalidEscrowStateError(
                escrow_id, record.status, event_name, ErrorCode.FUNDS_RELEASED
            )
        return sm

    def _emit(self, value: object, transfers: list[TransferRequest]) -> LedgerReceipt:
        self._transfer_log.extend(transfers)
        return LedgerReceipt(value=value, transfers=tuple(transfers))
