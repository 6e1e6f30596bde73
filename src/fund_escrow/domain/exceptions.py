"""Domain exceptions for the Fund Escrow ledger.

These exceptions are framework-agnostic and represent business rule violations.
Every exception carries exactly one ErrorCode from the fixed taxonomy, so a
host can surface ``exc.code`` verbatim to its own callers.
"""

from __future__ import annotations

from fund_escrow.domain.enums import ErrorCode


class EscrowLedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(self, message: str, code: ErrorCode) -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return self.code.kind

    def to_dict(self) -> dict:
        return {"error": self.kind, "code": int(self.code), "message": self.message}


# --- Authorization Errors ---


class NotAuthorizedError(EscrowLedgerError):
    """Raised when a non-admin caller invokes an admin-only operation."""

    def __init__(self, caller: str, operation: str) -> None:
        super().__init__(
            message=f"Caller {caller} is not authorized to {operation}",
            code=ErrorCode.NOT_AUTHORIZED,
        )
        self.caller = caller
        self.operation = operation


# --- Record Errors ---


class EscrowNotFoundError(EscrowLedgerError):
    """Raised when an escrow ID does not exist."""

    def __init__(self, escrow_id: int) -> None:
        super().__init__(
            message=f"Escrow not found: {escrow_id}",
            code=ErrorCode.ESCROW_NOT_FOUND,
        )
        self.escrow_id = escrow_id


class MaxEscrowsExceededError(EscrowLedgerError):
    """Raised when the ledger has already created ``max_escrows`` records."""

    def __init__(self, max_escrows: int) -> None:
        super().__init__(
            message=f"Escrow cap reached: {max_escrows}",
            code=ErrorCode.MAX_ESCROWS_EXCEEDED,
        )
        self.max_escrows = max_escrows


# --- Validation Errors ---


class EscrowValidationError(EscrowLedgerError):
    """Raised when an operation argument fails a field-level check.

    Example: quorum=101 -> InvalidQuorum on field "quorum".
    """

    def __init__(self, code: ErrorCode, field: str, value: object) -> None:
        super().__init__(
            message=f"{code.kind}: {field}={value!r}",
            code=code,
        )
        self.field = field
        self.value = value


class InvalidUpdateParamError(EscrowLedgerError):
    """Raised when an admin setter receives an out-of-range value."""

    def __init__(self, param: str, value: int) -> None:
        super().__init__(
            message=f"Invalid value for {param}: {value}",
            code=ErrorCode.INVALID_UPDATE_PARAM,
        )
        self.param = param
        self.value = value


# --- State Machine Errors ---


class InvalidEscrowStateError(EscrowLedgerError):
    """Raised when an escrow is not in a status that permits the operation.

    The code depends on the operation: release and refund report
    FundsReleased, update reports UpdateNotAllowed.
    """

    def __init__(self, escrow_id: int, current_status: str, attempted: str, code: ErrorCode) -> None:
        super().__init__(
            message=f"Escrow {escrow_id} is {current_status}; cannot {attempted}",
            code=code,
        )
        self.escrow_id = escrow_id
        self.current_status = current_status
        self.attempted = attempted


class ExpiredEscrowError(EscrowLedgerError):
    """Raised when a release is attempted at or after the deadline."""

    def __init__(self, escrow_id: int, deadline: int, block_height: int) -> None:
        super().__init__(
            message=f"Escrow {escrow_id} expired at {deadline} (now {block_height})",
            code=ErrorCode.EXPIRED_ESCROW,
        )
        self.escrow_id = escrow_id
        self.deadline = deadline
        self.block_height = block_height


class VerificationFailedError(EscrowLedgerError):
    """Raised when the external verifier reported the delivery as unverified."""

    def __init__(self, escrow_id: int) -> None:
        super().__init__(
            message=f"Delivery verification failed for escrow {escrow_id}",
            code=ErrorCode.VERIFICATION_FAILED,
        )
        self.escrow_id = escrow_id


# --- Settlement Errors ---


class SettlementError(EscrowLedgerError):
    """Raised by a settlement collaborator when a transfer cannot be applied."""


class InsufficientBalanceError(SettlementError):
    """Raised when the sending account holds less than the transfer amount."""

    def __init__(self, account: str, required: int, available: int) -> None:
        super().__init__(
            message=f"Insufficient balance on {account}: required {required}, available {available}",
            code=ErrorCode.INSUFFICIENT_BALANCE,
        )
        self.account = account
        self.required = required
        self.available = available


class TransferFailedError(SettlementError):
    """Raised when a transfer request is malformed or rejected outright."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code=ErrorCode.TRANSFER_FAILED)
