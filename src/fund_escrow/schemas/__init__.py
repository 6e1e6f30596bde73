"""Pydantic view schemas."""

from fund_escrow.schemas.escrow import (
    EscrowEventResponse,
    EscrowResponse,
    EscrowUpdateResponse,
    LedgerStatusResponse,
    TransferResponse,
)

__all__ = [
    "EscrowEventResponse",
    "EscrowResponse",
    "EscrowUpdateResponse",
    "LedgerStatusResponse",
    "TransferResponse",
]
