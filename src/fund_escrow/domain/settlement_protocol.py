"""Settlement Collaborator Protocol.

Defines the interface that the value-transfer primitive must implement.
This is a Protocol (structural subtyping) so concrete settlement backends
don't need to inherit from a base class — they just need to match the shape.

The ledger itself never calls a collaborator. It returns TransferRequests in a
LedgerReceipt and the host (see services/escrow_service.py) hands them over.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fund_escrow.domain.models import TransferRequest


@runtime_checkable
class SettlementCollaborator(Protocol):
    """Protocol that all settlement implementations must satisfy.

    Concrete implementations:
        - services/settlement.py  (InMemorySettlement, simulated balances)
    """

    def apply(self, transfer: TransferRequest) -> None:
        """Apply one transfer fully or raise a SettlementError."""
        ...

    def apply_all(self, transfers: Sequence[TransferRequest]) -> None:
        """Apply every transfer, or none of them if any would fail.

        Raises:
            InsufficientBalanceError: If a sender cannot cover its amount.
            TransferFailedError: If a request is malformed or rejected.
        """
        ...
