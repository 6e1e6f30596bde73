"""Settlement — simulated value-transfer collaborator.

Applies TransferRequests against in-memory integer balances. It stands in for
the real ledger primitive in tests and dry runs, and follows the same
contract: each request is applied fully or rejected, and a batch passed to
``apply_all`` is applied all-or-nothing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fund_escrow.domain.exceptions import InsufficientBalanceError, TransferFailedError
from fund_escrow.logging_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from fund_escrow.domain.models import TransferRequest

logger = get_logger(__name__)


class InMemorySettlement:
    """Handles escrow funding, release and refund transfers between accounts."""

    def __init__(self, balances: Mapping[str, int] | None = None) -> None:
        """Initialize the settlement backend.

        Args:
            balances: Opening balances per identity. Unknown identities hold 0.
        """
        self._balances: dict[str, int] = dict(balances or {})
        self._applied: list[TransferRequest] = []

    def fund(self, account: str, amount: int) -> None:
        """Credit ``amount`` to ``account`` out of band (faucet / opening balance)."""
        if amount <= 0:
            raise TransferFailedError(f"Funding amount must be positive, got {amount}")
        self._balances[account] = self._balances.get(account, 0) + amount
        logger.debug("settlement.account_funded", account=account, amount=amount)

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    @property
    def applied(self) -> list[TransferRequest]:
        """Transfers that have been committed, oldest first."""
        return list(self._applied)

    def apply(self, transfer: TransferRequest) -> None:
        self.apply_all([transfer])

    def apply_all(self, transfers: Sequence[TransferRequest]) -> None:
        """Apply every transfer against a working copy, then commit.

        Raises:
            InsufficientBalanceError: If a sender cannot cover its amount.
            TransferFailedError: If a request has a non-positive amount.

        A transfer to the sender itself must still be covered by its balance
        but leaves balances unchanged.
        """
        working = dict(self._balances)
        for transfer in transfers:
            self._debit_credit(working, transfer)

        self._balances = working
        for transfer in transfers:
            self._applied.append(transfer)
            logger.info(
                "settlement.transfer_applied",
                amount=transfer.amount,
                from_account=transfer.sender,
                to_account=transfer.recipient,
            )

    @staticmethod
    def _debit_credit(balances: dict[str, int], transfer: TransferRequest) -> None:
        if transfer.amount <= 0:
            raise TransferFailedError(f"Transfer amount must be positive, got {transfer.amount}")
        available = balances.get(transfer.sender, 0)
        if available < transfer.amount:
            raise InsufficientBalanceError(transfer.sender, transfer.amount, available)
        if transfer.sender == transfer.recipient:
            return

        balances[transfer.sender] = available - transfer.amount
        balances[transfer.recipient] = balances.get(transfer.recipient, 0) + transfer.amount
