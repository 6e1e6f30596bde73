"""Application factory for the Fund Escrow ledger.

Wires the pieces a host needs:
    1. Logging from settings.
    2. A fresh EscrowLedger seeded with the configured fee, cap and admin.
    3. A settlement backend (simulated unless the host supplies one).
    4. The EscrowService that commits ledger state and transfers together.

Usage:
    from fund_escrow.app import create_service
    service = create_service(balances={"ST1TEST": 10_000})
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fund_escrow.config import Settings, get_settings
from fund_escrow.domain.ledger import EscrowLedger
from fund_escrow.logging_config import get_logger, setup_logging
from fund_escrow.services.escrow_service import EscrowService
from fund_escrow.services.settlement import InMemorySettlement

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fund_escrow.domain.settlement_protocol import SettlementCollaborator


def create_service(
    settings: Settings | None = None,
    settlement: SettlementCollaborator | None = None,
    balances: Mapping[str, int] | None = None,
    configure_logging: bool = False,
) -> EscrowService:
    """Build an isolated EscrowService.

    Args:
        settings: Settings to seed the ledger from. Defaults to get_settings().
        settlement: Settlement backend. Defaults to InMemorySettlement(balances).
        balances: Opening balances for the default simulated backend.
        configure_logging: If True, run setup_logging from the settings.
    """
    settings = settings or get_settings()

    if configure_logging:
        setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)

    ledger = EscrowLedger(settings.ledger_config())
    if settlement is None:
        settlement = InMemorySettlement(balances)

    get_logger(__name__).info(
        "ledger.started",
        env=settings.app_env,
        admin=settings.admin_principal,
        max_escrows=settings.max_escrows,
        escrow_fee=settings.escrow_fee,
    )
    return EscrowService(ledger, settlement)
