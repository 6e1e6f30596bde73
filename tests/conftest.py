"""Shared test fixtures for the Fund Escrow test suite.

Provides:
    - Isolated ledger / settlement / service instances per test
    - Call contexts for the admin, the creator and third parties
    - A valid escrow creation data dict
"""

from __future__ import annotations

import pytest

from fund_escrow.domain.ledger import EscrowLedger
from fund_escrow.domain.models import CallContext, LedgerConfig
from fund_escrow.services.escrow_service import EscrowService
from fund_escrow.services.event_log import EventLog
from fund_escrow.services.settlement import InMemorySettlement

ADMIN = "ST1ADMIN"
CREATOR = "ST1TEST"
VENDOR = "ST2VENDOR"
ORACLE = "ST3ORACLE"
OUTSIDER = "ST4OTHER"

# ---------------------------------------------------------------------------
# Domain Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ledger() -> EscrowLedger:
    """A fresh ledger with the default configuration (fee 500, cap 1000)."""
    return EscrowLedger(LedgerConfig())


@pytest.fixture
def creator() -> CallContext:
    return CallContext(caller=CREATOR, block_height=0)


@pytest.fixture
def admin() -> CallContext:
    return CallContext(caller=ADMIN, block_height=0)


@pytest.fixture
def sample_escrow_data() -> dict:
    """Return a valid escrow creation data dict."""
    return {
        "proposal_id": 1,
        "amount": 1000,
        "vendor": VENDOR,
        "deadline": 100,
        "quorum": 50,
        "description": "Roof repair",
        "verification_method": "multisig",
        "multisig_count": 3,
        "oracle": ORACLE,
    }


@pytest.fixture
def locked_escrow(ledger: EscrowLedger, creator: CallContext, sample_escrow_data: dict) -> int:
    """Create one LOCKED escrow and return its ID."""
    return ledger.create_escrow(creator, **sample_escrow_data).value


# ---------------------------------------------------------------------------
# Service Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settlement() -> InMemorySettlement:
    return InMemorySettlement({CREATOR: 10_000})


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def service(ledger: EscrowLedger, settlement: InMemorySettlement, events: EventLog) -> EscrowService:
    return EscrowService(ledger, settlement, events)


@pytest.fixture
def at():
    """Factory for CallContexts: ``at(ADMIN, 50)``."""

    def _at(caller: str, block_height: int) -> CallContext:
        return CallContext(caller=caller, block_height=block_height)

    return _at
