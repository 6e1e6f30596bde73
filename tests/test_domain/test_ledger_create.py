"""Tests for EscrowLedger.create_escrow: validation order, emitted transfers, IDs."""

from __future__ import annotations

import pytest

from fund_escrow.domain.enums import ErrorCode, EscrowStatus, VerificationMethod
from fund_escrow.domain.exceptions import (
    EscrowLedgerError,
    EscrowValidationError,
    MaxEscrowsExceededError,
)
from fund_escrow.domain.ledger import EscrowLedger
from fund_escrow.domain.models import CallContext, LedgerConfig, TransferRequest


class TestCreateHappyPath:
    def test_creates_locked_escrow(self, ledger, creator, sample_escrow_data) -> None:
        receipt = ledger.create_escrow(creator, **sample_escrow_data)
        assert receipt.value == 0

        escrow = ledger.get_escrow(0)
        assert escrow is not None
        assert escrow.proposal_id == 1
        assert escrow.amount == 1000
        assert escrow.vendor == "ST2VENDOR"
        assert escrow.deadline == 100
        assert escrow.locked_at == 0
        assert escrow.quorum == 50
        assert escrow.description == "Roof repair"
        assert escrow.verification_method == VerificationMethod.MULTISIG
        assert escrow.multisig_count == 3
        assert escrow.oracle == "ST3ORACLE"
        assert escrow.creator == "ST1TEST"
        assert escrow.status == EscrowStatus.LOCKED
        assert escrow.verifier is None
        assert escrow.refund_reason is None

    def test_emits_fee_then_lock_transfer(self, ledger, creator, sample_escrow_data) -> None:
        receipt = ledger.create_escrow(creator, **sample_escrow_data)
        expected = (
            TransferRequest(500, "ST1TEST", "ST1ADMIN"),
            TransferRequest(1000, "ST1TEST", "contract"),
        )
        assert receipt.transfers == expected
        assert ledger.transfer_log == list(expected)

    def test_zero_fee_emits_only_lock_transfer(self, sample_escrow_data) -> None:
        ledger = EscrowLedger(LedgerConfig(escrow_fee=0))
        receipt = ledger.create_escrow(CallContext("ST1TEST"), **sample_escrow_data)
        assert receipt.transfers == (TransferRequest(1000, "ST1TEST", "contract"),)

    def test_ids_are_dense_and_counter_increments(self, ledger, creator, sample_escrow_data) -> None:
        for expected_id in range(3):
            before = ledger.get_escrow_count()
            receipt = ledger.create_escrow(creator, **sample_escrow_data)
            assert receipt.value == before == expected_id
            assert ledger.get_escrow_count() == before + 1

    def test_locked_at_records_block_height(self, ledger, at, sample_escrow_data) -> None:
        ledger.create_escrow(at("ST1TEST", 42), **sample_escrow_data)
        assert ledger.get_escrow(0).locked_at == 42

    def test_boundary_values_accepted(self, ledger, creator, sample_escrow_data) -> None:
        data = {
            **sample_escrow_data,
            "quorum": 100,
            "description": "x" * 200,
            "multisig_count": 10,
            "verification_method": "vote",
            "deadline": 1,
        }
        assert ledger.create_escrow(creator, **data).value == 0

    def test_custom_holder_account(self, sample_escrow_data) -> None:
        ledger = EscrowLedger(LedgerConfig(escrow_holder="vault"))
        receipt = ledger.create_escrow(CallContext("ST1TEST"), **sample_escrow_data)
        assert receipt.transfers[-1].recipient == "vault"


class TestCreateValidation:
    @pytest.mark.parametrize(
        ("field", "value", "code"),
        [
            ("proposal_id", 0, ErrorCode.INVALID_PROPOSAL_ID),
            ("amount", 0, ErrorCode.INVALID_AMOUNT),
            ("amount", -5, ErrorCode.INVALID_AMOUNT),
            ("vendor", "ST1TEST", ErrorCode.INVALID_VENDOR),
            ("deadline", 0, ErrorCode.INVALID_DEADLINE),
            ("quorum", 0, ErrorCode.INVALID_QUORUM),
            ("quorum", 101, ErrorCode.INVALID_QUORUM),
            ("description", "", ErrorCode.INVALID_DESCRIPTION),
            ("description", "x" * 201, ErrorCode.INVALID_DESCRIPTION),
            ("verification_method", "invalid", ErrorCode.INVALID_VERIFICATION_METHOD),
            ("multisig_count", 1, ErrorCode.INVALID_MULTISIG_COUNT),
            ("multisig_count", 11, ErrorCode.INVALID_MULTISIG_COUNT),
            ("oracle", "ST1TEST", ErrorCode.INVALID_ORACLE),
        ],
    )
    def test_rejects_invalid_field(self, ledger, creator, sample_escrow_data, field, value, code) -> None:
        with pytest.raises(EscrowValidationError) as exc_info:
            ledger.create_escrow(creator, **{**sample_escrow_data, field: value})
        assert exc_info.value.code == code
        assert exc_info.value.field == field
        assert ledger.get_escrow_count() == 0
        assert ledger.get_escrow(0) is None
        assert ledger.transfer_log == []

    def test_rejects_deadline_in_past(self, ledger, at, sample_escrow_data) -> None:
        with pytest.raises(EscrowValidationError) as exc_info:
            ledger.create_escrow(at("ST1TEST", 100), **{**sample_escrow_data, "deadline": 99})
        assert exc_info.value.code == ErrorCode.INVALID_DEADLINE

    def test_deadline_equal_to_now_rejected(self, ledger, at, sample_escrow_data) -> None:
        with pytest.raises(EscrowValidationError) as exc_info:
            ledger.create_escrow(at("ST1TEST", 100), **sample_escrow_data)
        assert exc_info.value.code == ErrorCode.INVALID_DEADLINE

    def test_first_failure_wins(self, ledger, creator, sample_escrow_data) -> None:
        data = {**sample_escrow_data, "amount": 0, "quorum": 0, "oracle": "ST1TEST"}
        with pytest.raises(EscrowLedgerError) as exc_info:
            ledger.create_escrow(creator, **data)
        assert exc_info.value.code == ErrorCode.INVALID_AMOUNT

    def test_proposal_checked_before_amount(self, ledger, creator, sample_escrow_data) -> None:
        data = {**sample_escrow_data, "proposal_id": 0, "amount": 0}
        with pytest.raises(EscrowLedgerError) as exc_info:
            ledger.create_escrow(creator, **data)
        assert exc_info.value.code == ErrorCode.INVALID_PROPOSAL_ID


class TestMaxEscrows:
    def test_cap_enforced(self, creator, sample_escrow_data) -> None:
        ledger = EscrowLedger(LedgerConfig(max_escrows=2))
        ledger.create_escrow(creator, **sample_escrow_data)
        ledger.create_escrow(creator, **sample_escrow_data)

        with pytest.raises(MaxEscrowsExceededError) as exc_info:
            ledger.create_escrow(creator, **sample_escrow_data)
        assert exc_info.value.code == ErrorCode.MAX_ESCROWS_EXCEEDED
        assert ledger.get_escrow_count() == 2

    def test_cap_checked_before_everything(self, creator, sample_escrow_data) -> None:
        ledger = EscrowLedger(LedgerConfig(max_escrows=1))
        ledger.create_escrow(creator, **sample_escrow_data)

        invalid = {**sample_escrow_data, "proposal_id": 0, "amount": 0, "quorum": 500}
        with pytest.raises(MaxEscrowsExceededError):
            ledger.create_escrow(creator, **invalid)
        assert ledger.get_escrow_count() == 1
