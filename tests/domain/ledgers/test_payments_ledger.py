from __future__ import annotations

import logging

import pytest

from bookbridge.domain.ledgers import PaymentLedger
from bookbridge.domain.scheduling import ManualScheduler
from bookbridge.domain.types import PaymentInfo, PaymentSource


@pytest.fixture
def ledger(scheduler: ManualScheduler) -> PaymentLedger:
    return PaymentLedger(clock=scheduler)


def test_speculative_seed_never_overwrites(ledger: PaymentLedger) -> None:
    assert ledger.seed_speculative("B1", 10_000) is True
    assert ledger.seed_speculative("B1", 99_000) is False

    record = ledger.get("B1")
    assert record is not None
    assert record.amount == 10_000
    assert record.paid is False
    assert ledger.is_speculative("B1")


def test_snapshot_replaces_speculative_value(ledger: PaymentLedger) -> None:
    ledger.seed_speculative("B1", 10_000)

    record = ledger.apply_snapshot("B1", PaymentInfo(amount=15_000, paid=True))

    assert record.info == PaymentInfo(amount=15_000, paid=True)
    assert record.source is PaymentSource.SNAPSHOT
    assert not ledger.is_speculative("B1")


def test_snapshot_zero_amount_keeps_known_amount(ledger: PaymentLedger) -> None:
    ledger.apply_revenue("B1", 20_000, False)

    record = ledger.apply_snapshot("B1", PaymentInfo(amount=0, paid=False))

    assert record.amount == 20_000


def test_revenue_never_reverts_paid_flag(
    ledger: PaymentLedger, caplog: pytest.LogCaptureFixture
) -> None:
    ledger.apply_revenue("B1", 20_000, True)

    with caplog.at_level(logging.WARNING):
        record = ledger.apply_revenue("B1", 25_000, False)

    assert record.amount == 25_000
    assert record.paid is True
    assert "already marked paid" in caplog.text


def test_snapshot_contradicting_paid_flag_logs_warning(
    ledger: PaymentLedger, caplog: pytest.LogCaptureFixture
) -> None:
    ledger.apply_revenue("B1", 20_000, True)

    with caplog.at_level(logging.WARNING):
        record = ledger.apply_snapshot("B1", PaymentInfo(amount=20_000, paid=False))

    assert record.paid is False
    assert "contradicts paid flag" in caplog.text
