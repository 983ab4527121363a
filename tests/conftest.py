"""Canonical test fixtures used across engine and API tests.

Loan fixture: $250K at 6.5% for 30 years (payment ~$1,580.17).
Tracking fixture: $305K mortgage started Nov 2023, paid on the 1st, with a
rate reset to 6.0% in July 2024.
"""

import pytest
from datetime import date
from decimal import Decimal

from src.models.loan import LoanTerms
from src.models.tracking import (
    MortgagePaymentRecord,
    MortgageSettings,
    MortgageSnapshot,
    PaymentKind,
)


@pytest.fixture
def canonical_terms() -> LoanTerms:
    """$250K, 6.5%, 360 months."""
    return LoanTerms(
        principal=Decimal("250000"),
        annual_rate_percent=Decimal("6.5"),
        term_months=360,
    )


@pytest.fixture
def jumbo_terms() -> LoanTerms:
    """$500K, 6.5%, 360 months. Used for lump-sum scenarios."""
    return LoanTerms(
        principal=Decimal("500000"),
        annual_rate_percent=Decimal("6.5"),
        term_months=360,
    )


@pytest.fixture
def mortgage_settings() -> MortgageSettings:
    return MortgageSettings(
        payment_day_of_month=1,
        start_date=date(2023, 11, 1),
        original_principal=Decimal("305000"),
        original_term_months=360,
    )


@pytest.fixture
def snapshots() -> list[MortgageSnapshot]:
    """Listed out of order on purpose."""
    return [
        MortgageSnapshot(
            snapshot_date=date(2024, 7, 1),
            remaining_balance=Decimal("295000"),
            periodic_payment_amount=Decimal("1850"),
            annual_rate_percent=Decimal("6.0"),
            description="Rate reset",
        ),
        MortgageSnapshot(
            snapshot_date=date(2024, 1, 1),
            remaining_balance=Decimal("300000"),
            periodic_payment_amount=Decimal("1800"),
            annual_rate_percent=Decimal("5.5"),
        ),
    ]


@pytest.fixture
def payments() -> list[MortgagePaymentRecord]:
    return [
        MortgagePaymentRecord(
            payment_date=date(2024, 7, 1),
            scheduled_amount=Decimal("1850"),
            remaining_balance=Decimal("294500"),
        ),
        MortgagePaymentRecord(
            payment_date=date(2024, 3, 15),
            scheduled_amount=Decimal("10000"),
            actual_amount=Decimal("12000"),
            remaining_balance=Decimal("287000"),
            kind=PaymentKind.LUMP_SUM,
            is_paid=True,
            description="Bonus",
        ),
        MortgagePaymentRecord(
            payment_date=date(2023, 12, 1),
            scheduled_amount=Decimal("1800"),
            remaining_balance=Decimal("304500"),
            is_paid=True,
            interest_portion=Decimal("1400"),
        ),
        MortgagePaymentRecord(
            payment_date=date(2024, 2, 1),
            scheduled_amount=Decimal("1800"),
            remaining_balance=Decimal("299500"),
            is_paid=True,
            interest_portion=Decimal("1375"),
        ),
    ]
