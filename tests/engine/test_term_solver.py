from decimal import Decimal

import pytest

from src.engine.errors import InvalidInputError, NeverAmortizesError
from src.engine.payment_math import periodic_payment, to_money
from src.engine.term_solver import (
    months_to_term_parts,
    normalize_term_parts,
    require_term_from_payment,
    term_from_payment,
    term_parts_to_months,
)
from src.models.loan import TermParts


class TestTermFromPayment:
    def test_inverts_periodic_payment(self):
        pmt = periodic_payment(Decimal("250000"), Decimal("6.5"), 360)
        assert term_from_payment(Decimal("250000"), Decimal("6.5"), pmt).months == 360

    def test_payment_a_cent_over_keeps_term(self):
        pmt = to_money(periodic_payment(Decimal("250000"), Decimal("6.5"), 360)) + Decimal("0.01")
        assert term_from_payment(Decimal("250000"), Decimal("6.5"), pmt).months == 360

    def test_partial_period_rounds_up(self):
        # 300K at 5% with $2,000/mo: n ~ 235.9
        solution = term_from_payment(Decimal("300000"), Decimal("5"), Decimal("2000"))
        assert solution.months == 236
        assert not solution.never_amortizes

    def test_zero_rate(self):
        assert term_from_payment(Decimal("120000"), Decimal("0"), Decimal("1000")).months == 120
        assert term_from_payment(Decimal("120000"), Decimal("0"), Decimal("1001")).months == 120

    def test_zero_principal(self):
        assert term_from_payment(Decimal("0"), Decimal("5"), Decimal("1000")).months == 0

    def test_payment_below_interest(self):
        solution = term_from_payment(Decimal("300000"), Decimal("5.0"), Decimal("1000"))
        assert solution.never_amortizes
        assert solution.months == 0

    def test_payment_equal_to_interest(self):
        solution = term_from_payment(Decimal("300000"), Decimal("5"), Decimal("1250"))
        assert solution.never_amortizes

    def test_larger_payment_shorter_term(self):
        slow = term_from_payment(Decimal("300000"), Decimal("5"), Decimal("2000")).months
        fast = term_from_payment(Decimal("300000"), Decimal("5"), Decimal("3000")).months
        assert fast < slow

    def test_invalid_payment(self):
        with pytest.raises(InvalidInputError):
            term_from_payment(Decimal("300000"), Decimal("5"), Decimal("0"))

    def test_invalid_rate(self):
        with pytest.raises(InvalidInputError):
            term_from_payment(Decimal("300000"), Decimal("150"), Decimal("2000"))


class TestRequireTermFromPayment:
    def test_returns_months(self):
        assert require_term_from_payment(Decimal("300000"), Decimal("5"), Decimal("2000")) == 236

    def test_raises_with_minimum_payment(self):
        with pytest.raises(NeverAmortizesError) as exc:
            require_term_from_payment(Decimal("300000"), Decimal("5"), Decimal("1000"))
        assert exc.value.minimum_payment == Decimal("1250.00")
        assert "$1,250.00" in str(exc.value)
        assert "Increase your payment" in str(exc.value)


class TestTermParts:
    def test_to_months(self):
        assert term_parts_to_months(30, 0) == 360
        assert term_parts_to_months(2, 6) == 30

    def test_from_months(self):
        assert months_to_term_parts(279) == TermParts(years=23, months=3)
        assert months_to_term_parts(0) == TermParts()

    def test_normalize_overflow(self):
        assert normalize_term_parts(24, 18) == TermParts(years=25, months=6)

    def test_junk_counts_as_zero(self):
        assert term_parts_to_months("", None) == 0
        assert term_parts_to_months("abc", 5) == 5
        assert term_parts_to_months(float("nan"), 3) == 3

    def test_negative_counts_as_zero(self):
        assert term_parts_to_months(-2, 4) == 4

    def test_fraction_truncated(self):
        assert term_parts_to_months("2.7", "3.9") == 27

    def test_round_trip(self):
        for months in (0, 1, 11, 12, 13, 359, 360, 480):
            parts = months_to_term_parts(months)
            assert term_parts_to_months(parts.years, parts.months) == months
