from decimal import Decimal

import pytest

from src.engine.errors import InvalidInputError
from src.engine.payment_math import monthly_rate, periodic_payment, to_money


class TestPeriodicPayment:
    def test_standard_mortgage(self):
        """$250K loan at 6.5% for 30 years."""
        pmt = periodic_payment(Decimal("250000"), Decimal("6.5"), 360)
        # Expected: ~$1,580.17
        assert to_money(pmt) == Decimal("1580.17")

    def test_matches_known_payment(self):
        pmt = periodic_payment(Decimal("400000"), Decimal("7"), 360)
        assert to_money(pmt) == Decimal("2661.21")

    def test_zero_rate(self):
        pmt = periodic_payment(Decimal("120000"), Decimal("0"), 120)
        assert pmt == Decimal("1000")

    def test_zero_principal(self):
        pmt = periodic_payment(Decimal("0"), Decimal("6.5"), 360)
        assert pmt == Decimal("0")

    def test_keeps_full_precision(self):
        pmt = periodic_payment(Decimal("250000"), Decimal("6.5"), 360)
        assert pmt != to_money(pmt)

    def test_shorter_term_costs_more_per_month(self):
        thirty = periodic_payment(Decimal("250000"), Decimal("6.5"), 360)
        fifteen = periodic_payment(Decimal("250000"), Decimal("6.5"), 180)
        assert fifteen > thirty


class TestValidation:
    def test_negative_principal(self):
        with pytest.raises(InvalidInputError):
            periodic_payment(Decimal("-1"), Decimal("6.5"), 360)

    def test_negative_rate(self):
        with pytest.raises(InvalidInputError):
            periodic_payment(Decimal("250000"), Decimal("-0.5"), 360)

    def test_rate_above_100(self):
        with pytest.raises(InvalidInputError):
            periodic_payment(Decimal("250000"), Decimal("100.01"), 360)

    def test_zero_term(self):
        with pytest.raises(InvalidInputError):
            periodic_payment(Decimal("250000"), Decimal("6.5"), 0)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            periodic_payment(Decimal("-1"), Decimal("6.5"), 360)


class TestHelpers:
    def test_monthly_rate(self):
        assert monthly_rate(Decimal("6")) == Decimal("0.005")

    def test_to_money_rounds_half_up(self):
        assert to_money(Decimal("1.005")) == Decimal("1.01")
        assert to_money(Decimal("1.004")) == Decimal("1.00")
