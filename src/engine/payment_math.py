"""Closed-form payment formulas.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from src.engine.errors import InvalidInputError

TWO_PLACES = Decimal("0.01")
MONTHS_PER_YEAR = 12
MAX_RATE_PERCENT = Decimal("100")
SAFETY_CAP_PERIODS = 1200  # 100 years of monthly payments


def to_money(value: Decimal) -> Decimal:
    """Round to cents the way every schedule row is rounded."""
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """6.5 (%) -> 0.065 / 12."""
    return Decimal(annual_rate_percent) / 100 / MONTHS_PER_YEAR


def validate_principal(principal: Decimal) -> None:
    if principal < 0:
        raise InvalidInputError("Principal amount cannot be negative")


def validate_rate(annual_rate_percent: Decimal) -> None:
    if annual_rate_percent < 0 or annual_rate_percent > MAX_RATE_PERCENT:
        raise InvalidInputError("Annual interest rate must be between 0% and 100%")


def validate_payment(payment_amount: Decimal) -> None:
    if payment_amount <= 0:
        raise InvalidInputError("Payment amount must be greater than 0")


def periodic_payment(principal: Decimal, annual_rate_percent: Decimal, term_months: int) -> Decimal:
    """Level monthly payment that amortizes `principal` over `term_months`.

    M = P * [r(1+r)^n] / [(1+r)^n - 1], r = annual % / 100 / 12.

    A zero rate pays P / n (the general form divides by zero as r -> 0).
    The result keeps full Decimal precision; schedule.level_payment() turns
    it into the cent amount actually paid each period.
    """
    validate_principal(principal)
    validate_rate(annual_rate_percent)
    if term_months < 1:
        raise InvalidInputError("Loan term must be at least 1 month")

    principal = Decimal(principal)
    if annual_rate_percent == 0:
        return principal / term_months

    r = monthly_rate(annual_rate_percent)
    factor = (1 + r) ** term_months
    return principal * (r * factor) / (factor - 1)
