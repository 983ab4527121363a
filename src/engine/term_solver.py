"""Solve a loan's term from a chosen payment amount.

Pure functions. No I/O.
"""

import logging
import math
from decimal import Decimal, ROUND_CEILING

from src.engine.errors import NeverAmortizesError
from src.engine.payment_math import (
    monthly_rate,
    to_money,
    validate_payment,
    validate_principal,
    validate_rate,
)
from src.models.loan import TermParts, TermSolution

logger = logging.getLogger(__name__)

# ln() results carry noise in the last digits; an exact n of 360 must not ceil to 361
_TERM_TOLERANCE = Decimal("1e-9")


def _ceil(value: Decimal) -> int:
    return int(value.quantize(_TERM_TOLERANCE).to_integral_value(rounding=ROUND_CEILING))


def term_from_payment(
    principal: Decimal,
    annual_rate_percent: Decimal,
    payment_amount: Decimal,
) -> TermSolution:
    """Number of monthly payments needed to retire `principal`.

    n = ceil(-ln(1 - P*r/M) / ln(1 + r))

    This is the closed-form inverse of the amortization formula. It can be one
    period off the count a full schedule walk produces (the walk trues up the
    final payment); use generate_schedule(...).periods for an exact count.

    Returns never_amortizes=True when the payment does not exceed the first
    month's interest. Callers must treat that as a validation failure.
    """
    validate_principal(principal)
    validate_rate(annual_rate_percent)
    validate_payment(payment_amount)

    principal = Decimal(principal)
    payment_amount = Decimal(payment_amount)
    if principal == 0:
        return TermSolution(months=0)

    r = monthly_rate(annual_rate_percent)
    if r == 0:
        return TermSolution(months=_ceil(principal / payment_amount))

    monthly_interest = principal * r
    if payment_amount <= monthly_interest:
        logger.debug(
            "Payment %s does not cover monthly interest %s", payment_amount, to_money(monthly_interest)
        )
        return TermSolution(months=0, never_amortizes=True)

    n = -(1 - monthly_interest / payment_amount).ln() / (1 + r).ln()
    return TermSolution(months=_ceil(n))


def require_term_from_payment(
    principal: Decimal,
    annual_rate_percent: Decimal,
    payment_amount: Decimal,
) -> int:
    """term_from_payment, raising NeverAmortizesError instead of flagging it."""
    solution = term_from_payment(principal, annual_rate_percent, payment_amount)
    if solution.never_amortizes:
        raise NeverAmortizesError(
            payment_amount=Decimal(payment_amount),
            minimum_payment=to_money(Decimal(principal) * monthly_rate(annual_rate_percent)),
        )
    return solution.months


def _whole(value) -> int:
    """Non-negative integer part of a user-entered value; junk counts as zero."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, int(number // 1))


def term_parts_to_months(years, months) -> int:
    return _whole(years) * 12 + _whole(months)


def months_to_term_parts(total_months) -> TermParts:
    total = _whole(total_months)
    return TermParts(years=total // 12, months=total % 12)


def normalize_term_parts(years, months) -> TermParts:
    """Fold overflowing months into years: (24, 18) -> (25, 6)."""
    return months_to_term_parts(term_parts_to_months(years, months))
