"""Interest and time saved by prepaying principal.

prepayment_impact() answers repeated what-if queries from the closed-form term
solver; lump_sum_impacts() and compare_schedules() walk full schedules and are
exact to the cent.

Pure functions. No I/O.
"""

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from src.engine.errors import InvalidInputError
from src.engine.payment_dates import add_months, payment_number_for_date
from src.engine.payment_math import monthly_rate, to_money
from src.engine.schedule import generate_schedule
from src.engine.term_solver import require_term_from_payment, term_from_payment
from src.models.loan import (
    AmortizationSchedule,
    ExtraMonthly,
    LoanTerms,
    LumpSum,
    LumpSumImpact,
    PaymentEvent,
    PrepaymentImpact,
    ScheduleComparison,
    TotalPrepaymentImpact,
)
from src.models.tracking import MortgagePaymentRecord, MortgageSettings, PaymentKind

logger = logging.getLogger(__name__)


def _balance_before_period(
    principal: Decimal, r: Decimal, payment: Decimal, period: int
) -> Decimal:
    """Balance left after the regular payments of periods 1 .. period-1."""
    balance = principal
    for _ in range(1, period):
        balance -= payment - balance * r
        if balance <= 0:
            return Decimal("0")
    return balance


def prepayment_impact(
    principal: Decimal,
    annual_rate_percent: Decimal,
    periodic_payment: Decimal,
    lump_sum_amount: Decimal,
    period_of_lump_sum: int,
    original_term_months: int,
    as_of: date | None = None,
) -> PrepaymentImpact:
    """Savings from one lump sum paid at `period_of_lump_sum`.

    Period counts come from the closed-form term solver, so the result can
    differ from a full schedule walk by a period and a few dollars of
    interest. Total interest on each path is periods x payment - principal.
    net_interest_saved also charges the lump sum itself to the prepayment
    path, i.e. what the borrower keeps after parting with the lump sum.

    Payoff dates are `as_of` (default: today) plus the period counts in months.
    """
    if lump_sum_amount < 0:
        raise InvalidInputError("Lump sum amount cannot be negative")
    if original_term_months < 1:
        raise InvalidInputError("Loan term must be at least 1 month")
    if not 1 <= period_of_lump_sum <= original_term_months:
        raise InvalidInputError(
            f"Lump sum period must fall within the loan term (1-{original_term_months})"
        )

    principal = Decimal(principal)
    payment = Decimal(periodic_payment)
    baseline_periods = require_term_from_payment(principal, annual_rate_percent, payment)

    r = monthly_rate(annual_rate_percent)
    balance_at_prepayment = _balance_before_period(principal, r, payment, period_of_lump_sum)
    lump_applied = min(Decimal(lump_sum_amount), balance_at_prepayment)
    balance_after = balance_at_prepayment - lump_applied

    new_total_periods = period_of_lump_sum
    if balance_after > 0:
        new_total_periods += term_from_payment(balance_after, annual_rate_percent, payment).months

    original_interest = baseline_periods * payment - principal
    new_interest = new_total_periods * payment - principal

    as_of = as_of or date.today()
    logger.debug(
        "Lump sum %s at period %d: %d -> %d periods",
        lump_sum_amount, period_of_lump_sum, baseline_periods, new_total_periods,
    )
    return PrepaymentImpact(
        interest_saved=to_money(max(Decimal("0"), original_interest - new_interest)),
        net_interest_saved=to_money(max(Decimal("0"), original_interest - new_interest - lump_applied)),
        time_saved_periods=max(0, baseline_periods - new_total_periods),
        payoff_date_original=add_months(as_of, baseline_periods),
        payoff_date_with_prepayment=add_months(as_of, new_total_periods),
        balance_at_prepayment_time=to_money(balance_at_prepayment),
    )


def compare_schedules(
    baseline: AmortizationSchedule, accelerated: AmortizationSchedule
) -> ScheduleComparison:
    return ScheduleComparison(
        interest_saved=baseline.total_interest - accelerated.total_interest,
        periods_saved=baseline.periods - accelerated.periods,
        baseline_periods=baseline.periods,
        accelerated_periods=accelerated.periods,
    )


def lump_sum_impacts(
    terms: LoanTerms,
    payment_amount: Decimal,
    lump_sums: Sequence[LumpSum],
    extra_monthly: Decimal = Decimal("0"),
) -> list[LumpSumImpact]:
    """Marginal and cumulative savings of each lump sum, added in the given order.

    The marginal figure compares the schedule with lump sums [0..i] against
    the one with [0..i-1]; the cumulative figure compares against no lump
    sums at all. Both keep the extra monthly amount in place.
    """
    require_term_from_payment(terms.principal, terms.annual_rate_percent, payment_amount)
    base_events: list[PaymentEvent] = [ExtraMonthly(extra_monthly)] if extra_monthly else []
    baseline = generate_schedule(terms, payment_amount, base_events)

    impacts: list[LumpSumImpact] = []
    previous = baseline
    for i, lump_sum in enumerate(lump_sums):
        current = generate_schedule(terms, payment_amount, base_events + list(lump_sums[: i + 1]))
        marginal = compare_schedules(previous, current)
        impacts.append(LumpSumImpact(
            lump_sum=lump_sum,
            interest_saved=marginal.interest_saved,
            periods_saved=marginal.periods_saved,
            cumulative_interest_saved=baseline.total_interest - current.total_interest,
        ))
        previous = current
    return impacts


def total_prepayment_impact(
    payments: Sequence[MortgagePaymentRecord],
    settings: MortgageSettings,
    annual_rate_percent: Decimal,
    periodic_payment: Decimal,
    as_of: date | None = None,
) -> TotalPrepaymentImpact:
    """Sum the individual impact of every recorded lump-sum payment.

    Each lump sum is placed at the schedule period its date falls in,
    counted from the mortgage start date.
    """
    lump_sum_payments = sorted(
        (p for p in payments if p.kind is PaymentKind.LUMP_SUM),
        key=lambda p: p.payment_date,
    )

    total = TotalPrepaymentImpact()
    for payment in lump_sum_payments:
        amount = payment.amount
        total.total_prepayments += amount
        total.payment_count += 1

        period = payment_number_for_date(
            settings.start_date,
            payment.payment_date,
            settings.payment_day_of_month,
            settings.preferred_end_of_month_day,
        )
        if period > settings.original_term_months:
            logger.warning(
                "Lump sum on %s falls after the original term, skipping impact", payment.payment_date
            )
            continue

        impact = prepayment_impact(
            settings.original_principal,
            annual_rate_percent,
            periodic_payment,
            amount,
            period,
            settings.original_term_months,
            as_of=as_of,
        )
        total.total_interest_saved += impact.interest_saved
        total.total_time_saved_periods += impact.time_saved_periods
        total.impacts.append(impact)

    return total
