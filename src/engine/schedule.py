"""Amortization schedule computation under irregular payment policies.

Pure functions: Decimal in, dataclass out. No I/O.
"""

import logging
from collections import defaultdict
from collections.abc import Sequence
from decimal import Decimal

from src.engine.errors import InvalidInputError
from src.engine.payment_math import (
    TWO_PLACES,
    SAFETY_CAP_PERIODS,
    monthly_rate,
    periodic_payment,
    to_money,
    validate_payment,
    validate_principal,
    validate_rate,
)
from src.engine.term_solver import require_term_from_payment
from src.models.loan import (
    AmortizationSchedule,
    ExtraMonthly,
    LoanTerms,
    LumpSum,
    LumpSumTiming,
    PaymentEvent,
    RateAdjustment,
    ScheduledPayment,
    YearlySummary,
)

logger = logging.getLogger(__name__)


def _validate_events(events: Sequence[PaymentEvent]) -> None:
    for event in events:
        if event.amount < 0:
            raise InvalidInputError("Extra and lump sum payments cannot be negative")
        if isinstance(event, LumpSum):
            if event.timing is LumpSumTiming.END_OF_YEAR and event.year < 0:
                raise InvalidInputError("Lump sum year cannot be negative")
            if event.timing is LumpSumTiming.PERIOD and (event.period is None or event.period < 1):
                raise InvalidInputError("Lump sum period must be 1 or later")


def _lump_sums_by_period(events: Sequence[PaymentEvent]) -> dict[int, Decimal]:
    """Group lump sums by the exact period they land on; same-period amounts add up."""
    mapping: dict[int, Decimal] = defaultdict(Decimal)
    for event in events:
        if isinstance(event, LumpSum):
            mapping[event.target_period] += event.amount
    return mapping


def _rate_by_period(
    annual_rate_percent: Decimal, rate_adjustments: Sequence[RateAdjustment]
) -> dict[int, Decimal]:
    """Periods at which the monthly rate changes, with the rate in force from then on."""
    changes: dict[int, Decimal] = {}
    rate = Decimal(annual_rate_percent)
    for adjustment in sorted(rate_adjustments, key=lambda a: a.period):
        rate = max(Decimal("0"), rate + adjustment.rate_delta_percent)
        changes[adjustment.period] = monthly_rate(rate)
    return changes


def generate_schedule(
    terms: LoanTerms,
    payment_amount: Decimal,
    events: Sequence[PaymentEvent] = (),
    rate_adjustments: Sequence[RateAdjustment] = (),
) -> AmortizationSchedule:
    """Walk the loan period by period with a fixed payment plus extra principal.

    Each period: interest accrues on the balance, principal is the payment
    minus interest plus any extra monthly amount and lump sums due that
    period, clamped so the last payment just clears the balance.

    The payment, the balance and every row amount are held in cents, so
    each non-final row pays exactly the payment and the principal column
    always sums to the original loan. The final row absorbs leftover cents.

    Stops once the balance is paid off or after 1,200 periods. Hitting the
    cap means the payment is insufficient: the schedule is returned as-is
    with reached_safety_cap set.
    """
    validate_principal(terms.principal)
    validate_rate(terms.annual_rate_percent)
    validate_payment(payment_amount)
    _validate_events(events)

    payment_amount = to_money(Decimal(payment_amount))
    extra_monthly = sum((e.amount for e in events if isinstance(e, ExtraMonthly)), Decimal("0"))
    lump_sums = _lump_sums_by_period(events)
    rate_changes = _rate_by_period(terms.annual_rate_percent, rate_adjustments)

    r = monthly_rate(terms.annual_rate_percent)
    balance = to_money(Decimal(terms.principal))
    payments: list[ScheduledPayment] = []
    period = 1

    while balance > 0 and period <= SAFETY_CAP_PERIODS:
        r = rate_changes.get(period, r)
        interest = to_money(balance * r)
        prepaid = to_money(extra_monthly + lump_sums.get(period, Decimal("0")))
        principal_paid = max(Decimal("0"), payment_amount - interest) + prepaid

        # Final payment adjustment
        if principal_paid > balance:
            principal_paid = balance

        balance -= principal_paid
        payments.append(ScheduledPayment(
            payment_number=period,
            payment_amount=principal_paid + interest,
            principal_portion=principal_paid,
            interest_portion=interest,
            remaining_balance=balance,
            prepaid=min(prepaid, principal_paid),
        ))
        period += 1

    reached_cap = balance > 0
    if reached_cap:
        logger.warning(
            "Schedule hit the %d-period safety cap with %s still owed; payment %s is insufficient",
            SAFETY_CAP_PERIODS, balance, payment_amount,
        )
    else:
        logger.debug("Schedule paid off in %d periods", len(payments))

    return AmortizationSchedule(
        payments=payments,
        payment_amount=payment_amount,
        reached_safety_cap=reached_cap,
    )


def level_payment(terms: LoanTerms) -> Decimal:
    """Cent-rounded payment that retires a fixed-term loan within its term.

    The amortization formula rounded to cents, bumped up a cent when the
    per-period interest rounding would leave a balance for one more period.
    """
    exact = periodic_payment(terms.principal, terms.annual_rate_percent, terms.term_months)
    payment = to_money(exact)
    if payment == 0:
        return TWO_PLACES if exact > 0 else payment
    if generate_schedule(terms, payment).periods > terms.term_months:
        payment += TWO_PLACES
    return payment


def schedule_for_loan(
    terms: LoanTerms,
    events: Sequence[PaymentEvent] = (),
    rate_adjustments: Sequence[RateAdjustment] = (),
) -> AmortizationSchedule:
    """Build the schedule for either a fixed-term loan or a payment-driven mortgage.

    Fixed-term loans take their payment from level_payment(). When
    `terms.payment_amount` is given instead, the payment is first checked to
    actually retire the loan (NeverAmortizesError otherwise).
    """
    if terms.payment_amount is not None:
        require_term_from_payment(terms.principal, terms.annual_rate_percent, terms.payment_amount)
        payment = terms.payment_amount
    elif terms.term_months is not None:
        payment = level_payment(terms)
    else:
        raise InvalidInputError("Either a loan term or a payment amount is required")
    return generate_schedule(terms, payment, events, rate_adjustments)


def yearly_summary(schedule: AmortizationSchedule) -> list[YearlySummary]:
    """Aggregate an amortization schedule by loan year (periods 1-12, 13-24, ...)."""
    yearly: list[YearlySummary] = []
    year_principal = Decimal("0")
    year_interest = Decimal("0")
    year_prepaid = Decimal("0")

    for p in schedule.payments:
        year_principal += p.principal_portion
        year_interest += p.interest_portion
        year_prepaid += p.prepaid

        if p.payment_number % 12 == 0 or p.payment_number == schedule.periods:
            yearly.append(YearlySummary(
                year=(p.payment_number - 1) // 12 + 1,
                principal=year_principal,
                interest=year_interest,
                prepaid=year_prepaid,
                total_paid=year_principal + year_interest,
                ending_balance=p.remaining_balance,
            ))
            year_principal = Decimal("0")
            year_interest = Decimal("0")
            year_prepaid = Decimal("0")

    return yearly
