"""Mortgage history and current-state reconstruction from tracking records.

Snapshots are the source of truth for rate and payment amount; payment
records only move the balance and carry event metadata.

Pure functions. No I/O.
"""

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from src.engine.payment_dates import add_months, payment_date_details
from src.engine.term_solver import term_from_payment
from src.models.tracking import (
    CurrentMortgageState,
    HistoryEvent,
    HistoryEventType,
    MortgageHistoryPoint,
    MortgagePaymentRecord,
    MortgageSettings,
    MortgageSnapshot,
    PaymentKind,
)

logger = logging.getLogger(__name__)


def _latest_snapshot(
    snapshots: Sequence[MortgageSnapshot], on_or_before: date
) -> MortgageSnapshot | None:
    candidates = [s for s in snapshots if s.snapshot_date <= on_or_before]
    if not candidates:
        return None
    return max(candidates, key=lambda s: s.snapshot_date)


def _snapshot_point(
    snapshot: MortgageSnapshot, previous: MortgageSnapshot | None
) -> MortgageHistoryPoint:
    event = None
    if previous is not None and snapshot.annual_rate_percent != previous.annual_rate_percent:
        event = HistoryEvent(
            type=HistoryEventType.RATE_CHANGE,
            amount=snapshot.annual_rate_percent - previous.annual_rate_percent,
            description=snapshot.description,
        )
    return MortgageHistoryPoint(
        date=snapshot.snapshot_date,
        balance=snapshot.remaining_balance,
        periodic_payment_amount=snapshot.periodic_payment_amount,
        annual_rate_percent=snapshot.annual_rate_percent,
        event=event,
    )


def _payment_point(
    payment: MortgagePaymentRecord, context: MortgageSnapshot | None
) -> MortgageHistoryPoint:
    event_type = (
        HistoryEventType.LUMP_SUM if payment.kind is PaymentKind.LUMP_SUM else HistoryEventType.PAYMENT
    )
    return MortgageHistoryPoint(
        date=payment.payment_date,
        balance=payment.remaining_balance,
        periodic_payment_amount=context.periodic_payment_amount if context else Decimal("0"),
        annual_rate_percent=context.annual_rate_percent if context else Decimal("0"),
        event=HistoryEvent(type=event_type, amount=payment.amount, description=payment.description),
    )


def build_history(
    snapshots: Sequence[MortgageSnapshot],
    payments: Sequence[MortgagePaymentRecord],
    settings: MortgageSettings | None = None,
) -> list[MortgageHistoryPoint]:
    """Merge snapshots and payments into one ascending timeline.

    Inputs may arrive in any order. On a shared date the snapshot comes
    first, so a payment recorded the same day inherits that snapshot's rate
    and payment amount. A snapshot whose rate differs from the snapshot
    before it is marked as a rate change.

    `settings` is loaded with the records by the tracking layer; the
    timeline itself only depends on the records.
    """
    events: list[tuple[date, int, MortgageSnapshot | MortgagePaymentRecord]] = [
        *((s.snapshot_date, 0, s) for s in snapshots),
        *((p.payment_date, 1, p) for p in payments),
    ]
    events.sort(key=lambda e: (e[0], e[1]))

    history: list[MortgageHistoryPoint] = []
    previous_snapshot: MortgageSnapshot | None = None
    for on, _, record in events:
        if isinstance(record, MortgageSnapshot):
            history.append(_snapshot_point(record, previous_snapshot))
            previous_snapshot = record
        else:
            history.append(_payment_point(record, _latest_snapshot(snapshots, on)))

    return history


def current_state(
    snapshots: Sequence[MortgageSnapshot],
    payments: Sequence[MortgagePaymentRecord],
    settings: MortgageSettings | None,
    today: date | None = None,
) -> CurrentMortgageState:
    """Summarize the mortgage as of `today` (default: the current date).

    A mortgage with no settings or no snapshot on or before today has no
    usable history yet and gets the empty state.
    """
    today = today or date.today()
    snapshot = _latest_snapshot(snapshots, today)
    if snapshot is None or settings is None:
        logger.debug("No settings or snapshot on or before %s, returning empty state", today)
        return CurrentMortgageState.empty()

    paid = [p for p in payments if p.is_paid]
    total_paid = sum((p.amount for p in paid), Decimal("0"))
    total_interest = sum((p.interest_portion or Decimal("0") for p in paid), Decimal("0"))

    next_payment = payment_date_details(
        today, settings.payment_day_of_month, settings.preferred_end_of_month_day
    )

    months_remaining = 0
    if snapshot.annual_rate_percent > 0 and snapshot.remaining_balance > 0:
        if snapshot.periodic_payment_amount <= 0:
            logger.warning("Snapshot on %s has no payment amount", snapshot.snapshot_date)
        else:
            solution = term_from_payment(
                snapshot.remaining_balance,
                snapshot.annual_rate_percent,
                snapshot.periodic_payment_amount,
            )
            if solution.never_amortizes:
                logger.warning(
                    "Snapshot payment %s on %s does not cover interest; payoff cannot be estimated",
                    snapshot.periodic_payment_amount, snapshot.snapshot_date,
                )
            months_remaining = solution.months

    return CurrentMortgageState(
        current_balance=snapshot.remaining_balance,
        next_payment_date=next_payment.next_payment_date,
        next_payment_amount=snapshot.periodic_payment_amount,
        days_until_payment=next_payment.days_until_payment,
        annual_rate_percent=snapshot.annual_rate_percent,
        estimated_payoff_date=add_months(today, months_remaining),
        total_paid_to_date=total_paid,
        total_interest_paid=total_interest,
        principal_paid=settings.original_principal - snapshot.remaining_balance,
        months_remaining=months_remaining,
    )
