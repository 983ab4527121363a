"""Calendar arithmetic for mortgage payment dates.

All dates are naive calendar dates; nothing here converts through UTC
instants, so month boundaries never shift by a day.
"""

import calendar
from datetime import date

from src.engine.errors import InvalidInputError
from src.engine.payment_math import SAFETY_CAP_PERIODS
from src.models.tracking import PaymentDateCalculation


def add_months(d: date, months: int) -> date:
    """Shift `d` by whole months, clamping the day to the target month's length.

    Jan 31 + 1 month -> Feb 28 (Feb 29 in leap years).
    """
    year = d.year + (d.month - 1 + months) // 12
    month = (d.month - 1 + months) % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _validate_days(payment_day_of_month: int, preferred_end_of_month_day: int | None) -> None:
    if not 1 <= payment_day_of_month <= 28:
        raise InvalidInputError("Payment day of month must be between 1 and 28")
    if preferred_end_of_month_day is not None and not 1 <= preferred_end_of_month_day <= 31:
        raise InvalidInputError("Preferred payment day must be between 1 and 31")


def _uses_end_of_month(preferred_end_of_month_day: int | None) -> bool:
    return bool(preferred_end_of_month_day) and preferred_end_of_month_day > 28


def resolve_payment_day(
    year: int,
    month: int,
    payment_day_of_month: int,
    preferred_end_of_month_day: int | None = None,
) -> int:
    """Day of `month` the payment falls on.

    A preference of 29-31 wins over the regular day and is clamped to the
    month's last day: 31 -> Feb 28/29, Apr 30.
    """
    if _uses_end_of_month(preferred_end_of_month_day):
        return min(preferred_end_of_month_day, calendar.monthrange(year, month)[1])
    return payment_day_of_month


def _payment_date_in_month(
    year: int,
    month: int,
    payment_day_of_month: int,
    preferred_end_of_month_day: int | None,
) -> date:
    day = resolve_payment_day(year, month, payment_day_of_month, preferred_end_of_month_day)
    return date(year, month, day)


def next_payment_date(
    from_date: date,
    payment_day_of_month: int,
    preferred_end_of_month_day: int | None = None,
) -> date:
    """Payment date in the calendar month after `from_date`, whatever its day."""
    _validate_days(payment_day_of_month, preferred_end_of_month_day)
    following = add_months(from_date.replace(day=1), 1)
    return _payment_date_in_month(
        following.year, following.month, payment_day_of_month, preferred_end_of_month_day
    )


def next_payment_on_or_after(
    from_date: date,
    payment_day_of_month: int,
    preferred_end_of_month_day: int | None = None,
) -> date:
    """First payment date falling on or after `from_date`.

    Stays in the current month while its payment day has not passed,
    otherwise moves to the following month.
    """
    _validate_days(payment_day_of_month, preferred_end_of_month_day)
    this_month = _payment_date_in_month(
        from_date.year, from_date.month, payment_day_of_month, preferred_end_of_month_day
    )
    if from_date <= this_month:
        return this_month
    return next_payment_date(from_date, payment_day_of_month, preferred_end_of_month_day)


def payment_date_details(
    from_date: date,
    payment_day_of_month: int,
    preferred_end_of_month_day: int | None = None,
    on_or_after: bool = True,
) -> PaymentDateCalculation:
    """Next payment date plus the countdown to it.

    `on_or_after=False` always skips to the following month.
    """
    find_next = next_payment_on_or_after if on_or_after else next_payment_date
    upcoming = find_next(from_date, payment_day_of_month, preferred_end_of_month_day)
    return PaymentDateCalculation(
        next_payment_date=upcoming,
        days_until_payment=(upcoming - from_date).days,
        is_end_of_month=_uses_end_of_month(preferred_end_of_month_day),
        actual_payment_day=upcoming.day,
    )


def payment_number_for_date(
    start_date: date,
    on_date: date,
    payment_day_of_month: int,
    preferred_end_of_month_day: int | None = None,
) -> int:
    """1-based schedule period whose payment date is the first on or after `on_date`.

    The first payment falls in the month after the mortgage starts. Dates on
    or before the start map to period 1; the result never exceeds the
    1,200-period safety cap.
    """
    _validate_days(payment_day_of_month, preferred_end_of_month_day)
    if on_date <= start_date:
        return 1

    payment_number = 1
    due = next_payment_date(start_date, payment_day_of_month, preferred_end_of_month_day)
    while payment_number < SAFETY_CAP_PERIODS and on_date > due:
        payment_number += 1
        due = next_payment_date(due, payment_day_of_month, preferred_end_of_month_day)
    return payment_number
