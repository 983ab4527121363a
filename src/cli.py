"""Command-line mortgage calculator.

Usage:
    python -m src.cli schedule --principal 250000 --rate 6.5 --term 360
    python -m src.cli schedule --principal 500000 --rate 6.5 --term 360 --lump-sum 50000@5
    python -m src.cli term --principal 300000 --rate 5 --payment 2000
    python -m src.cli impact --principal 300000 --rate 5 --payment 2000 --lump-sum 20000 --period 24
    python -m src.cli next-date --day 15 --end-of-month 31
"""

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation

from src.config import settings
from src.engine.errors import InvalidInputError, NeverAmortizesError
from src.engine.payment_dates import payment_date_details
from src.engine.prepayment import compare_schedules, prepayment_impact
from src.engine.schedule import schedule_for_loan, yearly_summary
from src.engine.term_solver import months_to_term_parts, term_from_payment
from src.models.loan import ExtraMonthly, LoanTerms, LumpSum, LumpSumTiming


# ── Helpers ──────────────────────────────────────────────────────────────────

def _dollar(v) -> str:
    return f"${float(v):,.2f}"


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


def _term(months: int) -> str:
    parts = months_to_term_parts(months)
    return f"{parts.years} yr {parts.months} mo ({months} payments)"


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value.replace(",", ""))
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"Invalid amount: {value}")


def _lump_sum(value: str) -> LumpSum:
    """AMOUNT (immediate) or AMOUNT@YEAR (end of that loan year)."""
    amount, _, year = value.partition("@")
    if not year:
        return LumpSum(_decimal(amount))
    try:
        return LumpSum(_decimal(amount), LumpSumTiming.END_OF_YEAR, year=int(year))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid lump sum year: {year}")


# ── Commands ─────────────────────────────────────────────────────────────────

def cmd_schedule(args) -> None:
    terms = LoanTerms(
        principal=args.principal,
        annual_rate_percent=args.rate,
        term_months=None if args.payment else args.term,
        payment_amount=args.payment,
    )
    events = list(args.lump_sum)
    if args.extra:
        events.append(ExtraMonthly(args.extra))

    baseline = schedule_for_loan(terms)
    result = schedule_for_loan(terms, events)

    _header("Amortization Schedule")
    print(f"  Monthly payment:  {_dollar(result.payment_amount)}")
    print(f"  Payoff:           {_term(result.periods)}")
    print(f"  Total interest:   {_dollar(result.total_interest)}")
    print(f"  Total paid:       {_dollar(result.total_paid)}")
    if result.reached_safety_cap:
        print("  WARNING: payment too low, loan not paid off within 100 years")
    if events:
        comparison = compare_schedules(baseline, result)
        print(f"  Interest saved:   {_dollar(comparison.interest_saved)}")
        print(f"  Time saved:       {_term(comparison.periods_saved)}")

    print(f"\n  {'Year':>4}  {'Principal':>14}  {'Interest':>12}  {'Prepaid':>12}  {'Balance':>14}")
    for y in yearly_summary(result):
        print(
            f"  {y.year:>4}  {_dollar(y.principal):>14}  {_dollar(y.interest):>12}"
            f"  {_dollar(y.prepaid):>12}  {_dollar(y.ending_balance):>14}"
        )
    print()


def cmd_term(args) -> None:
    solution = term_from_payment(args.principal, args.rate, args.payment)
    _header("Payoff Term")
    if solution.never_amortizes:
        print("  Payment too low - loan will never be paid off. Increase your payment.")
    else:
        print(f"  Payoff in:        {_term(solution.months)}")
    print()


def cmd_impact(args) -> None:
    impact = prepayment_impact(
        args.principal,
        args.rate,
        args.payment,
        args.lump_sum,
        args.period,
        args.term,
    )
    _header("Prepayment Impact")
    print(f"  Balance at prepayment:  {_dollar(impact.balance_at_prepayment_time)}")
    print(f"  Interest saved:         {_dollar(impact.interest_saved)}")
    print(f"  Net of lump sum:        {_dollar(impact.net_interest_saved)}")
    print(f"  Time saved:             {_term(impact.time_saved_periods)}")
    print(f"  Original payoff:        {impact.payoff_date_original.isoformat()}")
    print(f"  New payoff:             {impact.payoff_date_with_prepayment.isoformat()}")
    print()


def cmd_next_date(args) -> None:
    details = payment_date_details(
        args.from_date, args.day, args.end_of_month, on_or_after=not args.next_month
    )
    _header("Next Payment")
    print(f"  Date:             {details.next_payment_date.isoformat()}")
    print(f"  Days until:       {details.days_until_payment}")
    print(f"  End of month:     {'Yes' if details.is_end_of_month else 'No'}")
    print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mortgage amortization and prepayment calculator")
    sub = parser.add_subparsers(dest="command", required=True)

    def loan_args(p, payment_required: bool = False) -> None:
        p.add_argument("--principal", type=_decimal, default=settings.default_principal,
                       help=f"Loan amount (default: {settings.default_principal})")
        p.add_argument("--rate", type=_decimal, default=settings.default_annual_rate_percent,
                       help=f"Annual rate in percent (default: {settings.default_annual_rate_percent})")
        p.add_argument("--payment", type=_decimal, required=payment_required, help="Monthly payment")

    p_schedule = sub.add_parser("schedule", help="Print a yearly amortization summary")
    loan_args(p_schedule)
    p_schedule.add_argument("--term", type=int, default=settings.default_term_months,
                            help=f"Term in months (default: {settings.default_term_months})")
    p_schedule.add_argument("--extra", type=_decimal, help="Extra principal every month")
    p_schedule.add_argument("--lump-sum", type=_lump_sum, action="append", default=[],
                            help="AMOUNT or AMOUNT@YEAR, repeatable")
    p_schedule.set_defaults(func=cmd_schedule)

    p_term = sub.add_parser("term", help="Solve the payoff term from a payment")
    loan_args(p_term, payment_required=True)
    p_term.set_defaults(func=cmd_term)

    p_impact = sub.add_parser("impact", help="Estimate savings from one lump sum")
    loan_args(p_impact, payment_required=True)
    p_impact.add_argument("--lump-sum", type=_decimal, required=True, help="Lump sum amount")
    p_impact.add_argument("--period", type=int, required=True, help="Payment number the lump sum is paid with")
    p_impact.add_argument("--term", type=int, default=settings.default_term_months, help="Original term in months")
    p_impact.set_defaults(func=cmd_impact)

    p_next = sub.add_parser("next-date", help="Next payment date")
    p_next.add_argument("--from-date", type=date.fromisoformat, default=date.today(), help="YYYY-MM-DD (default: today)")
    p_next.add_argument("--day", type=int, default=settings.default_payment_day_of_month, help="Payment day 1-28")
    p_next.add_argument("--end-of-month", type=int, help="Preferred end-of-month day 29-31")
    p_next.add_argument("--next-month", action="store_true", help="Always skip to the following month")
    p_next.set_defaults(func=cmd_next_date)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (InvalidInputError, NeverAmortizesError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
