from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class LoanTerms:
    principal: Decimal
    annual_rate_percent: Decimal  # e.g. Decimal("6.5") for 6.5%
    term_months: int | None = None
    payment_amount: Decimal | None = None  # Used when the term is solved from the payment


class LumpSumTiming(Enum):
    IMMEDIATE = "immediate"
    END_OF_YEAR = "end_of_year"
    PERIOD = "period"  # Explicit schedule period, e.g. resolved from a calendar date


@dataclass(frozen=True)
class ExtraMonthly:
    """Extra principal paid on every period."""
    amount: Decimal


@dataclass(frozen=True)
class LumpSum:
    """One-off principal payment applied at a single schedule period."""
    amount: Decimal
    timing: LumpSumTiming = LumpSumTiming.IMMEDIATE
    year: int = 0  # END_OF_YEAR only
    period: int | None = None  # PERIOD only
    description: str | None = None

    @property
    def target_period(self) -> int:
        if self.timing is LumpSumTiming.IMMEDIATE:
            return 1
        if self.timing is LumpSumTiming.END_OF_YEAR:
            return 1 if self.year == 0 else self.year * 12
        return self.period or 1


PaymentEvent = ExtraMonthly | LumpSum


@dataclass(frozen=True)
class RateAdjustment:
    """Flat rate change taking effect at `period` and staying in force afterwards."""
    period: int
    rate_delta_percent: Decimal
    description: str | None = None


@dataclass(frozen=True)
class ScheduledPayment:
    payment_number: int
    payment_amount: Decimal  # Interest + principal actually paid this period
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal
    prepaid: Decimal = Decimal("0")  # Extra monthly + lump sums applied this period


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: list[ScheduledPayment]
    payment_amount: Decimal
    reached_safety_cap: bool = False

    @property
    def periods(self) -> int:
        return len(self.payments)

    @property
    def total_interest(self) -> Decimal:
        return sum((p.interest_portion for p in self.payments), Decimal("0"))

    @property
    def total_principal(self) -> Decimal:
        return sum((p.principal_portion for p in self.payments), Decimal("0"))

    @property
    def total_paid(self) -> Decimal:
        return self.total_interest + self.total_principal

    @property
    def final_balance(self) -> Decimal:
        return self.payments[-1].remaining_balance if self.payments else Decimal("0")


@dataclass(frozen=True)
class YearlySummary:
    year: int
    principal: Decimal
    interest: Decimal
    prepaid: Decimal
    total_paid: Decimal
    ending_balance: Decimal


@dataclass(frozen=True)
class TermSolution:
    months: int
    never_amortizes: bool = False


@dataclass(frozen=True)
class TermParts:
    years: int = 0
    months: int = 0


@dataclass(frozen=True)
class PrepaymentImpact:
    interest_saved: Decimal
    time_saved_periods: int
    payoff_date_original: date
    payoff_date_with_prepayment: date
    balance_at_prepayment_time: Decimal
    net_interest_saved: Decimal = Decimal("0")  # interest_saved less the lump sum paid


@dataclass(frozen=True)
class ScheduleComparison:
    interest_saved: Decimal
    periods_saved: int
    baseline_periods: int
    accelerated_periods: int


@dataclass(frozen=True)
class LumpSumImpact:
    """Effect of one lump sum when added after the ones listed before it."""
    lump_sum: LumpSum
    interest_saved: Decimal
    periods_saved: int
    cumulative_interest_saved: Decimal


@dataclass
class TotalPrepaymentImpact:
    total_prepayments: Decimal = Decimal("0")
    total_interest_saved: Decimal = Decimal("0")
    total_time_saved_periods: int = 0
    payment_count: int = 0
    impacts: list[PrepaymentImpact] = field(default_factory=list)
