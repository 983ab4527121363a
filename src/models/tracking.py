from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class PaymentKind(Enum):
    REGULAR = "regular"
    LUMP_SUM = "lump_sum"
    EXTRA = "extra"


class HistoryEventType(Enum):
    PAYMENT = "payment"
    LUMP_SUM = "lump_sum"
    RATE_CHANGE = "rate_change"


@dataclass(frozen=True)
class MortgageSettings:
    """Per-mortgage payment calendar and original loan terms."""
    payment_day_of_month: int  # 1-28
    start_date: date
    original_principal: Decimal
    original_term_months: int
    preferred_end_of_month_day: int | None = None  # 29-31, pays on the last day in short months


@dataclass(frozen=True)
class MortgageSnapshot:
    snapshot_date: date
    remaining_balance: Decimal
    periodic_payment_amount: Decimal
    annual_rate_percent: Decimal
    next_payment_date: date | None = None
    description: str | None = None


@dataclass(frozen=True)
class MortgagePaymentRecord:
    payment_date: date
    scheduled_amount: Decimal
    remaining_balance: Decimal
    kind: PaymentKind = PaymentKind.REGULAR
    is_paid: bool = False
    actual_amount: Decimal | None = None
    principal_portion: Decimal | None = None
    interest_portion: Decimal | None = None
    description: str | None = None

    @property
    def amount(self) -> Decimal:
        """Recorded actual amount, falling back to the scheduled one."""
        return self.actual_amount if self.actual_amount else self.scheduled_amount


@dataclass(frozen=True)
class HistoryEvent:
    type: HistoryEventType
    amount: Decimal
    description: str | None = None


@dataclass(frozen=True)
class MortgageHistoryPoint:
    date: date
    balance: Decimal
    periodic_payment_amount: Decimal
    annual_rate_percent: Decimal
    event: HistoryEvent | None = None


@dataclass(frozen=True)
class PaymentDateCalculation:
    next_payment_date: date
    days_until_payment: int
    is_end_of_month: bool
    actual_payment_day: int


@dataclass(frozen=True)
class CurrentMortgageState:
    current_balance: Decimal = Decimal("0")
    next_payment_date: date | None = None
    next_payment_amount: Decimal = Decimal("0")
    days_until_payment: int = 0
    annual_rate_percent: Decimal = Decimal("0")
    estimated_payoff_date: date | None = None
    total_paid_to_date: Decimal = Decimal("0")
    total_interest_paid: Decimal = Decimal("0")
    principal_paid: Decimal = Decimal("0")
    months_remaining: int = 0

    @classmethod
    def empty(cls) -> "CurrentMortgageState":
        """State reported for a mortgage with no usable history yet."""
        return cls()

    @property
    def has_history(self) -> bool:
        return self.next_payment_date is not None
