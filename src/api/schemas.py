"""Pydantic schemas for API request/response models."""

import datetime
from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from src.models.tracking import HistoryEventType, PaymentKind


# ---- Request schemas ----

class LumpSumRequest(BaseModel):
    amount: Decimal = Field(..., ge=0)
    timing: Literal["immediate", "end_of_year", "period"] = "immediate"
    year: int = Field(0, ge=0, le=100)
    period: int | None = Field(None, ge=1)
    planned_date: date | None = Field(None, description="Resolved to a schedule period from the mortgage start date")
    description: str | None = None


class RateAdjustmentRequest(BaseModel):
    period: int = Field(..., ge=1)
    rate_delta_percent: Decimal
    description: str | None = None


class PaymentRequest(BaseModel):
    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int


class TermRequest(BaseModel):
    principal: Decimal
    annual_rate_percent: Decimal
    payment_amount: Decimal


class ScheduleRequest(BaseModel):
    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int | None = None
    payment_amount: Decimal | None = None
    extra_monthly: Decimal = Field(Decimal("0"), ge=0)
    lump_sums: list[LumpSumRequest] = Field(default_factory=list)
    rate_adjustments: list[RateAdjustmentRequest] = Field(default_factory=list)

    # Needed only to place lump sums given by planned_date
    mortgage_start_date: date | None = None
    payment_day_of_month: int | None = Field(None, ge=1, le=28)
    preferred_end_of_month_day: int | None = Field(None, ge=1, le=31)


class PrepaymentImpactRequest(BaseModel):
    principal: Decimal
    annual_rate_percent: Decimal
    periodic_payment: Decimal
    lump_sum_amount: Decimal
    period_of_lump_sum: int
    original_term_months: int
    as_of: date | None = None


class LumpSumImpactsRequest(BaseModel):
    principal: Decimal
    annual_rate_percent: Decimal
    payment_amount: Decimal
    extra_monthly: Decimal = Field(Decimal("0"), ge=0)
    lump_sums: list[LumpSumRequest] = Field(default_factory=list)
    mortgage_start_date: date | None = None
    payment_day_of_month: int | None = Field(None, ge=1, le=28)
    preferred_end_of_month_day: int | None = Field(None, ge=1, le=31)


class MortgageSettingsRequest(BaseModel):
    payment_day_of_month: int = Field(..., ge=1, le=28)
    preferred_end_of_month_day: int | None = Field(None, ge=29, le=31)
    start_date: date
    original_principal: Decimal
    original_term_months: int = Field(..., ge=1)


class MortgageSnapshotRequest(BaseModel):
    snapshot_date: date
    remaining_balance: Decimal
    periodic_payment_amount: Decimal
    annual_rate_percent: Decimal
    next_payment_date: date | None = None
    description: str | None = None


class MortgagePaymentRequest(BaseModel):
    payment_date: date
    scheduled_amount: Decimal
    remaining_balance: Decimal
    kind: PaymentKind = PaymentKind.REGULAR
    is_paid: bool = False
    actual_amount: Decimal | None = None
    principal_portion: Decimal | None = None
    interest_portion: Decimal | None = None
    description: str | None = None


class TrackingRequest(BaseModel):
    settings: MortgageSettingsRequest | None = None
    snapshots: list[MortgageSnapshotRequest] = Field(default_factory=list)
    payments: list[MortgagePaymentRequest] = Field(default_factory=list)
    today: date | None = None


class NextPaymentDateRequest(BaseModel):
    from_date: date
    payment_day_of_month: int = Field(..., ge=1, le=28)
    preferred_end_of_month_day: int | None = Field(None, ge=1, le=31)
    mode: Literal["next_month", "on_or_after"] = "on_or_after"


class PrepaymentSummaryRequest(BaseModel):
    settings: MortgageSettingsRequest
    payments: list[MortgagePaymentRequest] = Field(default_factory=list)
    annual_rate_percent: Decimal
    periodic_payment: Decimal
    as_of: date | None = None


# ---- Response schemas ----

class PaymentResponse(BaseModel):
    payment_amount: Decimal


class TermResponse(BaseModel):
    months: int
    years: int
    remaining_months: int
    never_amortizes: bool


class ScheduledPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_number: int
    payment_amount: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal
    prepaid: Decimal


class YearlySummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    principal: Decimal
    interest: Decimal
    prepaid: Decimal
    total_paid: Decimal
    ending_balance: Decimal


class ScheduleResponse(BaseModel):
    payment_amount: Decimal
    periods: int
    years: int
    remaining_months: int
    total_interest: Decimal
    total_paid: Decimal
    reached_safety_cap: bool
    interest_saved: Decimal  # Against the same loan without extra or lump sum payments
    periods_saved: int
    payments: list[ScheduledPaymentResponse]
    yearly: list[YearlySummaryResponse]


class PrepaymentImpactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    interest_saved: Decimal
    time_saved_periods: int
    payoff_date_original: date
    payoff_date_with_prepayment: date
    balance_at_prepayment_time: Decimal
    net_interest_saved: Decimal


class LumpSumImpactResponse(BaseModel):
    amount: Decimal
    period: int
    description: str | None = None
    interest_saved: Decimal
    periods_saved: int
    cumulative_interest_saved: Decimal


class DefaultsResponse(BaseModel):
    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int
    payment_day_of_month: int


class HistoryEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: HistoryEventType
    amount: Decimal
    description: str | None = None


class HistoryPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: datetime.date
    balance: Decimal
    periodic_payment_amount: Decimal
    annual_rate_percent: Decimal
    event: HistoryEventResponse | None = None


class CurrentStateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_balance: Decimal
    next_payment_date: date | None = None
    next_payment_amount: Decimal
    days_until_payment: int
    annual_rate_percent: Decimal
    estimated_payoff_date: date | None = None
    total_paid_to_date: Decimal
    total_interest_paid: Decimal
    principal_paid: Decimal
    months_remaining: int
    has_history: bool


class NextPaymentDateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    next_payment_date: date
    days_until_payment: int
    is_end_of_month: bool
    actual_payment_day: int


class PrepaymentSummaryResponse(BaseModel):
    total_prepayments: Decimal
    total_interest_saved: Decimal
    total_time_saved_periods: int
    payment_count: int
