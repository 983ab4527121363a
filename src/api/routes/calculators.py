"""Loan and mortgage calculator routes. Stateless: every request carries its inputs."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from src.api.deps import engine_errors, get_settings
from src.api.schemas import (
    DefaultsResponse,
    LumpSumImpactResponse,
    LumpSumImpactsRequest,
    LumpSumRequest,
    PaymentRequest,
    PaymentResponse,
    PrepaymentImpactRequest,
    PrepaymentImpactResponse,
    ScheduledPaymentResponse,
    ScheduleRequest,
    ScheduleResponse,
    TermRequest,
    TermResponse,
    YearlySummaryResponse,
)
from src.config import Settings
from src.engine.payment_dates import payment_number_for_date
from src.engine.prepayment import compare_schedules, lump_sum_impacts, prepayment_impact
from src.engine.schedule import level_payment, schedule_for_loan, yearly_summary
from src.engine.term_solver import months_to_term_parts, term_from_payment
from src.models.loan import ExtraMonthly, LoanTerms, LumpSum, LumpSumTiming, RateAdjustment

router = APIRouter(prefix="/api/v1/calculators", tags=["calculators"])


def _to_lump_sum(
    req: LumpSumRequest,
    start_date: date | None,
    payment_day_of_month: int | None,
    preferred_end_of_month_day: int | None,
) -> LumpSum:
    """Build an engine lump sum; a planned date wins when the payment calendar is known."""
    if req.planned_date and start_date and payment_day_of_month:
        period = payment_number_for_date(
            start_date, req.planned_date, payment_day_of_month, preferred_end_of_month_day
        )
        return LumpSum(
            amount=req.amount,
            timing=LumpSumTiming.PERIOD,
            period=period,
            description=req.description,
        )
    return LumpSum(
        amount=req.amount,
        timing=LumpSumTiming(req.timing),
        year=req.year,
        period=req.period,
        description=req.description,
    )


@router.get("/defaults", response_model=DefaultsResponse)
async def defaults(config: Settings = Depends(get_settings)):
    """Starting values for the calculator forms."""
    return DefaultsResponse(
        principal=config.default_principal,
        annual_rate_percent=config.default_annual_rate_percent,
        term_months=config.default_term_months,
        payment_day_of_month=config.default_payment_day_of_month,
    )


@router.post("/payment", response_model=PaymentResponse)
async def payment(req: PaymentRequest):
    """Monthly payment for a fixed-term loan."""
    with engine_errors():
        amount = level_payment(LoanTerms(req.principal, req.annual_rate_percent, term_months=req.term_months))
    return PaymentResponse(payment_amount=amount)


@router.post("/term", response_model=TermResponse)
async def term(req: TermRequest):
    """Term implied by a chosen monthly payment."""
    with engine_errors():
        solution = term_from_payment(req.principal, req.annual_rate_percent, req.payment_amount)
    parts = months_to_term_parts(solution.months)
    return TermResponse(
        months=solution.months,
        years=parts.years,
        remaining_months=parts.months,
        never_amortizes=solution.never_amortizes,
    )


@router.post("/schedule", response_model=ScheduleResponse)
async def schedule(req: ScheduleRequest):
    """Full amortization schedule, compared against the same loan with no prepayments."""
    if req.term_months is None and req.payment_amount is None:
        raise HTTPException(status_code=400, detail="Provide term_months or payment_amount")

    terms = LoanTerms(
        principal=req.principal,
        annual_rate_percent=req.annual_rate_percent,
        term_months=req.term_months,
        payment_amount=req.payment_amount,
    )
    events = [
        _to_lump_sum(lump, req.mortgage_start_date, req.payment_day_of_month, req.preferred_end_of_month_day)
        for lump in req.lump_sums
    ]
    if req.extra_monthly:
        events.append(ExtraMonthly(req.extra_monthly))
    adjustments = [
        RateAdjustment(a.period, a.rate_delta_percent, a.description) for a in req.rate_adjustments
    ]

    with engine_errors():
        baseline = schedule_for_loan(terms, rate_adjustments=adjustments)
        result = schedule_for_loan(terms, events, adjustments)

    comparison = compare_schedules(baseline, result)
    parts = months_to_term_parts(result.periods)
    return ScheduleResponse(
        payment_amount=result.payment_amount,
        periods=result.periods,
        years=parts.years,
        remaining_months=parts.months,
        total_interest=result.total_interest,
        total_paid=result.total_paid,
        reached_safety_cap=result.reached_safety_cap,
        interest_saved=comparison.interest_saved,
        periods_saved=comparison.periods_saved,
        payments=[ScheduledPaymentResponse.model_validate(p) for p in result.payments],
        yearly=[YearlySummaryResponse.model_validate(y) for y in yearly_summary(result)],
    )


@router.post("/prepayment-impact", response_model=PrepaymentImpactResponse)
async def prepayment(req: PrepaymentImpactRequest):
    """Quick estimate of what one lump sum saves."""
    with engine_errors():
        impact = prepayment_impact(
            req.principal,
            req.annual_rate_percent,
            req.periodic_payment,
            req.lump_sum_amount,
            req.period_of_lump_sum,
            req.original_term_months,
            as_of=req.as_of,
        )
    return PrepaymentImpactResponse.model_validate(impact)


@router.post("/lump-sum-impacts", response_model=list[LumpSumImpactResponse])
async def lump_sums(req: LumpSumImpactsRequest):
    """Exact marginal and cumulative savings of each lump sum."""
    terms = LoanTerms(
        principal=req.principal,
        annual_rate_percent=req.annual_rate_percent,
        payment_amount=req.payment_amount,
    )
    events = [
        _to_lump_sum(lump, req.mortgage_start_date, req.payment_day_of_month, req.preferred_end_of_month_day)
        for lump in req.lump_sums
    ]
    with engine_errors():
        impacts = lump_sum_impacts(terms, req.payment_amount, events, req.extra_monthly)

    return [
        LumpSumImpactResponse(
            amount=i.lump_sum.amount,
            period=i.lump_sum.target_period,
            description=i.lump_sum.description,
            interest_saved=i.interest_saved,
            periods_saved=i.periods_saved,
            cumulative_interest_saved=i.cumulative_interest_saved,
        )
        for i in impacts
    ]
