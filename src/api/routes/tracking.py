"""Mortgage tracking routes.

The caller sends the settings, snapshots and payment records it loaded for a
mortgage; nothing is persisted here.
"""

from fastapi import APIRouter

from src.api.deps import engine_errors
from src.api.schemas import (
    CurrentStateResponse,
    HistoryPointResponse,
    MortgagePaymentRequest,
    MortgageSettingsRequest,
    MortgageSnapshotRequest,
    NextPaymentDateRequest,
    NextPaymentDateResponse,
    PrepaymentSummaryRequest,
    PrepaymentSummaryResponse,
    TrackingRequest,
)
from src.engine.history import build_history, current_state
from src.engine.payment_dates import payment_date_details
from src.engine.prepayment import total_prepayment_impact
from src.models.tracking import (
    MortgagePaymentRecord,
    MortgageSettings,
    MortgageSnapshot,
)

router = APIRouter(prefix="/api/v1/tracking", tags=["tracking"])


def _to_settings(req: MortgageSettingsRequest | None) -> MortgageSettings | None:
    if req is None:
        return None
    return MortgageSettings(**req.model_dump())


def _to_snapshots(reqs: list[MortgageSnapshotRequest]) -> list[MortgageSnapshot]:
    return [MortgageSnapshot(**r.model_dump()) for r in reqs]


def _to_payments(reqs: list[MortgagePaymentRequest]) -> list[MortgagePaymentRecord]:
    return [MortgagePaymentRecord(**r.model_dump()) for r in reqs]


@router.post("/history", response_model=list[HistoryPointResponse])
async def history(req: TrackingRequest):
    """Chronological balance timeline from snapshots and payments."""
    points = build_history(_to_snapshots(req.snapshots), _to_payments(req.payments), _to_settings(req.settings))
    return [HistoryPointResponse.model_validate(p) for p in points]


@router.post("/current-state", response_model=CurrentStateResponse)
async def state(req: TrackingRequest):
    """Where the mortgage stands today."""
    with engine_errors():
        result = current_state(
            _to_snapshots(req.snapshots),
            _to_payments(req.payments),
            _to_settings(req.settings),
            today=req.today,
        )
    return CurrentStateResponse.model_validate(result)


@router.post("/next-payment-date", response_model=NextPaymentDateResponse)
async def next_date(req: NextPaymentDateRequest):
    with engine_errors():
        details = payment_date_details(
            req.from_date,
            req.payment_day_of_month,
            req.preferred_end_of_month_day,
            on_or_after=req.mode == "on_or_after",
        )
    return NextPaymentDateResponse.model_validate(details)


@router.post("/prepayment-summary", response_model=PrepaymentSummaryResponse)
async def prepayment_summary(req: PrepaymentSummaryRequest):
    """Combined savings of every recorded lump-sum payment."""
    with engine_errors():
        total = total_prepayment_impact(
            _to_payments(req.payments),
            _to_settings(req.settings),
            req.annual_rate_percent,
            req.periodic_payment,
            as_of=req.as_of,
        )
    return PrepaymentSummaryResponse(
        total_prepayments=total.total_prepayments,
        total_interest_saved=total.total_interest_saved,
        total_time_saved_periods=total.total_time_saved_periods,
        payment_count=total.payment_count,
    )
