"""
Checkout API - FastAPI router for quoting visits and recording payments.
"""
from datetime import datetime, timezone

from fastapi import APIRouter

from .schemas import PaymentRequest, VisitQuoteRequest
from .state import checkout_service

router = APIRouter(prefix="/api/visits", tags=["checkout"])


@router.post("/{visit_id}/quote")
async def quote_visit(visit_id: str, body: VisitQuoteRequest):
    """Preview the bill for a visit. Seated visits are priced up to now."""
    visit = checkout_service.get_visit(visit_id)
    end_at = body.end_at or visit.check_out_at or datetime.now(timezone.utc)
    quote = checkout_service.preview(
        visit_id,
        add_ons=body.add_ons.to_domain(),
        plan=body.plan,
        end_at=end_at,
    )
    return quote.to_dict()


@router.post("/{visit_id}/payments")
async def record_payment(visit_id: str, body: PaymentRequest):
    """Re-price the visit and record the payment if it settles the quote."""
    quote = checkout_service.preview(
        visit_id,
        add_ons=body.add_ons.to_domain(),
        plan=body.plan,
        end_at=body.end_at,
    )
    record = checkout_service.confirm_payment(visit_id, quote, body.to_payment(), check_out_at=body.end_at)
    return record.to_dict()


@router.get("/{visit_id}/payments")
async def list_payments(visit_id: str):
    """List payments recorded for a visit."""
    return [p.to_dict() for p in checkout_service.list_payments(visit_id)]
