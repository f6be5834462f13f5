"""
Request models for the pricing API.

Plans travel as plain strings so unknown identifiers reach the engine and
come back as INVALID_INPUT rather than a generic validation error.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..engine import AddOns
from ..services import PaymentData


class AddOnsBody(BaseModel):
    use_room: bool = False
    nomination_count: int = Field(0, ge=0, description="Number of nominations")
    inhouse_count: int = Field(0, ge=0, description="Number of in-house nominations")
    apply_house_fee: bool = False
    apply_single_charge: bool = False
    drink_total: int = Field(0, ge=0, description="Drink charges in yen, billed at cost")

    def to_domain(self) -> AddOns:
        return AddOns(**self.model_dump())


class QuoteRequest(BaseModel):
    """Request model for quoting an arbitrary session."""
    plan: str
    start_at: datetime
    end_at: datetime
    add_ons: AddOnsBody = Field(default_factory=AddOnsBody)


class VisitQuoteRequest(BaseModel):
    """Request model for quoting a stored visit."""
    plan: Optional[str] = None
    end_at: Optional[datetime] = None
    add_ons: AddOnsBody = Field(default_factory=AddOnsBody)


class PaymentRequest(VisitQuoteRequest):
    """Request model for confirming a payment against a re-computed quote."""
    method: Literal["cash", "card", "mixed"]
    amount: int = Field(..., ge=0)
    cash_received: Optional[int] = None
    change_amount: Optional[int] = None
    notes: Optional[str] = None

    def to_payment(self) -> PaymentData:
        return PaymentData(
            method=self.method,
            amount=self.amount,
            cash_received=self.cash_received,
            change_amount=self.change_amount,
            notes=self.notes,
        )
