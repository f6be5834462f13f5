"""Checkout service - quotes a visit and records the confirmed payment.

Services:
- Depend only on the store interfaces and the quotation engine
- Never read the clock; "now" is supplied by the caller
- Write nothing until staff confirm a payment that settles the quote
"""
import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..engine.errors import InvalidInput, PaymentRejectedError, VisitNotFoundError
from ..engine.models import AddOns, Plan, Quote, SessionInput
from ..engine.quotation_engine import QuotationEngine
from .stores import PAYMENT_METHODS, PaymentData, PaymentRecord, PaymentStore, Visit, VisitStore

logger = logging.getLogger(__name__)


class CheckoutService:
    """Service for the quote → confirm → pay flow."""

    def __init__(self, visits: VisitStore, payments: PaymentStore, engine: QuotationEngine) -> None:
        self._visits = visits
        self._payments = payments
        self._engine = engine

    def get_visit(self, visit_id: str) -> Visit:
        """Return a visit by ID.

        Raises:
            VisitNotFoundError: If the visit does not exist.
        """
        visit = self._visits.get_visit(visit_id)
        if visit is None:
            raise VisitNotFoundError(visit_id)
        return visit

    def preview(
        self,
        visit_id: str,
        add_ons: Optional[AddOns] = None,
        plan: Optional[Plan | str] = None,
        end_at: Optional[datetime] = None,
    ) -> Quote:
        """Quote a visit without writing anything.

        The plan defaults to the visit's plan and the end time to its
        check-out time; a visit still seated needs an explicit end_at.

        Raises:
            VisitNotFoundError: If the visit does not exist.
            InvalidInput: If no plan or no end time can be determined.
        """
        visit = self.get_visit(visit_id)
        plan = plan or visit.plan
        if not plan:
            raise InvalidInput(f"Visit {visit_id} has no plan; pass one explicitly")
        end_at = end_at or visit.check_out_at
        if end_at is None:
            raise InvalidInput(f"Visit {visit_id} has not checked out; pass end_at")

        session = SessionInput(
            plan=plan,
            start_at=visit.check_in_at,
            end_at=end_at,
            add_ons=add_ons or AddOns(),
        )
        return self._engine.quote(session)

    def confirm_payment(
        self,
        visit_id: str,
        quote: Quote,
        payment: PaymentData,
        check_out_at: Optional[datetime] = None,
    ) -> PaymentRecord:
        """Record a payment that settles the given quote and close the visit.

        check_out_at is the end time the quote was priced to; it defaults
        to the visit's own check-out time.

        Raises:
            VisitNotFoundError: If the visit does not exist.
            InvalidInput: If no check-out time can be determined.
            PaymentRejectedError: If the visit is already settled or the
                payment does not settle the quote.
        """
        visit = self.get_visit(visit_id)
        check_out_at = check_out_at or visit.check_out_at
        if check_out_at is None:
            raise InvalidInput(f"Visit {visit_id} has not checked out; pass check_out_at")
        try:
            if visit.status != "active":
                raise PaymentRejectedError(f"Visit {visit_id} is already {visit.status}")
            payment = self._check_payment(quote, payment)
        except PaymentRejectedError as e:
            logger.warning("Payment rejected for visit %s: %s", visit_id, e.message)
            raise

        record = self._payments.record_payment(visit_id, payment, quote.to_dict())
        self._visits.complete_visit(visit_id, check_out_at)
        logger.info(
            "Recorded %s payment #%d for visit %s: ¥%d",
            record.method, record.payment_id, visit_id, record.amount,
        )
        return record

    def list_payments(self, visit_id: str) -> list[PaymentRecord]:
        self.get_visit(visit_id)
        return self._payments.list_payments(visit_id)

    @staticmethod
    def _check_payment(quote: Quote, payment: PaymentData) -> PaymentData:
        if payment.method not in PAYMENT_METHODS:
            raise PaymentRejectedError(f"Unknown payment method '{payment.method}'")
        if payment.amount != quote.total:
            raise PaymentRejectedError(
                f"Payment amount ¥{payment.amount:,} does not match quote total ¥{quote.total:,}"
            )

        if payment.method == "card":
            if payment.cash_received is not None or payment.change_amount is not None:
                raise PaymentRejectedError("Card payments do not take cash")
            return payment

        if payment.cash_received is None:
            raise PaymentRejectedError("Cash received is required for cash payments")
        if payment.cash_received < 0:
            raise PaymentRejectedError("Cash received cannot be negative")

        if payment.method == "cash":
            if payment.cash_received < payment.amount:
                raise PaymentRejectedError(
                    f"Cash received ¥{payment.cash_received:,} is less than ¥{payment.amount:,}"
                )
            change = payment.cash_received - payment.amount
        else:
            # mixed: cash covers part, the card takes the rest
            if payment.cash_received > payment.amount:
                raise PaymentRejectedError("Cash portion of a mixed payment exceeds the total")
            change = 0

        if payment.change_amount is not None and payment.change_amount != change:
            raise PaymentRejectedError(
                f"Change ¥{payment.change_amount:,} does not match expected ¥{change:,}"
            )
        return replace(payment, change_amount=change)
