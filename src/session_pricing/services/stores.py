"""Store interfaces for the checkout flow (repository pattern).

Real deployments back these with the venue database; the in-memory
versions serve the API process and the tests.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime
from threading import Lock
from typing import Optional


PAYMENT_METHODS = ("cash", "card", "mixed")


@dataclass(frozen=True)
class Visit:
    """A seated party, as far as checkout needs to know it."""
    visit_id: str
    check_in_at: datetime
    check_out_at: Optional[datetime] = None
    plan: Optional[str] = None
    status: str = "active"


@dataclass(frozen=True)
class PaymentData:
    """Payment details entered by staff at checkout."""
    method: str
    amount: int
    cash_received: Optional[int] = None
    change_amount: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class PaymentRecord:
    """A payment written back to storage after confirmation."""
    payment_id: int
    visit_id: str
    method: str
    amount: int
    cash_received: Optional[int]
    change_amount: Optional[int]
    notes: Optional[str]
    quote: dict

    def to_dict(self) -> dict:
        return {
            "payment_id": self.payment_id,
            "visit_id": self.visit_id,
            "method": self.method,
            "amount": self.amount,
            "cash_received": self.cash_received,
            "change_amount": self.change_amount,
            "notes": self.notes,
            "quote": self.quote,
        }


class VisitStore(ABC):
    """Interface for visit lookups."""

    @abstractmethod
    def get_visit(self, visit_id: str) -> Visit | None:
        """Return a visit by ID, or None if not found."""
        ...

    @abstractmethod
    def complete_visit(self, visit_id: str, check_out_at: datetime) -> Visit:
        """Mark a visit as paid and checked out, and return the updated visit."""
        ...


class PaymentStore(ABC):
    """Interface for payment persistence."""

    @abstractmethod
    def record_payment(self, visit_id: str, payment: PaymentData, quote: dict) -> PaymentRecord:
        """Persist a confirmed payment and return the stored record."""
        ...

    @abstractmethod
    def list_payments(self, visit_id: str) -> list[PaymentRecord]:
        """Return payments recorded for a visit, oldest first."""
        ...


class InMemoryVisitStore(VisitStore):
    """Dict-backed visit store."""

    def __init__(self, visits: Optional[list[Visit]] = None):
        self._visits = {v.visit_id: v for v in visits or []}

    def add(self, visit: Visit):
        self._visits[visit.visit_id] = visit

    def get_visit(self, visit_id: str) -> Visit | None:
        return self._visits.get(visit_id)

    def complete_visit(self, visit_id: str, check_out_at: datetime) -> Visit:
        visit = replace(self._visits[visit_id], status="completed", check_out_at=check_out_at)
        self._visits[visit_id] = visit
        return visit


class InMemoryPaymentStore(PaymentStore):
    """List-backed payment store."""

    def __init__(self):
        self._payments: list[PaymentRecord] = []
        self._lock = Lock()

    def record_payment(self, visit_id: str, payment: PaymentData, quote: dict) -> PaymentRecord:
        with self._lock:
            record = PaymentRecord(
                payment_id=len(self._payments) + 1,
                visit_id=visit_id,
                method=payment.method,
                amount=payment.amount,
                cash_received=payment.cash_received,
                change_amount=payment.change_amount,
                notes=payment.notes,
                quote=quote,
            )
            self._payments.append(record)
        return record

    def list_payments(self, visit_id: str) -> list[PaymentRecord]:
        with self._lock:
            return [p for p in self._payments if p.visit_id == visit_id]
