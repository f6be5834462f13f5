"""Process-wide instances shared by the API routers."""
from ..engine import QuotationEngine
from ..services import CheckoutService, InMemoryPaymentStore, InMemoryVisitStore

engine = QuotationEngine()
visit_store = InMemoryVisitStore()
payment_store = InMemoryPaymentStore()
checkout_service = CheckoutService(visit_store, payment_store, engine)
