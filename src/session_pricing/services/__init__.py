"""Services subpackage - checkout flow around the quotation engine."""
from .checkout_service import CheckoutService
from .stores import (
    InMemoryPaymentStore,
    InMemoryVisitStore,
    PaymentData,
    PaymentRecord,
    PaymentStore,
    Visit,
    VisitStore,
)

__all__ = [
    'CheckoutService',
    'Visit', 'PaymentData', 'PaymentRecord',
    'VisitStore', 'PaymentStore', 'InMemoryVisitStore', 'InMemoryPaymentStore',
]
