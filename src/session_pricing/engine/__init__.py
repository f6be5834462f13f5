"""Engine subpackage - core quotation logic and pricing data."""
from .errors import ConfigurationError, DomainError, InvalidInput
from .models import AddOns, LineCode, LineItem, Plan, PlanDefinition, PricingRates, Quote, RoomTrack, SessionInput
from .plan_table import PlanTable, default_plan_table, load_plan_table
from .quotation_engine import QuotationEngine, quote

__all__ = [
    'QuotationEngine', 'quote',
    'SessionInput', 'AddOns', 'Quote', 'LineItem', 'LineCode',
    'Plan', 'PlanDefinition', 'RoomTrack', 'PricingRates',
    'PlanTable', 'default_plan_table', 'load_plan_table',
    'DomainError', 'InvalidInput', 'ConfigurationError',
]
