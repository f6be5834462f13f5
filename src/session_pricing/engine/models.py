"""
Data models for the quotation engine.

Uses frozen dataclasses so every value that crosses the engine boundary
is immutable. Money is always an int in minor currency units (yen).
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from .errors import ConfigurationError, InvalidInput


class Plan(str, Enum):
    """Seating plans offered by the venue."""
    BAR = "BAR"
    COUNTER = "COUNTER"
    VIP_A = "VIP_A"
    VIP_B = "VIP_B"

    @classmethod
    def parse(cls, value: Union[str, "Plan"]) -> "Plan":
        """Resolve a plan identifier, rejecting anything outside the enumeration.

        Identifiers match case-insensitively ("vip_a" is VIP_A). Surrounding
        whitespace is not trimmed and makes the identifier unknown.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise InvalidInput(f"Unknown plan identifier: {value!r}") from None


class LineCode(str, Enum):
    """Stable line item identifiers, in canonical presentation order."""
    BASE = "BASE"
    EXT_SET = "EXT_SET"
    ROOM_BASE = "ROOM_BASE"
    EXT_ROOM = "EXT_ROOM"
    NOMINATION = "NOMINATION"
    INHOUSE = "INHOUSE"
    HOUSE_FEE = "HOUSE_FEE"
    SINGLE_CHARGE = "SINGLE_CHARGE"
    DRINK = "DRINK"


def _require_money(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True)
class RoomTrack:
    """Private room billing schedule layered on top of the set track."""
    base_price: int
    base_duration_minutes: int
    extension_unit_minutes: int
    extension_price: int

    def __post_init__(self):
        _require_money("room base_price", self.base_price)
        _require_money("room extension_price", self.extension_price)
        _require_money("room base_duration_minutes", self.base_duration_minutes)
        if isinstance(self.extension_unit_minutes, bool) or not isinstance(self.extension_unit_minutes, int) \
                or self.extension_unit_minutes <= 0:
            raise ConfigurationError(
                f"room extension_unit_minutes must be > 0, got {self.extension_unit_minutes!r}"
            )


@dataclass(frozen=True)
class PlanDefinition:
    """Static pricing parameters for one plan."""
    base_price: int
    base_duration_minutes: int
    extension_unit_minutes: int
    extension_price: int
    label: str = ""
    room: Optional[RoomTrack] = None

    def __post_init__(self):
        _require_money("base_price", self.base_price)
        _require_money("extension_price", self.extension_price)
        _require_money("base_duration_minutes", self.base_duration_minutes)
        if isinstance(self.extension_unit_minutes, bool) or not isinstance(self.extension_unit_minutes, int) \
                or self.extension_unit_minutes <= 0:
            raise ConfigurationError(
                f"extension_unit_minutes must be > 0, got {self.extension_unit_minutes!r}"
            )

    @property
    def has_room(self) -> bool:
        return self.room is not None


@dataclass(frozen=True)
class PricingRates:
    """Plan-independent unit prices and the service/tax rates."""
    nomination_unit_price: int = 1000
    inhouse_unit_price: int = 1000
    house_fee: int = 2000
    single_charge: int = 2000
    service_rate: Decimal = Decimal("0.10")
    tax_rate: Decimal = Decimal("0.10")

    def __post_init__(self):
        _require_money("nomination_unit_price", self.nomination_unit_price)
        _require_money("inhouse_unit_price", self.inhouse_unit_price)
        _require_money("house_fee", self.house_fee)
        _require_money("single_charge", self.single_charge)
        for name in ("service_rate", "tax_rate"):
            rate = getattr(self, name)
            if not isinstance(rate, Decimal):
                raise ConfigurationError(f"{name} must be a Decimal, got {rate!r}")
            if not rate.is_finite():
                raise ConfigurationError(f"{name} must be a finite rate, got {rate}")
            if not Decimal(0) <= rate <= Decimal(1):
                raise ConfigurationError(f"{name} must be between 0 and 1, got {rate}")

    @property
    def service_tax_rate(self) -> Decimal:
        """Combined rate applied to the subtotal."""
        return self.service_rate + self.tax_rate


def _require_count(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidInput(f"{name} cannot be negative")


@dataclass(frozen=True)
class AddOns:
    """Optional charges for a session. Every field has an explicit default."""
    use_room: bool = False
    nomination_count: int = 0
    inhouse_count: int = 0
    apply_house_fee: bool = False
    apply_single_charge: bool = False
    drink_total: int = 0

    def __post_init__(self):
        for name in ("use_room", "apply_house_fee", "apply_single_charge"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidInput(f"{name} must be a boolean, got {getattr(self, name)!r}")
        _require_count("nomination_count", self.nomination_count)
        _require_count("inhouse_count", self.inhouse_count)
        _require_count("drink_total", self.drink_total)


def _coerce_timestamp(name: str, value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise InvalidInput(f"{name} is not an ISO-8601 timestamp: {value!r}") from None
    raise InvalidInput(f"{name} must be a datetime, got {type(value).__name__}")


@dataclass(frozen=True)
class SessionInput:
    """A seating session to be quoted."""
    plan: Plan
    start_at: datetime
    end_at: datetime
    add_ons: AddOns = field(default_factory=AddOns)

    def __post_init__(self):
        object.__setattr__(self, "plan", Plan.parse(self.plan))
        start_at = _coerce_timestamp("start_at", self.start_at)
        end_at = _coerce_timestamp("end_at", self.end_at)
        try:
            reversed_range = end_at < start_at
        except TypeError:
            raise InvalidInput("start_at and end_at must both be timezone-aware or both naive") from None
        if reversed_range:
            raise InvalidInput("end_at must not be earlier than start_at")
        object.__setattr__(self, "start_at", start_at)
        object.__setattr__(self, "end_at", end_at)
        if not isinstance(self.add_ons, AddOns):
            raise InvalidInput("add_ons must be an AddOns record")


@dataclass(frozen=True)
class TraceStep:
    """A single step in the quotation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class LineItem:
    """A single charge on a quote."""
    code: LineCode
    label: str
    unit_price: int
    quantity: int
    amount: int

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "label": self.label,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class Quote:
    """Complete, immutable result of a quotation."""
    plan: Plan
    elapsed_minutes: int
    lines: tuple[LineItem, ...]
    subtotal: int
    service_amount: int
    tax_amount: int
    service_tax: int
    total: int
    warnings: tuple[str, ...] = ()
    trace: tuple[TraceStep, ...] = ()

    def line(self, code: LineCode) -> Optional[LineItem]:
        """Return the line with the given code, if it was emitted."""
        for item in self.lines:
            if item.code == code:
                return item
        return None

    @property
    def codes(self) -> list[str]:
        return [item.code.value for item in self.lines]

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dict for checkout screens and payment records."""
        return {
            "plan": self.plan.value,
            "elapsed_minutes": self.elapsed_minutes,
            "lines": [item.to_dict() for item in self.lines],
            "subtotal": self.subtotal,
            "service_amount": self.service_amount,
            "tax_amount": self.tax_amount,
            "service_tax": self.service_tax,
            "total": self.total,
            "warnings": list(self.warnings),
        }
