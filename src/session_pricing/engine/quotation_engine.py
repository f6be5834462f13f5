"""
Quotation Engine - prices a seating session into an itemized quote.

Pipeline:
1. Elapsed minutes (truncated) between start and end
2. Set track: base charge + block-quantized extension
3. Room track: room base + its own block-quantized extension
4. Metered add-ons (nominations, in-house)
5. Flat add-ons (house fee, single charge)
6. Drinks passed through at cost
7. Service tax applied once to the whole subtotal
"""
import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..config import settings as app_settings
from .models import (
    LineCode,
    LineItem,
    PlanDefinition,
    PricingRates,
    Quote,
    SessionInput,
    TraceStep,
)
from .plan_table import PlanTable

logger = logging.getLogger(__name__)

ONE_MINUTE = timedelta(minutes=1)


def elapsed_minutes(session: SessionInput) -> int:
    """Whole minutes between start and end; partial minutes are dropped."""
    return (session.end_at - session.start_at) // ONE_MINUTE


def extension_blocks(elapsed: int, base_duration: int, unit_minutes: int) -> int:
    """Number of billable extension blocks; any started block counts in full."""
    overage = max(0, elapsed - base_duration)
    if overage == 0:
        return 0
    return (overage + unit_minutes - 1) // unit_minutes


def apply_rate(amount: int, rate: Decimal) -> int:
    """amount × rate, rounded half-up to a whole currency unit."""
    return int((Decimal(amount) * rate).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class QuotationEngine:
    """
    Deterministic pricing engine for seating sessions.

    Holds an immutable plan table and pricing rates. quote() never reads the
    clock and never mutates engine state, so one engine can serve any number
    of concurrent callers.
    """

    def __init__(
        self,
        plans: Optional[PlanTable] = None,
        rates: Optional[PricingRates] = None,
        settings: Optional["app_settings.Settings"] = None,
    ):
        """Initialize with an explicit plan table and rates, or load them from settings."""
        if plans is None or rates is None:
            settings = settings or app_settings.get_settings()
        self._plans = plans if plans is not None else settings.load_plan_table()
        self.rates = rates if rates is not None else settings.rates()

    @property
    def plans(self) -> PlanTable:
        return self._plans

    def replace_plans(self, plans: PlanTable):
        """Swap in a new plan table. Quotes in flight keep the table they started with."""
        if not isinstance(plans, PlanTable):
            raise TypeError("replace_plans expects a PlanTable")
        self._plans = plans
        logger.info("Plan table replaced (%d plans)", len(plans))

    def quote(self, session: SessionInput) -> Quote:
        """
        Price a session.

        Args:
            session: SessionInput with plan, start/end and add-ons

        Returns:
            Quote with ordered lines, subtotal, service tax and total

        Raises:
            InvalidInput: malformed time range or unknown plan
            ConfigurationError: the plan table has no entry for the plan
        """
        plans = self._plans
        rates = self.rates
        plan = plans.get(session.plan)
        add_ons = session.add_ons

        lines: list[LineItem] = []
        trace: list[TraceStep] = []
        warnings: list[str] = []

        elapsed = elapsed_minutes(session)
        trace.append(TraceStep("Elapsed", f"{session.start_at.isoformat()} → {session.end_at.isoformat()}", f"{elapsed} min"))

        lines.append(LineItem(
            code=LineCode.BASE,
            label=plan.label or session.plan.value,
            unit_price=plan.base_price,
            quantity=1,
            amount=plan.base_price,
        ))
        trace.append(TraceStep("Set Base", f"{session.plan.value} covers {plan.base_duration_minutes} min", f"¥{plan.base_price:,}"))

        self._add_extension(
            lines, trace, LineCode.EXT_SET, "Set extension", elapsed,
            plan.base_duration_minutes, plan.extension_unit_minutes, plan.extension_price,
        )

        if add_ons.use_room:
            self._add_room(lines, trace, warnings, plan, session, elapsed)

        if add_ons.nomination_count > 0:
            lines.append(_per_unit(LineCode.NOMINATION, "Nomination", rates.nomination_unit_price, add_ons.nomination_count))
        if add_ons.inhouse_count > 0:
            lines.append(_per_unit(LineCode.INHOUSE, "In-house nomination", rates.inhouse_unit_price, add_ons.inhouse_count))
        if add_ons.apply_house_fee:
            lines.append(_per_unit(LineCode.HOUSE_FEE, "House fee", rates.house_fee, 1))
        if add_ons.apply_single_charge:
            lines.append(_per_unit(LineCode.SINGLE_CHARGE, "Single charge", rates.single_charge, 1))
        if add_ons.drink_total > 0:
            lines.append(_per_unit(LineCode.DRINK, "Drinks", add_ons.drink_total, 1))

        subtotal = sum(line.amount for line in lines)
        service_tax = apply_rate(subtotal, rates.service_tax_rate)
        service_amount = apply_rate(subtotal, rates.service_rate)
        tax_amount = service_tax - service_amount
        total = subtotal + service_tax

        trace.append(TraceStep("Subtotal", f"{len(lines)} line(s)", f"¥{subtotal:,}"))
        trace.append(TraceStep("Service Tax", f"{rates.service_tax_rate * 100:.0f}% of subtotal", f"¥{service_tax:,}"))
        trace.append(TraceStep("Total", "Subtotal + service tax", f"¥{total:,}"))

        logger.debug(
            "Quoted %s for %d min: subtotal=%d service_tax=%d total=%d",
            session.plan.value, elapsed, subtotal, service_tax, total,
        )

        return Quote(
            plan=session.plan,
            elapsed_minutes=elapsed,
            lines=tuple(lines),
            subtotal=subtotal,
            service_amount=service_amount,
            tax_amount=tax_amount,
            service_tax=service_tax,
            total=total,
            warnings=tuple(warnings),
            trace=tuple(trace),
        )

    def _add_room(self, lines, trace, warnings, plan: PlanDefinition, session: SessionInput, elapsed: int):
        room = plan.room
        if room is None:
            msg = f"Plan {session.plan.value} has no private room; room charges skipped"
            warnings.append(msg)
            trace.append(TraceStep("Room", msg))
            return

        lines.append(LineItem(
            code=LineCode.ROOM_BASE,
            label="Private room",
            unit_price=room.base_price,
            quantity=1,
            amount=room.base_price,
        ))
        trace.append(TraceStep("Room Base", f"Room covers {room.base_duration_minutes} min", f"¥{room.base_price:,}"))
        self._add_extension(
            lines, trace, LineCode.EXT_ROOM, "Room extension", elapsed,
            room.base_duration_minutes, room.extension_unit_minutes, room.extension_price,
        )

    @staticmethod
    def _add_extension(lines, trace, code: LineCode, label: str, elapsed: int,
                       base_duration: int, unit_minutes: int, price: int):
        blocks = extension_blocks(elapsed, base_duration, unit_minutes)
        if blocks == 0:
            trace.append(TraceStep(label, f"Within {base_duration} min allotment", "0 blocks"))
            return
        lines.append(LineItem(
            code=code,
            label=f"{label} ({unit_minutes} min)",
            unit_price=price,
            quantity=blocks,
            amount=blocks * price,
        ))
        trace.append(TraceStep(
            label,
            f"{elapsed - base_duration} min over, {unit_minutes} min blocks × ¥{price:,}",
            f"{blocks} block(s)",
        ))


def _per_unit(code: LineCode, label: str, unit_price: int, quantity: int) -> LineItem:
    return LineItem(code=code, label=label, unit_price=unit_price, quantity=quantity, amount=unit_price * quantity)


_default_engine: Optional[QuotationEngine] = None


def quote(session: SessionInput) -> Quote:
    """Price a session with the process-wide engine built from settings."""
    global _default_engine
    if _default_engine is None:
        _default_engine = QuotationEngine()
    return _default_engine.quote(session)
