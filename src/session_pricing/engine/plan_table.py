"""
Plan Table - the static pricing parameters for every seating plan.

The table is an immutable value handed to the engine. Overrides loaded
from CSV produce a new table; an existing table is never edited in place.
"""
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

import pandas as pd

from .errors import ConfigurationError
from .models import Plan, PlanDefinition, RoomTrack

logger = logging.getLogger(__name__)


DEFAULT_PLANS: Mapping[Plan, PlanDefinition] = MappingProxyType({
    Plan.BAR: PlanDefinition(
        label="BAR SET",
        base_price=3000,
        base_duration_minutes=90,
        extension_unit_minutes=30,
        extension_price=1000,
    ),
    Plan.COUNTER: PlanDefinition(
        label="COUNTER SET",
        base_price=8000,
        base_duration_minutes=60,
        extension_unit_minutes=10,
        extension_price=1000,
    ),
    Plan.VIP_A: PlanDefinition(
        label="VIP A SET",
        base_price=12000,
        base_duration_minutes=120,
        extension_unit_minutes=30,
        extension_price=10000,
        room=RoomTrack(
            base_price=10000,
            base_duration_minutes=120,
            extension_unit_minutes=30,
            extension_price=10000,
        ),
    ),
    Plan.VIP_B: PlanDefinition(
        label="VIP B SET",
        base_price=12000,
        base_duration_minutes=120,
        extension_unit_minutes=30,
        extension_price=10000,
        room=RoomTrack(
            base_price=20000,
            base_duration_minutes=120,
            extension_unit_minutes=30,
            extension_price=20000,
        ),
    ),
})

CSV_COLUMNS = [
    'plan', 'label', 'base_price', 'base_duration_minutes',
    'extension_unit_minutes', 'extension_price', 'room_base_price',
    'room_base_duration_minutes', 'room_extension_unit_minutes',
    'room_extension_price',
]
ROOM_COLUMNS = CSV_COLUMNS[6:]
REQUIRED_COLUMNS = CSV_COLUMNS[:1] + CSV_COLUMNS[2:6]


class PlanTable:
    """Read-only mapping of Plan → PlanDefinition."""

    def __init__(self, plans: Mapping[Plan, PlanDefinition]):
        entries = {}
        for plan, definition in plans.items():
            if not isinstance(definition, PlanDefinition):
                raise ConfigurationError(f"Plan table entry for {plan} is not a PlanDefinition")
            entries[Plan.parse(plan)] = definition
        self._plans = MappingProxyType(entries)

    def get(self, plan: Plan) -> PlanDefinition:
        """Look up a plan, failing loudly when the table has no entry for it."""
        try:
            return self._plans[plan]
        except KeyError:
            raise ConfigurationError(f"Plan table has no entry for {plan.value}") from None

    def __contains__(self, plan) -> bool:
        return plan in self._plans

    def __iter__(self) -> Iterator[Plan]:
        return iter(self._plans)

    def __len__(self) -> int:
        return len(self._plans)

    def items(self):
        return self._plans.items()

    def with_overrides(self, overrides: Mapping[Plan, PlanDefinition]) -> 'PlanTable':
        """Return a new table where the given entries replace existing ones."""
        merged = dict(self._plans)
        merged.update(overrides)
        return PlanTable(merged)

    def to_dict(self) -> dict:
        """Serialize for listing endpoints."""
        out = {}
        for plan, d in self._plans.items():
            out[plan.value] = {
                "label": d.label,
                "base_price": d.base_price,
                "base_duration_minutes": d.base_duration_minutes,
                "extension_unit_minutes": d.extension_unit_minutes,
                "extension_price": d.extension_price,
                "room": None if d.room is None else {
                    "base_price": d.room.base_price,
                    "base_duration_minutes": d.room.base_duration_minutes,
                    "extension_unit_minutes": d.room.extension_unit_minutes,
                    "extension_price": d.room.extension_price,
                },
            }
        return out


def default_plan_table() -> PlanTable:
    """Build the venue's standard plan table."""
    return PlanTable(DEFAULT_PLANS)


def _to_int(row: pd.Series, column: str) -> int:
    raw = row[column]
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"Column '{column}' for plan {row['plan']} is not an integer: {raw!r}"
        ) from None


def _row_to_definition(row: pd.Series) -> PlanDefinition:
    room_values = [row[c] for c in ROOM_COLUMNS]
    room = None
    if any(room_values):
        if not all(room_values):
            raise ConfigurationError(f"Plan {row['plan']} has an incomplete room track")
        room = RoomTrack(
            base_price=_to_int(row, 'room_base_price'),
            base_duration_minutes=_to_int(row, 'room_base_duration_minutes'),
            extension_unit_minutes=_to_int(row, 'room_extension_unit_minutes'),
            extension_price=_to_int(row, 'room_extension_price'),
        )
    return PlanDefinition(
        label=row['label'],
        base_price=_to_int(row, 'base_price'),
        base_duration_minutes=_to_int(row, 'base_duration_minutes'),
        extension_unit_minutes=_to_int(row, 'extension_unit_minutes'),
        extension_price=_to_int(row, 'extension_price'),
        room=room,
    )


def load_plan_table(csv_path: Path, base: Optional[PlanTable] = None) -> PlanTable:
    """
    Load plan overrides from CSV on top of a base table.

    Args:
        csv_path: CSV with one row per plan (room columns blank when the
            plan has no private room)
        base: Table to override; defaults to the standard table

    Returns:
        A new PlanTable
    """
    base = base or default_plan_table()
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise ConfigurationError(f"Plan table file not found: {csv_path}")

    try:
        df = pd.read_csv(csv_path, dtype=str).fillna('')
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise ConfigurationError(f"Plan table {csv_path.name} could not be parsed: {e}") from e
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ConfigurationError(f"Plan table {csv_path.name} is missing columns: {', '.join(missing)}")
    for col in CSV_COLUMNS:
        if col not in df.columns:
            df[col] = ''
        df[col] = df[col].astype(str).str.strip()

    overrides = {}
    for _, row in df.iterrows():
        try:
            plan = Plan(row['plan'].upper())
        except ValueError:
            raise ConfigurationError(f"Unknown plan '{row['plan']}' in {csv_path.name}") from None
        if plan in overrides:
            raise ConfigurationError(f"Plan {plan.value} appears twice in {csv_path.name}")
        overrides[plan] = _row_to_definition(row)

    logger.info("Loaded %d plan override(s) from %s", len(overrides), csv_path)
    return base.with_overrides(overrides)
