"""
Centralized settings for the session pricing package.

Values come from environment variables with sensible defaults.
"""
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from ..engine.errors import ConfigurationError
from ..engine.models import PricingRates
from ..engine.plan_table import PlanTable, default_plan_table, load_plan_table

ENV_PREFIX = "SESSION_PRICING_"


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def _env_rate(name: str, default: str) -> Decimal:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == '':
        return Decimal(default)
    try:
        rate = Decimal(raw.strip())
    except InvalidOperation:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a decimal rate, got {raw!r}") from None
    if not rate.is_finite():
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a finite rate, got {raw!r}")
    return rate


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Optional CSV of plan overrides
    plans_csv: Optional[Path] = None

    # Plan-independent prices (yen)
    nomination_unit_price: int = 1000
    inhouse_unit_price: int = 1000
    house_fee: int = 2000
    single_charge: int = 2000

    # Service charge and consumption tax, both applied to the subtotal
    service_rate: Decimal = Decimal("0.10")
    tax_rate: Decimal = Decimal("0.10")

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment."""
        root = project_root or get_project_root()

        plans_csv = None
        raw_csv = os.environ.get(ENV_PREFIX + "PLANS_CSV")
        if raw_csv:
            plans_csv = Path(raw_csv)
            if not plans_csv.is_absolute():
                plans_csv = root / plans_csv

        return cls(
            project_root=root,
            plans_csv=plans_csv,
            nomination_unit_price=_env_int("NOMINATION_PRICE", 1000),
            inhouse_unit_price=_env_int("INHOUSE_PRICE", 1000),
            house_fee=_env_int("HOUSE_FEE", 2000),
            single_charge=_env_int("SINGLE_CHARGE", 2000),
            service_rate=_env_rate("SERVICE_RATE", "0.10"),
            tax_rate=_env_rate("TAX_RATE", "0.10"),
        )

    def rates(self) -> PricingRates:
        """Build the immutable rates the engine prices with."""
        return PricingRates(
            nomination_unit_price=self.nomination_unit_price,
            inhouse_unit_price=self.inhouse_unit_price,
            house_fee=self.house_fee,
            single_charge=self.single_charge,
            service_rate=self.service_rate,
            tax_rate=self.tax_rate,
        )

    def load_plan_table(self) -> PlanTable:
        """Standard plan table, with CSV overrides applied when configured."""
        if self.plans_csv is None:
            return default_plan_table()
        return load_plan_table(self.plans_csv)


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
