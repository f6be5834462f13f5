from decimal import Decimal

import pytest

from session_pricing.config.settings import Settings
from session_pricing.engine import ConfigurationError, Plan, QuotationEngine


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PLANS_CSV", "NOMINATION_PRICE", "INHOUSE_PRICE", "HOUSE_FEE",
                 "SINGLE_CHARGE", "SERVICE_RATE", "TAX_RATE"):
        monkeypatch.delenv(f"SESSION_PRICING_{name}", raising=False)


def test_defaults(tmp_path):
    settings = Settings.load(project_root=tmp_path)
    rates = settings.rates()
    assert settings.plans_csv is None
    assert rates.nomination_unit_price == 1000
    assert rates.house_fee == 2000
    assert rates.service_tax_rate == Decimal("0.20")


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("SESSION_PRICING_HOUSE_FEE", "2500")
    monkeypatch.setenv("SESSION_PRICING_TAX_RATE", "0.08")
    rates = Settings.load(project_root=tmp_path).rates()
    assert rates.house_fee == 2500
    assert rates.service_tax_rate == Decimal("0.18")


@pytest.mark.parametrize("name,value", [
    ("HOUSE_FEE", "two thousand"),
    ("SERVICE_RATE", "ten percent"),
    ("SERVICE_RATE", "NaN"),
    ("TAX_RATE", "Infinity"),
])
def test_malformed_environment(tmp_path, monkeypatch, name, value):
    monkeypatch.setenv(f"SESSION_PRICING_{name}", value)
    with pytest.raises(ConfigurationError):
        Settings.load(project_root=tmp_path)


def test_engine_built_from_settings_uses_plan_csv(tmp_path, monkeypatch):
    (tmp_path / "plans.csv").write_text(
        "plan,base_price,base_duration_minutes,extension_unit_minutes,extension_price\n"
        "BAR,2800,90,30,900\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SESSION_PRICING_PLANS_CSV", "plans.csv")

    engine = QuotationEngine(settings=Settings.load(project_root=tmp_path))

    assert engine.plans.get(Plan.BAR).base_price == 2800
    assert engine.plans.get(Plan.COUNTER).base_price == 8000
