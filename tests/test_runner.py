from datetime import date

import pandas as pd
import pytest

from calc_catalog.config import Settings, load_settings
from calc_catalog.runner import (
    catalog_frame, evaluate_frame, lookup_or_default, resolve_slug, run_calculator,
)


def test_unknown_calculator(registry):
    out = run_calculator("nope", {}, registry=registry)
    assert out["ok"] is False
    assert out["error"] == "Unknown calculator 'nope'"
    assert len(out["available"]) == 46


def test_run_calculator(registry):
    out = run_calculator("bmi-calculator", {"height": 170, "weight": 70}, lang="en", registry=registry)
    assert out["ok"] is True
    assert out["calculator"] == "bmi-calculator"
    assert out["outputs"]["bmi"] == 24.2
    assert out["display"] == {"bmi": "24.2", "category": "Normal Weight"}
    assert out["advisories"] == []


def test_run_calculator_fills_defaults(registry):
    out = run_calculator("work days", {}, lang="zh-CN", registry=registry, today=date(2024, 1, 1))
    assert out["calculator"] == "work-days-calculator"
    assert out["inputs"] == {"start": "2024-01-01", "end": "2024-01-08"}
    assert out["display"] == {"workDays": "6"}


@pytest.mark.parametrize("name, slug", [
    ("bmi", "bmi-calculator"),
    ("  Loan ", "loan-calculator"),
    ("Unit Converter", "unit-converter"),
    ("data storage", "data-storage-converter"),
    ("VAT / Sales Tax", "vat-calculator"),
    ("复利计算器", "compound-interest-calculator"),
    ("", None),
    ("spaceship", None),
])
def test_resolve_slug(registry, name, slug):
    assert resolve_slug(name, registry) == slug


def test_lookup_or_default(registry):
    assert lookup_or_default(registry, "gpa-calculator").slug == "gpa-calculator"
    assert lookup_or_default(registry, "missing").slug == "bmi-calculator"
    assert lookup_or_default(registry, "missing", Settings(default_slug="tip-calculator")).slug == "tip-calculator"
    with pytest.raises(ValueError):
        lookup_or_default(registry, "missing", Settings(default_slug="also-missing"))


def test_evaluate_frame(registry):
    loan = registry.lookup("loan-calculator")
    frame = pd.DataFrame(
        {"principal": [100000, 12000, None], "rate": [5, 0, 5], "term": [30, 1, 30]},
        index=["a", "b", "c"],
    )
    out = evaluate_frame(loan, frame)
    assert list(out.columns) == ["monthlyPayment", "totalInterest", "totalPayment"]
    assert list(out.index) == ["a", "b", "c"]
    assert out.loc["a", "monthlyPayment"] == "536.82"
    assert out.loc["b", "monthlyPayment"] == "1000.00"
    assert out.loc["c", "monthlyPayment"] == "0"


def test_evaluate_frame_resolves_locale(registry):
    bmi = registry.lookup("bmi-calculator")
    frame = pd.DataFrame({"height": [170, 170], "weight": [70, 100]})
    out = evaluate_frame(bmi, frame, lang="zh-CN")
    assert out["category"].tolist() == ["正常体重", "肥胖"]


def test_catalog_frame(registry):
    frame = catalog_frame(registry, lang="zh-CN")
    assert len(frame) == 46
    assert list(frame.columns) == ["slug", "category", "title", "description", "path"]
    assert frame.iloc[0]["slug"] == "bmi-calculator"
    assert frame.iloc[0]["path"] == "/zh-CN/health/bmi-calculator"


def test_load_settings_defaults(monkeypatch, tmp_path):
    for var in ("CALC_CATALOG_LANG", "CALC_CATALOG_SITE_NAME", "CALC_CATALOG_DEFAULT_SLUG", "CALC_CATALOG_CONTENT_DIR"):
        monkeypatch.delenv(var, raising=False)
    settings = load_settings(tmp_path / "missing.env")
    assert settings == Settings()


def test_load_settings_from_dotenv(monkeypatch, tmp_path):
    for var in ("CALC_CATALOG_LANG", "CALC_CATALOG_SITE_NAME"):
        monkeypatch.delenv(var, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("CALC_CATALOG_LANG=zh-CN\nCALC_CATALOG_SITE_NAME=Calc\n", encoding="utf-8")
    settings = load_settings(env_file)
    assert settings.lang == "zh-CN"
    assert settings.site_name == "Calc"
    monkeypatch.delenv("CALC_CATALOG_LANG")
    monkeypatch.delenv("CALC_CATALOG_SITE_NAME")


def test_load_settings_rejects_unknown_language(monkeypatch, tmp_path):
    monkeypatch.setenv("CALC_CATALOG_LANG", "fr")
    with pytest.raises(ValueError, match="Unsupported language"):
        load_settings(tmp_path / "missing.env")


def test_run_calculator_uses_its_date_for_age(registry):
    out = run_calculator("age-calculator", {"dob": "2000-01-01"}, lang="en", registry=registry, today=date(2010, 1, 1))
    assert out["display"]["ageString"] == "10 years 0 months 0 days"
    assert out["outputs"]["totalDays"] == 3653
