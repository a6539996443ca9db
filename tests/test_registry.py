import json
import shutil

import pytest

from calc_catalog.catalog import (
    CALCULATORS, CONTENT_DIR, CalculatorRegistry, build_registry, resolve_default,
)
from calc_catalog.calculators.base import CalculatorDefinition, LocalizedText

CATEGORY_ORDER = ["health", "math", "finance", "date-time", "conversion", "education", "life"]


def test_registry_holds_every_calculator_once(registry):
    slugs = [d.slug for d in registry.list_all()]
    assert len(slugs) == 46
    assert len(set(slugs)) == len(slugs)
    assert slugs == [cls.slug for cls in CALCULATORS]
    assert slugs[0] == "bmi-calculator"
    assert slugs[-1] == "shoe-size-converter"


def test_lookup(registry):
    for definition in registry.list_all():
        assert registry.lookup(definition.slug) is definition
    assert registry.lookup("nonexistent-slug") is None


def test_group_by_category_keeps_first_seen_order(registry):
    groups = registry.group_by_category()
    assert list(groups) == CATEGORY_ORDER
    finance = [d.slug for d in groups["finance"]]
    assert finance[:4] == ["simple-interest-calculator", "compound-interest-calculator", "roi-calculator", "margin-calculator"]
    assert finance[4] == "loan-calculator"
    assert sum(len(v) for v in groups.values()) == len(registry)


def test_related_to_same_category(registry):
    bmi = registry.lookup("bmi-calculator")
    related = registry.related_to(bmi)
    assert [d.category for d in related] == ["health"] * 5
    assert bmi not in related
    assert len(registry.related_to(bmi, limit=2)) == 2


def test_related_falls_back_to_all_others(registry):
    bmi, pct, frac = (registry.lookup(s) for s in ("bmi-calculator", "percentage-calculator", "fraction-calculator"))
    small = CalculatorRegistry([bmi, pct, frac])
    assert small.related_to(bmi) == [pct, frac]
    assert small.related_to(pct) == [frac]


def test_search_title_and_category(registry):
    assert [d.slug for d in registry.search("LOAN")] == ["loan-calculator"]
    health = registry.search("health", exclude_slug="bmi-calculator")
    assert len(health) == 5
    assert all(d.slug != "bmi-calculator" for d in health)
    zh = [d.slug for d in registry.search("贷款", lang="zh-CN")]
    assert zh == ["loan-calculator", "mortgage-calculator"]
    assert registry.search("   ") == []
    assert registry.search("zzz-nothing") == []


def test_duplicate_slug_rejected(registry):
    bmi = registry.lookup("bmi-calculator")
    with pytest.raises(ValueError, match="Duplicate"):
        CalculatorRegistry([bmi, bmi])


def test_definitions_carry_localized_content(registry):
    for d in registry:
        assert isinstance(d, CalculatorDefinition)
        for text in (d.content.title, d.content.description, d.content.article):
            assert text.is_complete()
        for field in d.inputs:
            if field.type == "select":
                assert field.options


def test_options_are_shared_between_unit_selects(registry):
    converter = registry.lookup("unit-converter")
    assert converter.input("toUnit").options == converter.input("fromUnit").options
    assert converter.input("toUnit").options[0].label["en"] == "Meters (m)"


def test_resolve_default():
    from datetime import date
    today = date(2024, 1, 31)
    assert resolve_default("@today", today) == "2024-01-31"
    assert resolve_default("@today+30", today) == "2024-03-01"
    assert resolve_default("09:00", today) == "09:00"
    assert resolve_default(5, today) == 5


@pytest.fixture
def content_copy(tmp_path):
    """Writable copy of the packaged catalog files."""
    target = tmp_path / "content"
    shutil.copytree(CONTENT_DIR, target)
    return target


def _edit(path, change):
    data = json.loads(path.read_text(encoding="utf-8"))
    change(data)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


def test_build_registry_from_copy(content_copy):
    assert len(build_registry(content_copy)) == 46


def test_missing_catalog_entry(content_copy):
    _edit(content_copy / "health.json", lambda d: d.pop("bmi-calculator"))
    with pytest.raises(ValueError, match="bmi-calculator"):
        build_registry(content_copy)


def test_catalog_entry_without_calculator(content_copy):
    def add(d):
        d["mystery-calculator"] = d["bmi-calculator"]
    _edit(content_copy / "health.json", add)
    with pytest.raises(ValueError, match="mystery-calculator"):
        build_registry(content_copy)


def test_select_without_options(content_copy):
    def strip(d):
        d["ideal-weight-calculator"]["inputs"][0].pop("options")
    _edit(content_copy / "health.json", strip)
    with pytest.raises(ValueError, match="options"):
        build_registry(content_copy)


def test_missing_locale(content_copy):
    def drop(d):
        d["bmi-calculator"]["content"]["title"].pop("zh-CN")
    _edit(content_copy / "health.json", drop)
    with pytest.raises(ValueError, match="Title"):
        build_registry(content_copy)


def test_empty_content_dir(tmp_path):
    with pytest.raises(ValueError, match="No catalog files"):
        build_registry(tmp_path)


def test_localized_text():
    text = LocalizedText.of("Hello", "你好")
    assert text == {"en": "Hello", "zh-CN": "你好"}
    assert text.resolve("zh-CN") == "你好"
    with pytest.raises(KeyError):
        text.resolve("fr")
    with pytest.raises(ValueError):
        LocalizedText({"fr": "Bonjour"})
