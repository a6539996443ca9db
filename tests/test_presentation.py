import json

from calc_catalog.calculators.base import LocalizedText
from calc_catalog.config import Settings
from calc_catalog.engine import CalculatorSession
from calc_catalog.presentation import (
    breadcrumbs, display_outputs, emphasis, format_output, label, page_path,
    related_section, render_result_card, resolve_value, seo_metadata,
)


def test_resolve_value_only_touches_localized_text():
    text = LocalizedText.of("Normal Weight", "正常体重")
    assert resolve_value(text, "zh-CN") == "正常体重"
    assert resolve_value("536.82", "zh-CN") == "536.82"
    assert resolve_value(24.2, "en") == 24.2


def test_format_output(registry):
    bmi = registry.lookup("bmi-calculator")
    value_field, category_field = bmi.outputs
    assert format_output(value_field, None, "en") == "-"
    assert format_output(value_field, 24.2, "en") == "24.2"
    assert format_output(value_field, 12.0, "en") == "12"
    assert format_output(category_field, LocalizedText.of("Obese", "肥胖"), "zh-CN") == "肥胖"
    assert emphasis(category_field) == "category"
    assert emphasis(value_field) == "score"


def test_language_switch_needs_no_re_evaluation(registry):
    definition = registry.lookup("bmi-calculator")
    results = CalculatorSession(definition).results
    assert display_outputs(definition, results, "en") == {"bmi": "24.2", "category": "Normal Weight"}
    assert display_outputs(definition, results, "zh-CN") == {"bmi": "24.2", "category": "正常体重"}


def test_related_section_headings(registry):
    bmi = registry.lookup("bmi-calculator")
    title, items = related_section(registry, bmi, "en")
    assert title == "Related Calculators"
    assert len(items) == 5

    title, items = related_section(registry, bmi, "zh-CN", term="贷款")
    assert title == '"贷款" 的搜索结果'
    assert [d.slug for d in items] == ["loan-calculator", "mortgage-calculator"]

    title, items = related_section(registry, bmi, "en", term="zzz")
    assert title == 'Search Results for "zzz"'
    assert items == []
    assert label("no_results", "en") == "No calculators found matching your search."


def test_page_path_and_breadcrumbs(registry):
    loan = registry.lookup("loan-calculator")
    assert page_path(loan, "zh-CN") == "/zh-CN/finance/loan-calculator"
    assert breadcrumbs(loan, "en") == ["All Calculators", "finance", "Loan Calculator"]


def test_seo_metadata(registry):
    meta = seo_metadata(registry.lookup("bmi-calculator"), "en")
    assert meta["title"] == "BMI Calculator | CalcFlow"
    assert meta["description"] == registry.lookup("bmi-calculator").content.description["en"]
    assert meta["structured_data"]["@type"] == "SoftwareApplication"
    assert json.loads(meta["json_ld"])["name"] == "BMI Calculator"

    zh = seo_metadata(registry.lookup("loan-calculator"), "zh-CN", Settings(site_name="算算"))
    assert zh["title"] == "贷款计算器 | 算算"


def test_render_result_card(registry):
    definition = registry.lookup("loan-calculator")
    results = CalculatorSession(definition).results
    html = render_result_card(definition, results, "en")
    assert 'data-slug="loan-calculator"' in html
    assert "Loan Calculator" in html
    assert "536.82" in html
    assert "Formula Used" in html

    html_zh = render_result_card(definition, results, "zh-CN")
    assert "贷款计算器" in html_zh
    assert "计算公式" in html_zh


def test_result_card_without_formula(registry):
    from dataclasses import replace
    definition = registry.lookup("bmi-calculator")
    bare = replace(definition, content=replace(definition.content, formula=None))
    html = render_result_card(bare, {"bmi": 24.2}, "en")
    assert "Formula Used" not in html
    assert "24.2" in html


def test_seo_application_category_follows_catalog_category(registry):
    def category_of(slug):
        return seo_metadata(registry.lookup(slug), "en")["structured_data"]["applicationCategory"]

    assert category_of("bmi-calculator") == "HealthApplication"
    assert category_of("loan-calculator") == "FinanceApplication"
    assert category_of("gpa-calculator") == "EducationalApplication"
    assert category_of("unit-converter") == "UtilitiesApplication"
