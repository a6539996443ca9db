"""
Locale resolution and display helpers for calculator pages.

Computed outputs stay unresolved until render time, so switching the
language re-renders existing results without evaluating again.
"""
import json
from typing import Any, Dict, List, Mapping, Optional, Tuple

from jinja2 import Environment, DictLoader

from .calc_utils import js_str
from .calculators.base import CalculatorDefinition, LocalizedText, OutputField
from .catalog import CalculatorRegistry
from .config import Settings

LABELS = {
    "related": LocalizedText.of("Related Calculators", "相关计算器"),
    "other": LocalizedText.of("Other Calculators", "其他计算器"),
    "search_results": LocalizedText.of('Search Results for "{term}"', '"{term}" 的搜索结果'),
    "no_results": LocalizedText.of("No calculators found matching your search.", "未找到匹配的计算器。"),
    "search_placeholder": LocalizedText.of("Search calculators...", "搜索计算器..."),
    "formula": LocalizedText.of("Formula Used", "计算公式"),
    "all_calculators": LocalizedText.of("All Calculators", "所有计算器"),
}

# schema.org applicationCategory per catalog category
APPLICATION_CATEGORIES = {
    "health": "HealthApplication",
    "finance": "FinanceApplication",
    "education": "EducationalApplication",
}
DEFAULT_APPLICATION_CATEGORY = "UtilitiesApplication"


def label(key: str, lang: str, **fields) -> str:
    text = LABELS[key][lang]
    return text.format(**fields) if fields else text


def resolve_value(value: Any, lang: str) -> Any:
    """LocalizedText -> the string for ``lang``; anything else unchanged."""
    if isinstance(value, LocalizedText):
        return value[lang]
    return value


def format_output(field: OutputField, value: Any, lang: str) -> str:
    value = resolve_value(value, lang)
    if value is None:
        return "-"
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return js_str(value)
    return str(value)


def emphasis(field: OutputField) -> str:
    if field.type == "category":
        return "category"
    if field.type == "text":
        return "text"
    return "score"


def display_outputs(definition: CalculatorDefinition, results: Mapping[str, Any], lang: str) -> Dict[str, str]:
    return {o.id: format_output(o, results.get(o.id), lang) for o in definition.outputs}


def related_section(
    registry: CalculatorRegistry,
    definition: CalculatorDefinition,
    lang: str,
    term: str = "",
) -> Tuple[str, List[CalculatorDefinition]]:
    """Heading and calculators listed under the calculator: search hits or related ones."""
    if term and term.strip():
        return label("search_results", lang, term=term), registry.search(term, definition.slug, lang)
    key = "related" if registry.siblings(definition) else "other"
    return label(key, lang), registry.related_to(definition)


def page_path(definition: CalculatorDefinition, lang: str) -> str:
    return f"/{lang}/{definition.category}/{definition.slug}"


def breadcrumbs(definition: CalculatorDefinition, lang: str) -> List[str]:
    return [label("all_calculators", lang), definition.category, definition.content.title[lang]]


def seo_metadata(definition: CalculatorDefinition, lang: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Document title, meta description and JSON-LD for a calculator page."""
    settings = settings or Settings()
    title = definition.content.title[lang]
    structured = {
        "@context": "https://schema.org",
        "@type": "SoftwareApplication",
        "name": title,
        "applicationCategory": APPLICATION_CATEGORIES.get(definition.category, DEFAULT_APPLICATION_CATEGORY),
        "operatingSystem": "Web",
    }
    return {
        "title": f"{title} | {settings.site_name}",
        "description": definition.content.description[lang],
        "structured_data": structured,
        "json_ld": json.dumps(structured, ensure_ascii=False),
    }


template_str = """
<section class="calculator-card" data-slug="{{ slug }}">
  <h2>{{ title }}</h2>
  <dl>
  {% for row in rows %}
    <dt>{{ row.label }}</dt>
    <dd class="{{ row.emphasis }}">{{ row.value }}{% if row.unit %} <span class="unit">{{ row.unit }}</span>{% endif %}</dd>
  {% endfor %}
  </dl>
  {% if formula %}
  <p class="formula"><strong>{{ formula_label }}</strong> {{ formula }}</p>
  {% endif %}
</section>
"""

env = Environment(loader=DictLoader({"result_card": template_str}), autoescape=True, trim_blocks=True, lstrip_blocks=True)
template = env.get_template("result_card")


def render_result_card(definition: CalculatorDefinition, results: Mapping[str, Any], lang: str) -> str:
    rows = [
        {
            "label": o.label[lang],
            "value": format_output(o, results.get(o.id), lang),
            "unit": o.unit,
            "emphasis": emphasis(o),
        }
        for o in definition.outputs
    ]
    formula = definition.content.formula
    return template.render(
        slug=definition.slug,
        title=definition.content.title[lang],
        rows=rows,
        formula=formula[lang] if formula else None,
        formula_label=label("formula", lang),
    ).strip()
