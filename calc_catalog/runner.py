from datetime import date
from functools import lru_cache
from typing import Any, Dict, Optional, Union

import pandas as pd

from .catalog import CalculatorRegistry, build_registry
from .calculators.base import CalculatorDefinition
from .config import Settings, load_settings
from .engine import CalculatorSession
from .presentation import display_outputs, page_path

SLUG_SUFFIXES = ("", "-calculator", "-converter")


@lru_cache(maxsize=None)
def default_registry() -> CalculatorRegistry:
    """Registry built once from the configured content folder."""
    return build_registry(load_settings().content_dir)


def resolve_slug(name: str, registry: CalculatorRegistry) -> Union[str, None]:
    """
    Map a loose name ("bmi", "Unit Converter", "loan-calculator") to a registered slug.
    """
    n = (name or "").strip().lower()
    if not n:
        return None
    candidate = "-".join(n.split())
    for suffix in SLUG_SUFFIXES:
        if candidate + suffix in registry:
            return candidate + suffix
    for d in registry:
        if any(n == title.lower() for title in d.content.title.values()):
            return d.slug
    return None


def lookup_or_default(registry: CalculatorRegistry, slug: str, settings: Optional[Settings] = None) -> CalculatorDefinition:
    """The calculator for ``slug``, falling back to the configured default one."""
    settings = settings or Settings()
    definition = registry.lookup(slug)
    if definition is None:
        definition = registry.lookup(settings.default_slug)
    if definition is None:
        raise ValueError(f"Default calculator '{settings.default_slug}' is not registered")
    return definition


def run_calculator(
    name: str,
    values: Optional[Dict[str, Any]] = None,
    lang: Optional[str] = None,
    registry: Optional[CalculatorRegistry] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Evaluate one calculator over ``values`` (unset inputs take their defaults)
    """
    if registry is None:
        registry = default_registry()
    lang = lang or load_settings().lang
    slug = resolve_slug(name, registry)
    if not slug:
        return {"ok": False, "error": f"Unknown calculator '{name}'", "available": registry.slugs}

    definition = registry.lookup(slug)
    session = CalculatorSession(definition, values, today=today)
    result = session.result()
    return {
        "ok": True,
        "calculator": slug,
        "inputs": result.inputs,
        "outputs": result.outputs,
        "display": display_outputs(definition, result.outputs, lang),
        "advisories": result.advisories,
    }


def evaluate_frame(definition: CalculatorDefinition, frame: pd.DataFrame, lang: str = "en") -> pd.DataFrame:
    """Evaluate every row of ``frame`` (one column per input id) into display strings."""
    rows = []
    for _, row in frame.iterrows():
        outputs = definition.evaluate(row.to_dict())
        rows.append(display_outputs(definition, outputs, lang))
    return pd.DataFrame(rows, index=frame.index, columns=definition.output_ids)


def catalog_frame(registry: CalculatorRegistry, lang: str = "en") -> pd.DataFrame:
    """One row per calculator in registration order."""
    return pd.DataFrame(
        [
            {
                "slug": d.slug,
                "category": d.category,
                "title": d.content.title[lang],
                "description": d.content.description[lang],
                "path": page_path(d, lang),
            }
            for d in registry
        ],
        columns=["slug", "category", "title", "description", "path"],
    )
