import json
import logging
from collections import OrderedDict
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import regex as re

from .calculators.base import (
    CalculatorDefinition, Content, InputField, LocalizedText, Option, OutputField, Validation,
)
from .calculators.health import BMI, IdealWeight, BodyFat, Calorie, WaterIntake, Pregnancy
from .calculators.arithmetic import Percentage, Fraction, GcdLcm, ScientificNotation, Pythagorean, Binary
from .calculators.finance import (
    SimpleInterest, CompoundInterest, ROI, Margin, Loan, Mortgage, VAT, Tip, Discount, Salary,
)
from .calculators.dates import DateDifference, TimeDuration, TimeAdder, WorkDays, DecimalHours, Age
from .calculators.conversion import GeneralUnits, Volume, Speed, DataStorage, Area, Pressure
from .calculators.education import FinalGrade, TestGrade, GPA, WeightedGrade, ReadingTime, Attendance
from .calculators.life import DogAge, CatAge, Pizza, FuelCost, ElectricityCost, ShoeSize
from .calc_utils import shift_days

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).resolve().parent / "content"

TODAY_TOKEN = re.compile(r"@today(?:([+-]\d+))?")

# Registration order: listings, grouping and search results follow it.
CALCULATORS = (
    BMI, IdealWeight, BodyFat, Calorie, WaterIntake, Pregnancy,
    Percentage, Fraction, GcdLcm, ScientificNotation, Pythagorean, Binary,
    SimpleInterest, CompoundInterest, ROI, Margin,
    DateDifference, TimeDuration, TimeAdder, WorkDays, DecimalHours, Age,
    GeneralUnits, Volume, Speed, DataStorage, Area, Pressure,
    FinalGrade, TestGrade, GPA, WeightedGrade, ReadingTime, Attendance,
    Loan, Mortgage, VAT, Tip, Discount, Salary,
    DogAge, CatAge, Pizza, FuelCost, ElectricityCost, ShoeSize,
)


def resolve_default(value: Any, today: date) -> Any:
    """Expand "@today" / "@today+N" date defaults into ISO dates."""
    if not isinstance(value, str):
        return value
    m = TODAY_TOKEN.fullmatch(value)
    if not m:
        return value
    shifted = shift_days(today, int(m.group(1) or 0))
    return shifted.isoformat() if shifted else ""


def _text(raw: Any, where: str) -> LocalizedText:
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: expected a localized mapping, got {type(raw).__name__}")
    return LocalizedText(raw)


def _input(raw: Dict[str, Any], siblings: Dict[str, Dict[str, Any]], slug: str) -> InputField:
    where = f"{slug}.inputs.{raw.get('id')}"
    options_raw = raw.get("options")
    if "options_from" in raw:
        source = siblings.get(raw["options_from"])
        if source is None or "options" not in source:
            raise ValueError(f"{where}: options_from '{raw['options_from']}' names no select input")
        options_raw = source["options"]

    validation = raw.get("validation")
    return InputField(
        id=raw["id"],
        type=raw["type"],
        label=_text(raw["label"], f"{where}.label"),
        unit=raw.get("unit"),
        default_value=raw.get("defaultValue"),
        options=tuple(
            Option(value=o["value"], label=_text(o["label"], f"{where}.options"))
            for o in options_raw or ()
        ),
        validation=Validation(**validation) if validation else None,
        placeholder=raw.get("placeholder"),
    )


def parse_definition(slug: str, raw: Dict[str, Any], calculator) -> CalculatorDefinition:
    """Build one definition from its catalog entry and formula instance."""
    content = raw["content"]
    formula = content.get("formula")
    inputs_raw = raw.get("inputs", [])
    siblings = {i.get("id"): i for i in inputs_raw}
    return CalculatorDefinition(
        slug=slug,
        category=raw["category"],
        icon=raw.get("icon", ""),
        content=Content(
            title=_text(content["title"], f"{slug}.title"),
            description=_text(content["description"], f"{slug}.description"),
            article=_text(content["article"], f"{slug}.article"),
            formula=_text(formula, f"{slug}.formula") if formula else None,
        ),
        inputs=tuple(_input(i, siblings, slug) for i in inputs_raw),
        outputs=tuple(
            OutputField(
                id=o["id"],
                label=_text(o["label"], f"{slug}.outputs.{o['id']}.label"),
                type=o["type"],
                unit=o.get("unit"),
            )
            for o in raw.get("outputs", [])
        ),
        calculator=calculator,
    )


def load_content(content_dir: Union[str, Path, None] = None) -> Dict[str, Dict[str, Any]]:
    """Read every ``*.json`` catalog file, keyed by slug."""
    folder = Path(content_dir) if content_dir else CONTENT_DIR
    files = sorted(folder.glob("*.json"))
    if not files:
        raise ValueError(f"No catalog files found in {folder}")

    entries: Dict[str, Dict[str, Any]] = {}
    for path in files:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded %d catalog entries from %s", len(data), path.name)
        for slug, entry in data.items():
            if slug in entries:
                raise ValueError(f"Catalog entry '{slug}' is defined more than once ({path.name})")
            entries[slug] = entry
    return entries


class CalculatorRegistry:
    """Read-only, ordered collection of calculator definitions."""

    def __init__(self, definitions: Iterable[CalculatorDefinition]):
        self._definitions = tuple(definitions)
        index: Dict[str, CalculatorDefinition] = {}
        for d in self._definitions:
            if d.slug in index:
                raise ValueError(f"Duplicate calculator slug '{d.slug}'")
            index[d.slug] = d
        self._index = index

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions)

    def __contains__(self, slug) -> bool:
        return slug in self._index

    @property
    def slugs(self) -> List[str]:
        return [d.slug for d in self._definitions]

    def lookup(self, slug: str) -> Optional[CalculatorDefinition]:
        """The definition for ``slug``, or None when there is none."""
        return self._index.get(slug)

    def list_all(self) -> List[CalculatorDefinition]:
        return list(self._definitions)

    def group_by_category(self) -> "OrderedDict[str, List[CalculatorDefinition]]":
        groups: "OrderedDict[str, List[CalculatorDefinition]]" = OrderedDict()
        for d in self._definitions:
            groups.setdefault(d.category, []).append(d)
        return groups

    def siblings(self, definition: CalculatorDefinition) -> List[CalculatorDefinition]:
        return [d for d in self._definitions if d.category == definition.category and d.slug != definition.slug]

    def related_to(self, definition: CalculatorDefinition, limit: Optional[int] = None) -> List[CalculatorDefinition]:
        """Same-category calculators; every other calculator when the category has no siblings."""
        related = self.siblings(definition)
        if not related:
            related = [d for d in self._definitions if d.slug != definition.slug]
        return related[:limit] if limit is not None else related

    def search(self, term: str, exclude_slug: Optional[str] = None, lang: str = "en") -> List[CalculatorDefinition]:
        """Case-insensitive substring match on the localized title or the category key."""
        if not (term or "").strip():
            return []
        needle = term.lower()
        return [
            d for d in self._definitions
            if d.slug != exclude_slug
            and (needle in d.content.title[lang].lower() or needle in d.category.lower())
        ]


def build_registry(content_dir: Union[str, Path, None] = None) -> CalculatorRegistry:
    """Pair every calculator class with its catalog entry, in registration order."""
    entries = load_content(content_dir)

    definitions = []
    for cls in CALCULATORS:
        raw = entries.pop(cls.slug, None)
        if raw is None:
            raise ValueError(f"Calculator '{cls.slug}' has no catalog entry")
        definitions.append(parse_definition(cls.slug, raw, cls()))
    if entries:
        raise ValueError(f"Catalog entries without a calculator: {', '.join(sorted(entries))}")

    registry = CalculatorRegistry(definitions)
    logger.info("Built calculator registry with %d calculators", len(registry))
    return registry
