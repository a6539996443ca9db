from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

SUPPORTED_LANGS = ("en", "zh-CN")
INPUT_TYPES = ("number", "select", "date", "time")
OUTPUT_TYPES = ("score", "category", "currency", "text")


class LocalizedText(Mapping):
    """A string available in each supported locale, e.g. {"en": ..., "zh-CN": ...}.

    Compares equal to a plain dict with the same entries. Resolution is a
    plain lookup: a missing locale raises KeyError.
    """
    __slots__ = ("_values",)

    def __init__(self, values: Mapping):
        unknown = set(values) - set(SUPPORTED_LANGS)
        if unknown:
            raise ValueError(f"Unsupported locale(s): {', '.join(sorted(unknown))}")
        self._values = dict(values)

    @classmethod
    def of(cls, en: str, zh: str) -> "LocalizedText":
        return cls({"en": en, "zh-CN": zh})

    def __getitem__(self, lang: str) -> str:
        return self._values[lang]

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self):
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"LocalizedText({self._values!r})"

    def is_complete(self) -> bool:
        return all(self._values.get(lang) for lang in SUPPORTED_LANGS)

    def resolve(self, lang: str) -> str:
        return self._values[lang]


# A computed output slot: plain number, preformatted numeric string, plain
# string, or a LocalizedText resolved at render time.
OutputValue = Union[int, float, str, LocalizedText]


def _require_complete(text: LocalizedText, what: str):
    if not isinstance(text, LocalizedText) or not text.is_complete():
        raise ValueError(f"{what} must have an entry for each of {', '.join(SUPPORTED_LANGS)}")


@dataclass(frozen=True)
class Option:
    value: str
    label: LocalizedText


@dataclass(frozen=True)
class Validation:
    """Advisory bounds, reported to the user but never enforced."""
    min: Optional[float] = None
    max: Optional[float] = None
    required: bool = False


@dataclass(frozen=True)
class InputField:
    id: str
    type: str
    label: LocalizedText
    unit: Optional[str] = None
    default_value: Union[int, float, str, None] = None
    options: Tuple[Option, ...] = ()
    validation: Optional[Validation] = None
    placeholder: Optional[str] = None

    def __post_init__(self):
        if self.type not in INPUT_TYPES:
            raise ValueError(f"Input '{self.id}' has unknown type '{self.type}'")
        if (self.type == "select") != bool(self.options):
            raise ValueError(f"Input '{self.id}': options are required for select inputs and only for them")
        _require_complete(self.label, f"Label of input '{self.id}'")


@dataclass(frozen=True)
class OutputField:
    id: str
    label: LocalizedText
    type: str
    unit: Optional[str] = None

    def __post_init__(self):
        if self.type not in OUTPUT_TYPES:
            raise ValueError(f"Output '{self.id}' has unknown type '{self.type}'")
        _require_complete(self.label, f"Label of output '{self.id}'")


@dataclass(frozen=True)
class Content:
    title: LocalizedText
    description: LocalizedText
    article: LocalizedText
    formula: Optional[LocalizedText] = None

    def __post_init__(self):
        _require_complete(self.title, "Title")
        _require_complete(self.description, "Description")
        _require_complete(self.article, "Article")


class Calculator(Protocol):
    slug: str
    def normalize(self, values: Dict[str, Any]) -> Dict[str, Any]: ...
    def compute(self, x: Dict[str, Any]) -> Dict[str, OutputValue]: ...


def evaluate(calc: Calculator, values: Dict[str, Any]) -> Dict[str, OutputValue]:
    return calc.compute(calc.normalize(values or {}))


@dataclass(frozen=True)
class CalculatorDefinition:
    slug: str
    category: str
    icon: str
    content: Content
    inputs: Tuple[InputField, ...]
    outputs: Tuple[OutputField, ...]
    calculator: Calculator = field(compare=False, repr=False)

    def __post_init__(self):
        for kind, fields in (("input", self.inputs), ("output", self.outputs)):
            ids = [f.id for f in fields]
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            if dupes:
                raise ValueError(f"{self.slug}: duplicate {kind} id(s) {', '.join(dupes)}")

    @property
    def output_ids(self) -> List[str]:
        return [o.id for o in self.outputs]

    def input(self, input_id: str) -> Optional[InputField]:
        return next((i for i in self.inputs if i.id == input_id), None)

    def evaluate(self, values: Dict[str, Any]) -> Dict[str, OutputValue]:
        return evaluate(self.calculator, values)


@dataclass
class CalcResult:
    slug: str
    inputs: Dict[str, Any]
    outputs: Dict[str, OutputValue]
    advisories: List[str]
