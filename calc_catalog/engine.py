import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from .catalog import resolve_default
from .calc_utils import to_number
from .calculators.base import CalcResult, CalculatorDefinition, OutputValue

logger = logging.getLogger(__name__)


class CalculatorSession:
    """
    Holds the current input values of one calculator and re-evaluates it on every change.

    Inputs are passed to the formula as-is; each formula does its own coercion.
    If a formula raises anyway, the error is logged and the previous results are kept.
    """

    def __init__(
        self,
        definition: CalculatorDefinition,
        values: Optional[Mapping[str, Any]] = None,
        today: Optional[date] = None,
    ):
        self.definition = definition
        self.today = today or date.today()
        self._values: Dict[str, Any] = self.defaults()
        if values:
            self._values.update(values)
        self._results: Dict[str, OutputValue] = {}
        self._evaluate()

    def defaults(self) -> Dict[str, Any]:
        """Initial value per input: its default (date tokens resolved) or ''."""
        defaults = {}
        for field in self.definition.inputs:
            value = resolve_default(field.default_value, self.today)
            defaults[field.id] = value if value is not None else ""
        return defaults

    @property
    def values(self) -> Dict[str, Any]:
        return dict(self._values)

    @property
    def results(self) -> Dict[str, OutputValue]:
        return dict(self._results)

    def update(self, input_id: str, value: Any) -> Dict[str, OutputValue]:
        self._values[input_id] = value
        self._evaluate()
        return self.results

    def update_many(self, values: Mapping[str, Any]) -> Dict[str, OutputValue]:
        self._values.update(values)
        self._evaluate()
        return self.results

    def reset(self) -> Dict[str, OutputValue]:
        self._values = self.defaults()
        self._evaluate()
        return self.results

    def validate(self) -> List[str]:
        """Input ids outside their advisory bounds, or empty while required.

        Purely informational: evaluation never depends on it.
        """
        flagged = []
        for field in self.definition.inputs:
            rule = field.validation
            if rule is None:
                continue
            raw = self._values.get(field.id)
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                if rule.required:
                    flagged.append(field.id)
                continue
            num = to_number(raw)
            if num is None:
                continue
            if (rule.min is not None and num < rule.min) or (rule.max is not None and num > rule.max):
                flagged.append(field.id)
        return flagged

    def result(self) -> CalcResult:
        return CalcResult(
            slug=self.definition.slug,
            inputs=self.values,
            outputs=self.results,
            advisories=self.validate(),
        )

    def _evaluate(self):
        # formulas measured against "today" use the session date unless asOf is given
        values = {"asOf": self.today.isoformat(), **self._values}
        try:
            self._results = self.definition.evaluate(values)
        except Exception:
            logger.exception("Calculation error in %s", self.definition.slug)
