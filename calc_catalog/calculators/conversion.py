from dataclasses import dataclass
from typing import Any, Callable, Dict

from .base import LocalizedText
from ..calc_utils import to_number, number_or, to_fixed, fixed_number, js_str, to_exponential, safe_pow

INCOMPATIBLE_UNITS = LocalizedText.of("Incompatible Units", "单位不兼容")


@dataclass(frozen=True)
class Unit:
    group: str
    to_base: Callable[[float], float]
    from_base: Callable[[float], float]
    symbol: str


def scaled(group: str, factor: float, symbol: str) -> Unit:
    """A unit that is ``factor`` base units."""
    return Unit(group, lambda n: n * factor, lambda n: n / factor, symbol)


def per_base(group: str, rate: float, symbol: str) -> Unit:
    """A unit that takes ``rate`` of itself to make one base unit."""
    return Unit(group, lambda n: n / rate, lambda n: n * rate, symbol)


class UnitConverter:
    """Convert ``value`` from ``fromUnit`` into ``toUnit`` through a base unit.

    Subclasses provide the ``units`` table and ``format``. Unknown units and
    units from different groups yield the incompatible-units sentinel.
    """
    slug: str
    units: Dict[str, Unit] = {}
    # value used when the input is not a number; None means report "-"
    fallback_value = None

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        if self.fallback_value is None:
            value = to_number(e.get("value"))
        else:
            value = number_or(e.get("value"), self.fallback_value)
        return {"value": value, "fromUnit": e.get("fromUnit"), "toUnit": e.get("toUnit")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        if x["value"] is None:
            return {"result": "-"}
        src, dst = self.units.get(x["fromUnit"]), self.units.get(x["toUnit"])
        if src is None or dst is None or src.group != dst.group:
            return {"result": INCOMPATIBLE_UNITS}
        return {"result": self.format(dst.from_base(src.to_base(x["value"])), x["toUnit"], dst)}

    def format(self, result: float, unit_key: str, unit: Unit) -> str:
        raise NotImplementedError


def adaptive_precision(result: float) -> int:
    """More digits for tiny magnitudes, fewer for large ones, none for whole numbers."""
    if float(result).is_integer():
        return 0
    if abs(result) < 1e-6:
        return 8
    if abs(result) >= 1000:
        return 2
    return 4


class GeneralUnits(UnitConverter):
    """Length (base m), weight (base kg) and temperature (base °C)."""
    slug = "unit-converter"
    units = {
        "m": scaled("length", 1, "m"),
        "km": scaled("length", 1000, "km"),
        "cm": per_base("length", 100, "cm"),
        "mm": per_base("length", 1000, "mm"),
        "ft": scaled("length", 0.3048, "ft"),
        "in": scaled("length", 0.0254, "in"),
        "kg": scaled("weight", 1, "kg"),
        "g": per_base("weight", 1000, "g"),
        "lb": scaled("weight", 0.453592, "lb"),
        "oz": scaled("weight", 0.0283495, "oz"),
        "c": Unit("temperature", lambda n: n, lambda n: n, "°C"),
        "f": Unit("temperature", lambda n: (n - 32) * 5 / 9, lambda n: n * 9 / 5 + 32, "°F"),
    }

    def format(self, result, unit_key, unit):
        return f"{js_str(fixed_number(result, adaptive_precision(result)))} {unit.symbol}"


class Area(UnitConverter):
    slug = "area-converter"
    fallback_value = 0.0
    units = {
        "m2": scaled("area", 1, "m2"),
        "ft2": scaled("area", 0.092903, "ft2"),
        "ac": scaled("area", 4046.86, "ac"),
        "ha": scaled("area", 10000, "ha"),
    }

    def format(self, result, unit_key, unit):
        return f"{to_fixed(result, 4)} {unit_key}"


class Pressure(UnitConverter):
    slug = "pressure-converter"
    fallback_value = 0.0
    units = {
        "pa": scaled("pressure", 1, "pa"),
        "bar": scaled("pressure", 100000, "bar"),
        "psi": scaled("pressure", 6894.76, "psi"),
        "atm": scaled("pressure", 101325, "atm"),
    }

    def format(self, result, unit_key, unit):
        return f"{to_fixed(result, 4)} {unit_key}"


class Volume(UnitConverter):
    slug = "volume-converter"
    units = {
        "l": scaled("volume", 1, "L"),
        "ml": scaled("volume", 0.001, "ML"),
        "gal": scaled("volume", 3.78541, "GAL"),
        "cup": scaled("volume", 0.236588, "CUP"),
        "floz": scaled("volume", 0.0295735, "FLOZ"),
    }

    def format(self, result, unit_key, unit):
        return f"{js_str(fixed_number(result, 4))} {unit.symbol}"


class Speed(UnitConverter):
    """Base unit m/s."""
    slug = "speed-converter"
    units = {
        "ms": scaled("speed", 1, "m/s"),
        "kmh": per_base("speed", 3.6, "km/h"),
        "mph": per_base("speed", 2.23694, "mph"),
        "kn": per_base("speed", 1.94384, "kn"),
    }

    def format(self, result, unit_key, unit):
        return f"{js_str(fixed_number(result, 2))} {unit.symbol}"


def storage_unit(power: int, symbol: str) -> Unit:
    return Unit("storage", lambda n: n * safe_pow(1024, power), lambda n: n / safe_pow(1024, power), symbol)


class DataStorage(UnitConverter):
    """Binary prefixes: 1 KB = 1024 B."""
    slug = "data-storage-converter"
    units = {
        "b": storage_unit(0, "B"),
        "kb": storage_unit(1, "KB"),
        "mb": storage_unit(2, "MB"),
        "gb": storage_unit(3, "GB"),
        "tb": storage_unit(4, "TB"),
    }

    def format(self, result, unit_key, unit):
        if abs(result) < 0.01:
            text = to_exponential(result, 2)
        elif not float(result).is_integer():
            text = to_fixed(result, 2)
        else:
            text = js_str(result)
        if text.endswith(".00"):
            text = text[:-3]
        return f"{text} {unit.symbol}"
