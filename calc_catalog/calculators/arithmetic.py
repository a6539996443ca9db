import math
from decimal import Decimal
from typing import Any, Dict

from ..calc_utils import to_number, number_or, to_fixed, fixed_number, js_round, js_str

MIN_NORMAL_EXPONENT = -307


def _gcd(a, b):
    # Euclid with a truncated remainder, so it also accepts non-integral values
    while b:
        a, b = b, math.fmod(a, b)
    return a


class Percentage:
    slug = "percentage-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("amount", "percentage")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        return {"result": fixed_number(x["amount"] * x["percentage"] / 100, 2)}


class Fraction:
    slug = "fraction-calculator"
    operations = ("add", "sub", "mul", "div")

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        x = {k: to_number(e.get(k)) for k in ("num1", "den1", "num2", "den2")}
        x["op"] = e.get("op")
        return x

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        n1, d1, n2, d2 = x["num1"], x["den1"], x["num2"], x["den2"]
        if None in (n1, d1, n2, d2):
            return {"resultFraction": "-", "decimal": "-"}
        if d1 == 0 or d2 == 0:
            return {"resultFraction": "Error", "decimal": "NaN"}

        op = x["op"]
        if op == "add":
            num, den = n1 * d2 + n2 * d1, d1 * d2
        elif op == "sub":
            num, den = n1 * d2 - n2 * d1, d1 * d2
        elif op == "mul":
            num, den = n1 * n2, d1 * d2
        else:
            if n2 == 0:
                return {"resultFraction": "Div by 0", "decimal": "Infinity"}
            num, den = n1 * d2, d1 * n2
        if not (math.isfinite(num) and math.isfinite(den)) or den == 0:
            return {"resultFraction": "Error", "decimal": "NaN"}

        common = abs(_gcd(num, den)) or 1
        final_n, final_d = num / common, den / common
        if final_d < 0:
            final_n, final_d = -final_n, -final_d
        text = js_str(final_n) if final_d == 1 else f"{js_str(final_n)}/{js_str(final_d)}"
        return {"resultFraction": text, "decimal": to_fixed(num / den, 4)}


class GcdLcm:
    slug = "gcd-lcm-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        x = {}
        for k in ("a", "b"):
            num = to_number(e.get(k))
            x[k] = js_round(num) if num is not None else 0
        return x

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        a, b = x["a"], x["b"]
        if a == 0 or b == 0:
            return {"gcd": 0, "lcm": 0}
        gcd = math.gcd(a, b)
        return {"gcd": gcd, "lcm": abs(a * b) // gcd}


class ScientificNotation:
    slug = "scientific-notation-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"num": to_number(e.get("num"))}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        num = x["num"]
        if num is None:
            return {"scientific": "-", "exponent": "-"}
        if num == 0:
            return {"scientific": "0 × 10⁰", "exponent": 0}

        exponent = math.floor(math.log10(abs(num)))
        if exponent < MIN_NORMAL_EXPONENT:
            # 10**exponent is subnormal or zero as a float
            mantissa = float(Decimal(num).scaleb(-exponent))
        else:
            mantissa = num / math.pow(10, exponent)
        return {"scientific": f"{to_fixed(mantissa, 4)} × 10^{exponent}", "exponent": exponent}


class Pythagorean:
    slug = "pythagorean-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("a", "b")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        return {"c": to_fixed(math.hypot(x["a"], x["b"]), 2)}


class Binary:
    slug = "binary-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        num = to_number(e.get("decimal"))
        return {"decimal": math.floor(num) if num is not None else None}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        d = x["decimal"]
        if d is None:
            return {"binary": "-", "hex": "-"}
        return {"binary": format(d, "b"), "hex": format(d, "X")}
