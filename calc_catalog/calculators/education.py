import math
from typing import Any, Dict

from ..calc_utils import to_number, number_or, to_fixed, clean_number

LETTER_GRADES = ((90, "A"), (80, "B"), (70, "C"), (60, "D"))


def letter_for(pct: float) -> str:
    return next((letter for floor, letter in LETTER_GRADES if pct >= floor), "F")


def ceil_or_zero(x: float) -> int:
    return math.ceil(x) if math.isfinite(x) else 0


class FinalGrade:
    """Score needed on the final: (target - current * (1 - w)) / w."""
    slug = "final-grade-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("currentGrade", "targetGrade", "finalWeight")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        w = x["finalWeight"] / 100
        if w == 0:
            return {"needed": 0}
        needed = (x["targetGrade"] - x["currentGrade"] * (1 - w)) / w
        return {"needed": to_fixed(needed, 1)}


class TestGrade:
    slug = "test-grade-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"earned": number_or(e.get("earned")), "total": number_or(e.get("total"), 1.0)}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        pct = x["earned"] / x["total"] * 100
        return {"percentage": to_fixed(pct, 1), "letter": letter_for(pct)}


class GPA:
    """Credit-weighted mean over four courses."""
    slug = "gpa-calculator"
    courses = 4

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "grades": [number_or(e.get(f"g{i}")) for i in range(1, self.courses + 1)],
            "credits": [number_or(e.get(f"c{i}")) for i in range(1, self.courses + 1)],
        }

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        points = sum(g * c for g, c in zip(x["grades"], x["credits"]))
        credits = sum(x["credits"])
        return {
            "gpa": to_fixed(points / credits, 2) if credits > 0 else 0,
            "totalCredits": clean_number(credits),
        }


class WeightedGrade:
    """Pairs where either the grade or the weight is not a number are left out."""
    slug = "weighted-grade-calculator"
    items = 3

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        pairs = ((to_number(e.get(f"g{i}")), to_number(e.get(f"w{i}"))) for i in range(1, self.items + 1))
        return {"pairs": [(g, w) for g, w in pairs if g is not None and w is not None]}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        score = sum(g * w for g, w in x["pairs"])
        weight = sum(w for _, w in x["pairs"])
        return {"average": to_fixed(score / weight, 2) if weight > 0 else 0}


class ReadingTime:
    slug = "reading-time-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"words": number_or(e.get("words")), "wpm": number_or(e.get("wpm"), 1.0)}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        return {"minutes": ceil_or_zero(x["words"] / x["wpm"])}


class Attendance:
    slug = "attendance-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"total": number_or(e.get("total"), 1.0), "attended": number_or(e.get("attended"))}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        return {"rate": to_fixed(x["attended"] / x["total"] * 100, 1)}
