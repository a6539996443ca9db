import math
from datetime import date
from typing import Any, Dict

from .base import LocalizedText
from ..calc_utils import to_number, number_or, to_fixed, fixed_number, js_round, parse_date, shift_days

BMI_CATEGORIES = {
    "underweight": LocalizedText.of("Underweight", "体重过轻"),
    "normal": LocalizedText.of("Normal Weight", "正常体重"),
    "overweight": LocalizedText.of("Overweight", "超重"),
    "obese": LocalizedText.of("Obese", "肥胖"),
}

BODY_FAT_CLASSES = {
    "high": LocalizedText.of("High", "偏高"),
    "average": LocalizedText.of("Average", "一般"),
    "normal": LocalizedText.of("Normal", "正常"),
}


def as_of(values: Dict[str, Any]) -> date:
    """Reference date for calculators measured against "today"."""
    return parse_date(values.get("asOf")) or date.today()


class BMI:
    slug = "bmi-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: to_number(e.get(k)) for k in ("height", "weight")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        height_cm, weight_kg = x["height"], x["weight"]
        if not height_cm or not weight_kg:
            return {"bmi": 0, "category": "-"}

        height_m = height_cm / 100
        height_sq = height_m * height_m
        if height_sq == 0:
            return {"bmi": 0, "category": "-"}
        bmi = weight_kg / height_sq
        if bmi < 18.5:
            key = "underweight"
        elif bmi < 25:
            key = "normal"
        elif bmi < 30:
            key = "overweight"
        else:
            key = "obese"
        return {"bmi": fixed_number(bmi, 1), "category": BMI_CATEGORIES[key]}


class IdealWeight:
    """Devine formula."""
    slug = "ideal-weight-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"gender": e.get("gender"), "height": number_or(e.get("height"))}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        inches_over_5ft = max(0.0, x["height"] / 2.54 - 60)
        base = 50 if x["gender"] == "male" else 45.5
        return {"idealWeight": to_fixed(base + 2.3 * inches_over_5ft, 1)}


class BodyFat:
    """US Navy method."""
    slug = "body-fat-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        x = {k: to_number(e.get(k)) for k in ("height", "waist", "neck", "hip")}
        x["gender"] = e.get("gender")
        return x

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        h, w, n, hip = x["height"], x["waist"], x["neck"], x["hip"]
        if not h or not w or not n or h < 0:
            return {"bodyFat": 0, "fatMass": "-"}

        male = x["gender"] == "male"
        if male:
            girth = w - n
            if girth <= 0:
                return {"bodyFat": 0, "fatMass": "-"}
            density = 1.0324 - 0.19077 * math.log10(girth) + 0.15456 * math.log10(h)
        else:
            girth = w + (hip or 0) - n
            if girth <= 0:
                return {"bodyFat": 0, "fatMass": "-"}
            density = 1.29579 - 0.35004 * math.log10(girth) + 0.22100 * math.log10(h)
        if density == 0:
            return {"bodyFat": 0, "fatMass": "-"}

        bf = 495 / density - 450
        if bf > 25:
            fat_class = BODY_FAT_CLASSES["high" if male else "average"]
        else:
            fat_class = BODY_FAT_CLASSES["normal"]
        return {"bodyFat": to_fixed(max(0.0, bf), 1), "fatMass": fat_class}


class Calorie:
    """Mifflin-St Jeor BMR times an activity multiplier."""
    slug = "calorie-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "gender": e.get("gender"),
            "age": number_or(e.get("age")),
            "height": number_or(e.get("height")),
            "weight": number_or(e.get("weight")),
            "activity": number_or(e.get("activity"), 1.2),
        }

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        bmr = 10 * x["weight"] + 6.25 * x["height"] - 5 * x["age"]
        bmr += 5 if x["gender"] == "male" else -161
        return {"bmr": js_round(bmr), "tdee": js_round(bmr * x["activity"])}


class WaterIntake:
    slug = "water-intake-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("weight", "exercise")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        # 33 ml per kg, plus ~350 ml per 30 minutes of exercise
        total = x["weight"] * 0.033 + x["exercise"] * (0.35 / 30)
        return {"intake": to_fixed(total, 2)}


class Pregnancy:
    """Naegele's rule: due date is the last period plus 280 days."""
    slug = "pregnancy-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"lastPeriod": parse_date(e.get("lastPeriod")), "today": as_of(e)}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        lmp = x["lastPeriod"]
        due = shift_days(lmp, 280) if lmp else None
        if due is None:
            return {"dueDate": "-", "weeks": "-"}

        week = (x["today"] - lmp).days // 7
        return {
            "dueDate": LocalizedText.of(
                f"{due.month}/{due.day}/{due.year}",
                f"{due.year}/{due.month}/{due.day}",
            ),
            "weeks": max(0, min(42, week)),
        }
