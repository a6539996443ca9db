import math
from typing import Any, Dict

from .education import ceil_or_zero
from ..calc_utils import number_or, to_fixed, js_round, clean_number

SLICES_PER_PIZZA = 8


class DogAge:
    """Logarithmic fit: human age = 16 ln(dog age) + 31."""
    slug = "dog-age-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"dogAge": number_or(e.get("dogAge"))}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        age = x["dogAge"]
        if age < 1:
            return {"humanAge": 0}
        return {"humanAge": js_round(16 * math.log(age) + 31)}


class CatAge:
    slug = "cat-age-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"catAge": number_or(e.get("catAge"))}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        age = x["catAge"]
        if age <= 0:
            human = 0
        elif age == 1:
            human = 15
        elif age == 2:
            human = 24
        else:
            # four human years for every year after the second
            human = 24 + (age - 2) * 4
        return {"humanAge": clean_number(human)}


class ShoeSize:
    slug = "shoe-size-converter"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"usSize": number_or(e.get("usSize")), "gender": e.get("gender")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        us = x["usSize"]
        if x["gender"] == "m":
            uk, eu = us - 1, us + 33
        else:
            uk, eu = us - 2, us + 31
        return {"ukSize": clean_number(max(uk, 0)), "euSize": clean_number(max(eu, 0))}


class Pizza:
    slug = "pizza-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"people": number_or(e.get("people")), "hunger": number_or(e.get("hunger"), 3.0)}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        return {"pizzas": ceil_or_zero(x["people"] * x["hunger"] / SLICES_PER_PIZZA)}


class FuelCost:
    slug = "fuel-cost-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("distance", "consumption", "price")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        # consumption is per 100 km
        fuel = x["distance"] / 100 * x["consumption"]
        return {"totalCost": to_fixed(fuel * x["price"], 2), "fuelNeeded": to_fixed(fuel, 1)}


class ElectricityCost:
    slug = "electricity-cost-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("watts", "hours", "price")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        daily = x["watts"] * x["hours"] / 1000 * x["price"]
        return {
            "dailyCost": to_fixed(daily, 2),
            "monthlyCost": to_fixed(daily * 30, 2),
            "yearlyCost": to_fixed(daily * 365, 2),
        }
