import math
from datetime import date
from typing import Any, Dict, Optional, Tuple

from .base import LocalizedText
from .health import as_of
from ..calc_utils import MINUTES_PER_DAY, number_or, to_fixed, js_str, parse_date, parse_clock, add_years, add_month

NOT_BORN_YET = LocalizedText.of("Not born yet!", "尚未出生！")

WEEKEND = (5, 6)  # date.weekday(): Saturday, Sunday


def ymd_breakdown(start: date, end: date) -> Tuple[int, int, int]:
    """Whole years, months and days from ``start`` to ``end`` (start <= end).

    Years are found by shifting ``start`` forward and backing off one if that
    overshoots. Months are then counted by advancing one calendar month at a
    time, clamping the day to the target month's length, for as long as the
    result stays on or before ``end``. The day count is what remains.

    >>> ymd_breakdown(date(2024, 1, 31), date(2024, 3, 1))
    (0, 1, 1)
    """
    years = end.year - start.year
    anchor = add_years(start, years)
    if anchor > end:
        years -= 1
        anchor = add_years(start, years)

    months = 0
    while True:
        nxt = add_month(anchor)
        if nxt is None or nxt > end:
            break
        anchor = nxt
        months += 1

    return years, months, (end - anchor).days


def count_business_days(start: date, end: date) -> int:
    """Monday to Friday days in [start, end]; 0 when start is after end."""
    span = (end - start).days + 1
    if span <= 0:
        return 0
    full_weeks, rest = divmod(span, 7)
    count = full_weeks * 5
    first = start.weekday()
    for offset in range(rest):
        if (first + offset) % 7 not in WEEKEND:
            count += 1
    return count


def _clock(minutes) -> str:
    h, m = divmod(minutes, 60)
    return f"{js_str(math.floor(h)).rjust(2, '0')}:{js_str(m).rjust(2, '0')}"


class DateDifference:
    slug = "date-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: parse_date(e.get(k)) for k in ("startDate", "endDate")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        start, end = x["startDate"], x["endDate"]
        if start is None or end is None:
            return {"breakdown": "-", "totalDays": "-"}
        if start > end:
            start, end = end, start

        y, m, d = ymd_breakdown(start, end)
        return {
            "breakdown": LocalizedText.of(f"{y}y {m}m {d}d", f"{y}年 {m}个月 {d}天"),
            "totalDays": (end - start).days,
        }


class TimeDuration:
    """End earlier than start is read as the next day."""
    slug = "time-duration-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: parse_clock(e.get(k)) for k in ("startTime", "endTime")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        start, end = x["startTime"], x["endTime"]
        if start is None or end is None:
            return {"duration": "-", "totalMinutes": "-"}
        if end < start:
            end += MINUTES_PER_DAY

        diff = end - start
        hours, minutes = divmod(diff, 60)
        return {
            "duration": LocalizedText.of(f"{hours}h {minutes}m", f"{hours}小时 {minutes}分钟"),
            "totalMinutes": diff,
        }


class TimeAdder:
    slug = "time-adder-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "start": parse_clock(e.get("start")),
            "addHours": number_or(e.get("addHours")),
            "addMinutes": number_or(e.get("addMinutes")),
        }

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        if x["start"] is None:
            return {"newTime": "-"}
        total = x["start"] + x["addHours"] * 60 + x["addMinutes"]
        if not math.isfinite(total):
            return {"newTime": "-"}
        # Python's modulo is already non-negative for a positive divisor
        return {"newTime": _clock(total % MINUTES_PER_DAY)}


class WorkDays:
    slug = "work-days-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: parse_date(e.get(k)) for k in ("start", "end")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        if x["start"] is None or x["end"] is None:
            return {"workDays": 0}
        return {"workDays": count_business_days(x["start"], x["end"])}


class DecimalHours:
    slug = "decimal-hours-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"time": parse_clock(e.get("time"))}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        minutes: Optional[int] = x["time"]
        if minutes is None:
            return {"decimal": 0}
        return {"decimal": to_fixed(minutes / 60, 2)}


class Age:
    slug = "age-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {"dob": parse_date(e.get("dob")), "today": as_of(e)}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        dob, today = x["dob"], x["today"]
        if dob is None:
            return {"ageString": "-", "totalDays": "-"}
        if dob > today:
            return {"ageString": NOT_BORN_YET, "totalDays": 0}

        y, m, d = ymd_breakdown(dob, today)
        return {
            "ageString": LocalizedText.of(f"{y} years {m} months {d} days", f"{y}岁 {m}个月 {d}天"),
            "totalDays": (today - dob).days,
        }
