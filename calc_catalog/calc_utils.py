import calendar
import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP, localcontext

import numpy as np
import regex as re

NUMBER_LITERAL = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
ISO_DATE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?")
CLOCK = re.compile(r"(\d{1,2}):(\d{1,2})(?::\d{1,2}(?:\.\d+)?)?")

MINUTES_PER_DAY = 24 * 60


def to_number(val):
    """Coerce a raw input value the way a browser ``Number()`` cast does.

    '' and whitespace -> 0.0, '12.5 ' -> 12.5, '12abc' -> None, None -> None.
    None stands in for NaN so each formula decides its own fallback.
    Infinite values are treated as not-a-number too.
    """
    if val is None:
        return None
    if isinstance(val, bool):
        return float(val)
    if isinstance(val, (int, float, np.integer, np.floating)):
        num = float(val)
    elif isinstance(val, str):
        s = val.strip()
        if not s:
            return 0.0
        if not NUMBER_LITERAL.fullmatch(s):
            return None
        num = float(s)
    else:
        return None
    return num if math.isfinite(num) else None


def number_or(val, default=0.0):
    '''Same as `Number(val) || default`: NaN and zero both fall back.'''
    num = to_number(val)
    return num if num else default


def to_fixed(x, digits=2):
    """Fixed-point string rounded half away from zero on the exact binary value.

    Non-finite values format as zero.
    """
    if x is None or not math.isfinite(x) or x == 0:
        x = 0.0
    with localcontext() as ctx:
        ctx.prec = 400
        quantum = Decimal(1).scaleb(-digits)
        return format(Decimal(x).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def fixed_number(x, digits=2):
    '''`parseFloat(x.toFixed(digits))`'''
    return clean_number(float(to_fixed(x, digits)))


def js_round(x):
    # half rounds toward +inf, unlike round(); non-finite values give 0
    if not math.isfinite(x):
        return 0
    return int(math.floor(x + 0.5))


def clean_number(x):
    """Integral floats come back as int so 12.0 displays as 12."""
    if isinstance(x, float) and x.is_integer():
        return int(x)
    return x


def js_str(x):
    """Shortest display form of a number, matching JavaScript's String(x)."""
    if isinstance(x, (int, np.integer)) and not isinstance(x, bool):
        return str(int(x))
    x = float(x)
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x == 0:
        return "0"
    if x.is_integer() and abs(x) < 1e21:
        return str(int(x))
    if abs(x) >= 1e21 or abs(x) < 1e-6:
        return _js_exponent(np.format_float_scientific(x, trim="-"))
    return np.format_float_positional(x, trim="-")


def to_exponential(x, digits=2):
    '''`x.toExponential(digits)`, e.g. 0.001 -> "1.00e-3"'''
    return _js_exponent(f"{x:.{digits}e}")


def _js_exponent(s):
    mantissa, exp = s.split("e")
    exp = int(exp)
    return f"{mantissa}e{'+' if exp >= 0 else '-'}{abs(exp)}"


def safe_pow(base, exp):
    """`Math.pow` without exceptions: overflow gives inf, domain errors (negative base, fractional exponent) give nan."""
    try:
        return math.pow(base, exp)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def parse_date(val):
    """Calendar date from an ISO 'YYYY-MM-DD' string (a time part is ignored)."""
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if not isinstance(val, str):
        return None
    m = ISO_DATE.fullmatch(val.strip())
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def parse_clock(val):
    """Minutes since midnight from 'HH:MM' (seconds ignored), or None."""
    if isinstance(val, time):
        return val.hour * 60 + val.minute
    if not isinstance(val, str):
        return None
    m = CLOCK.fullmatch(val.strip())
    if not m:
        return None
    return int(m.group(1)) * 60 + int(m.group(2))


def days_in_month(year, month):
    return calendar.monthrange(year, month)[1]


def add_years(d, years):
    """Shift by whole years, clamping Feb 29 to Feb 28 in common years."""
    year = d.year + years
    if not date.min.year <= year <= date.max.year:
        return None
    return date(year, d.month, min(d.day, days_in_month(year, d.month)))


def add_month(d):
    """Next calendar month, clamping the day (Jan 31 -> Feb 28/29)."""
    year, month = (d.year + 1, 1) if d.month == 12 else (d.year, d.month + 1)
    if year > date.max.year:
        return None
    return date(year, month, min(d.day, days_in_month(year, month)))


def shift_days(d, days):
    try:
        return d + timedelta(days=days)
    except OverflowError:
        return None
