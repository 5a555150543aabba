"""
Invariant Format Specifiers
===========================

Bounded Context: Template Rendering

This module renders scalar property values the way a message template
displays them, honouring the format specifier carried by a property token
(e.g. `{Value:D4}` -> "0042").

Design:
- Locale-independent: every rendering goes through a FormatProvider,
  and INVARIANT is the fixed convention used for the `_r` renderings
- Numbers are rounded half away from zero on their exact decimal value
- Unsupported specifiers raise TemplateRenderingError

Supported Specifiers:
    Numeric:   D X x N F E e P G g C R (optional precision, e.g. N2),
               custom patterns built from 0 # . , % and literals
    Date/time: O o s u R r d D t T f F g G M m Y y U,
               custom patterns (yyyy MM dd HH hh mm ss fff FFF tt zzz K ...)
    Duration:  c g G
    UUID:      N D B P
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import List, Optional, Tuple
from uuid import UUID

from ..errors import TemplateRenderingError


@dataclass(frozen=True)
class FormatProvider:
    """
    Culture conventions for number and date rendering.

    The defaults are the invariant culture.
    """
    name: str = "invariant"
    decimal_separator: str = "."
    group_separator: str = ","
    negative_sign: str = "-"
    percent_symbol: str = "%"
    currency_symbol: str = "¤"
    nan_symbol: str = "NaN"
    positive_infinity_symbol: str = "Infinity"
    negative_infinity_symbol: str = "-Infinity"
    date_separator: str = "/"
    time_separator: str = ":"
    am_designator: str = "AM"
    pm_designator: str = "PM"
    era_name: str = "A.D."
    month_names: Tuple[str, ...] = (
        "January", "February", "March", "April", "May", "June", "July",
        "August", "September", "October", "November", "December",
    )
    month_abbreviations: Tuple[str, ...] = (
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    )
    # Monday first, matching date.weekday()
    day_names: Tuple[str, ...] = (
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
        "Saturday", "Sunday",
    )
    day_abbreviations: Tuple[str, ...] = (
        "Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun",
    )


INVARIANT = FormatProvider()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def format_scalar(
    value,
    format_spec: Optional[str] = None,
    provider: FormatProvider = INVARIANT
) -> str:
    """
    Render a scalar as a message template displays it.

    Strings are double-quoted unless the format is 'l' (literal).

    Args:
        value: Scalar to render
        format_spec: Token format specifier (None for default rendering)
        provider: Culture conventions

    Returns:
        Rendered text

    Raises:
        TemplateRenderingError: If the specifier does not apply to the value
    """
    if value is None:
        return "null"

    if isinstance(value, str):
        if format_spec == "l":
            return value
        return '"' + value.replace('"', '\\"') + '"'

    # 'l' only affects strings
    if format_spec == "l":
        format_spec = None

    if isinstance(value, bool):
        return "True" if value else "False"

    if isinstance(value, Enum):
        if format_spec and format_spec.upper() in ("D", "X") and isinstance(value.value, int):
            return format_number(value.value, format_spec, provider)
        return value.name

    if isinstance(value, (int, float, Decimal)):
        return format_number(value, format_spec, provider)

    if isinstance(value, (datetime, date, time)):
        return format_datetime(value, format_spec, provider)

    if isinstance(value, timedelta):
        return format_timedelta(value, format_spec)

    if isinstance(value, UUID):
        return format_uuid(value, format_spec)

    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()

    if format_spec:
        try:
            return format(value, format_spec)
        except (TypeError, ValueError) as e:
            raise TemplateRenderingError(
                f"Cannot apply format {format_spec!r} to {type(value).__name__}: {e}"
            ) from e

    return str(value)


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

def format_number(value, format_spec: Optional[str] = None,
                  provider: FormatProvider = INVARIANT) -> str:
    """Render an int, float or Decimal with a numeric format specifier."""
    if isinstance(value, (float, Decimal)) and not math.isfinite(value):
        if math.isnan(value):
            return provider.nan_symbol
        return (provider.positive_infinity_symbol if value > 0
                else provider.negative_infinity_symbol)

    if not format_spec:
        return _general(value, None, True, provider)

    letter, precision = _parse_standard(format_spec)
    if letter is None:
        return _custom_numeric(value, format_spec, provider)

    kind = letter.upper()

    if kind == "D":
        if not isinstance(value, int):
            raise TemplateRenderingError(
                f"Format specifier {format_spec!r} requires an integral value, "
                f"got {type(value).__name__}"
            )
        digits = str(abs(value)).rjust(precision or 0, "0")
        return provider.negative_sign + digits if value < 0 else digits

    if kind == "X":
        if not isinstance(value, int):
            raise TemplateRenderingError(
                f"Format specifier {format_spec!r} requires an integral value, "
                f"got {type(value).__name__}"
            )
        if value < 0:
            # two's complement at the narrowest machine width that holds it
            width = 32 if value >= -(2 ** 31) else 64
            value &= (1 << width) - 1
        digits = format(value, "X" if letter == "X" else "x")
        return digits.rjust(precision or 0, "0")

    if kind == "F":
        places = 2 if precision is None else precision
        negative, int_part, frac_part = _fixed_parts(value, places)
        return _compose(negative, int_part, frac_part, provider, grouped=False)

    if kind == "N":
        places = 2 if precision is None else precision
        negative, int_part, frac_part = _fixed_parts(value, places)
        return _compose(negative, int_part, frac_part, provider, grouped=True)

    if kind == "P":
        places = 2 if precision is None else precision
        negative, int_part, frac_part = _fixed_parts(_to_decimal(value) * 100, places)
        text = _compose(False, int_part, frac_part, provider, grouped=True)
        text = f"{text} {provider.percent_symbol}"
        return provider.negative_sign + text if negative else text

    if kind == "C":
        places = 2 if precision is None else precision
        negative, int_part, frac_part = _fixed_parts(value, places)
        text = provider.currency_symbol + _compose(
            False, int_part, frac_part, provider, grouped=True
        )
        return f"({text})" if negative else text

    if kind == "E":
        places = 6 if precision is None else precision
        return _exponential(value, places, letter == "E", provider)

    if kind in ("G", "R"):
        return _general(value, precision if kind == "G" else None,
                        letter.isupper(), provider)

    raise TemplateRenderingError(f"Unsupported numeric format specifier: {format_spec!r}")


def _parse_standard(format_spec: str) -> Tuple[Optional[str], Optional[int]]:
    """Split a standard specifier like 'N2' into ('N', 2); custom -> (None, None)."""
    letter = format_spec[0]
    rest = format_spec[1:]
    if not letter.isalpha() or (rest and not rest.isdigit()) or len(rest) > 9:
        return None, None
    return letter, int(rest) if rest else None


def _to_decimal(value) -> Decimal:
    """Exact decimal value of a number."""
    if isinstance(value, Decimal):
        return value
    return Decimal(value)


def _round(value: Decimal, places: int) -> Decimal:
    """Round half away from zero to a number of fraction digits."""
    with localcontext() as ctx:
        ctx.prec = max(28, value.adjusted() + places + 2)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _fixed_parts(value, places: int) -> Tuple[bool, str, str]:
    """Round and split a number into (negative, integer digits, fraction digits)."""
    rounded = _round(_to_decimal(value), places)
    text = format(abs(rounded), "f")
    int_part, _, frac_part = text.partition(".")
    frac_part = frac_part.ljust(places, "0")[:places]
    return rounded < 0, int_part, frac_part


def _group(digits: str, separator: str) -> str:
    """Insert a group separator every three digits from the right."""
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


def _compose(negative: bool, int_part: str, frac_part: str,
             provider: FormatProvider, grouped: bool) -> str:
    if grouped:
        int_part = _group(int_part, provider.group_separator)
    text = int_part
    if frac_part:
        text += provider.decimal_separator + frac_part
    return provider.negative_sign + text if negative else text


def _exponential(value, places: int, upper: bool, provider: FormatProvider) -> str:
    """Scientific notation: d.ddddddE+ddd."""
    number = _to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = places + 1
        ctx.rounding = ROUND_HALF_UP
        rounded = +number

    sign, digits, _ = rounded.as_tuple()
    digits = [str(d) for d in digits]
    digits += ["0"] * (places + 1 - len(digits))
    exponent = rounded.adjusted() if rounded != 0 else 0

    mantissa = digits[0]
    if places > 0:
        mantissa += provider.decimal_separator + "".join(digits[1:places + 1])

    exp_sign = "+" if exponent >= 0 else "-"
    text = f"{mantissa}{'E' if upper else 'e'}{exp_sign}{abs(exponent):03d}"
    return provider.negative_sign + text if sign and rounded != 0 else text


def _general(value, precision: Optional[int], upper: bool,
             provider: FormatProvider) -> str:
    """General format: shortest round-trip text, or N significant digits."""
    if precision:
        text = format(value, f".{precision}G")
    elif isinstance(value, float):
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
    else:
        text = str(value)

    text = text.upper() if upper else text.lower()
    mantissa, marker, exponent = text.partition("E" if upper else "e")
    if marker:
        exp_sign = exponent[0] if exponent[0] in "+-" else "+"
        exp_digits = exponent.lstrip("+-").rjust(2, "0")
        text = f"{mantissa}{marker}{exp_sign}{exp_digits}"
    if provider.decimal_separator != ".":
        text = text.replace(".", provider.decimal_separator)
    return text


def _tokenize_custom(section: str) -> List[Tuple[str, str]]:
    """Split a custom numeric pattern into ('ph', char) and ('lit', text) items."""
    items = []
    i = 0
    while i < len(section):
        ch = section[i]
        if ch in ("'", '"'):
            end = section.find(ch, i + 1)
            end = len(section) if end == -1 else end
            items.append(("lit", section[i + 1:end]))
            i = end + 1
            continue
        if ch == "\\" and i + 1 < len(section):
            items.append(("lit", section[i + 1]))
            i += 2
            continue
        if ch in "0#.,":
            items.append(("ph", ch))
        elif ch == "%":
            items.append(("pct", ch))
        else:
            items.append(("lit", ch))
        i += 1
    return items


def _split_sections(pattern: str) -> List[str]:
    """Split on unquoted ';'."""
    sections, current, quote = [], [], None
    for ch in pattern:
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            sections.append("".join(current))
            current = []
            continue
        current.append(ch)
    sections.append("".join(current))
    return sections


def _custom_numeric(value, pattern: str, provider: FormatProvider) -> str:
    """Render with a custom numeric pattern such as '#,##0.00' or '000'."""
    sections = _split_sections(pattern)
    number = _to_decimal(value)
    section = sections[0]
    explicit_negative = False
    if len(sections) >= 2 and number < 0 and sections[1]:
        section = sections[1]
        explicit_negative = True
    if len(sections) >= 3 and number == 0:
        section = sections[2]

    items = _tokenize_custom(section)
    positions = [i for i, (kind, _) in enumerate(items) if kind == "ph"]
    for kind, _ in items:
        if kind == "pct":
            number *= 100

    def _literal(item):
        kind, text = item
        return provider.percent_symbol if kind == "pct" else text

    if not positions:
        text = "".join(_literal(item) for item in items)
        if number < 0 and not explicit_negative:
            return provider.negative_sign + text
        return text

    first, last = positions[0], positions[-1]
    prefix = "".join(_literal(item) for item in items[:first])
    suffix = "".join(_literal(item) for item in items[last + 1:])
    spec = "".join(ch for kind, ch in items[first:last + 1] if kind == "ph")

    int_spec, _, frac_spec = spec.partition(".")
    frac_spec = frac_spec.replace(",", "").replace(".", "")

    # trailing commas scale by 1000 each
    while int_spec.endswith(","):
        int_spec = int_spec[:-1]
        number /= 1000

    grouped = "," in int_spec
    int_placeholders = int_spec.replace(",", "")
    first_zero = int_placeholders.find("0")
    min_int = 0 if first_zero == -1 else len(int_placeholders) - first_zero
    max_frac = len(frac_spec)
    min_frac = frac_spec.rfind("0") + 1

    negative, int_part, frac_part = _fixed_parts(number, max_frac)
    frac_part = frac_part.rstrip("0").ljust(min_frac, "0")
    if int_part == "0" and min_int == 0:
        int_part = ""
    int_part = int_part.rjust(min_int, "0")
    if grouped and int_part:
        int_part = _group(int_part, provider.group_separator)

    text = int_part
    if frac_part:
        text += provider.decimal_separator + frac_part
    text = prefix + text + suffix
    if negative and not explicit_negative:
        return provider.negative_sign + text
    return text


# ---------------------------------------------------------------------------
# Dates and times
# ---------------------------------------------------------------------------

_ROUND_TRIP = "yyyy'-'MM'-'dd'T'HH':'mm':'ss'.'fffffffK"

_STANDARD_DATE_PATTERNS = {
    "d": "MM/dd/yyyy",
    "D": "dddd, dd MMMM yyyy",
    "f": "dddd, dd MMMM yyyy HH:mm",
    "F": "dddd, dd MMMM yyyy HH:mm:ss",
    "g": "MM/dd/yyyy HH:mm",
    "G": "MM/dd/yyyy HH:mm:ss",
    "M": "MMMM dd",
    "m": "MMMM dd",
    "O": _ROUND_TRIP,
    "o": _ROUND_TRIP,
    "R": "ddd, dd MMM yyyy HH':'mm':'ss 'GMT'",
    "r": "ddd, dd MMM yyyy HH':'mm':'ss 'GMT'",
    "s": "yyyy'-'MM'-'dd'T'HH':'mm':'ss",
    "t": "HH:mm",
    "T": "HH:mm:ss",
    "u": "yyyy'-'MM'-'dd HH':'mm':'ss'Z'",
    "U": "dddd, dd MMMM yyyy HH:mm:ss",
    "Y": "yyyy MMMM",
    "y": "yyyy MMMM",
}

# standard formats rendered in UTC
_UTC_FORMATS = {"R", "r", "u", "U"}

_DATE_TOKEN_CHARS = "yMdhHmsfFtzKg"


def format_datetime(value, format_spec: Optional[str] = None,
                    provider: FormatProvider = INVARIANT) -> str:
    """
    Render a datetime, date or time.

    Without a format, datetimes render as 'G' (followed by the offset when
    aware), dates as 'd' and times as 't'.
    """
    if not format_spec:
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                return _custom_datetime(
                    value, _STANDARD_DATE_PATTERNS["G"] + " zzz", provider
                )
            format_spec = "G"
        elif isinstance(value, date):
            format_spec = "d"
        else:
            format_spec = "t"

    if len(format_spec) == 1:
        pattern = _STANDARD_DATE_PATTERNS.get(format_spec)
        if pattern is None:
            raise TemplateRenderingError(
                f"Unsupported date/time format specifier: {format_spec!r}"
            )
        if (format_spec in _UTC_FORMATS and isinstance(value, datetime)
                and value.tzinfo is not None):
            value = value.astimezone(timezone.utc)
        return _custom_datetime(value, pattern, provider)

    return _custom_datetime(value, format_spec, provider)


def _as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return datetime.combine(date(1, 1, 1), value)


def _utc_offset(value: datetime) -> Optional[timedelta]:
    if value.tzinfo is None:
        return None
    return value.utcoffset()


def _format_offset(offset: Optional[timedelta], count: int) -> str:
    minutes_total = int((offset or timedelta()).total_seconds() // 60)
    sign = "-" if minutes_total < 0 else "+"
    hours, minutes = divmod(abs(minutes_total), 60)
    if count == 1:
        return f"{sign}{hours}"
    if count == 2:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _custom_datetime(value, pattern: str, provider: FormatProvider) -> str:
    """Render with a custom date/time pattern such as 'yyyy-MM-dd HH:mm'."""
    dt = _as_datetime(value)
    out: List[str] = []
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]

        if ch in ("'", '"'):
            end = pattern.find(ch, i + 1)
            if end == -1:
                raise TemplateRenderingError(f"Unterminated quote in format: {pattern!r}")
            out.append(pattern[i + 1:end])
            i = end + 1
            continue

        if ch == "\\":
            if i + 1 >= n:
                raise TemplateRenderingError(f"Trailing escape in format: {pattern!r}")
            out.append(pattern[i + 1])
            i += 2
            continue

        if ch == "%":
            i += 1
            continue

        if ch == ":":
            out.append(provider.time_separator)
            i += 1
            continue

        if ch == "/":
            out.append(provider.date_separator)
            i += 1
            continue

        if ch not in _DATE_TOKEN_CHARS:
            out.append(ch)
            i += 1
            continue

        count = 1
        while i + count < n and pattern[i + count] == ch:
            count += 1
        i += count

        if ch == "y":
            if count == 1:
                out.append(str(dt.year % 100))
            elif count == 2:
                out.append(f"{dt.year % 100:02d}")
            else:
                out.append(str(dt.year).rjust(count, "0"))
        elif ch == "M":
            if count <= 2:
                out.append(str(dt.month).rjust(count, "0"))
            elif count == 3:
                out.append(provider.month_abbreviations[dt.month - 1])
            else:
                out.append(provider.month_names[dt.month - 1])
        elif ch == "d":
            if count <= 2:
                out.append(str(dt.day).rjust(count, "0"))
            elif count == 3:
                out.append(provider.day_abbreviations[dt.weekday()])
            else:
                out.append(provider.day_names[dt.weekday()])
        elif ch == "h":
            out.append(str(dt.hour % 12 or 12).rjust(min(count, 2), "0"))
        elif ch == "H":
            out.append(str(dt.hour).rjust(min(count, 2), "0"))
        elif ch == "m":
            out.append(str(dt.minute).rjust(min(count, 2), "0"))
        elif ch == "s":
            out.append(str(dt.second).rjust(min(count, 2), "0"))
        elif ch in ("f", "F"):
            if count > 7:
                raise TemplateRenderingError(f"Too many fraction digits in format: {pattern!r}")
            digits = f"{dt.microsecond:06d}0"[:count]
            if ch == "F":
                digits = digits.rstrip("0")
                if not digits and out and out[-1].endswith(provider.decimal_separator):
                    out[-1] = out[-1][:-len(provider.decimal_separator)]
            out.append(digits)
        elif ch == "t":
            designator = provider.am_designator if dt.hour < 12 else provider.pm_designator
            out.append(designator[:1] if count == 1 else designator)
        elif ch == "z":
            out.append(_format_offset(_utc_offset(dt), count))
        elif ch == "K":
            offset = _utc_offset(dt)
            if offset is None:
                pass
            elif dt.tzinfo is timezone.utc:
                out.append("Z")
            else:
                out.append(_format_offset(offset, 3))
        elif ch == "g":
            out.append(provider.era_name)

    return "".join(out)


def format_timedelta(value: timedelta, format_spec: Optional[str] = None) -> str:
    """
    Render a duration.

    Formats:
        c (default): [-][d.]hh:mm:ss[.fffffff]
        g:           [-][d:]h:mm:ss[.FFFFFFF]
        G:           [-]d:hh:mm:ss.fffffff
    """
    total = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    negative = total < 0
    total = abs(total)

    days, rem = divmod(total, 86400 * 1_000_000)
    hours, rem = divmod(rem, 3600 * 1_000_000)
    minutes, rem = divmod(rem, 60 * 1_000_000)
    seconds, micros = divmod(rem, 1_000_000)
    fraction = f"{micros:06d}0"

    if format_spec in (None, "", "c", "t", "T"):
        text = f"{days}." if days else ""
        text += f"{hours:02d}:{minutes:02d}:{seconds:02d}"
        if micros:
            text += f".{fraction}"
    elif format_spec == "g":
        text = f"{days}:" if days else ""
        text += f"{hours}:{minutes:02d}:{seconds:02d}"
        if micros:
            text += "." + fraction.rstrip("0")
    elif format_spec == "G":
        text = f"{days}:{hours:02d}:{minutes:02d}:{seconds:02d}.{fraction}"
    else:
        raise TemplateRenderingError(f"Unsupported duration format specifier: {format_spec!r}")

    return "-" + text if negative else text


def format_uuid(value: UUID, format_spec: Optional[str] = None) -> str:
    """Render a UUID with N (32 digits), D (hyphens), B ({...}) or P ((...))."""
    spec = (format_spec or "D").upper()
    if spec == "N":
        text = value.hex
    elif spec == "D":
        text = str(value)
    elif spec == "B":
        text = "{" + str(value) + "}"
    elif spec == "P":
        text = "(" + str(value) + ")"
    else:
        raise TemplateRenderingError(f"Unsupported UUID format specifier: {format_spec!r}")
    return text
