"""Rendering of cell values through parsed spreadsheet number formats."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum, auto

from .numfmt import (
    FALLBACK_ERROR_FORMAT,
    GENERAL,
    TEXT,
    FormatOptions,
    NumberFormatError,
    is_12_hour_time,
    is_time_format,
    parse_number_format_section,
    split_format_on_semicolon,
)

__all__ = [
    "CellType",
    "ParsedNumberFormat",
    "parse_full_number_format_string",
    "general_numeric_scientific",
]

# General format switches to scientific notation outside this range.
MIN_NON_SCIENTIFIC_NUMBER = 1e-9
MAX_NON_SCIENTIFIC_NUMBER = 1e11

_GENERAL_OPTIONS = FormatOptions(full_format_string=GENERAL, reduced_format_string=GENERAL)

_FIXED_PRECISION = {
    "0": 0,
    "#,##0": 0,
    "0.0": 1,
    "#,##0.0": 1,
    "0.00": 2,
    "#,##0.00": 2,
    "0.000": 3,
    "#,##0.000": 3,
    "0.0000": 4,
    "#,##0.0000": 4,
}
_EXPONENT_FORMATS = frozenset({"0.00e+00", "##0.0e+0"})

_EPOCH_1900 = datetime(1899, 12, 30)
_EPOCH_1904 = datetime(1904, 1, 1)

# Spreadsheet date/time codes mapped to layout tokens, applied in order, once each.
_TIME_REPLACEMENTS = (
    ("YYYY", "2006"),
    ("yyyy", "2006"),
    ("YY", "06"),
    ("yy", "06"),
    ("MMMM", "%%%%"),
    ("mmmm", "%%%%"),
    ("DDDD", "&&&&"),
    ("dddd", "&&&&"),
    ("DD", "02"),
    ("dd", "02"),
    ("D", "2"),
    ("d", "2"),
    ("MMM", "Jan"),
    ("mmm", "Jan"),
    ("MMSS", "0405"),
    ("mmss", "0405"),
    ("SS", "05"),
    ("ss", "05"),
    ("MM:", "04:"),
    ("mm:", "04:"),
    (":MM", ":04"),
    (":mm", ":04"),
    ("MM", "01"),
    ("mm", "01"),
    ("AM/PM", "pm"),
    ("am/pm", "pm"),
    ("M/", "1/"),
    ("m/", "1/"),
    ("%%%%", "January"),
    ("&&&&", "Monday"),
)

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_ZONES = (
    ("Z070000", "Z"),
    ("Z07:00:00", "Z"),
    ("Z0700", "Z"),
    ("Z07:00", "Z"),
    ("Z07", "Z"),
    ("-070000", "+000000"),
    ("-07:00:00", "+00:00:00"),
    ("-0700", "+0000"),
    ("-07:00", "+00:00"),
    ("-07", "+00"),
)

_DIGITS = "0123456789"


class CellType(Enum):
    """The kind of value a cell holds."""

    STRING = auto()
    STRING_FORMULA = auto()
    NUMERIC = auto()
    BOOL = auto()
    INLINE = auto()
    ERROR = auto()
    DATE = auto()


_TEXT_TYPES = frozenset({CellType.STRING, CellType.INLINE, CellType.STRING_FORMULA})


def _parse_float(value: str) -> float:
    if value != value.strip() or "_" in value:
        raise NumberFormatError(f"invalid number: {value!r}")
    try:
        return float(value)
    except ValueError as exc:
        raise NumberFormatError(f"invalid number: {value!r}") from exc


def _special_float(number: float) -> str | None:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    return None


def _fixed(number: float, precision: int) -> str:
    return _special_float(number) or f"{number:.{precision}f}"


def _exponent(number: float) -> str:
    return _special_float(number) or f"{number:e}"


def _shortest_fixed(number: float) -> str:
    special = _special_float(number)
    if special:
        return special
    return format(Decimal(repr(number)).normalize(), "f")


def _shortest_scientific(number: float) -> str:
    special = _special_float(number)
    if special:
        return special
    dec = Decimal(repr(number))
    sign, digits, _ = dec.as_tuple()
    text = "".join(map(str, digits)).rstrip("0") or "0"
    exponent = dec.adjusted() if text != "0" else 0
    mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
    exp_sign = "+" if exponent >= 0 else "-"
    return f"{'-' if sign else ''}{mantissa}E{exp_sign}{abs(exponent):02d}"


def general_numeric_scientific(value: str, allow_scientific: bool = True) -> str:
    """Render a numeric string the way the General format shows it."""
    if not value.strip():
        return ""
    number = _parse_float(value)
    if allow_scientific:
        magnitude = abs(number)
        if (
            math.ulp(0.0) <= magnitude < MIN_NON_SCIENTIFIC_NUMBER
            or magnitude >= MAX_NON_SCIENTIFIC_NUMBER
        ):
            return _shortest_scientific(number)
    return _shortest_fixed(number)


def _from_excel_serial(serial: float, date1904: bool) -> datetime:
    epoch = _EPOCH_1904 if date1904 else _EPOCH_1900
    try:
        return epoch + timedelta(days=serial)
    except (OverflowError, ValueError) as exc:
        raise NumberFormatError(f"date serial out of range: {serial!r}") from exc


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


def _fraction(moment: datetime, digits: int, trim: bool) -> str:
    text = f"{moment.microsecond * 1000:09d}"[:digits]
    if trim:
        text = text.rstrip("0")
        if not text:
            return ""
    return "." + text


def _layout_chunk(layout: str, index: int, moment: datetime) -> tuple[str, int] | None:
    rest = layout[index:]
    head = rest[0]
    yday = moment.timetuple().tm_yday
    if head == "J" and rest.startswith("Jan"):
        name = _MONTH_NAMES[moment.month - 1]
        return (name, 7) if rest.startswith("January") else (name[:3], 3)
    if head == "M":
        if rest.startswith("Mon"):
            name = _DAY_NAMES[moment.weekday()]
            return (name, 6) if rest.startswith("Monday") else (name[:3], 3)
        if rest.startswith("MST"):
            return "UTC", 3
        return None
    if head == "0":
        if len(rest) > 1 and rest[1] in "123456":
            value = {
                "1": moment.month,
                "2": moment.day,
                "3": _hour12(moment),
                "4": moment.minute,
                "5": moment.second,
                "6": moment.year % 100,
            }[rest[1]]
            return f"{value:02d}", 2
        if rest.startswith("002"):
            return f"{yday:03d}", 3
        return None
    if head == "1":
        if rest.startswith("15"):
            return f"{moment.hour:02d}", 2
        return str(moment.month), 1
    if head == "2":
        if rest.startswith("2006"):
            return f"{moment.year:04d}", 4
        return str(moment.day), 1
    if head == "_":
        if rest.startswith("_2006"):
            return f"_{moment.year:04d}", 5
        if rest.startswith("_2"):
            return f"{moment.day:>2d}", 2
        if rest.startswith("__2"):
            return f"{yday:>3d}", 3
        return None
    if head in "345":
        value = {"3": _hour12(moment), "4": moment.minute, "5": moment.second}[head]
        return str(value), 1
    if head == "P" and rest.startswith("PM"):
        return ("PM" if moment.hour >= 12 else "AM"), 2
    if head == "p" and rest.startswith("pm"):
        return ("pm" if moment.hour >= 12 else "am"), 2
    if head in "-Z":
        for pattern, text in _ZONES:
            if rest.startswith(pattern):
                return text, len(pattern)
        return None
    if head == "." and len(rest) > 1 and rest[1] in "09":
        digit = rest[1]
        end = 1
        while end < len(rest) and rest[end] == digit:
            end += 1
        if not (end < len(rest) and rest[end] in _DIGITS):
            return _fraction(moment, end - 1, digit == "9"), end
    return None


def _format_layout(moment: datetime, layout: str) -> str:
    parts: list[str] = []
    index = 0
    while index < len(layout):
        chunk = _layout_chunk(layout, index, moment)
        if chunk is None:
            parts.append(layout[index])
            index += 1
        else:
            parts.append(chunk[0])
            index += chunk[1]
    return "".join(parts)


@dataclass(frozen=True)
class ParsedNumberFormat:
    """A number format code split into its positive, negative, zero and text sections."""

    num_fmt: str
    is_time_format: bool = False
    negative_format_expects_positive: bool = False
    positive_format: FormatOptions | None = None
    negative_format: FormatOptions | None = None
    zero_format: FormatOptions | None = None
    text_format: FormatOptions = _GENERAL_OPTIONS
    parse_error: NumberFormatError | None = None

    def format_value(
        self, value: str, cell_type: CellType, date1904: bool = False
    ) -> str:
        """Render a cell's raw value according to its type and this format."""
        if cell_type is CellType.ERROR or cell_type is CellType.DATE:
            return value
        if cell_type is CellType.BOOL:
            if value == "0":
                return "FALSE"
            if value == "1":
                return "TRUE"
            raise NumberFormatError("invalid value in bool cell")
        if cell_type in _TEXT_TYPES:
            text = self.text_format
            reduced = text.reduced_format_string
            if reduced == GENERAL:
                return value
            if reduced == TEXT:
                return text.prefix + value + text.suffix
            if reduced == "":
                return text.prefix + text.suffix
            raise NumberFormatError(
                "invalid or unsupported format, unsupported string format"
            )
        if cell_type is CellType.NUMERIC:
            return self.format_numeric(value, date1904)
        raise NumberFormatError("unknown cell type")

    def format_numeric(self, value: str, date1904: bool = False) -> str:
        """Render a numeric cell value."""
        raw = value.strip()
        if not raw:
            return ""
        if self.is_time_format:
            return self.format_time(raw, date1904)

        number = _parse_float(raw)
        if number > 0:
            options = self.positive_format
        elif number < 0:
            if self.negative_format_expects_positive:
                number = abs(number)
            options = self.negative_format
        else:
            options = self.zero_format
        assert options is not None

        if options.show_percent:
            number *= 100

        reduced = options.reduced_format_string
        if reduced == GENERAL:
            try:
                return general_numeric_scientific(value, True)
            except NumberFormatError:
                return raw
        if reduced == TEXT:
            formatted = value
        elif reduced in _FIXED_PRECISION:
            formatted = _fixed(number, _FIXED_PRECISION[reduced])
        elif reduced in _EXPONENT_FORMATS:
            formatted = _exponent(number)
        elif reduced == "":
            formatted = ""
        else:
            return raw
        return options.prefix + formatted + options.suffix

    def format_time(self, value: str, date1904: bool = False) -> str:
        """Render a date serial number through this date/time format."""
        moment = _from_excel_serial(_parse_float(value), date1904)
        layout = self.num_fmt
        if is_12_hour_time(layout):
            layout = layout.replace("hh", "03", 1).replace("h", "3", 1)
        else:
            layout = layout.replace("hh", "15", 1).replace("h", "15", 1)
        for excel_code, token in _TIME_REPLACEMENTS:
            layout = layout.replace(excel_code, token, 1)
        if moment.hour < 1:
            layout = layout.replace("]:", "]", 1)
            for optional in ("[03]", "[3]", "[15]"):
                layout = layout.replace(optional, "", 1)
        else:
            layout = layout.replace("[3]", "3", 1).replace("[15]", "15", 1)
        return _format_layout(moment, layout)


def parse_full_number_format_string(num_fmt: str) -> ParsedNumberFormat:
    """Parse a complete format code, falling back to General on errors."""
    if is_time_format(num_fmt):
        return ParsedNumberFormat(num_fmt=num_fmt, is_time_format=True)

    error: NumberFormatError | None = None
    options: list[FormatOptions] = []
    try:
        sections = split_format_on_semicolon(num_fmt)
    except NumberFormatError as exc:
        options.append(FALLBACK_ERROR_FORMAT)
        error = exc
    else:
        for section in sections:
            try:
                options.append(parse_number_format_section(section))
            except NumberFormatError as exc:
                options.append(FALLBACK_ERROR_FORMAT)
                error = exc

    if len(options) > 4:
        options = [FALLBACK_ERROR_FORMAT]
        error = NumberFormatError("invalid number format, too many format sections")

    if len(options) == 1:
        only = options[0]
        text = only if "@" in only.full_format_string else _GENERAL_OPTIONS
        return ParsedNumberFormat(
            num_fmt=num_fmt,
            positive_format=only,
            negative_format=only,
            zero_format=only,
            text_format=text,
            parse_error=error,
        )
    if len(options) == 2:
        positive, negative = options
        zero, text = positive, _GENERAL_OPTIONS
    elif len(options) == 3:
        positive, negative, zero = options
        text = _GENERAL_OPTIONS
    else:
        positive, negative, zero, text = options
    return ParsedNumberFormat(
        num_fmt=num_fmt,
        negative_format_expects_positive=True,
        positive_format=positive,
        negative_format=negative,
        zero_format=zero,
        text_format=text,
        parse_error=error,
    )