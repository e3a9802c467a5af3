"""Parsing of spreadsheet number format codes into their component parts."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "NumberFormatError",
    "FormatOptions",
    "GENERAL",
    "TEXT",
    "FALLBACK_ERROR_FORMAT",
    "FORMATTING_CHARACTERS",
    "TIME_FORMAT_CHARACTERS",
    "compare_format_string",
    "split_format_on_semicolon",
    "parse_number_format_section",
    "split_format_and_suffix_format",
    "parse_literals",
    "is_time_format",
    "is_12_hour_time",
]

GENERAL = "general"
TEXT = "@"


class NumberFormatError(ValueError):
    """Raised when a number format code cannot be parsed."""


@dataclass(frozen=True)
class FormatOptions:
    """One section of a number format, split into literals and the number pattern."""

    full_format_string: str = ""
    reduced_format_string: str = ""
    prefix: str = ""
    suffix: str = ""
    show_percent: bool = False
    is_time_format: bool = False


FALLBACK_ERROR_FORMAT = FormatOptions(
    full_format_string=GENERAL, reduced_format_string=GENERAL
)

# Order matters: the two-character forms must be tried before their single characters.
FORMATTING_CHARACTERS = (
    "0/", "#/", "?/", "E-", "E+", "e-", "e+", "0", "#", "?", ".", ",", "@", "*",
)

TIME_FORMAT_CHARACTERS = (
    "M", "D", "Y", "YY", "YYYY", "MM", "yyyy", "m", "d", "yy", "h", "m",
    "AM/PM", "A/P", "am/pm", "a/p", "r", "g", "e", "b1", "b2",
    "[hh]", "[h]", "[mm]", "[m]",
    "s.0000", "s.000", "s.00", "s.0", "s",
    "[ss].0000", "[ss].000", "[ss].00", "[ss].0", "[ss]",
    "[s].0000", "[s].000", "[s].00", "[s].0", "[s]",
    "上", "午", "下",
)

_UNESCAPED_LITERALS = frozenset("$-+/()!^&'~{}<>=: ")


def _is_general(fmt: str) -> bool:
    return fmt == "" or fmt.casefold() == GENERAL


def compare_format_string(fmt1: str, fmt2: str) -> bool:
    """Compare format codes, treating "" and any casing of "general" as equal."""
    if fmt1 == fmt2:
        return True
    if _is_general(fmt1):
        fmt1 = GENERAL
    if _is_general(fmt2):
        fmt2 = GENERAL
    return fmt1 == fmt2


def split_format_on_semicolon(format_string: str) -> list[str]:
    """Split a format code into its sections, ignoring escaped and quoted semicolons."""
    sections: list[str] = []
    start = 0
    i = 0
    while i < len(format_string):
        ch = format_string[i]
        if ch == ";":
            sections.append(format_string[start:i])
            start = i + 1
        elif ch == "\\":
            i += 1
        elif ch == '"':
            end = format_string.find('"', i + 1)
            if end == -1:
                raise NumberFormatError("invalid format string, unmatched double quote")
            i = end
        i += 1
    sections.append(format_string[start:])
    return sections


def _formatting_prefix(text: str, pos: int = 0) -> str | None:
    return next((s for s in FORMATTING_CHARACTERS if text.startswith(s, pos)), None)


def split_format_and_suffix_format(format_string: str) -> tuple[str, str]:
    """Split off the leading run of number-formatting characters from the rest."""
    i = 0
    while i < len(format_string):
        special = _formatting_prefix(format_string, i)
        if special is None:
            break
        i += len(special)
    return format_string[:i], format_string[i:]


def parse_literals(format_string: str) -> tuple[str, str, bool]:
    """Collect leading literal text.

    Returns ``(literals, remaining_format, show_percent)`` where the remaining
    format starts at the first number-formatting character.
    """
    prefix: list[str] = []
    show_percent = False
    i = 0
    while i < len(format_string):
        rest = format_string[i:]
        ch = rest[0]
        if ch == "\\":
            if len(rest) > 1:
                i += 1
                prefix.append(rest[1])
        elif ch == "_":
            if len(rest) > 1:
                i += 1
        elif ch == "*":
            pass
        elif ch == '"':
            end = rest.find('"', 1)
            if end == -1:
                raise NumberFormatError("invalid formatting code, unmatched double quote")
            prefix.append(rest[1:end])
            i += end
        elif ch == "%":
            show_percent = True
            prefix.append("%")
        elif ch == "[":
            bracket = rest.find("]")
            if bracket == -1:
                raise NumberFormatError("invalid formatting code, invalid brackets")
            if len(rest) > 2 and rest[1] == "$":
                dash = rest.find("-")
                if dash != -1 and dash < bracket:
                    prefix.append(rest[2:dash])
                else:
                    raise NumberFormatError(
                        "invalid formatting code, invalid currency annotation"
                    )
            i += bracket
        elif ch in _UNESCAPED_LITERALS:
            prefix.append(ch)
        else:
            if _formatting_prefix(rest) is not None:
                return "".join(prefix), format_string[i:], show_percent
            raise NumberFormatError(
                "invalid formatting code: unsupported or unescaped characters"
            )
        i += 1
    return "".join(prefix), "", show_percent


def parse_number_format_section(full_format: str) -> FormatOptions:
    """Parse one format section into prefix, number pattern, suffix and percent flag."""
    reduced = full_format.strip()
    if compare_format_string(reduced, GENERAL):
        return FormatOptions(full_format_string=GENERAL, reduced_format_string=GENERAL)

    prefix, reduced, percent_before = parse_literals(reduced)
    reduced, suffix_format = split_format_and_suffix_format(reduced)
    suffix, remaining, percent_after = parse_literals(suffix_format)
    if remaining:
        raise NumberFormatError("invalid or unsupported format string")

    return FormatOptions(
        full_format_string=full_format,
        reduced_format_string=reduced,
        prefix=prefix,
        suffix=suffix,
        show_percent=percent_before or percent_after,
        is_time_format=False,
    )


def is_time_format(format_string: str) -> bool:
    """Tell whether a format code formats its value as a date or time."""
    found = False
    i = 0
    while i < len(format_string):
        rest = format_string[i:]
        ch = rest[0]
        if ch in "\\_":
            if len(rest) > 1:
                i += 1
        elif ch == "*":
            pass
        elif ch == '"':
            end = rest.find('"', 1)
            if end == -1:
                return False
            i += end + 1
        elif ch in _UNESCAPED_LITERALS or ch == ",":
            pass
        else:
            special = next(
                (s for s in TIME_FORMAT_CHARACTERS if rest.startswith(s)), None
            )
            if special is not None:
                found = True
                i += len(special) - 1
            elif ch == "[":
                end = rest.find("]", 1)
                if end == -1:
                    return False
                i += end
            else:
                return False
        i += 1
    return found


def is_12_hour_time(format_string: str) -> bool:
    """Tell whether a time format code uses a 12-hour clock."""
    return any(marker in format_string for marker in ("am/pm", "AM/PM", "a/p", "A/P"))