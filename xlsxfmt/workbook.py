"""Workbook-level helpers: sheet name rules and relationship namespace fix-ups."""

from __future__ import annotations

from collections.abc import Container

__all__ = [
    "SheetNameError",
    "MAX_SHEET_NAME_LENGTH",
    "RESTRICTED_SHEET_NAME_CHARACTERS",
    "validate_sheet_name",
    "replace_relationships_namespace",
    "add_relationship_namespace_to_worksheet",
]

MAX_SHEET_NAME_LENGTH = 31
RESTRICTED_SHEET_NAME_CHARACTERS = frozenset(":\\/?*[]")

_MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

_INLINE_REL_ID = f'xmlns:relationships="{_REL_NS}" relationships:id'
_WORKBOOK_OPEN = f'<workbook xmlns="{_MAIN_NS}">'
_WORKBOOK_OPEN_WITH_R = f'<workbook xmlns="{_MAIN_NS}" xmlns:r="{_REL_NS}">'
_WORKSHEET_OPEN = f'<worksheet xmlns="{_MAIN_NS}">'
_WORKSHEET_OPEN_WITH_R = f'<worksheet xmlns="{_MAIN_NS}" xmlns:r="{_REL_NS}">'


class SheetNameError(ValueError):
    """Raised when a sheet name is duplicated, too short, too long or holds forbidden characters."""


def validate_sheet_name(sheet_name: str, existing: Container[str] = ()) -> str:
    """Check a new sheet name against the spreadsheet rules and return it.

    The name must be unique among ``existing``, between 1 and 31 characters
    long, and free of the characters ``: \\ / ? * [ ]``.
    """
    if sheet_name in existing:
        raise SheetNameError(f"duplicate sheet name '{sheet_name}'.")
    length = len(sheet_name)
    if length == 0 or length > MAX_SHEET_NAME_LENGTH:
        raise SheetNameError(
            "sheet name must be 31 or fewer characters long.  "
            f"It is currently '{length}' characters long"
        )
    bad = next((ch for ch in sheet_name if ch in RESTRICTED_SHEET_NAME_CHARACTERS), None)
    if bad is not None:
        raise SheetNameError(
            "sheet name must not contain any restricted characters "
            f": \\ / ? * [ ] but contains '{bad}'"
        )
    return sheet_name


def replace_relationships_namespace(workbook_xml: str) -> str:
    """Move inline relationship namespace declarations onto the root ``r`` prefix."""
    fixed = workbook_xml.replace(_INLINE_REL_ID, "r:id")
    return fixed.replace(_WORKBOOK_OPEN, _WORKBOOK_OPEN_WITH_R, 1)


def add_relationship_namespace_to_worksheet(worksheet_xml: str) -> str:
    """Declare the ``r`` prefix on the worksheet root and use it for hyperlink ids."""
    fixed = worksheet_xml.replace(_WORKSHEET_OPEN, _WORKSHEET_OPEN_WITH_R, 1)
    return fixed.replace("<hyperlink id=", "<hyperlink r:id=")