"""Spreadsheet number formats, cell value formatting, HSL colours and workbook helpers."""

__version__ = "0.1.0"
__all__ = ["formatting", "hsl", "numfmt", "workbook"]