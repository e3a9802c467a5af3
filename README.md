# xlsxfmt

Tools for spreadsheet number formats and related workbook details:

- `xlsxfmt.numfmt` splits and parses number format codes. It handles literals,
  escapes, currency annotations such as `[$€-409]`, colour and condition
  brackets, and percentages. It also tells time formats apart from number
  formats (`is_time_format`, `is_12_hour_time`). It raises
  `NumberFormatError` (a `ValueError`) when a code cannot be parsed.
- `xlsxfmt.formatting` turns raw cell values into display strings.
  `parse_full_number_format_string` builds a `ParsedNumberFormat` with its
  positive, negative, zero and text sections. If a section fails to parse,
  that section falls back to General and the error is kept in `parse_error`.
  `ParsedNumberFormat.format_value` renders a value according to its
  `CellType`. `format_numeric` and `format_time` handle numbers and date
  serials, including workbooks that use the 1904 date system.
  `general_numeric_scientific` shows a number the way the General format does.
- `xlsxfmt.hsl` converts colours between RGB and HSL: `rgb_to_hsl`,
  `hsl_to_rgb`, the `HSL` dataclass and `hsl_model`.
- `xlsxfmt.workbook` checks sheet names with `validate_sheet_name`, which
  raises `SheetNameError` for a name that:
  - is a duplicate,
  - is empty,
  - is longer than 31 characters,
  - or contains any of `: \ / ? * [ ]`.

  It also fixes relationship namespaces in workbook and worksheet XML text
  (`replace_relationships_namespace`,
  `add_relationship_namespace_to_worksheet`).

## Installation

```
pip install xlsxfmt
```

## Usage

```python
from xlsxfmt.formatting import CellType, parse_full_number_format_string

fmt = parse_full_number_format_string('0;(0);"zero"')
fmt.format_value("-39", CellType.NUMERIC, False)   # "(39)"
fmt.format_value("0", CellType.NUMERIC, False)     # "zero"

currency = parse_full_number_format_string("[$€-409]0")
currency.format_numeric("18.989999999999998", False)  # "€19"
```

```python
from xlsxfmt.numfmt import is_time_format

is_time_format("h:mm AM/PM")  # True
is_time_format("#,##0.00")    # False
```

```python
from xlsxfmt.hsl import rgb_to_hsl, hsl_to_rgb

h, s, l = rgb_to_hsl(255, 0, 0)
hsl_to_rgb(h, s, l)  # (255, 0, 0)
```

```python
from xlsxfmt.workbook import SheetNameError, validate_sheet_name

try:
    validate_sheet_name("Bad/Name", existing=set())
except SheetNameError as exc:
    print(exc)
```

## What it does not do

This package does not open, read or write `.xlsx` files. It has no workbook,
sheet, row or cell objects and provides no command-line tool. The formatting
functions work on raw cell value strings that you supply. The workbook
helpers work on XML text that you already have.

Number formatting supports only common patterns:

- fixed decimals from `0` to `0.0000`, with or without `#,##0`,
- scientific notation,
- `@`,
- General.

Thousands separators are not inserted. Any other number pattern returns the
raw value unchanged.

## Running the tests

```
pip install -e ".[test]"
pytest
```