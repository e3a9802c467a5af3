import pytest

from xlsxfmt.workbook import (
    SheetNameError,
    add_relationship_namespace_to_worksheet,
    replace_relationships_namespace,
    validate_sheet_name,
)

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"


def test_valid_name_is_returned():
    assert validate_sheet_name("MySheet", []) == "MySheet"


def test_duplicate_name_rejected():
    existing = {"MySheet"}
    with pytest.raises(SheetNameError) as info:
        validate_sheet_name("MySheet", existing)
    assert str(info.value) == "duplicate sheet name 'MySheet'."


def test_empty_name_rejected():
    with pytest.raises(SheetNameError) as info:
        validate_sheet_name("", [])
    assert str(info.value) == (
        "sheet name must be 31 or fewer characters long.  "
        "It is currently '0' characters long"
    )


def test_max_length_name_accepted():
    name = "αααααβββββγγγγγδδδδδεεεεεζζζζζη"
    assert len(name) == 31
    assert validate_sheet_name(name, []) == name


def test_too_long_name_rejected():
    with pytest.raises(SheetNameError, match="'32' characters long"):
        validate_sheet_name("a" * 32, [])


@pytest.mark.parametrize("invalid", [":", "\\", "/", "?", "*", "[", "]"])
def test_invalid_characters_rejected(invalid):
    with pytest.raises(SheetNameError) as info:
        validate_sheet_name(invalid, [])
    assert str(info.value).endswith(f"but contains '{invalid}'")


def test_invalid_character_inside_name():
    with pytest.raises(SheetNameError, match="contains '/'"):
        validate_sheet_name("Q1/Q2", [])


def test_sheet_name_error_is_value_error():
    with pytest.raises(ValueError):
        validate_sheet_name("x", ["x"])


def test_replace_relationships_namespace_workbook():
    inline = f'xmlns:relationships="{REL_NS}" relationships:id'
    marshalled = (
        f'<workbook xmlns="{MAIN_NS}"><fileVersion appName="Go XLSX"></fileVersion>'
        '<workbookPr showObjects="all" date1904="false"></workbookPr>'
        "<workbookProtection></workbookProtection><bookViews>"
        '<workbookView showHorizontalScroll="true" showVerticalScroll="true" '
        'showSheetTabs="true" tabRatio="204" windowHeight="8192" windowWidth="16384" '
        'xWindow="0" yWindow="0"></workbookView></bookViews><sheets>'
        f'<sheet name="MyFirstSheet" sheetId="1" {inline}="rId1" state="visible"></sheet>'
        f'<sheet name="MySecondSheet" sheetId="2" {inline}="rId2" state="visible"></sheet>'
        "</sheets><definedNames></definedNames>"
        '<calcPr iterateCount="100" refMode="A1" iterateDelta="0.001"></calcPr></workbook>'
    )
    expected = (
        f'<workbook xmlns="{MAIN_NS}" xmlns:r="{REL_NS}">'
        '<fileVersion appName="Go XLSX"></fileVersion>'
        '<workbookPr showObjects="all" date1904="false"></workbookPr>'
        "<workbookProtection></workbookProtection><bookViews>"
        '<workbookView showHorizontalScroll="true" showVerticalScroll="true" '
        'showSheetTabs="true" tabRatio="204" windowHeight="8192" windowWidth="16384" '
        'xWindow="0" yWindow="0"></workbookView></bookViews><sheets>'
        '<sheet name="MyFirstSheet" sheetId="1" r:id="rId1" state="visible"></sheet>'
        '<sheet name="MySecondSheet" sheetId="2" r:id="rId2" state="visible"></sheet>'
        "</sheets><definedNames></definedNames>"
        '<calcPr iterateCount="100" refMode="A1" iterateDelta="0.001"></calcPr></workbook>'
    )
    assert replace_relationships_namespace(marshalled) == expected


def test_replace_relationships_namespace_leaves_other_text():
    text = "<other>unchanged</other>"
    assert replace_relationships_namespace(text) == text


def test_worksheet_namespace_and_hyperlinks():
    marshalled = (
        f'<worksheet xmlns="{MAIN_NS}"><hyperlinks>'
        '<hyperlink id="rId1" ref="A1"></hyperlink>'
        '<hyperlink id="rId2" ref="B1"></hyperlink>'
        "</hyperlinks></worksheet>"
    )
    expected = (
        f'<worksheet xmlns="{MAIN_NS}" xmlns:r="{REL_NS}"><hyperlinks>'
        '<hyperlink r:id="rId1" ref="A1"></hyperlink>'
        '<hyperlink r:id="rId2" ref="B1"></hyperlink>'
        "</hyperlinks></worksheet>"
    )
    assert add_relationship_namespace_to_worksheet(marshalled) == expected


def test_worksheet_without_hyperlinks_only_gets_namespace():
    marshalled = f'<worksheet xmlns="{MAIN_NS}"><sheetData></sheetData></worksheet>'
    result = add_relationship_namespace_to_worksheet(marshalled)
    assert result == (
        f'<worksheet xmlns="{MAIN_NS}" xmlns:r="{REL_NS}">'
        "<sheetData></sheetData></worksheet>"
    )