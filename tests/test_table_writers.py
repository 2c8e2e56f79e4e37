import pytest
from openpyxl import load_workbook

from errors import CellContentError
from table_writers import CsvWriter, ExcelWriter, TsvWriter

UTF8_BOM = b"\xef\xbb\xbf"


def test_csv_quotes_every_value(tmp_path):
    path = tmp_path / "band.csv"

    with CsvWriter(path, version="3.1.5", status="Released") as writer:
        writer.write_table(["A", "B"], [['x "y"', ""]])

    assert path.read_bytes() == UTF8_BOM + (
        '"A","B","ADIF Version","ADIF Status"\r\n'
        '"x ""y""","","3.1.5","Released"\r\n'
    ).encode("utf-8")


def test_csv_keeps_non_ascii_text(tmp_path):
    path = tmp_path / "subdivision.csv"

    with CsvWriter(path, version="3.1.5", status="Released") as writer:
        writer.write_table(["Name"], [["Île-de-France"]])

    assert "Île-de-France" in path.read_text(encoding="utf-8-sig")


def test_tsv_is_unquoted(tmp_path):
    path = tmp_path / "band.tsv"

    with TsvWriter(path, version="3.1.5", status="Released") as writer:
        writer.write_table(["A", "B"], [['x "y"', ""], ["1,2", "z"]])

    assert path.read_bytes() == UTF8_BOM + (
        "A\tB\tADIF Version\tADIF Status\r\n"
        'x "y"\t\t3.1.5\tReleased\r\n'
        "1,2\tz\t3.1.5\tReleased\r\n"
    ).encode("utf-8")


@pytest.mark.parametrize("value", ["a\tb", "a\nb", "a\rb"])
def test_tsv_rejects_values_needing_quotes(tmp_path, value):
    writer = TsvWriter(tmp_path / "bad.tsv", version="3.1.5", status="Released")
    try:
        with pytest.raises(CellContentError, match="without quoting"):
            writer.write_table(["A"], [[value]])
    finally:
        writer.close()


def test_combined_file_repeats_headers(tmp_path):
    path = tmp_path / "enumerations.csv"

    with CsvWriter(path, version="3.1.5", status="Released") as writer:
        writer.write_table(["Enumeration Name", "Band"], [["Band", "20m"]])
        writer.write_table(["Enumeration Name", "Mode"], [["Mode", "SSB"]])

    lines = path.read_text(encoding="utf-8-sig").splitlines()
    assert lines == [
        '"Enumeration Name","Band","ADIF Version","ADIF Status"',
        '"Band","20m","3.1.5","Released"',
        '"Enumeration Name","Mode","ADIF Version","ADIF Status"',
        '"Mode","SSB","3.1.5","Released"',
    ]


def test_xlsx_sheet_properties_and_formats(tmp_path):
    path = tmp_path / "enumerations.xlsx"
    sheet_name = "Secondary_Administrative_Subdivision_Alt"

    with ExcelWriter(
        path,
        version="3.1.5",
        status="Released",
        sheet_name=sheet_name,
        title="Enumerations exported from Released ADIF Specification 3.1.5",
    ) as writer:
        writer.write_table(["Code", "Lower Freq (MHz)"], [["AK", "14.0"]])

    workbook = load_workbook(path)
    sheet = workbook.active

    assert sheet.title == sheet_name[:31]
    assert workbook.properties.title == "Enumerations exported from Released ADIF Specification 3.1.5"
    assert workbook.properties.creator == "ADIF Development Group"

    assert [cell.value for cell in sheet[1]] == ["Code", "Lower Freq (MHz)", "ADIF Version", "ADIF Status"]
    assert [cell.value for cell in sheet[2]] == ["AK", "14.0", "3.1.5", "Released"]
    assert all(cell.font.bold for cell in sheet[1])
    assert not sheet["A2"].font.bold
    assert sheet["B2"].number_format == "@"
