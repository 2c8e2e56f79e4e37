import pytest

from column_order import project_columns
from loader_fields import FieldLoader
from tests.conftest import FIELD_TABLES, parse_table, rows_as_dicts


@pytest.fixture
def fields() -> dict[str, dict[str, str]]:
    loader = FieldLoader()
    for table in parse_table(FIELD_TABLES).parent.find_all("table"):
        loader.load(table, table["id"])
    return {row["Field Name"]: row for row in rows_as_dicts(loader)}


def test_all_field_tables_share_one_table(fields):
    assert list(fields) == [
        "ADIF_VER",
        "AGE",
        "ARRL_SECT",
        "CALL",
        "CREDIT_SUBMITTED",
        "STATE",
        "SUBMODE",
        "VE_PROV",
    ]


def test_header_fields_are_flagged(fields):
    assert fields["ADIF_VER"]["Header Field"] == "Y"
    assert fields["CALL"]["Header Field"] == ""


def test_bounds_from_description(fields):
    assert fields["AGE"]["Minimum Value"] == "0"
    assert fields["AGE"]["Maximum Value"] == "120"
    assert fields["CALL"]["Minimum Value"] == ""


@pytest.mark.parametrize(
    "field_name, enumeration",
    [
        ("ARRL_SECT", "ARRL_Section"),
        ("CALL", ""),
        ("CREDIT_SUBMITTED", "Credit,Award"),
        ("STATE", "Primary_Administrative_Subdivision[DXCC]"),
        ("SUBMODE", "Submode[MODE]"),
    ],
)
def test_enumeration_references(fields, field_name, enumeration):
    assert fields[field_name]["Enumeration"] == enumeration


def test_data_type_override(fields):
    assert fields["CREDIT_SUBMITTED"]["Data Type"] == "CreditList,AwardList"
    assert fields["CALL"]["Data Type"] == "String"


def test_import_only_from_description(fields):
    assert fields["VE_PROV"]["Import-only"] == "Import-only"
    assert fields["AGE"]["Import-only"] == ""


def test_export_columns_and_key():
    loader = FieldLoader()
    for table in parse_table(FIELD_TABLES).parent.find_all("table"):
        loader.load(table, table["id"])

    projected = project_columns(loader.table, loader.export_columns())

    assert projected.header == [
        "Field Name",
        "Data Type",
        "Enumeration",
        "Description",
        "Header Field",
        "Minimum Value",
        "Maximum Value",
        "Import-only",
        "Comments",
    ]
    assert [loader.record_key(projected.header, row) for row in projected.rows][:2] == ["ADIF_VER", "AGE"]
