from datetime import datetime, timezone

import pytest

from errors import IncompleteRowError, StructuralParseError
from models import ColumnRegistry, ExportRoot, LogicalTable, TableExport, iso_utc


def test_add_column_returns_stable_slots():
    """A name keeps the slot it was first given; distinct names get distinct slots."""
    registry = ColumnRegistry()
    code = registry.add_column("Code")
    description = registry.add_column("Description")

    assert code != description
    assert registry.add_column("Code") == code
    assert registry.add_column("Description") == description
    assert registry.names == ("Code", "Description")
    assert len(registry) == 2
    assert "Code" in registry
    assert registry.slot_of("Missing") is None


def test_register_column_backfills_buffered_rows():
    table = LogicalTable(name="Band")
    table.register_column("Band", from_source=True)
    row = table.new_row()
    row[0] = "20m"
    table.append_row(row)

    table.register_column("Comments")

    assert table.rows == [["20m", ""]]
    assert table.source_columns == ["Band"]


def test_register_column_twice_does_not_backfill_again():
    table = LogicalTable(name="Band")
    table.register_column("Band", from_source=True)
    table.append_row(["20m"])

    table.register_column("Band", from_source=True)

    assert table.rows == [["20m"]]
    assert table.source_columns == ["Band"]


def test_append_row_rejects_unset_slot():
    table = LogicalTable(name="Mode")
    table.register_column("Mode")
    table.register_column("Description")
    row = table.new_row()
    row[0] = "SSB"

    with pytest.raises(IncompleteRowError, match="null value in table 'Mode'") as exc:
        table.append_row(row)

    assert exc.value.values == ("SSB", None)
    assert table.rows == []


def test_table_export_rejects_duplicate_key():
    export = TableExport(header=["Code"])
    export.add_record("AK", {"Code": "AK"}, table="State")

    with pytest.raises(StructuralParseError, match="duplicate record key 'AK'"):
        export.add_record("AK", {"Code": "AK"}, table="State")


def test_export_root_omits_absent_tables():
    root = ExportRoot(
        version="3.1.5",
        status="Released",
        created="2024-10-01T12:00:00Z",
        data_types=TableExport(header=["Data Type Name"]),
    )

    adif = root.to_dict()["Adif"]

    assert list(adif) == ["Version", "Status", "Created", "DataTypes"]
    assert adif["DataTypes"] == {"Header": ["Data Type Name"], "Records": {}}


def test_export_root_includes_date():
    root = ExportRoot(
        version="3.1.5",
        status="Released",
        date=datetime(2024, 9, 15, tzinfo=timezone.utc),
        created="2024-10-01T12:00:00Z",
        enumerations={},
    )

    adif = root.to_dict()["Adif"]

    assert adif["Date"] == "2024-09-15T00:00:00Z"
    assert adif["Enumerations"] == {}


def test_iso_utc_treats_naive_datetime_as_utc():
    assert iso_utc(datetime(2024, 9, 15, 8, 30, 5)) == "2024-09-15T08:30:05Z"
