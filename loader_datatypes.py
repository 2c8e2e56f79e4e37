"""
Loader for the Data Types table (id ``_Data_Types``).
"""

from __future__ import annotations

from base_loader import BaseTableLoader, DataRow, HeaderLayout
from cell_normalizer import contains_import_only, min_max_values, strip_import_only
from config import (
    COL_COMMENTS,
    COL_IMPORT_ONLY,
    COL_MAXIMUM_VALUE,
    COL_MINIMUM_VALUE,
    DATA_TYPE_COLUMN_ROLES,
    DATA_TYPE_SYNTHETIC_COLUMNS,
    IMPORT_ONLY_VALUE,
    ColumnRole,
    TableKind,
)


class DataTypeLoader(BaseTableLoader):
    """Loads ``Data Type Name``, ``Data Type Indicator`` and ``Description`` rows.

    A ``" import-only"`` marker on the name sets the Import-only column;
    bounds annotated in the description fill Minimum/Maximum Value.
    """

    kind = TableKind.DATA_TYPES

    def __init__(self, name: str = "Data Types") -> None:
        super().__init__(name)

    def export_columns(self) -> list[str]:
        return list(self.table.source_columns) + list(DATA_TYPE_SYNTHETIC_COLUMNS)

    def record_key(self, header: list[str], values: list[str]) -> str:
        return values[0]

    # ── BaseTableLoader hooks ──

    def _header_name(self, text: str) -> str:
        # "Data Type Indicator (see ...)" -> "Data Type Indicator"
        posn = text.find("(")
        if posn >= 0:
            text = text[:posn].rstrip()
        return text

    def _role_for(self, column_name: str) -> ColumnRole | None:
        return DATA_TYPE_COLUMN_ROLES.get(column_name)

    def _synthetic_columns(self) -> tuple[str, ...]:
        return DATA_TYPE_SYNTHETIC_COLUMNS

    def _populate_row(
        self,
        row: list[str | None],
        data: DataRow,
        layout: HeaderLayout,
    ) -> None:
        import_only = False
        minimum = maximum = ""

        for cell_index, value in enumerate(data.texts):
            role = layout.role_at(cell_index)
            if role is ColumnRole.DATA_TYPE_NAME and contains_import_only(value):
                import_only = True
                value = strip_import_only(value)
            elif role is ColumnRole.DESCRIPTION:
                minimum, maximum = min_max_values(data.cells[cell_index])
            row[layout.slots[cell_index]] = value

        self._set(row, COL_MINIMUM_VALUE, minimum)
        self._set(row, COL_MAXIMUM_VALUE, maximum)
        self._set(row, COL_IMPORT_ONLY, IMPORT_ONLY_VALUE if import_only else "")
        self._set(row, COL_COMMENTS, "")
