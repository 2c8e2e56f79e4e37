"""
Loader for the Field tables (ids ``Field_*``).

All field tables (header fields, QSO fields, ...) share one logical table.
Rows read from the ``Field_Header`` table carry ``Header Field = Y``.
"""

from __future__ import annotations

import logging

from base_loader import BaseTableLoader, DataRow, HeaderLayout
from cell_normalizer import enumeration_reference, min_max_values
from config import (
    COL_COMMENTS,
    COL_HEADER_FIELD,
    COL_IMPORT_ONLY,
    COL_MAXIMUM_VALUE,
    COL_MINIMUM_VALUE,
    FIELD_COLUMN_ROLES,
    FIELD_OVERRIDES,
    FIELD_SYNTHETIC_COLUMNS,
    HEADER_FIELD_VALUE,
    HEADER_FIELDS_ID,
    IMPORT_ONLY_VALUE,
    ColumnRole,
    TableKind,
)

logger = logging.getLogger(__name__)


class FieldLoader(BaseTableLoader):
    """Loads the rows of every ``Field_`` table into the ``Fields`` table."""

    kind = TableKind.FIELDS

    def __init__(self, name: str = "Fields") -> None:
        super().__init__(name)
        self._header_fields = False

    def export_columns(self) -> list[str]:
        return list(self.table.source_columns) + list(FIELD_SYNTHETIC_COLUMNS)

    def record_key(self, header: list[str], values: list[str]) -> str:
        return values[0]

    # ── BaseTableLoader hooks ──

    def _begin_table(self, table_id: str) -> None:
        self._header_fields = table_id == HEADER_FIELDS_ID

    def _role_for(self, column_name: str) -> ColumnRole | None:
        return FIELD_COLUMN_ROLES.get(column_name)

    def _synthetic_columns(self) -> tuple[str, ...]:
        return FIELD_SYNTHETIC_COLUMNS

    def _populate_row(
        self,
        row: list[str | None],
        data: DataRow,
        layout: HeaderLayout,
    ) -> None:
        import_only = False
        minimum = maximum = ""

        field_name = data.text_for(layout, ColumnRole.FIELD_NAME) or data.texts[0]
        overrides = FIELD_OVERRIDES.get(field_name, {})
        if overrides:
            logger.debug("Field '%s': applying fixed column values", field_name)

        for cell_index, value in enumerate(data.texts):
            role = layout.role_at(cell_index)
            column = layout.names[cell_index]

            if role is ColumnRole.DESCRIPTION:
                minimum, maximum = min_max_values(data.cells[cell_index])
                if value.lower().startswith("import-only"):
                    import_only = True
            elif role is ColumnRole.ENUMERATION and value:
                value = overrides.get(column) or enumeration_reference(value)
            elif role is ColumnRole.DATA_TYPE and column in overrides:
                value = overrides[column]

            row[layout.slots[cell_index]] = value

        self._set(row, COL_HEADER_FIELD, HEADER_FIELD_VALUE if self._header_fields else "")
        self._set(row, COL_MINIMUM_VALUE, minimum)
        self._set(row, COL_MAXIMUM_VALUE, maximum)
        self._set(row, COL_IMPORT_ONLY, IMPORT_ONLY_VALUE if import_only else "")
        self._set(row, COL_COMMENTS, "")
