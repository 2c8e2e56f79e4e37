"""
Abstract base loader for ADIF Specification tables.

Concrete subclasses (``DataTypeLoader``, ``FieldLoader``,
``EnumerationLoader``) implement the table-specific column roles and cell
rules while inheriting the header/data row state machine shared by every
table in the document.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from bs4 import Tag

from cell_normalizer import cell_text
from config import ColumnRole, TableKind
from errors import StructuralParseError
from models import LogicalTable

logger = logging.getLogger(__name__)


# ── HeaderLayout ──────────────────────────────────────────────────────────


@dataclass
class HeaderLayout:
    """Column names, slots and roles of one header row.

    ``names[i]`` and ``slots[i]`` describe HTML cell position ``i``;
    ``roles`` maps each resolved role to its cell position.
    """

    names: list[str] = field(default_factory=list)
    slots: list[int] = field(default_factory=list)
    roles: dict[ColumnRole, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.names)

    def role_at(self, cell_index: int) -> ColumnRole | None:
        """Return the role of the column at *cell_index*, if it has one."""
        for role, index in self.roles.items():
            if index == cell_index:
                return role
        return None

    def index_of(self, role: ColumnRole) -> int | None:
        return self.roles.get(role)


@dataclass
class DataRow:
    """Cells of one data row, padded to the header's cell count."""

    cells: list[Tag | None]
    texts: list[str]

    def text_for(self, layout: HeaderLayout, role: ColumnRole) -> str:
        index = layout.index_of(role)
        return self.texts[index] if index is not None else ""

    def cell_for(self, layout: HeaderLayout, role: ColumnRole) -> Tag | None:
        index = layout.index_of(role)
        return self.cells[index] if index is not None else None


def spanning_cell(row: Tag) -> Tag | None:
    """Return the ``<th colspan>`` directly inside *row*, if any."""
    th = row.find("th", attrs={"colspan": True}, recursive=False)
    if th is None:
        return None
    try:
        colspan = int(th.get("colspan", "0"))
    except ValueError:
        return None
    return th if colspan > 0 else None


# ── BaseTableLoader ───────────────────────────────────────────────────────


class BaseTableLoader(ABC):
    """Base class for all table loaders.

    Every ``<table>`` element handed to ``load`` is read as a header row
    followed by data rows.  A loader may be fed several table elements;
    rows from all of them accumulate in one ``LogicalTable``.
    """

    kind: TableKind

    def __init__(self, name: str) -> None:
        self.table = LogicalTable(name=name)

    @property
    def name(self) -> str:
        return self.table.name

    # ── public entry point ──

    def load(self, table_el: Tag, table_id: str) -> None:
        """Read every row of *table_el* into the logical table."""
        logger.debug("Loading table '%s' into '%s'", table_id, self.name)
        self._begin_table(table_id)

        layout: HeaderLayout | None = None
        for row in table_el.find_all("tr"):
            span = spanning_cell(row)
            if span is not None:
                self._spanning_row(row, header_read=layout is not None)
                continue

            if layout is None:
                layout = self._read_header(row)
            else:
                self._read_data_row(row, layout)

    def export_columns(self) -> list[str]:
        """Return the column names, in order, written to every export file."""
        return list(self.table.source_columns)

    # ── abstract methods ── (to be implemented by subclasses)

    @abstractmethod
    def _role_for(self, column_name: str) -> ColumnRole | None:
        """Return the role of a source column, or ``None``."""
        ...

    @abstractmethod
    def _synthetic_columns(self) -> tuple[str, ...]:
        """Columns registered after each header row."""
        ...

    @abstractmethod
    def _populate_row(
        self,
        row: list[str | None],
        data: DataRow,
        layout: HeaderLayout,
    ) -> None:
        """Fill every slot of *row* from *data*."""
        ...

    @abstractmethod
    def record_key(self, header: list[str], values: list[str]) -> str:
        """Natural key of an exported record."""
        ...

    # ── hooks ──

    def _begin_table(self, table_id: str) -> None:
        """Called before the rows of each table element are read."""

    def _header_name(self, text: str) -> str:
        """Map header cell text to a column name."""
        return text

    def _spanning_row(self, row: Tag, *, header_read: bool) -> None:
        logger.warning(
            "Table '%s': ignoring spanning row '%s'", self.name, cell_text(row)
        )

    # ── concrete helpers ──

    def _read_header(self, row: Tag) -> HeaderLayout:
        cells = row.find_all(["th", "td"], recursive=False)
        if not cells:
            raise StructuralParseError(
                f"No columns found in header row for table '{self.name}'"
            )

        layout = HeaderLayout()
        for cell_index, cell in enumerate(cells):
            name = self._header_name(cell_text(cell))
            slot = self.table.register_column(name, from_source=True)
            layout.names.append(name)
            layout.slots.append(slot)
            role = self._role_for(name)
            if role is not None:
                layout.roles[role] = cell_index

        for name in self._synthetic_columns():
            self.table.register_column(name)

        return layout

    def _read_data_row(self, row: Tag, layout: HeaderLayout) -> None:
        found = row.find_all("td")
        cells: list[Tag | None] = [
            found[i] if i < len(found) else None for i in range(len(layout))
        ]
        data = DataRow(cells=cells, texts=[cell_text(cell) for cell in cells])

        values = self.table.new_row()
        # Columns seen only in other table elements of this logical table
        owned = set(layout.slots)
        owned.update(self.table.registry.slot_of(name) for name in self._synthetic_columns())
        for slot in range(len(values)):
            if slot not in owned:
                values[slot] = ""

        self._populate_row(values, data, layout)
        self.table.append_row(values)

    def _set(self, row: list[str | None], column: str, value: str) -> None:
        """Store *value* in the slot registered for *column*."""
        slot = self.table.registry.slot_of(column)
        if slot is None:
            raise StructuralParseError(
                f"Table '{self.name}': column '{column}' was never registered"
            )
        row[slot] = value
