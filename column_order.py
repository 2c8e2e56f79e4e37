"""
Column order projection.

Turns a loaded ``LogicalTable`` into the header and rows written to the
export files, in a fixed column order chosen by the table's loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from errors import StructuralParseError
from models import LogicalTable


@dataclass
class ProjectedTable:
    """Ordered header and rows of one table, ready for the writers."""

    name: str
    header: list[str]
    rows: list[list[str]] = field(default_factory=list)

    def column(self, name: str) -> list[str]:
        """Return every value of column *name*."""
        index = self.header.index(name)
        return [row[index] for row in self.rows]


def project_columns(table: LogicalTable, expected: Iterable[str]) -> ProjectedTable:
    """Select and reorder the columns of *table* to match *expected*.

    Columns registered in the table but absent from *expected* are
    dropped.  A name in *expected* that was never registered raises
    ``StructuralParseError`` listing the registered names.
    """
    header = list(expected)
    slots: list[int] = []

    for name in header:
        slot = table.registry.slot_of(name)
        if slot is None:
            known = ", ".join(f'"{n}"' for n in table.registry)
            raise StructuralParseError(
                f"Table '{table.name}': Unable to find column '{name}'. Known columns: {known}"
            )
        slots.append(slot)

    rows = [[row[slot] for slot in slots] for row in table.rows]
    return ProjectedTable(name=table.name, header=header, rows=rows)
