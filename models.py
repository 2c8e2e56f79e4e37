"""
Data models for the ADIF Specification export.

Contains the ColumnRegistry and LogicalTable used while loading tables,
and the structured export records serialised to JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator

from errors import IncompleteRowError, StructuralParseError


# ── ColumnRegistry ────────────────────────────────────────────────────────


class ColumnRegistry:
    """Assigns a stable slot number to each distinct column name.

    Rules
    -----
    * A name is registered at most once; a second ``add_column`` call for
      the same name returns the slot assigned the first time.
    * Slots are allocated in first-seen order and never change.
    * Registries are never shared between logical tables.
    """

    def __init__(self) -> None:
        self._names: list[str] = []
        self._index: dict[str, int] = {}

    # ── public API ──

    def add_column(self, name: str) -> int:
        """Return the slot for *name*, registering it if it is new."""
        slot = self._index.get(name)
        if slot is None:
            slot = len(self._names)
            self._names.append(name)
            self._index[name] = slot
        return slot

    def slot_of(self, name: str) -> int | None:
        """Return the slot for *name* or ``None`` if it was never registered."""
        return self._index.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)


# ── LogicalTable ──────────────────────────────────────────────────────────


@dataclass
class LogicalTable:
    """One logical table: DataTypes, Fields, or a single named Enumeration.

    ``source_columns`` keeps the names read from header rows (after
    renames) in first-seen order; it is the natural export order.
    ``rows`` always hold exactly ``len(registry)`` strings.
    """

    name: str
    registry: ColumnRegistry = field(default_factory=ColumnRegistry)
    rows: list[list[str]] = field(default_factory=list)
    source_columns: list[str] = field(default_factory=list)

    def register_column(self, name: str, *, from_source: bool = False) -> int:
        """Register *name*, backfilling ``""`` into rows already buffered."""
        known = name in self.registry
        slot = self.registry.add_column(name)
        if not known:
            for row in self.rows:
                row.append("")
        if from_source and name not in self.source_columns:
            self.source_columns.append(name)
        return slot

    def new_row(self) -> list[str | None]:
        """Return an empty row with every slot unset."""
        return [None] * len(self.registry)

    def append_row(self, values: list[str | None]) -> None:
        """Buffer a fully populated row.

        Raises ``IncompleteRowError`` if any slot is still unset, dumping
        the whole row for diagnosis.
        """
        if len(values) != len(self.registry) or any(v is None for v in values):
            shown = ", ".join(
                f'"{v}"' if v is not None else "null" for v in values
            )
            raise IncompleteRowError(
                f"null value in table '{self.name}': values={shown}",
                values=values,
            )
        self.rows.append(list(values))  # type: ignore[arg-type]


# ── Structured export ─────────────────────────────────────────────────────

# A record maps column name to value; keys are unique and keep insertion order.
Record = dict[str, str]


@dataclass
class TableExport:
    """Header and keyed records of one table in the structured export."""

    header: list[str]
    records: dict[str, Record] = field(default_factory=dict)

    def add_record(self, key: str, record: Record, *, table: str) -> None:
        """Add *record* under *key*; a repeated key is a structural error."""
        if key in self.records:
            raise StructuralParseError(
                f"Table '{table}': duplicate record key '{key}'"
            )
        self.records[key] = record

    def to_dict(self) -> dict[str, Any]:
        return {"Header": list(self.header), "Records": self.records}


@dataclass
class ExportRoot:
    """The ``Adif`` object of a structured export document.

    Each of ``data_types``, ``enumerations`` and ``fields`` is omitted from
    the serialised form when ``None``; ``all.json`` carries all three.
    """

    version: str
    status: str
    date: datetime | None = None
    created: str = ""
    data_types: TableExport | None = None
    enumerations: dict[str, TableExport] | None = None
    fields: TableExport | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dictionary rooted at ``"Adif"``."""
        adif: dict[str, Any] = {
            "Version": self.version,
            "Status": self.status,
        }
        if self.date is not None:
            adif["Date"] = iso_utc(self.date)
        adif["Created"] = self.created

        if self.data_types is not None:
            adif["DataTypes"] = self.data_types.to_dict()
        if self.enumerations is not None:
            adif["Enumerations"] = {
                name: table.to_dict() for name, table in self.enumerations.items()
            }
        if self.fields is not None:
            adif["Fields"] = self.fields.to_dict()

        return {"Adif": adif}


# ── date helpers ──────────────────────────────────────────────────────────


def iso_utc(value: datetime) -> str:
    """Format *value* as an ISO-8601 UTC date-time with whole seconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def utc_now() -> str:
    """Return the current UTC time for ``created`` stamps."""
    return iso_utc(datetime.now(timezone.utc).replace(microsecond=0))
