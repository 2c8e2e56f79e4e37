"""
Loader for the Enumeration tables (ids ``Enumeration_*``).

One ``EnumerationLoader`` exists per enumeration name.  Most enumerations
are a single table; the administrative subdivision enumerations are split
into one table per DXCC entity, with the entity code as an id suffix::

    Enumeration_Band
    Enumeration_Primary_Administrative_Subdivision_291

Rows of every such table accumulate in the same loader, tagged with the
entity code, so that the exported enumeration holds all entities.
"""

from __future__ import annotations

import logging
import re

from bs4 import Tag

from base_loader import BaseTableLoader, DataRow, HeaderLayout
from cell_normalizer import (
    append_comment,
    canonical_deleted,
    cell_text,
    contains_import_only,
    extract_comments,
    join_comments,
    rejoin_list,
    remove_spaces,
    strip_thousands_separators,
)
from config import (
    COL_COMMENTS,
    COL_CONTAINED_WITHIN,
    COL_DELETED,
    COL_DXCC_ENTITY_CODE,
    COL_ENUMERATION_NAME,
    COL_IMPORT_ONLY,
    DELETED_VALUE,
    ENTITY_EXPORT_COLUMNS,
    ENTITY_KEYED_ENUMERATIONS,
    ENTITY_SYNTHETIC_COLUMNS,
    ENUMERATION_COLUMN_ROLES,
    ENUMERATION_HEADER_RENAMES,
    ENUMERATION_HEADER_SUFFIXES,
    ENUMERATION_ID_PREFIX,
    ENUMERATION_SPECIFIC_COLUMN_ROLES,
    ENUMERATION_SYNTHETIC_COLUMNS,
    IMPORT_ONLY_VALUE,
    PRIMARY_SUBDIVISION_NAME,
    ColumnRole,
    TableKind,
)
from errors import StructuralParseError

logger = logging.getLogger(__name__)


RE_ENTITY_CODE = re.compile(r"^\d+$")

# Columns whose "(...)" groups are moved into Comments, besides cell 0
COMMENT_ROLES = frozenset({
    ColumnRole.ARRL_SECTION_NAME,
    ColumnRole.DESCRIPTION,
    ColumnRole.PRIMARY_SUBDIVISION,
    ColumnRole.SECONDARY_SUBDIVISION,
})

# Columns that may end in " - for contacts made before ..." and similar
DASH_ANNOTATION_ROLES = frozenset({
    ColumnRole.PRIMARY_SUBDIVISION,
    ColumnRole.SECONDARY_SUBDIVISION,
})


def parse_enumeration_id(table_id: str) -> tuple[str, str | None]:
    """Split a table id into the enumeration name and optional entity code.

    >>> parse_enumeration_id("Enumeration_Band")
    ('Band', None)
    >>> parse_enumeration_id("Enumeration_Secondary_Administrative_Subdivision_Alt_170")
    ('Secondary_Administrative_Subdivision_Alt', '170')
    """
    name = table_id[len(ENUMERATION_ID_PREFIX):]

    for entity_name in ENTITY_KEYED_ENUMERATIONS:
        if name.startswith(entity_name):
            code = name[len(entity_name) + 1:]
            if not RE_ENTITY_CODE.match(code):
                raise StructuralParseError(
                    f"Table id '{table_id}': expected a DXCC entity code after '{entity_name}', found '{code}'"
                )
            return entity_name, str(int(code))

    return name, None


class EnumerationLoader(BaseTableLoader):
    """Loads the rows of one named enumeration.

    Parameters
    ----------
    name : str
        Enumeration name, e.g. ``"Band"`` or
        ``"Primary_Administrative_Subdivision"``.
    """

    kind = TableKind.ENUMERATIONS

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.entity_keyed = name in ENTITY_SYNTHETIC_COLUMNS
        self._entity_code: str | None = None
        self._contained_within: str | None = None

    @property
    def base_file_name(self) -> str:
        return f"enumerations_{self.name.lower()}"

    def export_columns(self) -> list[str]:
        if self.entity_keyed:
            middle = list(ENTITY_EXPORT_COLUMNS[self.name])
        else:
            middle = list(self.table.source_columns)
        return [COL_ENUMERATION_NAME] + middle + [COL_IMPORT_ONLY, COL_COMMENTS]

    def record_key(self, header: list[str], values: list[str]) -> str:
        """Return the natural key of an exported record.

        Records are keyed by the column after ``Enumeration Name``.  In the
        subdivision enumerations a code is only unique within its entity,
        and a deleted code may be reused, so the key is
        ``"<code>.<entity>"`` with ``".Deleted.0"`` appended when deleted.

        Known limitation: two deleted records with the same code in one
        entity get the same key.  The suffix is not renumbered;
        ``TableExport.add_record`` rejects the second record with
        ``StructuralParseError``.
        """
        key = values[1]
        if self.entity_keyed:
            key = f"{key}.{values[header.index(COL_DXCC_ENTITY_CODE)]}"
            if values[header.index(COL_DELETED)]:
                key = f"{key}.{DELETED_VALUE}.0"
        return key

    # ── BaseTableLoader hooks ──

    def _begin_table(self, table_id: str) -> None:
        name, code = parse_enumeration_id(table_id)
        if name != self.name:
            raise StructuralParseError(
                f"Table id '{table_id}' does not belong to enumeration '{self.name}'"
            )
        if self.entity_keyed and code is None:
            raise StructuralParseError(
                f"Table id '{table_id}': enumeration '{self.name}' requires a DXCC entity code"
            )
        self._entity_code = code
        self._contained_within = None

    def _header_name(self, text: str) -> str:
        suffix = ENUMERATION_HEADER_SUFFIXES.get(self.name)
        if suffix and suffix in text:
            text = text.replace(suffix, "")
        return ENUMERATION_HEADER_RENAMES.get((self.name, text), text)

    def _role_for(self, column_name: str) -> ColumnRole | None:
        role = ENUMERATION_SPECIFIC_COLUMN_ROLES.get((self.name, column_name))
        if role is None:
            role = ENUMERATION_COLUMN_ROLES.get(column_name)
        return role

    def _synthetic_columns(self) -> tuple[str, ...]:
        return ENUMERATION_SYNTHETIC_COLUMNS + ENTITY_SYNTHETIC_COLUMNS.get(self.name, ())

    def _spanning_row(self, row: Tag, *, header_read: bool) -> None:
        text = cell_text(row)

        if not self.entity_keyed:
            super()._spanning_row(row, header_read=header_read)
        elif not header_read:
            # Title row naming the entity; must agree with the table id
            if f" {self._entity_code} " not in f" {text} ":
                raise StructuralParseError(
                    f"{self.name.replace('_', ' ')} DXCC entity code mismatch between the table ID "
                    f"(\"{self._entity_code}\") and the table header row (\"{text}\")"
                )
        elif self.name == PRIMARY_SUBDIVISION_NAME:
            self._contained_within = text
        else:
            logger.debug("Enumeration '%s': ignoring spanning row '%s'", self.name, text)

    def _populate_row(
        self,
        row: list[str | None],
        data: DataRow,
        layout: HeaderLayout,
    ) -> None:
        comments: list[str] = []
        import_only = False
        deleted = ""
        dash_deleted = False

        for cell_index, value in enumerate(data.texts):
            role = layout.role_at(cell_index)

            if contains_import_only(value):
                import_only = True

            if cell_index == 0 or role in COMMENT_ROLES:
                extraction = extract_comments(
                    value,
                    dash_annotations=role in DASH_ANNOTATION_ROLES,
                    context=f"enumeration '{self.name}' column '{layout.names[cell_index]}'",
                )
                value = extraction.value
                import_only = import_only or extraction.import_only
                dash_deleted = dash_deleted or extraction.deleted
                for comment in extraction.comments:
                    append_comment(comments, comment)

            if role in (ColumnRole.LOWER_FREQ, ColumnRole.UPPER_FREQ):
                value = strip_thousands_separators(value)
            elif role is ColumnRole.CONTEST_ID:
                value = value.upper()
            elif role is ColumnRole.SUBMODES:
                value = rejoin_list(value)
            elif role in (ColumnRole.CREDIT_FOR, ColumnRole.ARRL_DXCC_ENTITY_CODE):
                value = remove_spaces(value)
            elif role is ColumnRole.DELETED:
                value = canonical_deleted(value, table=self.name)
                deleted = value

            row[layout.slots[cell_index]] = value

        self._set(row, COL_ENUMERATION_NAME, self.name)
        self._set(row, COL_IMPORT_ONLY, IMPORT_ONLY_VALUE if import_only else "")
        self._set(row, COL_COMMENTS, join_comments(comments))

        if self.entity_keyed:
            self._populate_entity_columns(row, deleted=deleted or (DELETED_VALUE if dash_deleted else ""))

    def _populate_entity_columns(self, row: list[str | None], *, deleted: str) -> None:
        """Fill the structural columns of the subdivision enumerations."""
        self._set(row, COL_DXCC_ENTITY_CODE, self._entity_code or "")
        self._set(row, COL_DELETED, deleted)
        if self.name == PRIMARY_SUBDIVISION_NAME:
            self._set(row, COL_CONTAINED_WITHIN, self._contained_within or "")

        # Columns absent from this entity's table
        for column in ENTITY_SYNTHETIC_COLUMNS[self.name]:
            slot = self.table.registry.slot_of(column)
            if slot is not None and row[slot] is None:
                row[slot] = ""
