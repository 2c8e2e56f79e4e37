"""
XML and JSON export documents.

Both formats carry the version, status, release date and creation time
as document-level attributes rather than as columns.  Within records,
empty values are omitted, boolean columns become ``true`` and date
columns are rewritten from ``yyyy-mm-dd``:

* XML: ``yyyy-mm-ddZ``
* JSON: ``yyyy-mm-ddT00:00:00Z``

A bare ``yyyy-mm-dd`` value in any other column is rejected rather than
exported in a form that differs from the date columns.
"""

from __future__ import annotations

import copy
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from lxml import etree

from config import DATE_COLUMNS, RE_RAW_DATE
from errors import CellContentError
from models import ExportRoot, Record, TableExport, iso_utc

logger = logging.getLogger(__name__)

XML_TRUE = "true"
JSON_TRUE = "true"

KeyFunction = Callable[[list[str], list[str]], str]


def parse_column_date(column: str, value: str, *, table: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise CellContentError(
            f"Unexpected date for '{column}' in table '{table}': value='{value}'",
            value=value,
        ) from exc


# ── XML ───────────────────────────────────────────────────────────────────


def new_xml_document(
    version: str,
    status: str,
    date: datetime | None,
    created: str,
) -> etree._Element:
    """Return an empty ``<adif>`` root element."""
    root = etree.Element("adif")
    root.set("version", version)
    root.set("status", status)
    if date is not None:
        root.set("date", iso_utc(date))
    root.set("created", created)
    return root


def xml_value(column: str, value: str, *, boolean_columns: frozenset[str], table: str) -> str:
    upper = column.upper()
    if upper in boolean_columns:
        return XML_TRUE
    if upper in DATE_COLUMNS:
        return parse_column_date(column, value, table=table).strftime("%Y-%m-%dZ")
    return value


def append_table(
    parent: etree._Element,
    tag: str,
    header: Sequence[str],
    rows: Iterable[Sequence[str]],
    *,
    boolean_columns: frozenset[str],
    table: str,
    name: str | None = None,
) -> etree._Element:
    """Append ``<tag>`` holding a ``<header>`` and one ``<record>`` per row."""
    table_el = etree.SubElement(parent, tag)
    if name is not None:
        table_el.set("name", name)

    header_el = etree.SubElement(table_el, "header")
    for column in header:
        etree.SubElement(header_el, "value").text = column

    for row in rows:
        record_el = etree.SubElement(table_el, "record")
        for column, value in zip(header, row):
            if not value:
                continue
            value_el = etree.SubElement(record_el, "value")
            value_el.set("name", column)
            value_el.text = xml_value(column, value, boolean_columns=boolean_columns, table=table)

    return table_el


def merge_xml_documents(documents: Sequence[etree._Element]) -> etree._Element:
    """Return a copy of the first document with the children of the rest appended."""
    merged = copy.deepcopy(documents[0])
    for document in documents[1:]:
        for child in document:
            merged.append(copy.deepcopy(child))
    return merged


def write_xml(root: etree._Element, path: str | Path) -> None:
    etree.ElementTree(root).write(
        str(path),
        xml_declaration=True,
        encoding="utf-8",
        pretty_print=True,
    )
    logger.debug("Wrote %s", path)


# ── JSON ──────────────────────────────────────────────────────────────────


def json_record(
    header: Sequence[str],
    row: Sequence[str],
    *,
    boolean_columns: frozenset[str],
    table: str,
) -> Record:
    record: Record = {}
    for column, value in zip(header, row):
        if not value:
            continue
        upper = column.upper()
        if upper in boolean_columns:
            record[column] = JSON_TRUE
        elif upper in DATE_COLUMNS:
            record[column] = iso_utc(parse_column_date(column, value, table=table))
        elif RE_RAW_DATE.match(value):
            raise CellContentError(
                f"Unexpected date while exporting JSON for '{column}' in table '{table}': value='{value}'",
                value=value,
            )
        else:
            record[column] = value
    return record


def build_table_export(
    header: list[str],
    rows: Iterable[list[str]],
    *,
    key_for: KeyFunction,
    boolean_columns: frozenset[str],
    table: str,
) -> TableExport:
    """Return the keyed records of one table."""
    export = TableExport(header=list(header))
    for row in rows:
        record = json_record(header, row, boolean_columns=boolean_columns, table=table)
        export.add_record(key_for(header, row), record, table=table)
    return export


def write_json(root: ExportRoot, path: str | Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(root.to_dict(), f, ensure_ascii=False, indent=2)
    logger.debug("Wrote %s", path)


def read_json(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)
