"""
Export orchestration for a loaded ``Specification``.

Writes the Data Types, every Enumeration and the Fields to CSV, TSV,
XLSX, XML and JSON under ``exports/<format>/``, then merges the three
kinds into ``all.xml`` and ``all.json`` and reads ``all.json`` back as a
self-consistency check.

Directory layout::

    exports/
        csv/   datatypes.csv  enumerations.csv  enumerations_band.csv ...  fields.csv
        tsv/   (as csv)
        xlsx/  (as csv)
        xml/   (as csv) + all.xml [+ adifexport.xsd]
        json/  (as csv) + all.json
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional, Sequence

from lxml import etree

from base_loader import BaseTableLoader
from column_order import ProjectedTable, project_columns
from config import (
    BOOLEAN_COLUMNS,
    DEFAULT_SELF_CHECK_SAMPLES,
    EXPORT_FORMATS,
    EXPORTS_DIR_NAME,
    FIELD_BOOLEAN_COLUMNS,
    SCHEMA_FILE_NAME,
    TableKind,
    export_title,
)
from errors import (
    ExportCancelledError,
    OutputDirectoryError,
    StructuralParseError,
)
from export_documents import (
    append_table,
    build_table_export,
    merge_xml_documents,
    new_xml_document,
    read_json,
    write_json,
    write_xml,
)
from loader_enumerations import EnumerationLoader
from models import ExportRoot, TableExport, utc_now
from specification import ProgressCallback, Specification
from table_writers import CsvWriter, ExcelWriter, TableWriter, TsvWriter

logger = logging.getLogger(__name__)

CancelCallback = Callable[[], bool]

# (kind, table name or None, record key, column, expected value)
SelfCheckSample = tuple[str, Optional[str], str, str, str]

# JSON object names of each kind under "Adif"
JSON_KIND_KEYS: dict[str, str] = {
    TableKind.DATA_TYPES.value: "DataTypes",
    TableKind.ENUMERATIONS.value: "Enumerations",
    TableKind.FIELDS.value: "Fields",
}

DATA_TYPES_BASE_NAME = "datatypes"
FIELDS_BASE_NAME = "fields"
ENUMERATIONS_BASE_NAME = "enumerations"
ALL_BASE_NAME = "all"


def boolean_columns_for(kind: TableKind) -> frozenset[str]:
    return FIELD_BOOLEAN_COLUMNS if kind is TableKind.FIELDS else BOOLEAN_COLUMNS


def project(loader: BaseTableLoader) -> ProjectedTable:
    """Return the loader's table in its export column order."""
    return project_columns(loader.table, loader.export_columns())


# ── EnumerationExportContext ──────────────────────────────────────────────


class EnumerationExportContext:
    """Outputs that combine every enumeration.

    Opened once per export, fed each enumeration in name order, and
    closed after the last one.
    """

    def __init__(self, exporter: SpecificationExporter) -> None:
        self.writers: list[TableWriter] = exporter.open_writers(
            ENUMERATIONS_BASE_NAME, "Enumerations"
        )
        self.xml_root = exporter.new_xml_document()
        self.xml_enumerations = etree.SubElement(self.xml_root, TableKind.ENUMERATIONS.value)
        self.tables: dict[str, TableExport] = {}

    def add(self, name: str, projected: ProjectedTable, table_export: TableExport) -> None:
        for writer in self.writers:
            writer.write_table(projected.header, projected.rows)
        append_table(
            self.xml_enumerations,
            "enumeration",
            projected.header,
            projected.rows,
            boolean_columns=BOOLEAN_COLUMNS,
            table=name,
            name=name,
        )
        self.tables[name] = table_export

    def close(self) -> None:
        for writer in self.writers:
            writer.close()


# ── SpecificationExporter ─────────────────────────────────────────────────


class SpecificationExporter:
    """Writes every export file for one loaded specification.

    Parameters
    ----------
    spec : Specification
        The loaded document; never modified.
    exports_path : str | Path | None
        Root of the export tree; defaults to ``exports`` beside the input.
    progress : callable, optional
        Receives one-line progress messages.
    cancel_requested : callable, optional
        Polled after each progress message; returning true cancels the
        export with ``ExportCancelledError``.
    schema_path : str | Path | None
        XML schema copied into ``exports/xml``.
    self_check_samples : sequence, optional
        ``(kind, table, key, column, expected)`` values looked up in
        ``all.json``.  ``None`` skips the self-consistency check.
    """

    def __init__(
        self,
        spec: Specification,
        exports_path: str | Path | None = None,
        *,
        progress: ProgressCallback | None = None,
        cancel_requested: CancelCallback | None = None,
        schema_path: str | Path | None = None,
        self_check_samples: Sequence[SelfCheckSample] | None = DEFAULT_SELF_CHECK_SAMPLES,
    ) -> None:
        if exports_path is None:
            base = spec.path.parent if spec.path is not None else Path.cwd()
            exports_path = base / EXPORTS_DIR_NAME
        self.spec = spec
        self.exports_path = Path(exports_path)
        self.progress = progress
        self.cancel_requested = cancel_requested
        self.schema_path = Path(schema_path) if schema_path is not None else None
        self.self_check_samples = self_check_samples
        self.created = ""

    # ── public entry point ──

    def export(self) -> ExportRoot:
        """Write every export file and return the combined structured export."""
        self.created = utc_now()
        self._report("Exporting ...")

        self._reset_directories()
        self._copy_schema()

        data_types_xml, data_types = self._export_data_types()
        enumerations_xml, enumerations = self._export_enumerations()
        fields_xml, fields = self._export_fields()

        combined = self.new_export_root(
            data_types=data_types, enumerations=enumerations, fields=fields
        )
        self._export_all(combined, [data_types_xml, enumerations_xml, fields_xml])

        if self.self_check_samples is not None:
            self._self_check(combined)

        self._report("Completed", poll=False)
        return combined

    def path_for(self, fmt: str, base_name: str) -> Path:
        return self.exports_path / fmt / f"{base_name}.{fmt}"

    # ── shared document factories ──

    def open_writers(self, base_name: str, content: str) -> list[TableWriter]:
        """Open the CSV, TSV and XLSX writers of one output."""
        version, status = self.spec.version, self.spec.status
        return [
            CsvWriter(self.path_for("csv", base_name), version=version, status=status),
            TsvWriter(self.path_for("tsv", base_name), version=version, status=status),
            ExcelWriter(
                self.path_for("xlsx", base_name),
                version=version,
                status=status,
                sheet_name=content,
                title=export_title(content, version, status),
            ),
        ]

    def new_xml_document(self) -> etree._Element:
        return new_xml_document(self.spec.version, self.spec.status, self.spec.date, self.created)

    def new_export_root(self, **tables) -> ExportRoot:
        return ExportRoot(
            version=self.spec.version,
            status=self.spec.status,
            date=self.spec.date,
            created=self.created,
            **tables,
        )

    # ── per kind ──

    def _export_data_types(self) -> tuple[etree._Element, TableExport]:
        self._report("Exporting data types ...")
        loader = self.spec.data_types
        return self._export_table(
            loader,
            base_name=DATA_TYPES_BASE_NAME,
            content="Data Types",
            json_attr="data_types",
        )

    def _export_fields(self) -> tuple[etree._Element, TableExport]:
        self._report("Exporting fields ...")
        loader = self.spec.fields
        return self._export_table(
            loader,
            base_name=FIELDS_BASE_NAME,
            content="Fields",
            json_attr="fields",
        )

    def _export_table(
        self,
        loader: BaseTableLoader,
        *,
        base_name: str,
        content: str,
        json_attr: str,
    ) -> tuple[etree._Element, TableExport]:
        """Export the Data Types or Fields table to every format."""
        projected = project(loader)
        booleans = boolean_columns_for(loader.kind)

        self._write_tables(base_name, content, projected)

        root = self.new_xml_document()
        append_table(
            root,
            loader.kind.value,
            projected.header,
            projected.rows,
            boolean_columns=booleans,
            table=loader.name,
        )
        write_xml(root, self.path_for("xml", base_name))

        table_export = build_table_export(
            projected.header,
            projected.rows,
            key_for=loader.record_key,
            boolean_columns=booleans,
            table=loader.name,
        )
        write_json(self.new_export_root(**{json_attr: table_export}), self.path_for("json", base_name))
        return root, table_export

    def _export_enumerations(self) -> tuple[etree._Element, dict[str, TableExport]]:
        context = EnumerationExportContext(self)
        try:
            for name, loader in self.spec.enumerations.items():
                self._report(f"Exporting enumeration {name} ...")
                self._export_enumeration(loader, context)
        finally:
            context.close()

        write_xml(context.xml_root, self.path_for("xml", ENUMERATIONS_BASE_NAME))
        write_json(
            self.new_export_root(enumerations=context.tables),
            self.path_for("json", ENUMERATIONS_BASE_NAME),
        )
        return context.xml_root, context.tables

    def _export_enumeration(self, loader: EnumerationLoader, context: EnumerationExportContext) -> None:
        projected = project(loader)
        base_name = loader.base_file_name

        self._write_tables(base_name, f"{loader.name} Enumeration", projected)

        root = self.new_xml_document()
        enumerations_el = etree.SubElement(root, TableKind.ENUMERATIONS.value)
        append_table(
            enumerations_el,
            "enumeration",
            projected.header,
            projected.rows,
            boolean_columns=BOOLEAN_COLUMNS,
            table=loader.name,
            name=loader.name,
        )
        write_xml(root, self.path_for("xml", base_name))

        table_export = build_table_export(
            projected.header,
            projected.rows,
            key_for=loader.record_key,
            boolean_columns=BOOLEAN_COLUMNS,
            table=loader.name,
        )
        write_json(
            self.new_export_root(enumerations={loader.name: table_export}),
            self.path_for("json", base_name),
        )

        context.add(loader.name, projected, table_export)

    def _write_tables(self, base_name: str, content: str, projected: ProjectedTable) -> None:
        writers = self.open_writers(base_name, content)
        try:
            for writer in writers:
                writer.write_table(projected.header, projected.rows)
        finally:
            for writer in writers:
                writer.close()

    def _export_all(self, combined: ExportRoot, documents: list[etree._Element]) -> None:
        self._report("Exporting all.xml and all.json ...")
        write_xml(merge_xml_documents(documents), self.path_for("xml", ALL_BASE_NAME))
        write_json(combined, self.path_for("json", ALL_BASE_NAME))

    # ── directories ──

    def _reset_directories(self) -> None:
        """Empty the exports directory and recreate one directory per format."""
        root = self.exports_path
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError("Failed to create the exports directory", path=str(root)) from exc

        for entry in sorted(root.iterdir()):
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as exc:
                raise OutputDirectoryError(
                    "Failed to delete old directories and files", path=str(entry)
                ) from exc

        for fmt in EXPORT_FORMATS:
            directory = root / fmt
            try:
                directory.mkdir()
            except OSError as exc:
                raise OutputDirectoryError("Failed to create directory", path=str(directory)) from exc

    def _copy_schema(self) -> None:
        if self.schema_path is None:
            return
        target = self.exports_path / "xml" / SCHEMA_FILE_NAME
        shutil.copyfile(self.schema_path, target)
        logger.info("Copied %s to %s", self.schema_path, target)

    # ── validation ──

    def _self_check(self, combined: ExportRoot) -> None:
        """Read ``all.json`` back and compare it with what was exported."""
        path = self.path_for("json", ALL_BASE_NAME)
        loaded = read_json(path)

        if loaded != combined.to_dict():
            raise StructuralParseError(f"{path} does not match the exported data")

        adif = loaded["Adif"]
        for kind, table, key, column, expected in self.self_check_samples or ():
            parts = [JSON_KIND_KEYS.get(kind, kind)]
            if table is not None:
                parts.append(table)
            parts += ["Records", key, column]

            node = adif
            for part in parts:
                if not isinstance(node, dict) or part not in node:
                    raise StructuralParseError(
                        f"Self-check failed: no value at Adif/{'/'.join(parts)}"
                    )
                node = node[part]

            if node != expected:
                raise StructuralParseError(
                    f"Self-check failed: Adif/{'/'.join(parts)} is '{node}', expected '{expected}'"
                )

        logger.info("Self-check of %s passed", path)

    # ── progress ──

    def _report(self, message: str, *, poll: bool = True) -> None:
        logger.info(message)
        if self.progress is not None:
            self.progress(message)
        if poll and self.cancel_requested is not None and self.cancel_requested():
            raise ExportCancelledError("Export cancelled by user.")
