"""
Delimited text and spreadsheet writers.

Every writer takes records as lists of strings.  ``write_table`` adds the
``ADIF Version`` and ``ADIF Status`` columns to the header and to each
record, so a combined file (all enumerations) is simply several
``write_table`` calls on one writer.
"""

from __future__ import annotations

import csv
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Sequence

from openpyxl import Workbook
from openpyxl.packaging.custom import StringProperty
from openpyxl.styles import Font

from config import AUTHOR, COL_ADIF_STATUS, COL_ADIF_VERSION, MAX_SHEET_NAME
from errors import CellContentError

logger = logging.getLogger(__name__)


class TableWriter(ABC):
    """Base class for the CSV, TSV and XLSX writers."""

    def __init__(self, path: str | Path, *, version: str, status: str) -> None:
        self.path = Path(path)
        self.version = version
        self.status = status
        self._closed = False

    # ── public API ──

    def write_table(self, header: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
        """Write *header* and *rows*, each followed by version and status."""
        self.write_header([*header, COL_ADIF_VERSION, COL_ADIF_STATUS])
        for row in rows:
            self.write_record([*row, self.version, self.status])

    def write_header(self, values: list[str]) -> None:
        self.write_record(values)

    @abstractmethod
    def write_record(self, values: list[str]) -> None:
        ...

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._close()
            logger.debug("Wrote %s", self.path)

    @abstractmethod
    def _close(self) -> None:
        ...

    def __enter__(self) -> TableWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class CsvWriter(TableWriter):
    """UTF-8 (with BOM) CSV; every value quoted, records end in CRLF."""

    def __init__(self, path: str | Path, *, version: str, status: str) -> None:
        super().__init__(path, version=version, status=status)
        self._file = open(self.path, "w", encoding="utf-8-sig", newline="")
        self._writer = csv.writer(
            self._file, quoting=csv.QUOTE_ALL, lineterminator="\r\n"
        )

    def write_record(self, values: list[str]) -> None:
        self._writer.writerow(values)

    def _close(self) -> None:
        self._file.close()


class TsvWriter(TableWriter):
    """UTF-8 (with BOM) tab-separated text without quoting."""

    def __init__(self, path: str | Path, *, version: str, status: str) -> None:
        super().__init__(path, version=version, status=status)
        self._file = open(self.path, "w", encoding="utf-8-sig", newline="")
        self._writer = csv.writer(
            self._file,
            delimiter="\t",
            quoting=csv.QUOTE_NONE,
            quotechar=None,
            lineterminator="\r\n",
        )

    def write_record(self, values: list[str]) -> None:
        for value in values:
            if "\t" in value or "\r" in value or "\n" in value:
                raise CellContentError(
                    f"Value cannot be written to {self.path.name} without quoting: value='{value}'",
                    value=value,
                )
        self._writer.writerow(values)

    def _close(self) -> None:
        self._file.close()


class ExcelWriter(TableWriter):
    """Single-sheet XLSX workbook with every cell formatted as text.

    Parameters
    ----------
    sheet_name : str
        Work sheet name; truncated to Excel's limit of 31 characters.
    title : str
        Workbook title property.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        version: str,
        status: str,
        sheet_name: str,
        title: str,
    ) -> None:
        super().__init__(path, version=version, status=status)
        self._workbook = Workbook()
        self._sheet = self._workbook.active
        self._sheet.title = sheet_name[:MAX_SHEET_NAME]

        props = self._workbook.properties
        props.title = title
        props.creator = AUTHOR
        self._workbook.custom_doc_props.append(StringProperty(name=COL_ADIF_VERSION, value=version))
        self._workbook.custom_doc_props.append(StringProperty(name=COL_ADIF_STATUS, value=status))

    def write_header(self, values: list[str]) -> None:
        for cell in self._append(values):
            cell.font = Font(bold=True)

    def write_record(self, values: list[str]) -> None:
        self._append(values)

    def _append(self, values: list[str]) -> list:
        self._sheet.append(values)
        row_number = self._sheet.max_row
        cells = [
            self._sheet.cell(row=row_number, column=column)
            for column in range(1, len(values) + 1)
        ]
        for cell in cells:
            cell.number_format = "@"
        return cells

    def _close(self) -> None:
        self._workbook.save(self.path)
        self._workbook.close()
