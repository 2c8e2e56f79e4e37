#!/usr/bin/env python3
"""
CLI entry point for exporting the tables of an ADIF Specification.

Pipeline
--------
1. **Load**: ``Specification.load`` reads the XHTML specification and
   loads the Data Types, Enumeration and Field tables.
2. **Export**: ``SpecificationExporter`` writes CSV, TSV, XLSX, XML and
   JSON files under ``exports/`` and checks ``all.json``.

Usage
-----
    # Exports to ADIF_316.htm's directory under exports/
    python convert.py ADIF_316.htm

    # Different output directory, with the XML schema copied alongside
    python convert.py ADIF_316.htm --output out/exports --schema adifexport.xsd

    # Annotated specification, answering "yes" to the warning
    python convert.py ADIF_316_annotated.htm --yes

Exit status is 0 on success, 2 when the run was cancelled and 1 on any
other error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from config import DEFAULT_SELF_CHECK_SAMPLES
from errors import AdifExportError, OutputDirectoryError, UserCancelledError
from exporter import SpecificationExporter
from specification import Specification

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 2


def prompt_user(message: str, caption: str) -> bool:
    """Ask a yes/no question on the terminal."""
    print(f"{caption}\n\n{message}")
    try:
        answer = input("[y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def export_file(
    file_path: Path,
    *,
    output: Path | None = None,
    schema: Path | None = None,
    assume_yes: bool = False,
    self_check: bool = True,
) -> None:
    """Load *file_path* and write every export file."""
    confirm = (lambda message, caption: True) if assume_yes else prompt_user

    spec = Specification.load(file_path, confirm=confirm, progress=print)
    exporter = SpecificationExporter(
        spec,
        output,
        progress=print,
        schema_path=schema,
        self_check_samples=DEFAULT_SELF_CHECK_SAMPLES if self_check else None,
    )
    exporter.export()
    print(f"Exports written to {exporter.exports_path}")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        description="Export the data types, enumerations and fields of an "
                    "ADIF Specification XHTML file to CSV, TSV, XLSX, XML and JSON."
    )
    ap.add_argument(
        "file",
        type=str,
        help="Path to the ADIF Specification XHTML file.",
    )
    ap.add_argument(
        "--output",
        type=str,
        default=None,
        help="Exports directory (default: 'exports' beside the input file). "
             "Its contents are deleted first.",
    )
    ap.add_argument(
        "--schema",
        type=str,
        default=None,
        help="XML schema file copied into the xml export directory.",
    )
    ap.add_argument(
        "--yes",
        action="store_true",
        help="Continue without asking when the specification is annotated.",
    )
    ap.add_argument(
        "--skip-self-check",
        action="store_true",
        help="Do not read all.json back to check it after exporting.",
    )
    ap.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages.",
    )

    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.file)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return EXIT_ERROR

    schema = Path(args.schema) if args.schema else None
    if schema is not None and not schema.exists():
        print(f"Error: schema not found: {schema}", file=sys.stderr)
        return EXIT_ERROR

    try:
        export_file(
            path,
            output=Path(args.output) if args.output else None,
            schema=schema,
            assume_yes=args.yes,
            self_check=not args.skip_self_check,
        )
    except UserCancelledError as exc:
        print(f"Cancelled: {exc}", file=sys.stderr)
        return EXIT_CANCELLED
    except OutputDirectoryError as exc:
        print(
            f"Error: {exc}\n\nDelete the directory {exc.path} and its contents, then try again.",
            file=sys.stderr,
        )
        return EXIT_ERROR
    except AdifExportError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    print("Done.")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
