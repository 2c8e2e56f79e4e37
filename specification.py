"""
ADIF Specification aggregate: reads the document metadata and routes every
table to its loader.

Loading is a single pass over the parsed document:

1. read and validate the ``adifversion``, ``adifstatus`` and ``adifdate``
   meta tags;
2. remove markup showing deleted text (asking first if the file is an
   annotated specification);
3. route each ``<table id=...>`` to the Data Types, Field or Enumeration
   loader.

The loaded ``Specification`` is read-only from then on; see ``exporter``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from bs4 import BeautifulSoup, Tag

from config import (
    ANNOTATED_FILE_MARKER,
    DATA_TYPES_ID,
    DELETION_CLASSES,
    ENUMERATION_ID_PREFIX,
    FIELD_ID_PREFIX,
    META_DATE,
    META_STATUS,
    META_VERSION,
    SUPPORTED_STATUSES,
    SUPPORTED_VERSIONS,
)
from errors import AnnotatedSpecificationDeclinedError, UnsupportedInputError
from loader_datatypes import DataTypeLoader
from loader_enumerations import EnumerationLoader, parse_enumeration_id
from loader_fields import FieldLoader
from xhtml_loader import load_xhtml

logger = logging.getLogger(__name__)

# (message, caption) -> True to continue
ConfirmCallback = Callable[[str, str], bool]
ProgressCallback = Callable[[str], None]


class Specification:
    """A fully loaded ADIF Specification document."""

    def __init__(
        self,
        version: str,
        status: str,
        date: datetime | None = None,
        *,
        path: Path | None = None,
    ) -> None:
        self.version = version
        self.status = status
        self.date = date
        self.path = path

        self.data_types = DataTypeLoader()
        self.fields = FieldLoader()
        self.enumerations: dict[str, EnumerationLoader] = {}

    # ── public entry points ──

    @classmethod
    def load(
        cls,
        path: str | Path,
        *,
        confirm: ConfirmCallback | None = None,
        progress: ProgressCallback | None = None,
    ) -> Specification:
        """Read the XHTML specification at *path*."""
        path = Path(path)
        _report(progress, f"Reading specification {path} ...")
        soup = load_xhtml(path)
        return cls.from_soup(soup, path=path, confirm=confirm, progress=progress)

    @classmethod
    def from_soup(
        cls,
        soup: BeautifulSoup,
        *,
        path: Path,
        confirm: ConfirmCallback | None = None,
        progress: ProgressCallback | None = None,
    ) -> Specification:
        """Build a specification from an already parsed document."""
        version = _meta_content(soup, META_VERSION)
        if version not in SUPPORTED_VERSIONS:
            raise UnsupportedInputError(
                f"ADIF Version {version} is not supported by this program. "
                f"Supported versions are: {', '.join(SUPPORTED_VERSIONS)}"
            )

        status = _meta_content(soup, META_STATUS)
        if status not in SUPPORTED_STATUSES:
            raise UnsupportedInputError(
                f'ADIF Status is invalid: "{status}". '
                f"Supported statuses are: {', '.join(SUPPORTED_STATUSES)}"
            )

        spec = cls(version, status, _release_date(soup), path=path)
        _report(progress, f"Specification Version is {version}, Status is {status}")

        _remove_deletions(soup, path.name, confirm)
        spec._load_tables(soup)
        return spec

    # ── table routing ──

    def _load_tables(self, soup: BeautifulSoup) -> None:
        for table in soup.find_all("table"):
            table_id = table.get("id")
            if not table_id:
                logger.warning("Skipping table without an id")
                continue

            if table_id.startswith(ENUMERATION_ID_PREFIX):
                self._enumeration_loader(table_id).load(table, table_id)
            elif table_id.startswith(FIELD_ID_PREFIX):
                self.fields.load(table, table_id)
            elif table_id == DATA_TYPES_ID:
                self.data_types.load(table, table_id)
            else:
                logger.debug("Ignoring table '%s'", table_id)

        self.enumerations = dict(sorted(self.enumerations.items()))
        logger.info(
            "Loaded %d data types, %d fields and %d enumerations",
            len(self.data_types.table.rows),
            len(self.fields.table.rows),
            len(self.enumerations),
        )

    def _enumeration_loader(self, table_id: str) -> EnumerationLoader:
        """Return the loader for the enumeration of *table_id*, creating it once."""
        name, _ = parse_enumeration_id(table_id)
        loader = self.enumerations.get(name)
        if loader is None:
            loader = EnumerationLoader(name)
            self.enumerations[name] = loader
        return loader


# ── helpers ───────────────────────────────────────────────────────────────


def _report(progress: ProgressCallback | None, message: str) -> None:
    logger.info(message)
    if progress is not None:
        progress(message)


def _find_meta(soup: BeautifulSoup, name: str) -> Tag | None:
    head = soup.find("head")
    if not isinstance(head, Tag):
        return None
    return head.find("meta", attrs={"name": name})


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    meta = _find_meta(soup, name)
    if meta is None:
        raise UnsupportedInputError(f'No meta tag found with the name "{name}"')
    content = meta.get("content")
    if content is None:
        raise UnsupportedInputError(f'Meta tag "{name}" has no content attribute')
    return content.strip()


def _release_date(soup: BeautifulSoup) -> datetime | None:
    """Return the ``adifdate`` meta value as a UTC datetime, or ``None``."""
    meta = _find_meta(soup, META_DATE)
    if meta is None or not meta.get("content", "").strip():
        logger.warning('No meta tag found with the name "%s"; exporting without a date', META_DATE)
        return None

    text = meta["content"].strip()
    try:
        value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as exc:
        raise UnsupportedInputError(f'Meta tag "{META_DATE}" is not a date: "{text}"') from exc

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _is_deletion(tag: Tag) -> bool:
    """True when the whole class attribute is one of the deletion classes."""
    classes = tag.get("class") or []
    return len(classes) == 1 and classes[0] in DELETION_CLASSES


def _remove_deletions(
    soup: BeautifulSoup,
    file_name: str,
    confirm: ConfirmCallback | None,
) -> None:
    """Remove elements that show deleted text.

    An annotated specification is expected to contain such markup; the
    user is asked before continuing with one.  No ``confirm`` callback
    counts as declining.
    """
    deletions = soup.find_all(_is_deletion)
    if not deletions:
        return

    if ANNOTATED_FILE_MARKER in file_name.lower():
        message = (
            f"Warning: '{file_name}' is an annotated ADIF specification.\n\n"
            "The program will remove deleted text from the specification, "
            "but it is safer to use an un-annotated specification.\n\n"
            "Continue?"
        )
        if confirm is None or not confirm(message, "Warning: Annotated ADIF Specification"):
            raise AnnotatedSpecificationDeclinedError(
                f"The specification '{file_name}' is annotated"
            )

    logger.info("Removing %d deleted text elements", len(deletions))
    for deletion in deletions:
        deletion.extract()
