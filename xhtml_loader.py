"""
Loads an ADIF Specification XHTML file into a BeautifulSoup tree.

Specifications up to 3.1.5 are Windows-1252 encoded and later ones are
UTF-8 with a byte order mark.  The encoding is chosen from the byte order
mark and then cross-checked against the document's Content-Type meta tag.
"""

from __future__ import annotations

import logging
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from errors import UnsupportedInputError

logger = logging.getLogger(__name__)


UTF8_BOM = b"\xef\xbb\xbf"

WINDOWS_1252 = "cp1252"
UTF_8 = "utf-8"


def load_xhtml(path: str | Path) -> BeautifulSoup:
    """Read and parse the XHTML file at *path*."""
    path = Path(path)
    data = path.read_bytes()
    return parse_xhtml(data, source=str(path))


def parse_xhtml(data: bytes, *, source: str = "<bytes>") -> BeautifulSoup:
    """Decode and parse XHTML *data*.

    Raises ``UnsupportedInputError`` when the data is too short to sniff,
    cannot be decoded, has no ``<html>`` element, or declares a charset
    that disagrees with the byte order mark.
    """
    if len(data) < len(UTF8_BOM):
        raise UnsupportedInputError(
            f"Failed to read first {len(UTF8_BOM)} bytes from {source} to determine encoding"
        )

    if data.startswith(UTF8_BOM):
        encoding = UTF_8
        data = data[len(UTF8_BOM):]
    else:
        encoding = WINDOWS_1252

    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise UnsupportedInputError(f"{source} is not valid {encoding}: {exc}") from exc

    # Drop the XML declaration and DOCTYPE; the HTML parser needs neither
    start = text.find("<html")
    if start < 0:
        raise UnsupportedInputError(f"Failed to find <html> tag in {source}")

    soup = BeautifulSoup(text[start:], "lxml")

    content_type = _content_type(soup)
    charset = _charset(content_type)
    logger.debug("%s: sniffed %s, declared '%s'", source, encoding, content_type)

    if charset == "windows-1252":
        if encoding != WINDOWS_1252:
            raise UnsupportedInputError(
                f'The encoding in the XHTML file is "{content_type}" but the file is UTF-8 encoded'
            )
    elif charset == "utf-8":
        if encoding != UTF_8:
            raise UnsupportedInputError(
                f'The encoding in the XHTML file is "{content_type}" but the file is not UTF-8 encoded'
            )
    elif charset == "iso-8859-1":
        # Either sniff decodes ISO-8859-1 text that avoids the C1 range
        pass
    else:
        raise UnsupportedInputError(
            f"The encoding in the XHTML file {content_type} is not Windows-1252 or UTF-8"
        )

    return soup


def _content_type(soup: BeautifulSoup) -> str:
    """Return the content attribute of the Content-Type meta tag, or ``""``."""
    head = soup.find("head")
    if not isinstance(head, Tag):
        return ""
    for meta in head.find_all("meta"):
        http_equiv = meta.get("http-equiv", "")
        if isinstance(http_equiv, str) and http_equiv.lower() == "content-type" and meta.has_attr("content"):
            return meta["content"]
    return ""


def _charset(content_type: str) -> str:
    """Return the lower-cased charset of a Content-Type value.

    >>> _charset("text/html; charset=Windows-1252")
    'windows-1252'
    """
    for part in content_type.split(";"):
        part = part.strip()
        if part.lower().startswith("charset="):
            return part[len("charset="):].strip().lower()
    return ""
