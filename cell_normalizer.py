"""
Cell value normalisation rules for ADIF Specification tables.

Small, composable text transforms.  The loaders decide which rule applies
to which column from the column's ``ColumnRole``; the rules themselves
know nothing about table layout.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bs4 import Tag

from config import (
    DELETED_VALUE,
    KNOWN_CELL_TYPOS,
    RE_COMPOSITE_ENUMERATION,
    SUBMODE_COMPOSITE_ENUMERATION,
    SUBMODE_ENUMERATION_PREFIX,
)
from errors import CellContentError


# ── regex patterns ────────────────────────────────────────────────────────

# Any run of whitespace, including U+00A0 from &nbsp;
RE_WHITESPACE = re.compile(r"\s+")

# Innermost parenthesised group
RE_PAREN_GROUP = re.compile(r"\(([^()]*)\)")

# Integer accepted inside <span title="GreaterThan">
RE_INTEGER = re.compile(r"^[-]?\d+$")

IMPORT_ONLY_MARKER = "import-only"

# Right-hand phrases of "value - phrase" annotations in subdivision names
DELETING_ANNOTATIONS: tuple[str, ...] = ("for contacts made before",)
KEEPING_ANNOTATIONS: tuple[str, ...] = ("for contacts made on or after", "referred to")


# ── text helpers ──────────────────────────────────────────────────────────


def collapse_whitespace(text: str | None) -> str:
    """Collapse whitespace runs to one ASCII space and trim the ends."""
    if not text:
        return ""
    return RE_WHITESPACE.sub(" ", text).strip()


def cell_text(cell: Tag | None) -> str:
    """Return the whitespace-collapsed text content of *cell*."""
    if cell is None:
        return ""
    return collapse_whitespace(cell.get_text())


def contains_import_only(text: str) -> bool:
    return IMPORT_ONLY_MARKER in text.lower()


def strip_import_only(text: str) -> str:
    """Remove a `` import-only`` marker (any case) from *text*."""
    stripped = re.sub(r"\s*" + re.escape(IMPORT_ONLY_MARKER), "", text, flags=re.IGNORECASE)
    return collapse_whitespace(stripped)


def append_comment(comments: list[str], comment: str) -> None:
    """Append *comment* unless an equal or containing comment is already present."""
    lowered = comment.lower()
    if any(lowered in existing.lower() for existing in comments):
        return
    comments.append(comment)


def join_comments(comments: list[str]) -> str:
    return "; ".join(comments)


# ── column rules ──────────────────────────────────────────────────────────


def canonical_deleted(value: str, *, table: str) -> str:
    """Normalise a deletion marker to ``"Deleted"`` or ``""``.

    >>> canonical_deleted("Y", table="Band")
    'Deleted'
    >>> canonical_deleted("", table="Band")
    ''
    """
    if not value:
        return ""
    if value.lower() in ("y", "deleted"):
        return DELETED_VALUE
    raise CellContentError(
        f"Unexpected value for 'Deleted' in table '{table}': value='{value}'",
        value=value,
    )


def strip_thousands_separators(value: str) -> str:
    """Frequencies above 999 MHz are written with ``,`` separators."""
    return value.replace(",", "")


def remove_spaces(value: str) -> str:
    return value.replace(" ", "")


def rejoin_list(value: str) -> str:
    """Trim the items of a comma-separated list and drop empty ones.

    >>> rejoin_list("a, b ,c,")
    'a,b,c'
    """
    return ",".join(item.strip() for item in value.split(",") if item.strip())


def underscore_name(name: str) -> str:
    return name.replace(" ", "_")


def enumeration_reference(value: str) -> str:
    """Normalise the Enumeration column of a field.

    * ``"(X Y, function of Z field's value)"`` becomes ``"X_Y[Z]"``.
    * A value starting ``"Submode"`` becomes ``"Submode[MODE]"``.
    * Otherwise spaces are replaced by underscores.
    """
    if not value:
        return value
    if value.startswith("("):
        m = RE_COMPOSITE_ENUMERATION.search(value)
        if m is None:
            raise CellContentError(
                f"Unrecognised enumeration reference: value='{value}'",
                value=value,
            )
        return f"{underscore_name(m.group(1))}[{m.group(2)}]"
    if value.startswith(SUBMODE_ENUMERATION_PREFIX):
        return enumeration_reference(SUBMODE_COMPOSITE_ENUMERATION)
    return underscore_name(value)


def min_max_values(cell: Tag | None) -> tuple[str, str]:
    """Return the ``(minimum, maximum)`` annotated inside a description cell.

    The description may hold a bound inside one of:

    * ``<span title="GreaterThan">`` (integers only; minimum is value + 1)
    * ``<span title="Minimum">``
    * ``<span title="Maximum">``

    The spans can be nested inside other elements such as ``<a>``.
    """
    minimum = ""
    maximum = ""
    if cell is None:
        return minimum, maximum

    span = cell.find("span", attrs={"title": "GreaterThan"})
    if span is not None:
        text = cell_text(span)
        if not RE_INTEGER.match(text):
            raise CellContentError(
                f'The <span title="GreaterThan"> tag contains {text} but only integer values are allowed',
                value=text,
            )
        minimum = str(int(text) + 1)

    span = cell.find("span", attrs={"title": "Minimum"})
    if span is not None:
        minimum = cell_text(span)

    span = cell.find("span", attrs={"title": "Maximum"})
    if span is not None:
        maximum = cell_text(span)

    return minimum, maximum


# ── comment extraction ────────────────────────────────────────────────────


@dataclass
class CommentExtraction:
    """Result of ``extract_comments``."""

    value: str
    comments: list[str] = field(default_factory=list)
    import_only: bool = False
    deleted: bool = False


def extract_comments(
    raw: str,
    *,
    dash_annotations: bool = False,
    context: str = "",
) -> CommentExtraction:
    """Split a name cell into its value, comments and flags.

    * The value is the text before the first ``(``, or the whole text.
    * Every ``(...)`` group becomes a comment.  A group starting
      ``import-only`` sets the import-only flag; the marker (and a following
      ``- ``, legal only alongside ``replaced by``) is dropped and the rest
      of the group is the comment.
    * With *dash_annotations*, a ``value - phrase`` outside the groups is
      split: ``for contacts made before`` marks the row deleted,
      ``for contacts made on or after`` and ``referred to`` do not;
      any other phrase is an error.  The phrase becomes a comment.

    >>> r = extract_comments("Foo (import-only - replaced by Bar)")
    >>> (r.value, r.import_only, r.comments)
    ('Foo', True, ['replaced by Bar'])
    >>> extract_comments("Foo (bar) baz").value
    'Foo'
    """
    text = KNOWN_CELL_TYPOS.get(raw, raw)
    posn = text.find("(")
    value = collapse_whitespace(text[:posn]) if posn >= 0 else text
    result = CommentExtraction(value=value)
    remaining = text

    while True:
        m = RE_PAREN_GROUP.search(remaining)
        if m is None:
            break
        group = collapse_whitespace(m.group(1))
        remaining = collapse_whitespace(remaining[: m.start()] + " " + remaining[m.end():])

        if not group:
            raise CellContentError(
                f"Empty comment in {context}: value='{raw}'",
                value=raw,
            )

        if group.lower().startswith(IMPORT_ONLY_MARKER):
            result.import_only = True
            group = group[len(IMPORT_ONLY_MARKER):].strip()
            if group.startswith("-"):
                if "replaced by" not in text.lower():
                    raise CellContentError(
                        f"Unexpected text after import-only in {context}: value='{raw}'",
                        value=raw,
                    )
                group = group[1:].strip()
            group = group.lstrip(";,").strip()

        if group:
            append_comment(result.comments, group)

    if "(" in remaining or ")" in remaining:
        raise CellContentError(
            f"Unbalanced parentheses in {context}: value='{raw}'",
            value=raw,
        )

    if dash_annotations:
        posn = remaining.find(" - ")
        if posn >= 0:
            phrase = remaining[posn + 3:].strip()
            lowered = phrase.lower()
            if lowered.startswith(DELETING_ANNOTATIONS):
                result.deleted = True
            elif not lowered.startswith(KEEPING_ANNOTATIONS):
                raise CellContentError(
                    f"Unexpected comment string found in {context}: value='{raw}'",
                    value=raw,
                )
            append_comment(result.comments, phrase)
            posn = result.value.find(" - ")
            if posn >= 0 and result.value[:posn].strip():
                result.value = result.value[:posn].strip()

    for comment in result.comments:
        if contains_import_only(comment):
            raise CellContentError(
                f"import-only found in comments in {context}: value='{raw}'",
                value=raw,
            )
    return result
