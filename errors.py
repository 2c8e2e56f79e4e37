"""Exception hierarchy for loading and exporting the ADIF Specification.

Every failure aborts the whole run.  The categories let the command line
tell a user-cancelled run (quiet message) and a directory that must be
cleaned up by hand apart from ordinary defects, which carry the table,
column and raw value needed to diagnose them without re-running.
"""

from __future__ import annotations

from typing import Optional, Sequence

__all__ = [
    "AdifExportError",
    "UnsupportedInputError",
    "UserCancelledError",
    "AnnotatedSpecificationDeclinedError",
    "ExportCancelledError",
    "StructuralParseError",
    "CellContentError",
    "IncompleteRowError",
    "OutputDirectoryError",
]


class AdifExportError(RuntimeError):
    """Base exception for specification load and export failures."""


class UnsupportedInputError(AdifExportError):
    """Raised when the document's version, status, metadata or encoding is not supported."""


class UserCancelledError(AdifExportError):
    """Raised when the user stops the run; not a defect."""


class AnnotatedSpecificationDeclinedError(UserCancelledError):
    """Raised when the user declines to export from an annotated specification."""

    def __init__(self, message: str = "Export cancelled by user.") -> None:
        super().__init__(message)


class ExportCancelledError(UserCancelledError):
    """Raised when cancellation is requested at a progress report."""


class StructuralParseError(AdifExportError):
    """Raised when a table's header, columns or entity cross-check are inconsistent."""


class CellContentError(AdifExportError):
    """Raised when a cell value violates the micro-format expected for its column."""

    def __init__(self, message: str, *, value: Optional[str] = None) -> None:
        super().__init__(message)
        self.value = value


class IncompleteRowError(AdifExportError):
    """Raised when a loaded row still has an unset slot."""

    def __init__(self, message: str, *, values: Sequence[Optional[str]] = ()) -> None:
        super().__init__(message)
        self.values = tuple(values)


class OutputDirectoryError(AdifExportError):
    """Raised when the previous export directories cannot be removed or recreated."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path
