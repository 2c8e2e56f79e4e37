"""
Configuration for the ADIF Specification export files creator.

Contains the TableKind and ColumnRole enums, the supported version and
status whitelists, synthetic column names, fixed export column orders and
the lookup tables of document-specific workarounds.
"""

import re
from enum import Enum


class TableKind(str, Enum):
    """The three kinds of logical table found in the specification."""

    DATA_TYPES = "dataTypes"
    ENUMERATIONS = "enumerations"
    FIELDS = "fields"


class ColumnRole(str, Enum):
    """Semantic role of a source column, resolved once per header row.

    A loader asks ``HeaderLayout.role_at(cell_index)`` instead of comparing
    cell positions against scattered sentinel values.
    """

    # --- Shared ---
    DESCRIPTION = "description"
    DELETED = "deleted"

    # --- Data types ---
    DATA_TYPE_NAME = "data_type_name"
    DATA_TYPE_INDICATOR = "data_type_indicator"

    # --- Fields ---
    FIELD_NAME = "field_name"
    DATA_TYPE = "data_type"
    ENUMERATION = "enumeration"

    # --- Enumerations ---
    ARRL_SECTION_NAME = "arrl_section_name"
    ARRL_DXCC_ENTITY_CODE = "arrl_dxcc_entity_code"
    LOWER_FREQ = "lower_freq"
    UPPER_FREQ = "upper_freq"
    CONTEST_ID = "contest_id"
    SUBMODES = "submodes"
    CREDIT_FOR = "credit_for"
    PRIMARY_SUBDIVISION = "primary_subdivision"
    SECONDARY_SUBDIVISION = "secondary_subdivision"


# ---------------------------------------------------------------------------
# Document metadata
# ---------------------------------------------------------------------------

# Only versions whose table layouts have been checked are accepted; a newer
# document may contain tables that need new rules to export correctly.
SUPPORTED_VERSIONS: tuple[str, ...] = ("3.1.4", "3.1.5", "3.1.6")

SUPPORTED_STATUSES: tuple[str, ...] = ("Draft", "Proposed", "Released")

META_VERSION = "adifversion"
META_STATUS = "adifstatus"
META_DATE = "adifdate"

AUTHOR = "ADIF Development Group"

# Substring of the input file name that marks an annotated specification
ANNOTATED_FILE_MARKER = "annotated.htm"

# class attribute values of markup that shows deleted text
DELETION_CLASSES: tuple[str, ...] = ("deletion", "deletionstrike")


# ---------------------------------------------------------------------------
# Table ids
# ---------------------------------------------------------------------------

ENUMERATION_ID_PREFIX = "Enumeration_"
FIELD_ID_PREFIX = "Field_"
DATA_TYPES_ID = "_Data_Types"
HEADER_FIELDS_ID = "Field_Header"

PRIMARY_SUBDIVISION_NAME = "Primary_Administrative_Subdivision"
SECONDARY_SUBDIVISION_NAME = "Secondary_Administrative_Subdivision"
SECONDARY_SUBDIVISION_ALT_NAME = "Secondary_Administrative_Subdivision_Alt"

# Checked in this order: the _Alt name is a prefix match for the plain one
ENTITY_KEYED_ENUMERATIONS: tuple[str, ...] = (
    PRIMARY_SUBDIVISION_NAME,
    SECONDARY_SUBDIVISION_ALT_NAME,
    SECONDARY_SUBDIVISION_NAME,
)


# ---------------------------------------------------------------------------
# Column names
# ---------------------------------------------------------------------------

COL_IMPORT_ONLY = "Import-only"
COL_COMMENTS = "Comments"
COL_ENUMERATION_NAME = "Enumeration Name"
COL_MINIMUM_VALUE = "Minimum Value"
COL_MAXIMUM_VALUE = "Maximum Value"
COL_HEADER_FIELD = "Header Field"
COL_DXCC_ENTITY_CODE = "DXCC Entity Code"
COL_CONTAINED_WITHIN = "Contained Within"
COL_OBLAST_NUMBER = "Oblast #"
COL_CQ_ZONE = "CQ Zone"
COL_ITU_ZONE = "ITU Zone"
COL_PREFIX = "Prefix"
COL_ALASKA_JUDICIAL_DISTRICT = "Alaska Judicial District"
COL_REGION = "Region"
COL_DISTRICT = "District"
COL_DELETED = "Deleted"
COL_CODE = "Code"

# Appended to every delimited and spreadsheet record at write time
COL_ADIF_VERSION = "ADIF Version"
COL_ADIF_STATUS = "ADIF Status"

IMPORT_ONLY_VALUE = "Import-only"
DELETED_VALUE = "Deleted"
HEADER_FIELD_VALUE = "Y"

# Columns rendered as a boolean ``true`` in the markup and structured exports
BOOLEAN_COLUMNS: frozenset[str] = frozenset({"DELETED", "IMPORT-ONLY"})
FIELD_BOOLEAN_COLUMNS: frozenset[str] = BOOLEAN_COLUMNS | {"HEADER FIELD"}

# Columns holding dates (compared upper-cased)
DATE_COLUMNS: frozenset[str] = frozenset({"DELETED DATE", "FROM DATE"})

# A bare yyyy-mm-dd value; must never reach the structured export as-is
RE_RAW_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Header columns mapped to a role in every enumeration table
ENUMERATION_COLUMN_ROLES: dict[str, ColumnRole] = {
    "Lower Freq (MHz)": ColumnRole.LOWER_FREQ,
    "Upper Freq (MHz)": ColumnRole.UPPER_FREQ,
    "Contest-ID": ColumnRole.CONTEST_ID,
    "Submodes": ColumnRole.SUBMODES,
    "Deleted": ColumnRole.DELETED,
    "Credit For": ColumnRole.CREDIT_FOR,
    "Description": ColumnRole.DESCRIPTION,
}

# Header columns mapped to a role only in one named enumeration
ENUMERATION_SPECIFIC_COLUMN_ROLES: dict[tuple[str, str], ColumnRole] = {
    ("ARRL_Section", "Section Name"): ColumnRole.ARRL_SECTION_NAME,
    ("ARRL_Section", "DXCC Entity Code"): ColumnRole.ARRL_DXCC_ENTITY_CODE,
    (PRIMARY_SUBDIVISION_NAME, "Primary Administrative Subdivision"): ColumnRole.PRIMARY_SUBDIVISION,
    (SECONDARY_SUBDIVISION_NAME, "Secondary Administrative Subdivision"): ColumnRole.SECONDARY_SUBDIVISION,
}

DATA_TYPE_COLUMN_ROLES: dict[str, ColumnRole] = {
    "Data Type Name": ColumnRole.DATA_TYPE_NAME,
    "Data Type Indicator": ColumnRole.DATA_TYPE_INDICATOR,
    "Description": ColumnRole.DESCRIPTION,
}

FIELD_COLUMN_ROLES: dict[str, ColumnRole] = {
    "Field Name": ColumnRole.FIELD_NAME,
    "Data Type": ColumnRole.DATA_TYPE,
    "Enumeration": ColumnRole.ENUMERATION,
    "Description": ColumnRole.DESCRIPTION,
}


# ---------------------------------------------------------------------------
# Synthetic columns registered after each header row
# ---------------------------------------------------------------------------

DATA_TYPE_SYNTHETIC_COLUMNS: tuple[str, ...] = (
    COL_MINIMUM_VALUE,
    COL_MAXIMUM_VALUE,
    COL_IMPORT_ONLY,
    COL_COMMENTS,
)

FIELD_SYNTHETIC_COLUMNS: tuple[str, ...] = (
    COL_HEADER_FIELD,
    COL_MINIMUM_VALUE,
    COL_MAXIMUM_VALUE,
    COL_IMPORT_ONLY,
    COL_COMMENTS,
)

ENUMERATION_SYNTHETIC_COLUMNS: tuple[str, ...] = (
    COL_IMPORT_ONLY,
    COL_COMMENTS,
    COL_ENUMERATION_NAME,
)

ENTITY_SYNTHETIC_COLUMNS: dict[str, tuple[str, ...]] = {
    PRIMARY_SUBDIVISION_NAME: (
        COL_DXCC_ENTITY_CODE,
        COL_CONTAINED_WITHIN,
        COL_OBLAST_NUMBER,
        COL_CQ_ZONE,
        COL_ITU_ZONE,
        COL_PREFIX,
        COL_DELETED,
    ),
    SECONDARY_SUBDIVISION_NAME: (
        COL_DXCC_ENTITY_CODE,
        COL_ALASKA_JUDICIAL_DISTRICT,
        COL_DELETED,
    ),
    SECONDARY_SUBDIVISION_ALT_NAME: (
        COL_DXCC_ENTITY_CODE,
        COL_REGION,
        COL_DISTRICT,
        COL_DELETED,
    ),
}


# ---------------------------------------------------------------------------
# Export column orders
# ---------------------------------------------------------------------------

# Entity-keyed enumerations override the natural header order
ENTITY_EXPORT_COLUMNS: dict[str, tuple[str, ...]] = {
    PRIMARY_SUBDIVISION_NAME: (
        COL_CODE,
        "Primary Administrative Subdivision",
        COL_DXCC_ENTITY_CODE,
        COL_CONTAINED_WITHIN,
        COL_OBLAST_NUMBER,
        COL_CQ_ZONE,
        COL_ITU_ZONE,
        COL_PREFIX,
        COL_DELETED,
    ),
    SECONDARY_SUBDIVISION_ALT_NAME: (
        COL_CODE,
        COL_DXCC_ENTITY_CODE,
        COL_REGION,
        COL_DISTRICT,
        COL_DELETED,
    ),
    SECONDARY_SUBDIVISION_NAME: (
        COL_CODE,
        "Secondary Administrative Subdivision",
        COL_DXCC_ENTITY_CODE,
        COL_ALASKA_JUDICIAL_DISTRICT,
        COL_DELETED,
    ),
}


# ---------------------------------------------------------------------------
# Document-specific workarounds
#
# Keyed by exact strings from particular revisions of the specification.
# New entries are expected as the document evolves; keep them here rather
# than inline in the loaders.
# ---------------------------------------------------------------------------

# (enumeration name, header text) -> replacement header text
ENUMERATION_HEADER_RENAMES: dict[tuple[str, str], str] = {
    ("DXCC_Entity_Code", "Country Code"): "Entity Code",
    ("QSO_Upload_Status", "Via"): "Status",
    ("Award_Sponsor", "Sponsor>"): "Sponsor",  # ADIF 3.0.6
}

# (enumeration name, header suffix) -> suffix removed from the header text
ENUMERATION_HEADER_SUFFIXES: dict[str, str] = {
    "Mode": " (to be supplied in a future specification)",
    "Submode": " (to be supplied in a future specification)",
}

# Raw cell text -> corrected text, applied before comment extraction
KNOWN_CELL_TYPOS: dict[str, str] = {
    "Kamchatka (Kamchatskaya oblast]": "Kamchatka (Kamchatskaya oblast)",
    "Krasnoyarsk (Krasnoyarsk Kraj]": "Krasnoyarsk (Krasnoyarsk Kraj)",
}

# Field name -> {column name: fixed value}; the first item in each list is
# current and later items are import-only.
FIELD_OVERRIDES: dict[str, dict[str, str]] = {
    "CREDIT_SUBMITTED": {
        "Data Type": "CreditList,AwardList",
        "Enumeration": "Credit,Award",
    },
    "CREDIT_GRANTED": {
        "Data Type": "CreditList,AwardList",
        "Enumeration": "Credit,Award",
    },
}

# Enumeration cells starting with this are rewritten to the composite form
SUBMODE_ENUMERATION_PREFIX = "Submode"
SUBMODE_COMPOSITE_ENUMERATION = "(Submode, function of MODE field's value)"

# "(X, function of Y field's value)"
RE_COMPOSITE_ENUMERATION = re.compile(r"\(([^,]*), function of ([\w ]*) field's value\)")


# ---------------------------------------------------------------------------
# Self-consistency samples checked against all.json after an export
#
# (kind, table name or None, record key, column, expected value)
# ---------------------------------------------------------------------------

DEFAULT_SELF_CHECK_SAMPLES: tuple[tuple[str, str | None, str, str, str], ...] = (
    (TableKind.DATA_TYPES.value, None, "Boolean", "Data Type Indicator", "B"),
    (TableKind.ENUMERATIONS.value, "Band", "20m", "Lower Freq (MHz)", "14.0"),
    (TableKind.ENUMERATIONS.value, "Band", "20m", "Upper Freq (MHz)", "14.35"),
    (TableKind.FIELDS.value, None, "CALL", "Data Type", "String"),
)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

EXPORTS_DIR_NAME = "exports"
EXPORT_FORMATS: tuple[str, ...] = ("csv", "tsv", "xlsx", "xml", "json")
SCHEMA_FILE_NAME = "adifexport.xsd"

# Excel limits work sheet names to 31 characters
MAX_SHEET_NAME = 31


def export_title(item: str, version: str, status: str) -> str:
    """Return the document title used in spreadsheet properties.

    >>> export_title("Fields", "3.1.5", "Released")
    'Fields exported from Released ADIF Specification 3.1.5'
    """
    return f"{item} exported from {status} ADIF Specification {version}"
