"""Shared fixtures: small ADIF Specification documents built inline."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

UTF8_BOM = b"\xef\xbb\xbf"


def make_document(
    body: str,
    *,
    version: str | None = "3.1.5",
    status: str | None = "Released",
    date: str | None = "2024-09-15",
    charset: str = "windows-1252",
) -> str:
    """Wrap *body* in an XHTML document with the ADIF meta tags."""
    metas = [f'<meta http-equiv="Content-Type" content="text/html; charset={charset}" />']
    if version is not None:
        metas.append(f'<meta name="adifversion" content="{version}" />')
    if status is not None:
        metas.append(f'<meta name="adifstatus" content="{status}" />')
    if date is not None:
        metas.append(f'<meta name="adifdate" content="{date}" />')
    head = "\n".join(metas)
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml" lang="en" xml:lang="en">\n'
        f"<head>\n<title>ADIF Specification</title>\n{head}\n</head>\n"
        f"<body>\n{body}\n</body>\n</html>\n"
    )


def write_document(
    directory: Path,
    body: str,
    *,
    name: str = "ADIF_315.htm",
    **kwargs,
) -> Path:
    """Write a Windows-1252 (or UTF-8 with BOM) document and return its path."""
    text = make_document(body, **kwargs)
    if kwargs.get("charset", "windows-1252") == "utf-8":
        data = UTF8_BOM + text.encode("utf-8")
    else:
        data = text.encode("cp1252")
    path = directory / name
    path.write_bytes(data)
    return path


def parse_table(html: str):
    """Return the first ``<table>`` of *html*."""
    return BeautifulSoup(html, "lxml").find("table")


def rows_as_dicts(loader) -> list[dict[str, str]]:
    """Return the loader's buffered rows keyed by column name."""
    names = loader.table.registry.names
    return [dict(zip(names, row)) for row in loader.table.rows]


DATA_TYPES_TABLE = """
<table id="_Data_Types">
  <tr><th>Data Type Name</th><th>Data Type Indicator (see note)</th><th>Description</th></tr>
  <tr><td>AwardList import-only</td><td></td><td>a comma-delimited list of Award</td></tr>
  <tr><td>Boolean</td><td>B</td><td>if True, the single ASCII character Y or y</td></tr>
  <tr><td>PositiveInteger</td><td></td><td>an unsigned sequence of one or more Digits representing a decimal integer that has a value greater than <span title="GreaterThan">0</span></td></tr>
  <tr><td>Location</td><td>L</td><td>a sequence of characters in the range <a href="#x"><span title="Minimum">-180</span></a> to <span title="Maximum">180</span></td></tr>
</table>
"""

ENUMERATION_TABLES = """
<table id="Enumeration_Band">
  <tr><th>Band</th><th>Lower Freq (MHz)</th><th>Upper Freq (MHz)</th></tr>
  <tr><td>20m</td><td>14.0</td><td>14.35</td></tr>
  <tr><td>1mm</td><td>241,000</td><td>250,000</td></tr>
</table>

<table id="Enumeration_Mode">
  <tr><th>Mode</th><th>Submodes</th><th>Description</th></tr>
  <tr><td>SSB</td><td>LSB, USB ,</td><td>Single Sideband</td></tr>
  <tr><td>AMTORFEC</td><td></td><td>import-only: use TOR</td></tr>
</table>

<table id="Enumeration_Contest_ID">
  <tr><th>Contest-ID</th><th>Description</th><th>Deleted</th></tr>
  <tr><td>ny-qso-party</td><td>New York QSO Party</td><td></td></tr>
  <tr><td>7QP</td><td>7th-Area QSO Party</td><td>Y</td></tr>
</table>

<table id="Enumeration_ARRL_Section">
  <tr><th>Section Abbreviation</th><th>Section Name</th><th>DXCC Entity Code</th><th>From Date</th><th>Deleted Date</th></tr>
  <tr><td>NL</td><td>Newfoundland Labrador (replaces NF)</td><td>1</td><td>2003-11-01</td><td></td></tr>
  <tr><td>NF</td><td>Newfoundland</td><td>1</td><td></td><td>2003-11-01</td></tr>
</table>

<table id="Enumeration_Primary_Administrative_Subdivision_15">
  <tr><th colspan="5">DXCC Entity Code 15 Asiatic Russia</th></tr>
  <tr><th>Code</th><th>Primary Administrative Subdivision</th><th>Oblast #</th><th>CQ Zone</th><th>ITU Zone</th></tr>
  <tr><th colspan="5">Siberian Federal District</th></tr>
  <tr><td>KK</td><td>Krasnoyarsk (Krasnoyarsk Kraj]</td><td>132</td><td>18</td><td>32</td></tr>
  <tr><td>TM</td><td>Taymyr - for contacts made before 2007-01-01</td><td>134</td><td>18</td><td>32</td></tr>
</table>

<table id="Enumeration_Primary_Administrative_Subdivision_1">
  <tr><th colspan="2">DXCC Entity Code 1 Canada</th></tr>
  <tr><th>Code</th><th>Primary Administrative Subdivision</th></tr>
  <tr><td>NS</td><td>Nova Scotia</td></tr>
</table>
"""

FIELD_TABLES = """
<table id="Field_Header">
  <tr><th>Field Name</th><th>Data Type</th><th>Enumeration</th><th>Description</th></tr>
  <tr><td>ADIF_VER</td><td>String</td><td></td><td>identifies the version of ADIF used in this file</td></tr>
</table>

<table id="Field_QSO_Fields">
  <tr><th>Field Name</th><th>Data Type</th><th>Enumeration</th><th>Description</th></tr>
  <tr><td>AGE</td><td>Number</td><td></td><td>the contacted station's age in years in the range <span title="Minimum">0</span> to <span title="Maximum">120</span> (inclusive)</td></tr>
  <tr><td>ARRL_SECT</td><td>Enumeration</td><td>ARRL Section</td><td>the contacted station's ARRL section</td></tr>
  <tr><td>CALL</td><td>String</td><td></td><td>the contacted station's callsign</td></tr>
  <tr><td>CREDIT_SUBMITTED</td><td>CreditList, AwardList</td><td>Credit, Award</td><td>the list of credits sought for this QSO</td></tr>
  <tr><td>STATE</td><td>Enumeration</td><td>(Primary Administrative Subdivision, function of DXCC field's value)</td><td>the code for the contacted station's Primary Administrative Subdivision</td></tr>
  <tr><td>SUBMODE</td><td>String</td><td>Submode, function of MODE</td><td>QSO submode</td></tr>
  <tr><td>VE_PROV</td><td>String</td><td></td><td>import-only: use STATE instead</td></tr>
</table>
"""

SPECIFICATION_BODY = DATA_TYPES_TABLE + ENUMERATION_TABLES + FIELD_TABLES


@pytest.fixture
def spec_file(tmp_path) -> Path:
    """A small but complete specification document."""
    return write_document(tmp_path, SPECIFICATION_BODY)
