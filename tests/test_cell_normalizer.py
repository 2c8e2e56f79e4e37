import pytest

from cell_normalizer import (
    append_comment,
    canonical_deleted,
    cell_text,
    collapse_whitespace,
    enumeration_reference,
    extract_comments,
    min_max_values,
    rejoin_list,
    remove_spaces,
    strip_import_only,
    strip_thousands_separators,
)
from errors import CellContentError
from tests.conftest import parse_table


def description_cell(inner: str):
    return parse_table(f"<table><tr><td>{inner}</td></tr></table>").find("td")


# ── comment extraction ──


def test_import_only_replaced_by():
    result = extract_comments("Foo (import-only - replaced by Bar)")

    assert result.value == "Foo"
    assert result.import_only is True
    assert result.comments == ["replaced by Bar"]
    assert result.deleted is False


def test_import_only_dash_without_replaced_by_is_rejected():
    with pytest.raises(CellContentError, match="Unexpected text after import-only"):
        extract_comments("Foo (import-only - use Bar)")


def test_bare_import_only_group_adds_no_comment():
    result = extract_comments("Foo (import-only)")

    assert result.value == "Foo"
    assert result.import_only is True
    assert result.comments == []


def test_every_group_is_extracted():
    result = extract_comments("Foo (first) Bar (second)")

    assert result.value == "Foo"
    assert result.comments == ["first", "second"]


def test_value_is_the_text_before_the_first_group():
    result = extract_comments("Foo (bar) baz")

    assert result.value == "Foo"
    assert result.comments == ["bar"]


def test_dash_annotation_after_a_group():
    result = extract_comments("Taymyr (Taymyrsky) - for contacts made before 2007-01-01", dash_annotations=True)

    assert result.value == "Taymyr"
    assert result.comments == ["Taymyrsky", "for contacts made before 2007-01-01"]
    assert result.deleted is True


def test_known_typo_is_repaired():
    result = extract_comments("Krasnoyarsk (Krasnoyarsk Kraj]")

    assert result.value == "Krasnoyarsk"
    assert result.comments == ["Krasnoyarsk Kraj"]


def test_empty_group_is_rejected():
    with pytest.raises(CellContentError, match="Empty comment"):
        extract_comments("Foo ( )")


def test_unbalanced_parentheses_are_rejected():
    with pytest.raises(CellContentError, match="Unbalanced parentheses"):
        extract_comments("Foo (bar")


def test_import_only_inside_a_comment_is_rejected():
    with pytest.raises(CellContentError, match="import-only found in comments"):
        extract_comments("Foo (note about import-only)")


@pytest.mark.parametrize(
    "raw, value, phrase, deleted",
    [
        ("Taymyr - for contacts made before 2007-01-01", "Taymyr", "for contacts made before 2007-01-01", True),
        ("Krasnoyarsk - for contacts made on or after 2007-01-01", "Krasnoyarsk", "for contacts made on or after 2007-01-01", False),
        ("Leningrad - referred to as Leningradskaya", "Leningrad", "referred to as Leningradskaya", False),
    ],
)
def test_dash_annotations(raw, value, phrase, deleted):
    result = extract_comments(raw, dash_annotations=True)

    assert result.value == value
    assert result.comments == [phrase]
    assert result.deleted is deleted


def test_unknown_dash_annotation_is_rejected():
    with pytest.raises(CellContentError, match="Unexpected comment string"):
        extract_comments("Foo - something else", dash_annotations=True)


def test_dash_is_kept_without_dash_annotations():
    result = extract_comments("Foo - something else")

    assert result.value == "Foo - something else"
    assert result.comments == []


# ── column rules ──


@pytest.mark.parametrize(
    "raw, expected",
    [("Y", "Deleted"), ("y", "Deleted"), ("Deleted", "Deleted"), ("DELETED", "Deleted"), ("", "")],
)
def test_canonical_deleted(raw, expected):
    assert canonical_deleted(raw, table="Band") == expected


def test_canonical_deleted_rejects_other_values():
    with pytest.raises(CellContentError, match="Unexpected value for 'Deleted' in table 'Band'"):
        canonical_deleted("N", table="Band")


def test_list_and_number_rules():
    assert rejoin_list("LSB, USB ,") == "LSB,USB"
    assert rejoin_list("") == ""
    assert strip_thousands_separators("241,000") == "241000"
    assert remove_spaces("W 1") == "W1"


def test_whitespace_is_collapsed_including_nbsp():
    assert collapse_whitespace("  a\u00a0 b\n c ") == "a b c"
    assert collapse_whitespace(None) == ""
    assert cell_text(None) == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", ""),
        ("ARRL Section", "ARRL_Section"),
        ("(Primary Administrative Subdivision, function of DXCC field's value)", "Primary_Administrative_Subdivision[DXCC]"),
        ("Submode, function of MODE", "Submode[MODE]"),
    ],
)
def test_enumeration_reference(raw, expected):
    assert enumeration_reference(raw) == expected


def test_enumeration_reference_rejects_unknown_composite():
    with pytest.raises(CellContentError, match="Unrecognised enumeration reference"):
        enumeration_reference("(something else)")


def test_min_max_from_spans():
    cell = description_cell(
        'from <a href="#x"><span title="Minimum">-180</span></a> to <span title="Maximum">180</span>'
    )
    assert min_max_values(cell) == ("-180", "180")


def test_min_from_greater_than():
    cell = description_cell('greater than <span title="GreaterThan">0</span>')
    assert min_max_values(cell) == ("1", "")


def test_greater_than_must_be_an_integer():
    cell = description_cell('greater than <span title="GreaterThan">1.5</span>')
    with pytest.raises(CellContentError, match="only integer values are allowed"):
        min_max_values(cell)


def test_min_max_without_spans():
    assert min_max_values(description_cell("plain text")) == ("", "")
    assert min_max_values(None) == ("", "")


def test_strip_import_only():
    assert strip_import_only("AwardList import-only") == "AwardList"
    assert strip_import_only("AwardList Import-Only") == "AwardList"
    assert strip_import_only("AwardList") == "AwardList"


def test_append_comment_skips_contained_comments():
    comments = ["replaced by Bar"]
    append_comment(comments, "Replaced By Bar")
    append_comment(comments, "Bar")
    append_comment(comments, "see Baz")

    assert comments == ["replaced by Bar", "see Baz"]
