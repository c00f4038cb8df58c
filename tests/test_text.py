"""Tests for cell text normalization."""

from dcmstd.pipeline.stage_text import (
    attribute_has_include,
    attribute_name,
    remove_break_hints,
    sequence_item_depth,
    trim_ws_nl,
)


class TestTrimWsNl:
    """Tests for whitespace trimming."""

    def test_strips_spaces_and_newlines(self):
        """Leading and trailing spaces, newlines and CRs are removed."""
        assert trim_ws_nl("  \n\r Patient ID \n ") == "Patient ID"

    def test_keeps_inner_whitespace(self):
        """Whitespace inside the text is untouched."""
        assert trim_ws_nl("\nReferenced  SOP\n") == "Referenced  SOP"

    def test_keeps_tabs(self):
        """Only spaces, newlines and carriage returns are trimmed."""
        assert trim_ws_nl("\tx\t") == "\tx\t"

    def test_empty(self):
        """Blank input trims to an empty string."""
        assert trim_ws_nl("") == ""
        assert trim_ws_nl(" \n ") == ""


class TestSequenceItemDepth:
    """Tests for sequence nesting markers."""

    def test_no_markers(self):
        """Plain text has depth zero."""
        assert sequence_item_depth("entry") == 0

    def test_single_marker(self):
        """One leading marker gives depth one."""
        assert sequence_item_depth(">entry") == 1

    def test_markers_after_whitespace(self):
        """Whitespace before the markers is skipped."""
        assert sequence_item_depth("  \n>>entry") == 2
        assert sequence_item_depth(" \r\n >>abc") == 2

    def test_whitespace_between_markers(self):
        """Whitespace between markers is skipped too."""
        assert sequence_item_depth(" >\n\r> >Code Value") == 3

    def test_markers_after_text_ignored(self):
        """Markers after the first other character do not count."""
        assert sequence_item_depth("a>b") == 0

    def test_empty(self):
        """Empty text has depth zero."""
        assert sequence_item_depth("") == 0


class TestAttributeName:
    """Tests for attribute name extraction."""

    def test_plain_name(self):
        """An undecorated name is returned as is."""
        assert attribute_name("Referenced Study Sequence") == "Referenced Study Sequence"

    def test_strips_markers(self):
        """Leading markers and whitespace are dropped."""
        assert attribute_name(" >\n\r> Referenced Study Sequence") == "Referenced Study Sequence"

    def test_collapses_separators(self):
        """Wrapped names collapse to single spaces."""
        assert attribute_name("Referenced SOP\n    Class UID") == "Referenced SOP Class UID"
        assert attribute_name("Patient\t.Name") == "Patient Name"

    def test_only_markers(self):
        """Text of markers only yields an empty name."""
        assert attribute_name(">> \n") == ""


class TestAttributeHasInclude:
    """Tests for include directive detection."""

    def test_plain_include(self):
        """A cell starting with Include is a directive."""
        assert attribute_has_include("Include Table 10-11")

    def test_include_after_markers(self):
        """Markers and whitespace may precede Include."""
        assert attribute_has_include(" >>\nInclude Table 10-11")

    def test_include_after_text(self):
        """Other text before Include is no directive."""
        assert not attribute_has_include("See Include Table 10-11")

    def test_lowercase_include_is_not_a_directive(self):
        """Matching is case sensitive."""
        assert not attribute_has_include("include")
        assert not attribute_has_include(" \n\r >>include")

    def test_no_include(self):
        """Attribute names are no directive."""
        assert not attribute_has_include("Patient's Name")


class TestRemoveBreakHints:
    """Tests for zero-width space removal."""

    def test_removes_zero_width_spaces(self):
        """Zero-width spaces inside keywords are removed."""
        assert remove_break_hints("Specific\u200bCharacter\u200bSet") == "SpecificCharacterSet"

    def test_plain_text_unchanged(self):
        """Text without break hints is unchanged."""
        assert remove_break_hints("PatientName") == "PatientName"
