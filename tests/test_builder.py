"""Tests for the standard builder."""

from unittest.mock import patch

import pytest

from dcmstd.errors import ChapterMissingError
from dcmstd.models import DicomStandard, Tag, Usage
from dcmstd.pipeline import build, build_part03, load_document_string

PART03_WITHOUT_CHAPTER_C = """
<book xmlns="http://docbook.org/ns/docbook" xml:id="PS3.3">
  <chapter xml:id="chapter_A"/>
</book>
"""

PART03_UNRESOLVED = """
<book xml:id="PS3.3">
  <chapter xml:id="chapter_A"/>
  <chapter xml:id="chapter_C">
    <table xml:id="table_C.1-1">
      <caption>Broken Module Attributes</caption>
      <thead><tr><th>Attribute Name</th><th>Tag</th><th>Type</th><th>Attribute Description</th></tr></thead>
      <tbody>
        <tr><td>Patient ID</td><td>(0010,0020)</td><td>2</td><td/></tr>
        <tr><td>Include <xref linkend="table_missing"/></td></tr>
      </tbody>
    </table>
  </chapter>
</book>
"""


class TestBuild:
    """Tests for the end to end build."""

    def test_builds_both_parts(self, part03_tree, part06_tree):
        """Both parts build into one complete model."""
        result = build([part03_tree, part06_tree])

        assert result.ok
        assert result.error is None
        standard = result.standard
        assert standard.ciod_ids() == ["table_A.2-1"]
        assert standard.imd_ids() == ["table_C.7-1", "table_C.7-2b", "table_10-11", "table_10-12"]
        assert standard.summary() == {"ciods": 1, "imds": 4, "data_elements": 6}
        assert result.not_module_ids == ["table_10-20"]
        assert result.unresolved_ids == []

    def test_ciod_content(self, part03_tree):
        """The CIOD keeps its modules, references and usages."""
        ciod = build([part03_tree]).standard.ciod("table_A.2-1")

        assert ciod.caption == "CR Image IOD Modules"
        assert ciod.parent_ids == ["sect_A.2.3", "sect_A.2", "chapter_A", "PS3.3"]
        assert [(i.information_entity, i.module, i.usage) for i in ciod.items] == [
            ("Patient", "Patient", Usage.MANDATORY),
            ("Patient", "Clinical Trial Subject", Usage.USER_OPTIONAL),
            ("Image", "General Image", Usage.CONDITIONAL),
        ]

    def test_every_include_is_resolved(self, part03_tree):
        """Every include link names an IMD or the skipped non-module table."""
        standard = build([part03_tree]).standard

        for imd in standard.imds.values():
            for link_id in imd.include_ids():
                assert standard.contains(link_id) or link_id == "table_10-20"

    def test_document_order_does_not_matter(self, part03_tree, part06_tree):
        """Part order does not change the model."""
        a = build([part03_tree, part06_tree]).standard
        b = build([part06_tree, part03_tree]).standard

        assert a.summary() == b.summary()
        assert a.data_element(Tag(group=0x0010, element=0x0010)) == b.data_element(
            Tag(group=0x0010, element=0x0010)
        )

    def test_unknown_documents_are_skipped(self, part06_tree):
        """Parts with unknown root ids are ignored."""
        other = load_document_string('<book xml:id="PS3.5"><chapter xml:id="chapter_A"/></book>')

        result = build([other, part06_tree])

        assert result.ok
        assert result.standard.summary() == {"ciods": 0, "imds": 0, "data_elements": 6}

    def test_no_documents(self):
        """An empty document list builds an empty model."""
        result = build([])

        assert result.ok
        assert result.standard.summary() == {"ciods": 0, "imds": 0, "data_elements": 0}

    def test_missing_chapter_fails(self):
        """A part 03 without chapter C fails the build."""
        result = build([load_document_string(PART03_WITHOUT_CHAPTER_C)])

        assert not result.ok
        assert result.standard is None
        assert "chapter_C" in result.error

    def test_unresolved_include_fails(self):
        """An unresolved include fails without a model."""
        result = build([load_document_string(PART03_UNRESOLVED)], keep_partial=False)

        assert not result.ok
        assert result.standard is None
        assert result.unresolved_ids == ["table_missing"]
        assert "table_missing" in result.error

    def test_unresolved_include_keeps_partial_model(self):
        """keep_partial attaches the model of a failed build."""
        result = build([load_document_string(PART03_UNRESOLVED)], keep_partial=True)

        assert not result.ok
        assert result.standard.imd_ids() == ["table_C.1-1"]

    def test_partial_model_follows_settings(self):
        """Without an explicit flag the settings decide."""
        with patch("dcmstd.pipeline.builder.settings") as mock_settings:
            mock_settings.expose_partial_model = True
            mock_settings.part03_root_id = "PS3.3"
            mock_settings.ciod_chapter_id = "chapter_A"
            mock_settings.imd_chapter_id = "chapter_C"

            result = build([load_document_string(PART03_UNRESOLVED)])

        assert not result.ok
        assert result.standard is not None

    def test_failed_registry_fails_build(self, part06_tree):
        """A registry failure fails the whole build."""
        with patch("dcmstd.pipeline.builder.build_part06", return_value=False):
            result = build([part06_tree])

        assert not result.ok
        assert "registry" in result.error


class TestBuildPart03:
    """Tests for part 03 chapter extraction."""

    def test_missing_chapter_raises(self):
        """A missing chapter raises with its id."""
        with pytest.raises(ChapterMissingError) as exc_info:
            build_part03(load_document_string(PART03_WITHOUT_CHAPTER_C), DicomStandard())
        assert exc_info.value.chapter_id == "chapter_C"

    def test_does_not_resolve(self, part03_tree):
        """Part 03 building stops short of include resolution."""
        standard = DicomStandard()
        build_part03(part03_tree, standard)

        assert standard.imd_ids() == ["table_C.7-1", "table_C.7-2b"]
