"""Tests for the data element registry stage."""

from dcmstd.models import VR, DicomStandard, Tag
from dcmstd.pipeline.stage_registry import build_part06


class TestBuildPart06:
    """Tests for registry extraction from part 06."""

    def test_adds_registry(self, part06_tree, query):
        """The registry tables fill the model."""
        standard = DicomStandard()

        assert build_part06(part06_tree, standard, query)

        assert len(standard.data_elements) == 6
        keywords = [e.keyword for e in standard.data_elements]
        assert "SpecificCharacterSet" in keywords
        assert "PatientName" in keywords

    def test_ranged_and_multi_vr_entries(self, part06_tree):
        """Ranged tags and multiple VRs survive."""
        standard = DicomStandard()
        build_part06(part06_tree, standard)

        (overlay,) = standard.data_element(Tag(group=0x6000, element=0x3000))
        assert overlay.keyword == "OverlayData"
        assert overlay.value_representations == (VR.OB, VR.OW)

        (pixel_value,) = standard.data_element(Tag(group=0x0028, element=0x0106))
        assert pixel_value.value_representations == (VR.US, VR.SS)

    def test_second_pass_adds_nothing(self, part06_tree):
        """A second pass adds no duplicates."""
        standard = DicomStandard()
        build_part06(part06_tree, standard)
        build_part06(part06_tree, standard)

        assert len(standard.data_elements) == 6

    def test_missing_table_fails(self, part06_tree):
        """A missing registry table fails the pass."""
        standard = DicomStandard()

        assert not build_part06(part06_tree, standard, table_ids=["table_6-1", "table_7-1"])
        assert len(standard.data_elements) == 6

    def test_invalid_table_fails(self, part03_tree):
        """A non-registry table fails the pass."""
        standard = DicomStandard()

        assert not build_part06(part03_tree, standard, table_ids=["table_C.7-1"])
        assert standard.data_elements == []
