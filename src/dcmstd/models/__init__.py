"""Pydantic models describing the DICOM standard.

Model Hierarchy:
- DicomStandard → Ciods → CiodEntries
- DicomStandard → Imds → DataEntries / IncludeEntries
- DicomStandard → DataElements (registry, part 06)

All models support JSON serialization; the aggregate can be written out
once and restored without re-parsing the standard.
"""

from .base import (
    AttributeType,
    BaseStdModel,
    Tag,
    Usage,
    XRef,
)
from .ciod import (
    Ciod,
    CiodEntry,
)
from .dictionary import (
    VR,
    DataElement,
    RangedTag,
    RangedTagItem,
)
from .imd import (
    DataEntry,
    Entry,
    Imd,
    IncludeEntry,
)
from .standard import DicomStandard

__all__ = [
    # Base types
    "AttributeType",
    "BaseStdModel",
    "Tag",
    "Usage",
    "XRef",
    # CIOD
    "Ciod",
    "CiodEntry",
    # IMD
    "DataEntry",
    "Entry",
    "Imd",
    "IncludeEntry",
    # Registry
    "DataElement",
    "RangedTag",
    "RangedTagItem",
    "VR",
    # Aggregate
    "DicomStandard",
]
