"""Aggregate model holding every definition extracted from the standard."""

from typing import Any, Optional

from pydantic import Field, PrivateAttr

from .base import BaseStdModel, Tag
from .ciod import Ciod
from .dictionary import DataElement
from .imd import Imd


class DicomStandard(BaseStdModel):
    """
    Queryable model of the DICOM standard.

    Definitions are keyed by the XML id of the table they were built from.
    The model only ever grows: inserts never overwrite an existing id and
    there are no update or delete operations.
    """

    ciods: dict[str, Ciod] = Field(default_factory=dict)
    imds: dict[str, Imd] = Field(default_factory=dict)
    data_elements: list[DataElement] = Field(default_factory=list)

    _element_set: set[DataElement] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._element_set = set(self.data_elements)

    def insert_ciod(self, ciod: Ciod) -> bool:
        """Add a CIOD unless its id is already known.

        Returns:
            True if the CIOD was inserted.
        """
        if ciod.id in self.ciods:
            return False
        self.ciods[ciod.id] = ciod
        return True

    def insert_imd(self, imd: Imd) -> bool:
        """Add an IMD unless its id is already known.

        Returns:
            True if the IMD was inserted.
        """
        if imd.id in self.imds:
            return False
        self.imds[imd.id] = imd
        return True

    def add_data_element(self, element: DataElement) -> bool:
        """Add a registry entry unless an equal one exists."""
        if element in self._element_set:
            return False
        self._element_set.add(element)
        self.data_elements.append(element)
        return True

    def ciod_ids(self) -> list[str]:
        """Snapshot of the known CIOD ids in insertion order."""
        return list(self.ciods)

    def imd_ids(self) -> list[str]:
        """Snapshot of the known IMD ids in insertion order."""
        return list(self.imds)

    def ciod(self, id: str) -> Optional[Ciod]:
        return self.ciods.get(id)

    def imd(self, id: str) -> Optional[Imd]:
        return self.imds.get(id)

    def contains(self, id: str) -> bool:
        """Check if a CIOD or IMD exists for a table id."""
        return id in self.ciods or id in self.imds

    def data_element_registry(self) -> frozenset[DataElement]:
        """Snapshot of all registry entries."""
        return frozenset(self._element_set)

    def data_element(self, tag: Tag) -> list[DataElement]:
        """Get all registry entries whose (ranged) tag covers a tag."""
        return [e for e in self.data_elements if e.tag.matches(tag)]

    def summary(self) -> dict[str, int]:
        """Definition counts per kind."""
        return {
            "ciods": len(self.ciods),
            "imds": len(self.imds),
            "data_elements": len(self.data_elements),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize the whole model to JSON."""
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, data: str) -> "DicomStandard":
        """Restore a model written by to_json."""
        return cls.model_validate_json(data)
