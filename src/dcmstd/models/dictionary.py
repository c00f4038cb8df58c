"""Data element registry models (DICOM standard part 06)."""

import logging
import re
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import UINT16_MAX, BaseStdModel, Tag, split_tag_text

logger = logging.getLogger(__name__)

_EXACT = re.compile(r"[0-9a-fA-F]{4}")
_WILDCARD = re.compile(r"[0-9a-fA-FxX]{4}")


class VR(str, Enum):
    """Value Representation codes."""

    AE = "AE"
    AS = "AS"
    AT = "AT"
    CS = "CS"
    DA = "DA"
    DS = "DS"
    DT = "DT"
    FD = "FD"
    FL = "FL"
    IS = "IS"
    LO = "LO"
    LT = "LT"
    OB = "OB"
    OD = "OD"
    OF = "OF"
    OL = "OL"
    OV = "OV"
    OW = "OW"
    PN = "PN"
    SH = "SH"
    SL = "SL"
    SQ = "SQ"
    SS = "SS"
    ST = "ST"
    SV = "SV"
    TM = "TM"
    UC = "UC"
    UI = "UI"
    UL = "UL"
    UN = "UN"
    UR = "UR"
    US = "US"
    UT = "UT"
    UV = "UV"

    @classmethod
    def parse(cls, token: str) -> Optional["VR"]:
        """Decode a VR code, None if unrecognized."""
        try:
            return cls(token)
        except ValueError:
            return None


class RangedTagItem(BaseStdModel):
    """Closed interval over a 16 bit group or element value.

    The registry writes ranges with ``x`` wildcards, e.g. ``60x0`` covers
    ``6000`` through ``60F0``.
    """

    min: int = Field(default=0, ge=0, le=UINT16_MAX)
    max: int = Field(default=0, ge=0, le=UINT16_MAX)

    class Config:
        frozen = True

    @classmethod
    def exact(cls, value: int) -> "RangedTagItem":
        """Create an item covering a single value."""
        return cls(min=value, max=value)

    @classmethod
    def parse(cls, text: str) -> Optional["RangedTagItem"]:
        """Parse a 4 digit hex literal, optionally with x/X wildcards."""
        if _EXACT.fullmatch(text):
            return cls.exact(int(text, 16))
        if _WILDCARD.fullmatch(text):
            lowered = text.lower()
            return cls(
                min=int(lowered.replace("x", "0"), 16),
                max=int(lowered.replace("x", "f"), 16),
            )
        logger.error("Input argument [%s] doesn't have a valid format.", text)
        return None

    def is_ranged(self) -> bool:
        """Check if the item covers more than one value."""
        return self.min != self.max

    def contains(self, value: int) -> bool:
        """Check if a concrete value lies within the interval."""
        return self.min <= value <= self.max

    def __str__(self) -> str:
        if not self.is_ranged():
            return f"{self.min:04X}"
        # show wildcard nibbles as x
        lo, hi = f"{self.min:04X}", f"{self.max:04X}"
        return "".join(a if a == b else "x" for a, b in zip(lo, hi))


class RangedTag(BaseStdModel):
    """Tag whose group and element may each be a range."""

    group: RangedTagItem
    element: RangedTagItem

    class Config:
        frozen = True

    @classmethod
    def parse(cls, text: str) -> Optional["RangedTag"]:
        """Parse ``(group,element)`` where each side is a ranged item."""
        parts = split_tag_text(text)
        if parts is None:
            logger.error("String [%s] does not have a valid Tag format", text)
            return None
        group = RangedTagItem.parse(parts[0].strip())
        element = RangedTagItem.parse(parts[1].strip())
        if group is None or element is None:
            logger.error("Input argument [%s] doesn't have a valid format.", text)
            return None
        return cls(group=group, element=element)

    def is_ranged(self) -> bool:
        """Check if either the group or the element is ranged."""
        return self.group.is_ranged() or self.element.is_ranged()

    def matches(self, tag: Tag) -> bool:
        """Check if a concrete tag falls within this ranged tag."""
        return self.group.contains(tag.group) and self.element.contains(tag.element)

    def __str__(self) -> str:
        return f"({self.group},{self.element})"


class DataElement(BaseStdModel):
    """Entry of the data element registry."""

    tag: RangedTag
    name: str = ""
    keyword: str = ""
    value_representations: tuple[VR, ...] = Field(default_factory=tuple)
    value_multiplicity: str = ""
    description: str = Field(default="", description="Retirement note, e.g. RET (2007)")

    class Config:
        frozen = True

    @property
    def is_retired(self) -> bool:
        """Check if the registry marks the element as retired."""
        return self.description.startswith("RET")
