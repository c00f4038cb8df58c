"""Base models and common types for the DICOM standard model."""

import logging
import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

UINT16_MAX = 0xFFFF

_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_HEX4_PREFIXED = re.compile(r"0[xX][0-9a-fA-F]{4}")


class BaseStdModel(BaseModel):
    """Base class for all standard model types."""

    class Config:
        from_attributes = True
        validate_assignment = True


class Usage(str, Enum):
    """Usage of a module within a Composite Information Object Definition."""

    MANDATORY = "M"
    USER_OPTIONAL = "U"
    CONDITIONAL = "C"

    @classmethod
    def parse(cls, text: str) -> Optional["Usage"]:
        """Decode a usage from the first character of already trimmed text.

        The usage column of the standard carries free text after the code,
        e.g. ``C - Required if the image is multi-frame``.
        """
        if not text:
            return None
        for usage in cls:
            if text[0] == usage.value:
                return usage
        return None


class AttributeType(str, Enum):
    """DICOM attribute requirement types."""

    TYPE_1 = "1"  # required, shall have a value
    TYPE_2 = "2"  # required, may be zero length
    TYPE_3 = "3"  # optional
    TYPE_1C = "1C"  # conditionally type 1
    TYPE_2C = "2C"  # conditionally type 2

    @classmethod
    def parse(cls, token: str) -> Optional["AttributeType"]:
        """Decode a type designation token, None if unrecognized."""
        try:
            return cls(token)
        except ValueError:
            return None


class XRef(BaseStdModel):
    """Citation of another table or section in the standard.

    An empty ``link_id`` means no reference was present.
    """

    link_id: str = ""
    style: str = ""

    class Config:
        frozen = True

    @property
    def is_empty(self) -> bool:
        """Check if no link target is set."""
        return not self.link_id


def _parse_hex4(text: str) -> Optional[int]:
    if _HEX4.fullmatch(text):
        return int(text, 16)
    if _HEX4_PREFIXED.fullmatch(text):
        return int(text[2:], 16)
    return None


def split_tag_text(text: str) -> Optional[tuple[str, str]]:
    """Split ``(gggg,eeee)`` text into its group and element parts."""
    i = text.find("(")
    j = text.find(",")
    k = text.find(")")
    if i == -1 or j == -1 or k == -1:
        return None
    return text[i + 1 : j], text[j + 1 : k]


class Tag(BaseStdModel):
    """Group and element pair identifying a DICOM data element."""

    group: int = Field(default=0, ge=0, le=UINT16_MAX)
    element: int = Field(default=0, ge=0, le=UINT16_MAX)

    class Config:
        frozen = True

    @classmethod
    def parse(cls, text: str) -> Optional["Tag"]:
        """Parse a tag from ``(gggg,eeee)`` or ``(0xgggg,0xeeee)``.

        Returns None if the text does not have a valid tag format.
        """
        parts = split_tag_text(text)
        if parts is None:
            logger.error("String [%s] does not have a valid Tag format", text)
            return None
        group = _parse_hex4(parts[0])
        if group is None:
            logger.error("String [%s] has no valid Tag group value", text)
        element = _parse_hex4(parts[1])
        if element is None:
            logger.error("String [%s] has no valid Tag element value", text)
        if group is None or element is None:
            return None
        return cls(group=group, element=element)

    def to_u32(self) -> int:
        """Combine group and element into a single 32 bit value."""
        return (self.group << 16) | self.element

    def __str__(self) -> str:
        return f"({self.group:04X},{self.element:04X})"
