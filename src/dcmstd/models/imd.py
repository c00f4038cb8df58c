"""Information Module Definition models (part 03 chapter C)."""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from .base import AttributeType, BaseStdModel, Tag, XRef


class DataEntry(BaseStdModel):
    """Attribute row of a module table."""

    kind: Literal["data"] = "data"
    sequence_indent: int = Field(default=0, ge=0, description="Number of leading '>' markers")
    name: str = ""
    tag: Tag = Field(default_factory=Tag)
    attribute_type: Optional[AttributeType] = Field(
        None, description="None when the table has no type column"
    )
    description: str = ""

    def is_sequence(self) -> bool:
        return self.name.endswith(" Sequence")

    def is_include(self) -> bool:
        return False

    def is_data(self) -> bool:
        return True


class IncludeEntry(BaseStdModel):
    """Row splicing the attributes of another table into a module."""

    kind: Literal["include"] = "include"
    sequence_indent: int = Field(default=0, ge=0)
    xref: XRef = Field(default_factory=XRef)
    description: str = ""

    def is_sequence(self) -> bool:
        return False

    def is_include(self) -> bool:
        return True

    def is_data(self) -> bool:
        return False


Entry = Annotated[Union[DataEntry, IncludeEntry], Field(discriminator="kind")]


class Imd(BaseStdModel):
    """
    Information Module Definition.

    Covers module tables as well as the macro and attribute tables they
    include, all keyed by XML table id.
    """

    id: str
    caption: str = ""
    parent_ids: list[str] = Field(default_factory=list)
    items: list[Entry] = Field(default_factory=list)

    @property
    def includes(self) -> list[IncludeEntry]:
        """Include rows in table order."""
        return [item for item in self.items if item.is_include()]

    @property
    def attributes(self) -> list[DataEntry]:
        """Attribute rows in table order."""
        return [item for item in self.items if item.is_data()]

    def include_ids(self) -> list[str]:
        """Link ids of all non-empty include references."""
        return [i.xref.link_id for i in self.includes if i.xref.link_id]
