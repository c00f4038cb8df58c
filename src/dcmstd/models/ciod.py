"""Composite Information Object Definition models (part 03 chapter A)."""

from pydantic import Field

from .base import BaseStdModel, Usage, XRef


class CiodEntry(BaseStdModel):
    """One module row of a CIOD table."""

    information_entity: str = Field(default="", description="IE, inherited from earlier rows if blank")
    module: str = ""
    reference: XRef = Field(default_factory=XRef)
    usage: Usage = Usage.USER_OPTIONAL


class Ciod(BaseStdModel):
    """
    Composite Information Object Definition.

    Identified by the XML id of the table it was built from. The parent ids
    are the XML ids of the enclosing sections, nearest first.
    """

    id: str
    caption: str = ""
    parent_ids: list[str] = Field(default_factory=list)
    items: list[CiodEntry] = Field(default_factory=list)

    @property
    def modules(self) -> list[str]:
        """Module names in table order."""
        return [item.module for item in self.items]

    def entries_for(self, information_entity: str) -> list[CiodEntry]:
        """Get all rows belonging to an information entity."""
        return [i for i in self.items if i.information_entity == information_entity]
