"""SQLAlchemy ORM models for the DICOM standard model.

Definitions are keyed by the XML table id. Table rows are stored as JSON
documents since they are always read back together with their table.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base

JsonDocument = JSON().with_variant(JSONB(), "postgresql")


class CiodORM(Base):
    """Composite Information Object Definition table."""

    __tablename__ = "ciods"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    caption: Mapped[str] = mapped_column(Text, nullable=False, default="")
    parent_ids: Mapped[list] = mapped_column(JsonDocument, default=list)
    items: Mapped[list] = mapped_column(JsonDocument, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class ImdORM(Base):
    """Information Module Definition table (modules, macros, attribute tables)."""

    __tablename__ = "imds"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    caption: Mapped[str] = mapped_column(Text, nullable=False, default="")
    parent_ids: Mapped[list] = mapped_column(JsonDocument, default=list)
    items: Mapped[list] = mapped_column(JsonDocument, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class DataElementORM(Base):
    """Data element registry table."""

    __tablename__ = "data_elements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Ranged tag
    group_min: Mapped[int] = mapped_column(Integer, nullable=False)
    group_max: Mapped[int] = mapped_column(Integer, nullable=False)
    element_min: Mapped[int] = mapped_column(Integer, nullable=False)
    element_max: Mapped[int] = mapped_column(Integer, nullable=False)

    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    keyword: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    vrs: Mapped[list] = mapped_column(JsonDocument, default=list)
    vm: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        Index("ix_data_elements_keyword", "keyword"),
        Index("ix_data_elements_group_element", "group_min", "element_min"),
    )
