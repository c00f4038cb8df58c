"""Repository layer for database CRUD operations."""

from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dcmstd.models import (
    Ciod,
    DataElement,
    DicomStandard,
    Imd,
    RangedTag,
    RangedTagItem,
)

from .orm_models import CiodORM, DataElementORM, ImdORM


class CiodRepository:
    """Repository for Ciod operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, ciod: Ciod) -> CiodORM:
        """Create a new CIOD record."""
        orm_ciod = CiodORM(
            id=ciod.id,
            caption=ciod.caption,
            parent_ids=list(ciod.parent_ids),
            items=[item.model_dump(mode="json") for item in ciod.items],
        )
        self.session.add(orm_ciod)
        await self.session.flush()
        return orm_ciod

    async def get_by_id(self, ciod_id: str) -> Optional[CiodORM]:
        """Get CIOD by table id."""
        result = await self.session.execute(
            select(CiodORM).where(CiodORM.id == ciod_id)
        )
        return result.scalar_one_or_none()

    async def list_ids(self) -> Sequence[str]:
        """Get all stored CIOD ids."""
        result = await self.session.execute(select(CiodORM.id).order_by(CiodORM.id))
        return result.scalars().all()

    async def list_all(self) -> Sequence[CiodORM]:
        result = await self.session.execute(select(CiodORM).order_by(CiodORM.id))
        return result.scalars().all()

    async def count_all(self) -> int:
        """Count stored CIODs."""
        result = await self.session.execute(
            select(func.count()).select_from(CiodORM)
        )
        return result.scalar_one()

    @staticmethod
    def to_model(orm_ciod: CiodORM) -> Ciod:
        """Convert a record back into a Ciod."""
        return Ciod(
            id=orm_ciod.id,
            caption=orm_ciod.caption,
            parent_ids=orm_ciod.parent_ids or [],
            items=orm_ciod.items or [],
        )


class ImdRepository:
    """Repository for Imd operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, imd: Imd) -> ImdORM:
        """Create a new IMD record."""
        orm_imd = ImdORM(
            id=imd.id,
            caption=imd.caption,
            parent_ids=list(imd.parent_ids),
            items=[item.model_dump(mode="json") for item in imd.items],
        )
        self.session.add(orm_imd)
        await self.session.flush()
        return orm_imd

    async def get_by_id(self, imd_id: str) -> Optional[ImdORM]:
        """Get IMD by table id."""
        result = await self.session.execute(
            select(ImdORM).where(ImdORM.id == imd_id)
        )
        return result.scalar_one_or_none()

    async def list_ids(self) -> Sequence[str]:
        """Get all stored IMD ids."""
        result = await self.session.execute(select(ImdORM.id).order_by(ImdORM.id))
        return result.scalars().all()

    async def list_all(self) -> Sequence[ImdORM]:
        result = await self.session.execute(select(ImdORM).order_by(ImdORM.id))
        return result.scalars().all()

    async def count_all(self) -> int:
        """Count stored IMDs."""
        result = await self.session.execute(
            select(func.count()).select_from(ImdORM)
        )
        return result.scalar_one()

    @staticmethod
    def to_model(orm_imd: ImdORM) -> Imd:
        """Convert a record back into an Imd."""
        return Imd(
            id=orm_imd.id,
            caption=orm_imd.caption,
            parent_ids=orm_imd.parent_ids or [],
            items=orm_imd.items or [],
        )


class DataElementRepository:
    """Repository for data element registry operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_batch(self, elements: Sequence[DataElement]) -> list[DataElementORM]:
        """Batch create registry entries for efficiency."""
        orm_elements = [
            DataElementORM(
                group_min=e.tag.group.min,
                group_max=e.tag.group.max,
                element_min=e.tag.element.min,
                element_max=e.tag.element.max,
                name=e.name,
                keyword=e.keyword,
                vrs=[vr.value for vr in e.value_representations],
                vm=e.value_multiplicity,
                description=e.description,
            )
            for e in elements
        ]
        self.session.add_all(orm_elements)
        await self.session.flush()
        return orm_elements

    async def get_by_keyword(self, keyword: str) -> Sequence[DataElementORM]:
        """Get registry entries by keyword."""
        result = await self.session.execute(
            select(DataElementORM).where(DataElementORM.keyword == keyword)
        )
        return result.scalars().all()

    async def list_all(self) -> Sequence[DataElementORM]:
        result = await self.session.execute(
            select(DataElementORM).order_by(DataElementORM.id)
        )
        return result.scalars().all()

    async def count_all(self) -> int:
        """Count stored registry entries."""
        result = await self.session.execute(
            select(func.count()).select_from(DataElementORM)
        )
        return result.scalar_one()

    @staticmethod
    def to_model(orm_element: DataElementORM) -> DataElement:
        """Convert a record back into a DataElement."""
        return DataElement(
            tag=RangedTag(
                group=RangedTagItem(min=orm_element.group_min, max=orm_element.group_max),
                element=RangedTagItem(min=orm_element.element_min, max=orm_element.element_max),
            ),
            name=orm_element.name,
            keyword=orm_element.keyword,
            value_representations=tuple(orm_element.vrs or ()),
            value_multiplicity=orm_element.vm,
            description=orm_element.description,
        )


class StandardRepository:
    """Persist and restore a whole DicomStandard."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.ciods = CiodRepository(session)
        self.imds = ImdRepository(session)
        self.data_elements = DataElementRepository(session)

    async def save(self, standard: DicomStandard) -> dict[str, int]:
        """Store every definition whose id is not stored yet.

        Registry entries are only written into an empty registry table.

        Returns:
            Number of new records per kind.
        """
        stored_ciods = set(await self.ciods.list_ids())
        stored_imds = set(await self.imds.list_ids())

        counts = {"ciods": 0, "imds": 0, "data_elements": 0}
        for ciod in standard.ciods.values():
            if ciod.id not in stored_ciods:
                await self.ciods.create(ciod)
                counts["ciods"] += 1
        for imd in standard.imds.values():
            if imd.id not in stored_imds:
                await self.imds.create(imd)
                counts["imds"] += 1
        if standard.data_elements and await self.data_elements.count_all() == 0:
            await self.data_elements.create_batch(standard.data_elements)
            counts["data_elements"] = len(standard.data_elements)
        return counts

    async def load(self) -> DicomStandard:
        """Restore the stored definitions into a new model."""
        standard = DicomStandard()
        for orm_ciod in await self.ciods.list_all():
            standard.insert_ciod(CiodRepository.to_model(orm_ciod))
        for orm_imd in await self.imds.list_all():
            standard.insert_imd(ImdRepository.to_model(orm_imd))
        for orm_element in await self.data_elements.list_all():
            standard.add_data_element(DataElementRepository.to_model(orm_element))
        return standard
