"""Storage layer for the DICOM standard model.

Provides database access via SQLAlchemy so a built model can be reused
without re-parsing the standard.
"""

from .database import (
    Base,
    async_session_factory,
    close_db,
    create_engine_for,
    engine,
    get_session,
    init_db,
    session_factory_for,
)
from .orm_models import (
    CiodORM,
    DataElementORM,
    ImdORM,
)
from .repositories import (
    CiodRepository,
    DataElementRepository,
    ImdRepository,
    StandardRepository,
)

__all__ = [
    # Database
    "Base",
    "engine",
    "async_session_factory",
    "create_engine_for",
    "session_factory_for",
    "get_session",
    "init_db",
    "close_db",
    # ORM Models
    "CiodORM",
    "ImdORM",
    "DataElementORM",
    # Repositories
    "CiodRepository",
    "ImdRepository",
    "DataElementRepository",
    "StandardRepository",
]
