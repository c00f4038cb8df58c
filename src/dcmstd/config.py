"""Configuration management for the DICOM standard model builder."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Standard document layout
    part03_root_id: str = "PS3.3"
    part06_root_id: str = "PS3.6"
    ciod_chapter_id: str = "chapter_A"
    imd_chapter_id: str = "chapter_C"
    registry_table_ids: list[str] = ["table_6-1"]

    # Attach the partially built model to a failed build result
    expose_partial_model: bool = False

    # Database
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "dcmstd"
    postgres_password: str = "localdev"
    postgres_db: str = "dcmstd"
    database_dsn: Optional[str] = None

    # Logging
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        """Construct async database URL."""
        if self.database_dsn:
            return self.database_dsn
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_prefix = "DCMSTD_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
