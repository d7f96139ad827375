"""Application configuration using Pydantic Settings."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class RelationSettings(BaseSettings):
    """Reciprocity table and mirror policy settings."""

    model_config = SettingsConfigDict(env_prefix="RELATIONS_")

    vocabulary: Literal["en", "he"] = "en"
    # "male" picks the male column when gender is unknown, "none" skips the mirror
    absent_gender: Literal["male", "none"] = "male"
    unknown_type_policy: Literal["identity", "suppress", "label"] = "identity"
    unknown_fallback_label: str = "other"
    extra_table_path: Optional[str] = None


class DatabaseSettings(BaseSettings):
    """Database path settings."""

    persons_db_path: str = "data/persons.db"
    relations_db_path: str = "data/relations.db"

    def ensure_dirs(self) -> None:
        """Create data directories if needed."""
        for path in (self.persons_db_path, self.relations_db_path):
            Path(path).parent.mkdir(parents=True, exist_ok=True)


class LogSettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    relations: RelationSettings = RelationSettings()
    database: DatabaseSettings = DatabaseSettings()
    log: LogSettings = LogSettings()


settings = Settings()
