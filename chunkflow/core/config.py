from datetime import timedelta
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App info
    APP_ENV: str = Field(default="dev")
    APP_NAME: str = Field(default="chunkflow")

    # Chunk storage
    UPLOAD_ROOT: str = Field(default="./data/uploads", validate_default=True)
    DIR_MODE: int = Field(default=0o777)   # still masked by the process umask
    FILE_MODE: int = Field(default=0o600)

    # Abandoned uploads older than this are eligible for cleanup
    CHUNK_RETENTION_SECONDS: int = Field(default=24 * 60 * 60, gt=0)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def chunk_retention(self) -> timedelta:
        return timedelta(seconds=self.CHUNK_RETENTION_SECONDS)

    @field_validator("UPLOAD_ROOT", mode="before")
    @classmethod
    def resolve_upload_root(cls, v: str) -> str:
        return str(Path(v).resolve())

    @field_validator("DIR_MODE", "FILE_MODE", mode="before")
    @classmethod
    def parse_mode(cls, v):
        """Permission bits come from the environment as octal text ("0755", "0o600")."""
        if isinstance(v, str):
            return int(v, 8)
        return v


# Global singleton
settings = Settings()
