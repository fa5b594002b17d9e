from pydantic import BaseModel, Field, field_validator
from typing import Optional
from loguru import logger


class Logs(BaseModel):
    """Logging configuration model."""
    level: str = "INFO"
    directory: Optional[str] = None

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.strip().upper()
        # Raises ValueError for names loguru does not know
        logger.level(value)
        return value


class Settings(BaseModel):
    """Main settings configuration model, read from ENVWARP_* variables."""
    template: Optional[str] = None
    confdir: Optional[str] = None
    execution: str = ""
    checkurl: str = ""
    logs: Logs = Field(default_factory=Logs)

    @field_validator("template", "confdir", mode="before")
    @classmethod
    def _empty_is_unset(cls, value):
        return value or None
