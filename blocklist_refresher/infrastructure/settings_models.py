"""
Pydantic models for validating the sections of the Dynaconf settings.

These models serve as a strict contract for the configuration, ensuring that
a malformed value is caught at startup before any blocklist is touched.
"""

from typing import Type, TypeVar

import pydantic
from pydantic import BaseModel, Field, field_validator

from ..application.exceptions import ConfigurationError

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

SectionModel = TypeVar("SectionModel", bound=BaseModel)


class LoggingSettings(BaseModel):
    """Represents the [logging] section."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(message)s"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(_LOG_LEVELS)}")
        return value


class RefreshSettings(BaseModel):
    """Represents the [refresh] section describing the remote source."""

    base_url: str
    timeout_seconds: float = Field(default=30.0, gt=0)
    user_agent: str = Field(default="blocklist-refresher/0.1", min_length=1)
    show_progress: bool = False

    @field_validator("base_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an http:// or https:// URL")
        return value.rstrip("/")


class PathSettings(BaseModel):
    """Represents the [paths] section. An empty install_dir means the cwd."""

    install_dir: str = ""


class SupervisorSettings(BaseModel):
    """Represents the [supervisor] section."""

    stream_limit_bytes: int = Field(default=2 ** 20, ge=1024)


def load_section(
    settings, name: str, model: Type[SectionModel]
) -> SectionModel:
    """
    Validate one section of the settings against its model.

    Keys are looked up case-insensitively, as Dynaconf stores keys from env
    vars upper-cased.

    Raises:
        ConfigurationError: If the section does not satisfy the model.
    """

    section = settings.get(name) or {}
    values = {}
    for field in model.model_fields:
        value = section.get(field)
        if value is not None:
            values[field] = value

    try:
        return model.model_validate(values)
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid [{name}] settings: {e}") from e
