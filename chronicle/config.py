"""Repository configuration using pydantic-settings."""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings


class RepositorySettings(BaseSettings):
    """Configuration for a Repository.

    All settings can be configured via environment variables with the
    CHRONICLE_ prefix. For example:
    - CHRONICLE_LOG_LEVEL=DEBUG
    - CHRONICLE_ISOLATE_OBSERVERS=true

    Attributes:
        log_level: Level used for replay log records (e.g. "INFO",
            "DEBUG"). Case-insensitive.
        isolate_observers: When true, an observer that raises is logged and
            the remaining observers still run. When false (the default),
            the exception propagates out of ``Repository.apply`` and the
            remaining observers are skipped.

    Example:
        >>> settings = RepositorySettings(log_level="debug")
        >>> settings.level
        10
    """

    log_level: str = "INFO"
    isolate_observers: bool = False

    model_config = {"env_prefix": "CHRONICLE_"}

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"unknown log level {value!r}")
        return value.upper()

    @property
    def level(self) -> int:
        """The numeric logging level."""
        return getattr(logging, self.log_level)  # type: ignore[no-any-return]
