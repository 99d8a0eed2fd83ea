"""SovereignConfig — runtime settings for the server and CLI.

Defaults are suitable for local use. Values can be overridden from the
environment::

    SOVEREIGN_HOST         bind address (default 127.0.0.1)
    SOVEREIGN_PORT         TCP port (default 8080)
    SOVEREIGN_LOG_LEVEL    DEBUG, INFO, WARNING or ERROR (default INFO)
    SOVEREIGN_STORE_FILE   path of the JSON snapshot file (default: in-memory only)
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

ENV_PREFIX = "SOVEREIGN_"


class SovereignConfig(BaseModel):
    """Runtime configuration.

    Parameters
    ----------
    host:
        Bind address for the HTTP server.
    port:
        TCP port for the HTTP server.
    log_level:
        Root logging level.
    store_file:
        Snapshot file backing the store. ``None`` keeps everything in memory.
    """

    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    log_level: LogLevel = "INFO"
    store_file: Optional[Path] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SovereignConfig":
        """Build a config from ``SOVEREIGN_*`` environment variables.

        Raises
        ------
        pydantic.ValidationError
            If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for field_name in cls.model_fields:
            raw = env.get(ENV_PREFIX + field_name.upper())
            if raw is not None and raw != "":
                values[field_name] = raw
        return cls.model_validate(values)

    def configure_logging(self) -> None:
        """Apply :attr:`log_level` to the root logger."""
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


__all__ = ["LogLevel", "SovereignConfig"]
