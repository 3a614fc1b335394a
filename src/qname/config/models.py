"""Configuration models describing qname settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class QnameConfigModel(BaseModel):
    """Shared configuration for qname settings models."""

    model_config = ConfigDict(extra="forbid")


class FileSettings(QnameConfigModel):
    """Where schemas are found.

    Attributes:
        schema_filename: Schema file looked up in a working directory when no
            explicit schema path is given.
    """

    schema_filename: str = "schema.q"


class NamingSettings(QnameConfigModel):
    """Filename generation options.

    Attributes:
        seed: Optional seed making salt generation repeatable.
        keep_extension: Whether renamed files keep their original extension.
        max_salt_attempts: Salts to try when a generated name is already taken.
    """

    seed: Optional[int] = None
    keep_extension: bool = True
    max_salt_attempts: int = Field(default=10, ge=1)


class LoggingSettings(QnameConfigModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        rich: Whether log records are rendered through rich.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    rich: bool = True


class CLIOptions(QnameConfigModel):
    """CLI output defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        json_default: Whether commands emit JSON by default.
    """

    quiet_default: bool = False
    json_default: bool = False


class QnameConfig(QnameConfigModel):
    """Top-level configuration for qname."""

    files: FileSettings = Field(default_factory=FileSettings)
    naming: NamingSettings = Field(default_factory=NamingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "QnameConfigModel",
    "FileSettings",
    "NamingSettings",
    "LoggingSettings",
    "CLIOptions",
    "QnameConfig",
]
