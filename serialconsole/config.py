"""Configuration loading and validation using Pydantic."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from serialconsole.domain import (
    DEFAULT_BAUD_RATE,
    OUTPUT_BUFFER_MAX_LINES,
    StreamFaultPolicy,
    validate_baud_rate,
)

CONFIG_PATH_ENV = "SERIALCONSOLE_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "config.yaml"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class SerialConfig(BaseModel):
    """Serial link configuration."""

    port: str | None = None
    baud_rate: int = DEFAULT_BAUD_RATE
    encoding: str = "utf-8"
    line_ending: str = "\n"
    stream_fault_policy: StreamFaultPolicy = StreamFaultPolicy.TEARDOWN
    hotplug_poll_interval: float = Field(default=1.0, gt=0)

    @field_validator("baud_rate")
    @classmethod
    def check_baud_rate(cls, v: int) -> int:
        """Only standard baud rates are offered."""
        return validate_baud_rate(v)

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate the codec exists."""
        import codecs

        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}") from None
        return v


class ConsoleConfig(BaseModel):
    """Console buffer configuration."""

    max_lines: int = Field(default=OUTPUT_BUFFER_MAX_LINES, ge=1)
    max_history: int | None = Field(default=None, ge=1)


class Config(BaseModel):
    """Application configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    serial: SerialConfig = Field(default_factory=SerialConfig)
    console: ConsoleConfig = Field(default_factory=ConsoleConfig)


def get_config_path() -> Path:
    """Config path from the environment, or the default."""
    return Path(os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    A missing or empty file gives the defaults.
    """
    config_path = Path(config_path) if config_path is not None else get_config_path()

    if not config_path.exists():
        data = {}
    else:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    return Config.model_validate(data)
