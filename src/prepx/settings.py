from __future__ import annotations

import codecs
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from prepx.config import CONFIG_FILENAME, ENV_PREFIX, MIN_SNIFF_BYTES, OUTPUT_FILENAME
from prepx.exceptions import ConfigError

ENV_FILE = find_dotenv(usecwd=True)


class Settings(BaseModel):
    """Configuration settings for the prepx package."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    repo: Path | None = Field(
        default=None,
        description="Repository root override; detected with git when unset.",
    )
    output_name: str = Field(
        default=OUTPUT_FILENAME,
        min_length=1,
        description="Output file name, written into the working directory.",
    )
    sniff_bytes: int = Field(
        default=MIN_SNIFF_BYTES,
        ge=MIN_SNIFF_BYTES,
        description="Bytes inspected for NUL when detecting binary files.",
    )
    encoding: str = Field(default="utf-8", description="Text encoding of files and output.")
    log_file: str = Field(default="", description="Log file path.")
    verbose: bool = Field(default=False, description="Log progress at INFO level.")

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            msg = f"unknown encoding: {value}"
            raise ValueError(msg) from e
        return value


def load_config_file(path: Path) -> dict[str, Any]:
    """Read settings overrides from a YAML mapping.

    Args:
        path (Path): the YAML file to read

    Raises:
        ConfigError: if the file cannot be read, is not valid YAML, or is not a mapping

    Returns:
        dict[str, Any]: the raw settings found in the file (empty for an empty file)
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(path=path, detail=e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(path=path, detail=str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(path=path, detail="top-level value must be a mapping")
    return data


def load_env_overrides(env_file: str | None = None) -> dict[str, str]:
    """Collect `PREPX_*` settings from a `.env` file and the process environment.

    Variables set in the process environment win over the `.env` file.

    Args:
        env_file (str | None): path of the dotenv file; empty to skip it,
            None for the `.env` found from the current directory

    Returns:
        dict[str, str]: settings names (lower-cased, prefix stripped) mapped to raw values
    """
    env_file = ENV_FILE if env_file is None else env_file
    merged: dict[str, str | None] = dict(dotenv_values(env_file)) if env_file else {}
    merged.update(os.environ)
    out: dict[str, str] = {}
    for key, value in merged.items():
        if value is None or not key.startswith(ENV_PREFIX):
            continue
        name = key.removeprefix(ENV_PREFIX).lower()
        if name in Settings.model_fields:
            out[name] = value
    return out


def load_settings(
    overrides: dict[str, Any] | None = None,
    *,
    config_file: Path | None = None,
    env_file: str | None = None,
    cwd: Path | None = None,
) -> Settings:
    """Build settings from defaults, a YAML file, the environment and explicit overrides.

    Later sources win: defaults < config file < environment < overrides.
    When `config_file` is None, `.prepx.yaml` in `cwd` is used if it exists.

    Args:
        overrides (dict[str, Any] | None): explicit values, typically from the CLI
        config_file (Path | None): YAML file to load
        env_file (str | None): dotenv file to read `PREPX_*` variables from
        cwd (Path | None): directory searched for the default config file

    Raises:
        ConfigError: if the config file is invalid or the merged values fail validation

    Returns:
        Settings: the validated settings
    """
    values: dict[str, Any] = {}
    source = config_file
    if source is None:
        candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
        if candidate.is_file():
            source = candidate
    if source is not None:
        values.update(load_config_file(source))
    values.update(load_env_overrides(env_file))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})
    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigError(path=source, detail=str(e)) from e
