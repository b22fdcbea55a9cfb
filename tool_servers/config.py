"""
Application configuration.

Values come from a YAML file (``config.yml`` by default) and can be
overridden by environment variables, e.g. ``WOLFRAM_APP_ID`` or ``DEBUG``.
A missing file is not an error: defaults plus environment are used.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError

from tool_servers.errors import ConfigurationError

DEFAULT_CONFIG_PATH = "config.yml"

# (section, key) -> environment variable. section None means top level.
ENV_OVERRIDES: Dict[Tuple[Optional[str], str], str] = {
    (None, "log"): "LOG_PATH",
    (None, "debug"): "DEBUG",
    ("transport", "type"): "MCP_TRANSPORT",
    ("transport", "host"): "HOST",
    ("transport", "port"): "PORT",
    ("greeting", "default_message"): "GREETING_DEFAULT_MESSAGE",
    ("wolfram", "app_id"): "WOLFRAM_APP_ID",
    ("wolfram", "timeout"): "WOLFRAM_TIMEOUT",
    ("wolfram", "use_bearer"): "WOLFRAM_USE_BEARER",
    ("wolfram", "default_max_chars"): "WOLFRAM_DEFAULT_MAX_CHARS",
}


class TransportConfig(BaseModel):
    type: Literal["stdio", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(8000, gt=0)


class GreetingConfig(BaseModel):
    default_message: str = "Hello!"


class WolframConfig(BaseModel):
    app_id: str = ""
    timeout: int = Field(30, gt=0)  # seconds
    use_bearer: bool = False
    default_max_chars: int = 2000


class Config(BaseModel):
    log: str = ""
    debug: bool = False
    transport: TransportConfig = Field(default_factory=TransportConfig)
    greeting: GreetingConfig = Field(default_factory=GreetingConfig)
    wolfram: WolframConfig = Field(default_factory=WolframConfig)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"could not read config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def apply_env_overrides(data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    """Return a copy of ``data`` with every set override variable applied."""
    merged = dict(data)
    for (section, key), var in ENV_OVERRIDES.items():
        # Unset and empty variables leave the file value alone.
        if not environ.get(var):
            continue
        if section is None:
            merged[key] = environ[var]
            continue
        block = merged.get(section)
        block = dict(block) if isinstance(block, dict) else {}
        block[key] = environ[var]
        merged[section] = block
    return merged


def load_config(path: str | os.PathLike = DEFAULT_CONFIG_PATH,
                environ: Optional[Mapping[str, str]] = None) -> Config:
    data = _read_yaml(Path(path))
    data = apply_env_overrides(data, os.environ if environ is None else environ)
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration in {path}: {e}") from e
