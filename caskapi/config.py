"""Service configuration read from environment variables."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT_PATTERN = re.compile(r"[+-]?\d+")


class ConfigError(ValueError):
    """Raised when an environment variable holds a value that cannot be parsed."""


def _lookup(environ: Mapping[str, str], name: str, default: str) -> str:
    value = environ.get(name, "")
    return value if value != "" else default


def _parse_bool(name: str, value: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name}: invalid boolean value {value!r}")


def _parse_int(name: str, value: str) -> int:
    if not _INT_PATTERN.fullmatch(value):
        raise ConfigError(f"{name}: invalid integer value {value!r}")
    return int(value)


@dataclass
class LocalConfig:
    """Settings for the local process: development mode and listening port."""

    development: bool = False
    http_port: int = 80


@dataclass
class Config:
    """The whole service configuration."""

    local: LocalConfig = field(default_factory=LocalConfig)
    clerk_key: str = ""
    project_properties: dict[str, Any] = field(default_factory=dict)


def build_project_properties(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Read the project-specific settings into a property mapping."""
    env = os.environ if environ is None else environ
    return {
        "stripeKey": _lookup(env, "STRIPE_SECRET", "stripe_secret"),
        "railway_port": _lookup(env, "PORT", "3000"),
        "on_railway": _parse_bool("ON_RAILWAY", _lookup(env, "ON_RAILWAY", "false")),
        "flags_agent": _lookup(env, "FLAGS_AGENT_ID", "orchestrator"),
        "flags_environment": _lookup(env, "FLAGS_ENVIRONMENT_ID", "orchestrator"),
        "flags_project": _lookup(env, "FLAGS_PROJECT_ID", "flags-gg"),
    }


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build the full configuration from the environment."""
    env = os.environ if environ is None else environ
    local = LocalConfig(
        development=_parse_bool("DEVELOPMENT", _lookup(env, "DEVELOPMENT", "false")),
        http_port=_parse_int("HTTP_PORT", _lookup(env, "HTTP_PORT", "80")),
    )
    return Config(
        local=local,
        clerk_key=env.get("CLERK_KEY", ""),
        project_properties=build_project_properties(env),
    )