"""Client configuration.

Values are merged from, highest precedence first:

    1. keyword overrides passed to load_config()
    2. SCW_* environment variables
    3. the [default] table of ~/.config/scaleway-baremetal/config.toml
    4. built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeAlias

from .errors import ConfigurationError

RawConfig: TypeAlias = dict[str, Any]

DEFAULT_API_URL = "https://api.scaleway.com"
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "scaleway-baremetal" / "config.toml"

ENV_VARS: Mapping[str, str] = {
    "secret_key": "SCW_SECRET_KEY",
    "api_url": "SCW_API_URL",
    "default_zone": "SCW_DEFAULT_ZONE",
    "default_organization_id": "SCW_DEFAULT_ORGANIZATION_ID",
    "default_page_size": "SCW_DEFAULT_PAGE_SIZE",
}


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Settings for ScalewayClient.

    Args:
        secret_key: API secret key, sent as X-Auth-Token.
        api_url: Base URL of the API.
        default_zone: Zone used when a request leaves it empty (e.g. "fr-par-1").
        default_organization_id: Organization used by create operations.
        default_page_size: Page size used by list operations that set none.
        request_timeout: Total timeout of one HTTP request, in seconds.
        max_retries: Attempts for requests answered with 429 or 503.
        retry_base_delay: First backoff delay between those attempts, in seconds.
    """

    secret_key: str | None = None
    api_url: str = DEFAULT_API_URL
    default_zone: str | None = None
    default_organization_id: str | None = None
    default_page_size: int | None = None
    request_timeout: float = 30.0
    max_retries: int = 3
    retry_base_delay: float = 1.0


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    with path.open("rb") as f:
        data = tomllib.load(f)
    profile = data.get("default", {})
    if not isinstance(profile, dict):
        raise ConfigurationError(f"[default] in {path} must be a table")
    return profile


def _read_env(environ: Mapping[str, str]) -> RawConfig:
    return {
        key: environ[var]
        for key, var in ENV_VARS.items()
        if environ.get(var)
    }


def _coerce_page_size(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        size = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid default_page_size: {value!r}") from e
    if size < 0:
        raise ConfigurationError(f"invalid default_page_size: {value!r}")
    return size or None


def load_config(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ClientConfig:
    """Build a ClientConfig from file, environment and explicit overrides."""
    known = {f.name for f in fields(ClientConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigurationError(f"unknown config keys: {', '.join(sorted(unknown))}")

    merged: RawConfig = {}
    merged.update(_read_toml(path or GLOBAL_CONFIG_PATH))
    merged.update(_read_env(os.environ if environ is None else environ))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    merged = {k: v for k, v in merged.items() if k in known}
    if "default_page_size" in merged:
        merged["default_page_size"] = _coerce_page_size(merged["default_page_size"])
    return ClientConfig(**merged)
