from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir
from snapapi_client.config_types import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS

from . import console

APP_NAME = "snapapi"
CONFIG_FILENAME = "config.toml"
ENV_API_KEY = "SNAPAPI_KEY"
ENV_BASE_URL = "SNAPAPI_BASE_URL"

_WARNED_BASE_URL_SCHEME = False


@dataclass
class AuthConfig:
    api_key: str = ""


@dataclass
class AppConfig:
    base_url: str
    auth: AuthConfig
    timeout_ms: int = DEFAULT_TIMEOUT_MS


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(
        base_url=DEFAULT_BASE_URL,
        auth=AuthConfig(api_key=""),
        timeout_ms=DEFAULT_TIMEOUT_MS,
    )


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_BASE_URL_SCHEME
    if _WARNED_BASE_URL_SCHEME:
        return
    if not _is_interactive():
        return
    console.warn(f"base_url missing scheme, assuming {normalized}")
    _WARNED_BASE_URL_SCHEME = True


def _is_interactive() -> bool:
    import sys
    return bool(sys.stderr.isatty() or sys.stdout.isatty())


def _parse_timeout(value: Any, default: int) -> int:
    try:
        timeout = int(value)
    except (TypeError, ValueError):
        return default
    return timeout if timeout > 0 else default


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return _prune_none(
        {
            "base_url": cfg.base_url,
            "timeout_ms": cfg.timeout_ms,
            "auth": {
                "api_key": cfg.auth.api_key or None,
            },
        }
    )


def _prune_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _prune_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_prune_none(item) for item in value if item is not None]
    return value


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    base_url = normalize_base_url(str(data.get("base_url") or ""), warn=True)
    if base_url:
        cfg.base_url = base_url
    cfg.timeout_ms = _parse_timeout(data.get("timeout_ms"), cfg.timeout_ms)
    auth_raw = data.get("auth") or {}
    if isinstance(auth_raw, dict):
        cfg.auth.api_key = str(auth_raw.get("api_key") or "").strip()
    return cfg


def _load_raw() -> dict[str, Any] | None:
    try:
        with open(config_path(), "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return None


def load_config() -> AppConfig:
    data = _load_raw()
    if data is None:
        return default_config()
    return from_toml(data)


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    data = _load_raw()
    if data is None:
        return cfg

    profiles_raw = data.get("profiles") or {}
    if not isinstance(profiles_raw, dict):
        return cfg
    prof = profiles_raw.get(profile)
    if not isinstance(prof, dict):
        console.warn(f"Profile {profile!r} not found in {config_path()}, using defaults.")
        return cfg

    base_url = normalize_base_url(str(prof.get("base_url") or cfg.base_url), warn=True)
    auth_raw = prof.get("auth") if isinstance(prof.get("auth"), dict) else {}
    api_key = str(prof.get("api_key") or auth_raw.get("api_key") or cfg.auth.api_key).strip()
    return AppConfig(
        base_url=base_url or cfg.base_url,
        auth=AuthConfig(api_key=api_key),
        timeout_ms=_parse_timeout(prof.get("timeout_ms"), cfg.timeout_ms),
    )


def resolve_api_key(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_API_KEY, "").strip()
    if env_value:
        return env_value
    return (cfg.auth.api_key or "").strip()


def resolve_base_url(cfg: AppConfig) -> str:
    env_value = normalize_base_url(os.getenv(ENV_BASE_URL, ""))
    if env_value:
        return env_value
    return (cfg.base_url or DEFAULT_BASE_URL).strip().rstrip("/")


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
