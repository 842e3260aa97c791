from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys

APP_NAME = "StockJournal"


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    logs_dir: Path


@dataclass(frozen=True)
class GatewaySettings:
    base_url: str = "http://127.0.0.1:8000/api/v1"
    token: Optional[str] = None
    tenant_slug: Optional[str] = None
    timeout_seconds: float = 30.0
    search_debounce_seconds: float = 0.5


def _platform_base(app_name: str, env: Mapping[str, str]) -> Path:
    home = Path.home()
    if sys.platform.startswith("win"):
        return Path(env.get("APPDATA") or home / "AppData" / "Roaming") / app_name
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / app_name
    return home / f".{app_name.lower()}"


def get_app_paths(app_name: str = APP_NAME, env: Optional[Mapping[str, str]] = None) -> AppPaths:
    """Per-user data directory; ``STOCKJOURNAL_HOME`` overrides the platform default."""
    env = os.environ if env is None else env
    override = (env.get("STOCKJOURNAL_HOME") or "").strip()
    base = Path(override).expanduser() if override else _platform_base(app_name, env)

    paths = AppPaths(base_dir=base, logs_dir=base / "logs")
    paths.logs_dir.mkdir(parents=True, exist_ok=True)
    return paths


def _env_str(env: Mapping[str, str], name: str) -> Optional[str]:
    return (env.get(name) or "").strip() or None


def _env_positive(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _env_str(env, name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number. Received: {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be > 0. Received: {value}")
    return value


def get_gateway_settings(env: Optional[Mapping[str, str]] = None) -> GatewaySettings:
    env = os.environ if env is None else env
    defaults = GatewaySettings()

    base_url = _env_str(env, "STOCKJOURNAL_API_URL") or defaults.base_url
    if not base_url.startswith(("http://", "https://")):
        raise ValueError(f"STOCKJOURNAL_API_URL must be an http(s) URL. Received: {base_url!r}")

    debounce_ms = _env_positive(env, "STOCKJOURNAL_SEARCH_DEBOUNCE_MS", defaults.search_debounce_seconds * 1000)
    return GatewaySettings(
        base_url=base_url,
        token=_env_str(env, "STOCKJOURNAL_API_TOKEN"),
        tenant_slug=_env_str(env, "STOCKJOURNAL_TENANT"),
        timeout_seconds=_env_positive(env, "STOCKJOURNAL_TIMEOUT", defaults.timeout_seconds),
        search_debounce_seconds=debounce_ms / 1000,
    )
