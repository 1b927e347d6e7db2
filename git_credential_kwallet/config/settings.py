"""Helper configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

CONFIG_ENV = "GIT_CREDENTIAL_KWALLET_CONFIG"
VERBOSE_ENV = "GIT_CREDENTIAL_KWALLET_VERBOSE"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class HelperConfig:
    verbose: bool = False
    app_name: str = "git-credential-kwallet"
    wallet_name: str = "kdewallet"
    folder_name: str = "git-credentials"
    service: str = "org.kde.kwalletd5"
    object_path: str = "/modules/kwalletd5"
    bridge_commands: tuple[str, ...] = ("qdbus", "qdbus-qt5", "qdbus6")


class ConfigLoadError(RuntimeError):
    """Raised when helper config cannot be loaded."""


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigLoadError(f"{key} must be an object")
    return value


def _text(data: dict[str, Any], key: str, default: str, label: str) -> str:
    value = str(data.get(key, default)).strip()
    if not value:
        raise ConfigLoadError(f"{label} must not be empty")
    return value


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV, "").strip()
    if explicit:
        return Path(explicit).expanduser()
    base = env.get("XDG_CONFIG_HOME", "").strip() or str(Path.home() / ".config")
    return Path(base) / "git-credential-kwallet" / "config.yaml"


def load_config(path: Path) -> HelperConfig:
    """Load config from YAML; a missing file yields the built-in defaults."""
    if not path.exists():
        return HelperConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"config file is not valid YAML: {path}") from exc
    if raw is None:
        return HelperConfig()
    if not isinstance(raw, dict):
        raise ConfigLoadError("config root must be an object")

    defaults = HelperConfig()
    wallet_raw = _section(raw, "wallet")
    bridge_raw = _section(raw, "bridge")

    commands_raw = bridge_raw.get("commands", list(defaults.bridge_commands))
    if not isinstance(commands_raw, list) or not commands_raw:
        raise ConfigLoadError("bridge.commands must be a non-empty list")
    commands = tuple(str(item).strip() for item in commands_raw)
    if any(not item for item in commands):
        raise ConfigLoadError("bridge.commands entries must not be empty")

    object_path = _text(bridge_raw, "object_path", defaults.object_path, "bridge.object_path")
    if not object_path.startswith("/"):
        raise ConfigLoadError(f"invalid bridge.object_path: {object_path}")

    verbose = raw.get("verbose", defaults.verbose)
    if not isinstance(verbose, bool):
        raise ConfigLoadError(f"verbose must be true or false, got: {verbose!r}")

    return HelperConfig(
        verbose=verbose,
        app_name=_text(raw, "app_name", defaults.app_name, "app_name"),
        wallet_name=_text(wallet_raw, "name", defaults.wallet_name, "wallet.name"),
        folder_name=_text(wallet_raw, "folder", defaults.folder_name, "wallet.folder"),
        service=_text(bridge_raw, "service", defaults.service, "bridge.service"),
        object_path=object_path,
        bridge_commands=commands,
    )


def resolve_config(environ: Optional[Mapping[str, str]] = None) -> HelperConfig:
    env = os.environ if environ is None else environ
    config = load_config(default_config_path(env))
    if env.get(VERBOSE_ENV, "").strip().lower() in _TRUTHY:
        config = replace(config, verbose=True)
    return config
