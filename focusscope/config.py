"""Configuration loading for focusscope (.focusscope.yml and local profiles)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import ScopeConfig

CONFIG_FILENAME = ".focusscope.yml"
STATE_DIRNAME = ".focusscope"
PROFILES_FILENAME = "profiles.yml"
PROFILE_ENV_VAR = "FOCUSSCOPE_PROFILE"


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be parsed."""


@dataclass
class InsightsConfig:
    """Defaults for the insights command."""

    fields: List[str] = field(default_factory=list)
    limit: Optional[int] = None


@dataclass
class ProjectConfig:
    """Team-wide settings committed at the repository root."""

    root: Path
    scope: Optional[ScopeConfig] = None
    insights: InsightsConfig = field(default_factory=InsightsConfig)
    manifests_dir: Optional[Path] = None

    @property
    def manifest_directory(self) -> Path:
        return self.manifests_dir or (self.root / STATE_DIRNAME / "manifests")


@dataclass
class ProfileConfig:
    """A named workspace with its own Focus Scope."""

    name: str
    description: Optional[str] = None
    aliases: List[str] = field(default_factory=list)
    scope: Optional[ScopeConfig] = None


@dataclass
class ProfileStore:
    active: Optional[str] = None
    profiles: Dict[str, ProfileConfig] = field(default_factory=dict)


def load_config(config_path: Path) -> ProjectConfig:
    """Load the project configuration; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ProjectConfig(root=root)

    data = _read_yaml(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    insights_data = _as_dict(data.get("insights"))
    insights = InsightsConfig(
        fields=_as_str_list(insights_data.get("fields")),
        limit=_as_int(insights_data.get("limit")),
    )

    manifests_dir_str = _as_str(data.get("manifests_dir"))
    manifests_dir = root / manifests_dir_str if manifests_dir_str else None

    return ProjectConfig(
        root=root,
        scope=_as_scope(data.get("scope")),
        insights=insights,
        manifests_dir=manifests_dir,
    )


def load_profiles(root: Path) -> ProfileStore:
    """Load local profiles from ``.focusscope/profiles.yml`` under ``root``."""
    path = root / STATE_DIRNAME / PROFILES_FILENAME
    if not path.exists():
        return ProfileStore()

    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise ConfigError(f"{PROFILES_FILENAME} must contain a mapping at the root")

    profiles: Dict[str, ProfileConfig] = {}
    for name, raw in _as_dict(data.get("profiles")).items():
        profile_data = _as_dict(raw)
        profiles[str(name)] = ProfileConfig(
            name=str(name),
            description=_as_str(profile_data.get("description")),
            aliases=_as_str_list(profile_data.get("aliases")),
            scope=_as_scope(profile_data.get("scope")),
        )

    return ProfileStore(active=_as_str(data.get("active")), profiles=profiles)


def resolve_profile(store: ProfileStore, name: Optional[str]) -> Optional[ProfileConfig]:
    """Find a profile by name or alias; None when ``name`` is empty or unknown."""
    if not name:
        return None
    if name in store.profiles:
        return store.profiles[name]
    for profile in store.profiles.values():
        if name in profile.aliases:
            return profile
    return None


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_yaml(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_scope(value: Any) -> Optional[ScopeConfig]:
    if not isinstance(value, dict):
        return None
    # Empty strings are kept so validation can report them.
    return ScopeConfig.from_lists(
        _as_str_list(value.get("include")),
        _as_str_list(value.get("exclude")),
    )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "InsightsConfig",
    "PROFILE_ENV_VAR",
    "ProfileConfig",
    "ProfileStore",
    "ProjectConfig",
    "load_config",
    "load_profiles",
    "resolve_profile",
]
