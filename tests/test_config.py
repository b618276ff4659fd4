from __future__ import annotations

from pathlib import Path

import pytest

from focusscope.config import (
    ConfigError,
    ProfileStore,
    load_config,
    load_profiles,
    resolve_profile,
)
from focusscope.models import ScopeConfig


def test_load_config_parses_scope_insights_and_manifests(tmp_path: Path) -> None:
    (tmp_path / ".focusscope.yml").write_text(
        """
scope:
  include:
    - src/**
  exclude: vendor/**
insights:
  fields: [tags, layer]
  limit: "5"
manifests_dir: analysis
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.scope == ScopeConfig(include=("src/**",), exclude=("vendor/**",))
    assert config.insights.fields == ["tags", "layer"]
    assert config.insights.limit == 5
    assert config.manifest_directory == tmp_path.resolve() / "analysis"


def test_missing_config_yields_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.scope is None
    assert config.insights.fields == []
    assert config.insights.limit is None
    assert config.manifest_directory == tmp_path.resolve() / ".focusscope" / "manifests"


def test_empty_patterns_are_preserved_for_validation(tmp_path: Path) -> None:
    (tmp_path / ".focusscope.yml").write_text(
        "scope:\n  include: ['src/**', '']\n", encoding="utf-8"
    )

    config = load_config(tmp_path)

    assert config.scope is not None
    assert config.scope.include == ("src/**", "")


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".focusscope.yml").write_text("scope: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".focusscope.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_load_profiles_and_resolve_by_alias(tmp_path: Path) -> None:
    profiles_file = tmp_path / ".focusscope" / "profiles.yml"
    profiles_file.parent.mkdir()
    profiles_file.write_text(
        """
active: security
profiles:
  security:
    description: Auth and crypto review
    aliases: [sec]
    scope:
      include: [src/auth/**]
  docs:
    scope:
      include: [docs/**]
""",
        encoding="utf-8",
    )

    store = load_profiles(tmp_path)

    assert store.active == "security"
    assert set(store.profiles) == {"security", "docs"}
    by_alias = resolve_profile(store, "sec")
    assert by_alias is not None
    assert by_alias.name == "security"
    assert by_alias.description == "Auth and crypto review"
    assert by_alias.scope == ScopeConfig(include=("src/auth/**",))
    assert resolve_profile(store, "docs").scope == ScopeConfig(include=("docs/**",))
    assert resolve_profile(store, "unknown") is None
    assert resolve_profile(store, None) is None


def test_missing_profiles_file_yields_empty_store(tmp_path: Path) -> None:
    store = load_profiles(tmp_path)

    assert store == ProfileStore()
