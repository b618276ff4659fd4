"""Helper utilities for constructing temporary repositories in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from focusscope.git.tracked import TrackedFileSource


class RepoBuilder:
    """Writes files, config and manifests into a throwaway repository.

    Tracked files are served by an in-memory runner instead of real git.
    """

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        (self.root / ".git").mkdir()
        self.tracked: List[str] = []
        self.git_calls: List[List[str]] = []

    def track(self, paths: Iterable[str]) -> None:
        """Register `paths` as tracked, creating empty files for them."""
        for relative in paths:
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
            if relative not in self.tracked:
                self.tracked.append(relative)

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries (untracked) into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_manifest(
        self,
        name: str,
        data: Iterable[Dict[str, Any]],
        fields: Optional[Iterable[Dict[str, Any]]] = None,
    ) -> Path:
        """Write an analysis manifest under .focusscope/manifests/."""
        path = self.root / ".focusscope" / "manifests" / f"{name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "schema_version": "1.0",
            "fields": list(fields or []),
            "data": list(data),
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    def tracked_source(self) -> TrackedFileSource:
        def runner(args, cwd):  # type: ignore[no-untyped-def]
            self.git_calls.append(list(args))
            if list(args[:2]) == ["git", "rev-parse"]:
                return f"{self.root}\n"
            return "\0".join(self.tracked) + ("\0" if self.tracked else "")

        return TrackedFileSource(runner=runner)

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


__all__ = ["RepoBuilder"]
