"""Version-control tracked file listing."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List

from ..logging import get_logger


class MissingPrerequisiteError(RuntimeError):
    """Raised when the tracked-file list cannot be obtained."""


class TrackedFileSource:
    """Lists files tracked by git for a repository."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git.tracked")

    def find_root(self, path: str | Path) -> Path:
        """Return the top-level directory of the work tree containing ``path``."""
        start = Path(path)
        if not start.is_dir():
            raise MissingPrerequisiteError(f"Repository path not found: {path}")

        output = self._git(["git", "rev-parse", "--show-toplevel"], start, not_a_repo=path)
        top_level = output.strip()
        if not top_level:
            raise MissingPrerequisiteError(f"{path} is not a Git repository")
        root = Path(top_level)
        if root != start:
            self.logger.debug("Using repository root %s for %s", root, start)
        return root

    def list_files(self, repo_path: str | Path) -> List[str]:
        """Return tracked paths relative to the repository root.

        ``repo_path`` may be any directory inside the work tree. Paths are
        ordered, deduplicated and use ``/`` separators.
        """
        root = self.find_root(repo_path)
        output = self._git(["git", "ls-files", "-z"], root)
        files = _normalise(output.split("\0"))
        self.logger.debug("git reports %d tracked files in %s", len(files), root)
        return files

    def _git(self, args: List[str], cwd: Path, *, not_a_repo: str | Path | None = None) -> str:
        try:
            return self._runner(args, cwd=cwd)
        except FileNotFoundError as exc:
            raise MissingPrerequisiteError("git executable not found on PATH") from exc
        except subprocess.CalledProcessError as exc:
            if not_a_repo is not None:
                raise MissingPrerequisiteError(f"{not_a_repo} is not a Git repository") from exc
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise MissingPrerequisiteError(f"{' '.join(args)} failed: {detail}") from exc

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


def _normalise(entries: Iterable[str]) -> List[str]:
    seen: dict[str, None] = {}
    for entry in entries:
        path = entry.strip("\n").replace("\\", "/")
        if path:
            seen.setdefault(path, None)
    return list(seen)


__all__ = ["MissingPrerequisiteError", "TrackedFileSource"]
