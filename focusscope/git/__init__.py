"""Git integration for tracked-file discovery."""

from .tracked import MissingPrerequisiteError, TrackedFileSource

__all__ = ["MissingPrerequisiteError", "TrackedFileSource"]
