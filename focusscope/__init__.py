"""Focus Scope resolution and coverage/insights analytics."""

from .models import CoverageReport, InsightsReport, ScopeConfig, ScopeValidationResult
from .target_set import TargetSet, build_target_set

__all__ = [
    "CoverageReport",
    "InsightsReport",
    "ScopeConfig",
    "ScopeValidationResult",
    "TargetSet",
    "build_target_set",
]
