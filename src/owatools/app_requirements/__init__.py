"""
App requirement checks.

This package compares the requirements declared by an app manifest with the
platform version and the components installed on the host.
"""

from .version_matcher import VersionMatcher, satisfies
from .evaluator import (
    Deficiency,
    DeficiencyKind,
    DeficiencyReport,
    InstalledComponent,
    RequirementEvaluator,
)

__all__ = [
    "VersionMatcher",
    "satisfies",
    "Deficiency",
    "DeficiencyKind",
    "DeficiencyReport",
    "InstalledComponent",
    "RequirementEvaluator",
]
