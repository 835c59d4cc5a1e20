"""
App manifest models.

This package provides Pydantic data models for the manifest.webapp document
shipped inside app packages.
"""

from .app_manifest import (
    AppManifest,
    AppActivities,
    AppDeveloper,
    OpenmrsActivity,
    AppRequirements,
    AppRequiredModule,
)

__all__ = [
    "AppManifest",
    "AppActivities",
    "AppDeveloper",
    "OpenmrsActivity",
    "AppRequirements",
    "AppRequiredModule",
]
