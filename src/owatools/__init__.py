"""
owatools inspects Open Web App packages before a host installs them: it derives
the canonical package file name, reads the embedded manifest.webapp and checks
the declared platform and module requirements against the host.
"""

from owatools.app_package_inspector import AppPackageInspector, InspectionResult
from owatools.app_manifest_models import AppManifest
from owatools.app_manifest_reader import ManifestExtractor
from owatools.app_requirements import (
    DeficiencyReport,
    InstalledComponent,
    RequirementEvaluator,
    VersionMatcher,
)
from owatools.owatools_config import OwaConfig, load_config
from owatools.owatools_utils import FilenameResolver

__all__ = [
    "AppPackageInspector",
    "InspectionResult",
    "AppManifest",
    "ManifestExtractor",
    "DeficiencyReport",
    "InstalledComponent",
    "RequirementEvaluator",
    "VersionMatcher",
    "OwaConfig",
    "load_config",
    "FilenameResolver",
]
