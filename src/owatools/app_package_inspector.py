"""
Provides the AppPackageInspector, the entry point a host upload handler uses to
vet an app package before installing it.
"""

import dataclasses
import logging
import os
from typing import Optional, Sequence

from owatools.app_manifest_models import AppManifest
from owatools.app_manifest_reader import ManifestExtractor
from owatools.app_manifest_reader.extractor import ArchivePath
from owatools.app_requirements import (
    DeficiencyReport,
    InstalledComponent,
    RequirementEvaluator,
    VersionMatcher,
)
from owatools.owatools_config import OwaConfig
from owatools.owatools_logger import OwaLogger
from owatools.owatools_utils import FilenameResolver


@dataclasses.dataclass(frozen=True)
class InspectionResult:
    """
    Outcome of inspecting one app package
    """

    file_name: str
    manifest: AppManifest
    report: DeficiencyReport

    @property
    def installable(self) -> bool:
        return self.report.is_satisfied()


class AppPackageInspector:
    """
    Chains file name resolution, manifest extraction and requirement evaluation
    for a single app package.
    """

    def __init__(
        self,
        config: Optional[OwaConfig] = None,
        logger: Optional[OwaLogger] = None,
        version_matcher: Optional[VersionMatcher] = None,
    ):
        self.config = config or OwaConfig()
        self.logger = logger or OwaLogger()
        self.filename_resolver = FilenameResolver(self.config)
        self.extractor = ManifestExtractor(self.config, self.logger)
        self.evaluator = RequirementEvaluator(self.config, version_matcher, self.logger)

    def canonical_file_name(self, source_ref: str) -> str:
        return self.filename_resolver.resolve(source_ref)

    def read_manifest(self, archive_path: ArchivePath) -> AppManifest:
        return self.extractor.extract(archive_path)

    def inspect(
        self,
        archive_path: ArchivePath,
        installed_platform_version: str,
        installed_components: Sequence[InstalledComponent],
        source_ref: Optional[str] = None,
    ) -> InspectionResult:
        """
        Inspect an app package.

        Args:
            archive_path: Path of the uploaded zip
            installed_platform_version: Version of the running platform
            installed_components: Components currently started on the host
            source_ref: URL or path the package was installed from. Defaults to archive_path.

        Returns:
            InspectionResult with the canonical file name, the manifest and the deficiency report
        """
        file_name = self.canonical_file_name(source_ref or os.fspath(archive_path))
        manifest = self.read_manifest(archive_path)
        report = self.evaluator.evaluate(manifest, installed_platform_version, installed_components)

        if not report.is_satisfied():
            self.logger.log(
                f"App package {file_name} is missing requirements: {report.to_message()}",
                logging.WARNING,
            )
        return InspectionResult(file_name=file_name, manifest=manifest, report=report)

    def missing_requirements_message(
        self,
        archive_path: ArchivePath,
        installed_platform_version: str,
        installed_components: Sequence[InstalledComponent],
    ) -> str:
        """
        Returns a message listing the missing requirements of an app package,
        or an empty string if all the requirements are installed or none are declared.
        """
        manifest = self.read_manifest(archive_path)
        report = self.evaluator.evaluate(manifest, installed_platform_version, installed_components)
        return report.to_message()
