"""
Requirement evaluator.

Checks the requirements declared by an app manifest against a snapshot of what
the host has installed, and reports every requirement that is not met.
"""

import dataclasses
import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from owatools.app_manifest_models import AppManifest, AppRequiredModule
from owatools.app_requirements.version_matcher import VersionMatcher
from owatools.owatools_config import OwaConfig
from owatools.owatools_logger import OwaLogger


class DeficiencyKind:
    """Enumeration of requirement kinds."""

    PLATFORM = "platform"
    MODULE = "module"


@dataclasses.dataclass(frozen=True)
class InstalledComponent:
    """
    A component started on the host, as reported by the host registry.
    """

    id: str
    version: str


@dataclasses.dataclass(frozen=True)
class Deficiency:
    """
    One unmet requirement.
    """

    kind: str
    requirement_id: str
    required_version: Optional[str]
    line: str


class DeficiencyReport:
    """
    Ordered, immutable list of unmet requirements.

    Iterating, indexing and len() work on the human readable lines. The report
    is empty when every requirement is satisfied.
    """

    def __init__(self, deficiencies: Iterable[Deficiency] = ()):
        self._deficiencies: Tuple[Deficiency, ...] = tuple(deficiencies)

    @property
    def deficiencies(self) -> Tuple[Deficiency, ...]:
        return self._deficiencies

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(d.line for d in self._deficiencies)

    def is_satisfied(self) -> bool:
        return not self._deficiencies

    def to_message(self) -> str:
        """
        Returns the report as a single message, lines separated by ", ".
        Empty string if all the requirements are installed.
        """
        return ", ".join(self.lines)

    def __len__(self) -> int:
        return len(self._deficiencies)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __getitem__(self, index):
        return self.lines[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeficiencyReport):
            return NotImplemented
        return self._deficiencies == other._deficiencies

    def __hash__(self) -> int:
        return hash(self._deficiencies)

    def __repr__(self) -> str:
        return f"DeficiencyReport(lines={list(self.lines)})"


class RequirementEvaluator:
    """
    Evaluates app manifest requirements against installed components.

    The evaluator is stateless: the platform version and the installed
    components are passed to every evaluate() call and are only read.
    """

    def __init__(
        self,
        config: Optional[OwaConfig] = None,
        version_matcher: Optional[VersionMatcher] = None,
        logger: Optional[OwaLogger] = None,
    ):
        """
        Initialize the requirement evaluator.

        Args:
            config: Configuration with the platform name and namespace prefixes
            version_matcher: Comparator for version expressions
            logger: Logger for evaluation messages
        """
        self.config = config or OwaConfig()
        self.version_matcher = version_matcher or VersionMatcher()
        self.logger = logger or OwaLogger()

    def evaluate(
        self,
        manifest: AppManifest,
        installed_platform_version: str,
        installed_components: Iterable[InstalledComponent],
    ) -> DeficiencyReport:
        """
        Build the deficiency report for an app.

        Args:
            manifest: The decoded app manifest
            installed_platform_version: Version of the running platform
            installed_components: Components currently started on the host

        Returns:
            DeficiencyReport, platform deficiency first, then modules in manifest order

        Raises:
            MalformedVersionExpression: If the version matcher rejects an expression
        """
        requirements = manifest.requirements
        if requirements is None:
            return DeficiencyReport()

        # scanned once per module; a host registry may hand over a one-shot iterable
        installed_components = tuple(installed_components)

        deficiencies: List[Deficiency] = []

        core_version = requirements.platform_min_version
        if core_version is not None and not self.version_matcher.satisfies(
            installed_platform_version, core_version
        ):
            deficiencies.append(
                Deficiency(
                    kind=DeficiencyKind.PLATFORM,
                    requirement_id=self.config.platform_name,
                    required_version=core_version,
                    line=f"{self.config.platform_name} version: {core_version}",
                )
            )

        for required_module in requirements.dependencies:
            if not self._is_module_met(required_module, installed_components):
                deficiencies.append(self._module_deficiency(required_module))

        for deficiency in deficiencies:
            self.logger.log(f"Unmet requirement: {deficiency.line}", logging.DEBUG)

        self.logger.log(
            f"App {manifest.name} has {len(deficiencies)} unmet requirement(s)",
            logging.INFO,
        )
        return DeficiencyReport(deficiencies)

    def short_module_name(self, module_id: str) -> str:
        """
        Strips the configured namespace prefixes from a module id,
        e.g. "org.openmrs.module.registrationapp" -> "registrationapp".
        """
        name = module_id
        for prefix in self.config.namespace_prefixes:
            if name.startswith(prefix):
                name = name[len(prefix):]
        return name

    def _is_module_met(
        self,
        required_module: AppRequiredModule,
        installed_components: Sequence[InstalledComponent],
    ) -> bool:
        installed = self._find_component(required_module.name, installed_components)
        if installed is None:
            return False

        if required_module.version is None:
            return True

        return self.version_matcher.satisfies(installed.version, required_module.version)

    @staticmethod
    def _find_component(
        module_id: str, installed_components: Sequence[InstalledComponent]
    ) -> Optional[InstalledComponent]:
        for component in installed_components:
            if component.id == module_id:
                return component
        return None

    def _module_deficiency(self, required_module: AppRequiredModule) -> Deficiency:
        version = required_module.version
        shown_version = version if version is not None else self.config.absent_version_marker
        return Deficiency(
            kind=DeficiencyKind.MODULE,
            requirement_id=required_module.name,
            required_version=version,
            line=f"{self.short_module_name(required_module.name)} version: {shown_version}",
        )
