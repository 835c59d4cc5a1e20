"""
Tests for evaluating app requirements against installed components.
"""

import pytest

from owatools.app_manifest_models import AppManifest
from owatools.app_requirements import (
    DeficiencyKind,
    DeficiencyReport,
    InstalledComponent,
    RequirementEvaluator,
    VersionMatcher,
)
from owatools.owatools_config import OwaConfig
from owatools.owatools_exceptions import MalformedVersionExpression

from tests.owatools.manifest_samples import NO_REQUIREMENTS_MANIFEST, REGISTRATION_MANIFEST


def manifest_with(core_version=None, required_modules=None):
    requirements = {}
    if core_version is not None:
        requirements["core_version"] = core_version
    if required_modules is not None:
        requirements["required_modules"] = required_modules
    return AppManifest.from_dict({"name": "test", "activities": {"openmrs": {"requirements": requirements}}})


class RecordingMatcher(VersionMatcher):
    """VersionMatcher that records every call."""

    def __init__(self):
        self.calls = []

    def satisfies(self, installed_version, required_expression):
        self.calls.append((installed_version, required_expression))
        return super().satisfies(installed_version, required_expression)


@pytest.fixture
def evaluator():
    return RequirementEvaluator()


class TestRequirementEvaluator:
    """Tests for RequirementEvaluator.evaluate."""

    def test_no_requirements_block(self, evaluator):
        """Test that a manifest without requirements yields an empty report whatever is installed."""
        manifest = AppManifest.from_dict(NO_REQUIREMENTS_MANIFEST)

        report = evaluator.evaluate(manifest, "0.1", [])

        assert len(report) == 0
        assert report.is_satisfied()
        assert report.to_message() == ""

    def test_platform_too_old(self, evaluator):
        """Test that an unmet platform version is reported first."""
        manifest = manifest_with(
            core_version=">=2.0",
            required_modules=[{"name": "org.openmrs.module.appui", "version": ">=1.0"}],
        )

        report = evaluator.evaluate(manifest, "1.9", [])

        assert len(report) == 2
        assert report[0] == "OpenMRS-core version: >=2.0"
        assert report.deficiencies[0].kind == DeficiencyKind.PLATFORM

    def test_missing_module(self, evaluator):
        """Test that a module absent from the host is reported with its prefix stripped."""
        manifest = manifest_with(
            required_modules=[{"name": "org.openmrs.module.registrationapp", "version": ">=1.0"}]
        )

        report = evaluator.evaluate(manifest, "2.3.0", [])

        assert list(report) == ["registrationapp version: >=1.0"]
        assert "registrationapp" in report[0]
        assert "1.0" in report[0]
        assert report.deficiencies[0].requirement_id == "org.openmrs.module.registrationapp"

    def test_all_requirements_met(self, evaluator, started_modules):
        """Test that a satisfied manifest yields an empty report."""
        manifest = AppManifest.from_dict(REGISTRATION_MANIFEST)

        report = evaluator.evaluate(manifest, "2.3.0", started_modules)

        assert report.is_satisfied()
        assert report == DeficiencyReport()

    def test_module_present_at_satisfying_version(self, evaluator):
        """Test a present module at a satisfying version with no platform requirement."""
        manifest = manifest_with(
            required_modules=[{"name": "org.openmrs.module.registrationapp", "version": ">=1.0"}]
        )
        installed = [InstalledComponent("org.openmrs.module.registrationapp", "1.2")]

        assert len(evaluator.evaluate(manifest, "1.0", installed)) == 0

    def test_module_too_old(self, evaluator):
        """Test that an installed module below the required version is unmet."""
        manifest = manifest_with(required_modules=[{"name": "org.openmrs.module.appui", "version": "1.9"}])
        installed = [InstalledComponent("org.openmrs.module.appui", "1.8.0")]

        assert list(evaluator.evaluate(manifest, "2.0", installed)) == ["appui version: 1.9"]

    def test_module_without_version_present(self):
        """Test that a module without version is met by any installed version, without calling the matcher."""
        matcher = RecordingMatcher()
        evaluator = RequirementEvaluator(version_matcher=matcher)
        manifest = manifest_with(required_modules=[{"name": "org.openmrs.module.appui"}])
        installed = [InstalledComponent("org.openmrs.module.appui", "0.0.1")]

        report = evaluator.evaluate(manifest, "2.0", installed)

        assert report.is_satisfied()
        assert matcher.calls == []

    def test_module_without_version_missing(self, evaluator):
        """Test that a missing module without version shows the absent marker."""
        manifest = manifest_with(required_modules=[{"name": "org.openmrs.module.appui"}])

        report = evaluator.evaluate(manifest, "2.0", [])

        assert list(report) == ["appui version: unspecified"]
        assert report.deficiencies[0].required_version is None

    def test_report_order_follows_manifest(self, evaluator):
        """Test that platform comes first and modules follow in manifest order."""
        manifest = manifest_with(
            core_version="3.0",
            required_modules=[
                {"name": "org.openmrs.module.zeta", "version": "1.0"},
                {"name": "org.openmrs.module.alpha", "version": "1.0"},
                {"name": "org.openmrs.module.present", "version": "1.0"},
                {"name": "org.openmrs.mid", "version": "1.0"},
            ],
        )
        installed = [InstalledComponent("org.openmrs.module.present", "1.0")]

        report = evaluator.evaluate(manifest, "2.0", installed)

        assert list(report) == [
            "OpenMRS-core version: 3.0",
            "zeta version: 1.0",
            "alpha version: 1.0",
            "mid version: 1.0",
        ]
        assert report.to_message() == (
            "OpenMRS-core version: 3.0, zeta version: 1.0, alpha version: 1.0, mid version: 1.0"
        )

    def test_first_duplicate_wins(self, evaluator):
        """Test that the first matching component in the snapshot decides."""
        manifest = manifest_with(required_modules=[{"name": "org.openmrs.module.appui", "version": ">=2.0"}])
        installed = [
            InstalledComponent("org.openmrs.module.appui", "1.0"),
            InstalledComponent("org.openmrs.module.appui", "2.5"),
        ]

        assert len(evaluator.evaluate(manifest, "2.0", installed)) == 1
        assert len(evaluator.evaluate(manifest, "2.0", list(reversed(installed)))) == 0

    def test_module_id_is_case_sensitive(self, evaluator):
        """Test that module ids are compared exactly."""
        manifest = manifest_with(required_modules=[{"name": "org.openmrs.module.AppUI"}])
        installed = [InstalledComponent("org.openmrs.module.appui", "1.0")]

        assert list(evaluator.evaluate(manifest, "2.0", installed)) == ["AppUI version: unspecified"]

    def test_foreign_namespace_kept(self, evaluator):
        """Test that ids outside the configured namespaces are shown in full."""
        manifest = manifest_with(required_modules=[{"name": "com.example.reports", "version": "1.0"}])

        assert list(evaluator.evaluate(manifest, "2.0", [])) == ["com.example.reports version: 1.0"]

    def test_malformed_expression_propagates(self, evaluator):
        """Test that a matcher failure is not swallowed."""
        manifest = manifest_with(required_modules=[{"name": "org.openmrs.module.appui", "version": ">=x"}])
        installed = [InstalledComponent("org.openmrs.module.appui", "1.0")]

        with pytest.raises(MalformedVersionExpression):
            evaluator.evaluate(manifest, "2.0", installed)

    def test_inputs_not_mutated(self, evaluator, started_modules):
        """Test that the manifest and the snapshot are left as they were."""
        manifest = AppManifest.from_dict(REGISTRATION_MANIFEST)
        before_manifest = manifest.model_dump()
        before_modules = list(started_modules)

        evaluator.evaluate(manifest, "1.0", started_modules)

        assert manifest.model_dump() == before_manifest
        assert started_modules == before_modules

    def test_configured_labels(self):
        """Test that the platform name, prefixes and absent marker come from the configuration."""
        config = OwaConfig(
            platform_name="Platform",
            namespace_prefixes=("com.example.",),
            absent_version_marker="any",
        )
        evaluator = RequirementEvaluator(config=config)
        manifest = manifest_with(core_version="9.0", required_modules=[{"name": "com.example.labs"}])

        assert list(evaluator.evaluate(manifest, "1.0", [])) == [
            "Platform version: 9.0",
            "labs version: any",
        ]


class TestShortModuleName:
    """Tests for RequirementEvaluator.short_module_name."""

    @pytest.mark.parametrize(
        "module_id,expected",
        [
            ("org.openmrs.module.webservices.rest", "webservices.rest"),
            ("org.openmrs.module.registrationapp", "registrationapp"),
            ("org.openmrs.legacyui", "legacyui"),
            ("registrationapp", "registrationapp"),
            ("com.org.openmrs.module.x", "com.org.openmrs.module.x"),
        ],
    )
    def test_short_module_name(self, evaluator, module_id, expected):
        """Test stripping of the leading namespace prefixes."""
        assert evaluator.short_module_name(module_id) == expected


class TestDeficiencyReport:
    """Tests for DeficiencyReport."""

    def test_slicing_returns_lines(self, evaluator):
        """Test that slices of a report are lines like single items."""
        manifest = manifest_with(core_version="3.0", required_modules=[{"name": "org.openmrs.module.appui"}])

        report = evaluator.evaluate(manifest, "2.0", [])

        assert report[0:1] == ("OpenMRS-core version: 3.0",)
        assert report[-1] == "appui version: unspecified"


class TestInstalledComponentsIterable:
    """Tests for the kinds of installed component snapshots evaluate accepts."""

    def test_generator_snapshot(self, evaluator):
        """Test that a one-shot generator serves every required module."""
        manifest = manifest_with(
            required_modules=[
                {"name": "org.openmrs.module.webservices.rest", "version": ">=2.0"},
                {"name": "org.openmrs.module.appui", "version": ">=1.0"},
            ]
        )
        installed = (
            InstalledComponent(module_id, version)
            for module_id, version in [
                ("org.openmrs.module.webservices.rest", "2.24.0"),
                ("org.openmrs.module.appui", "1.9.0"),
            ]
        )

        assert evaluator.evaluate(manifest, "2.0", installed).is_satisfied()
