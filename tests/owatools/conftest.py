"""
Shared fixtures for owatools tests.
"""

import json
import zipfile

import pytest

from owatools.app_requirements import InstalledComponent

from tests.owatools.manifest_samples import REGISTRATION_MANIFEST


@pytest.fixture
def make_app_package(tmp_path):
    """Build a zip app package in tmp_path from a dict of entry name -> content."""

    def _make(entries, name="app.zip"):
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            for entry_name, content in entries.items():
                if isinstance(content, dict):
                    content = json.dumps(content)
                archive.writestr(entry_name, content)
        return path

    return _make


@pytest.fixture
def registration_package(make_app_package):
    """App package with a full manifest.webapp and an index page."""
    return make_app_package(
        {
            "manifest.webapp": REGISTRATION_MANIFEST,
            "index.html": "<html></html>",
        },
        name="registration-1.2.0.zip",
    )


@pytest.fixture
def started_modules():
    """Modules started on a typical host."""
    return [
        InstalledComponent("org.openmrs.module.webservices.rest", "2.24.0"),
        InstalledComponent("org.openmrs.module.registrationapp", "1.13.0"),
        InstalledComponent("org.openmrs.module.appui", "1.9.0"),
    ]


class RecordingZipFile(zipfile.ZipFile):
    """ZipFile that remembers every archive and entry stream it opens."""

    archives = []
    streams = []

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        RecordingZipFile.archives.append(self)

    def open(self, *args, **kwargs):
        stream = super().open(*args, **kwargs)
        RecordingZipFile.streams.append(stream)
        return stream


@pytest.fixture
def recording_zipfile(monkeypatch):
    """Patch zipfile.ZipFile so tests can check every handle was released."""
    RecordingZipFile.archives = []
    RecordingZipFile.streams = []
    monkeypatch.setattr(zipfile, "ZipFile", RecordingZipFile)
    return RecordingZipFile
