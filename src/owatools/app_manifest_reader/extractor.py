"""
Manifest extractor implementation.

Opens an app package and decodes its manifest.webapp entry.
"""

import json
import logging
import os
import zipfile
import zlib
from typing import Optional, Union

from pydantic import ValidationError

from owatools.app_manifest_models import AppManifest
from owatools.owatools_config import OwaConfig
from owatools.owatools_exceptions import (
    ArchiveReadError,
    ManifestMissingError,
    ManifestParseError,
)
from owatools.owatools_logger import OwaLogger

ArchivePath = Union[str, "os.PathLike[str]"]

# errors zipfile lets through from a damaged, encrypted or truncated archive
_ARCHIVE_ERRORS = (
    OSError,
    EOFError,
    RuntimeError,
    NotImplementedError,
    zipfile.BadZipFile,
    zlib.error,
)


class ManifestExtractor:
    """
    Reads the app manifest from a zip app package.

    The archive handle and the entry stream are both scoped to a single
    extract() call and closed on every exit path.
    """

    def __init__(
        self,
        config: Optional[OwaConfig] = None,
        logger: Optional[OwaLogger] = None,
    ):
        """
        Initialize the manifest extractor.

        Args:
            config: Configuration naming the manifest entry
            logger: Logger for progress and error messages
        """
        self.config = config or OwaConfig()
        self.logger = logger or OwaLogger()

    def extract(self, archive_path: ArchivePath) -> AppManifest:
        """
        Extract the manifest from an app package.

        Args:
            archive_path: Path of the zip app package

        Returns:
            The decoded AppManifest

        Raises:
            ArchiveReadError: If the archive or the entry cannot be read
            ManifestMissingError: If the archive has no manifest entry
            ManifestParseError: If the entry does not decode into a manifest
        """
        source = os.fspath(archive_path)
        raw = self._read_entry(source)
        manifest = self.extract_bytes(raw, source)

        self.logger.log(
            f"Read {self.config.manifest_entry_name} of app {manifest.name} from {source}",
            logging.DEBUG,
        )
        return manifest

    def extract_bytes(self, raw: bytes, source: str = "<bytes>") -> AppManifest:
        """
        Decode the raw bytes of a manifest document.

        Args:
            raw: Content of the manifest entry
            source: Where the bytes came from, used in error messages

        Returns:
            The decoded AppManifest

        Raises:
            ManifestParseError: If the bytes are not a JSON object of the expected shape
        """
        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            raise self._parse_error(source, f"not a JSON document ({e})") from e

        if not isinstance(document, dict):
            raise self._parse_error(source, "top level must be a JSON object")

        try:
            return AppManifest.from_dict(document)
        except ValidationError as e:
            raise self._parse_error(source, str(e)) from e

    def _read_entry(self, source: str) -> bytes:
        entry_name = self.config.manifest_entry_name

        try:
            archive = zipfile.ZipFile(source)
        except _ARCHIVE_ERRORS as e:
            self.logger.log(f"Failed to open app package {source}: {e}", logging.ERROR)
            raise ArchiveReadError(source, str(e)) from e

        with archive:
            try:
                info = archive.getinfo(entry_name)
            except KeyError:
                self.logger.log(f"{entry_name} not found in {source}", logging.ERROR)
                raise ManifestMissingError(source, entry_name) from None

            try:
                with archive.open(info) as stream:
                    return stream.read()
            except _ARCHIVE_ERRORS as e:
                self.logger.log(f"Failed to read {entry_name} from {source}: {e}", logging.ERROR)
                raise ArchiveReadError(source, str(e)) from e

    def _parse_error(self, source: str, reason: str) -> ManifestParseError:
        self.logger.log(f"Failed to decode manifest from {source}", logging.ERROR, reason)
        return ManifestParseError(source, reason)
