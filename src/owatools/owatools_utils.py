"""
This file contains various utility functions like deriving the canonical file name of an app package.
"""

import string
from typing import Optional

from owatools.owatools_config import OwaConfig

_VERSION_SEPARATORS = "-_"


class FilenameResolver:
    """
    Derives the canonical ``<name>.zip`` file name of an app package from the
    URL, path or query string it is installed from.
    """

    def __init__(self, config: Optional[OwaConfig] = None):
        self.config = config or OwaConfig()

    def resolve(self, source_ref: str) -> str:
        """
        Gets the file name from the app installation source.

        Examples:
            "http://x/download?file_path=foo-1.2.3.zip&other=1" -> "foo.zip"
            "http://cdn.example.org/apps/registration_app-2.1.0.zip" -> "registration_app.zip"
        """
        if not source_ref:
            return ""

        marker = self.config.source_marker
        extension = self.config.archive_extension

        start = source_ref.find(marker)
        if start != -1:
            start += len(marker)
            end = source_ref.find(extension, start)
            if end != -1:
                return self.strip_version(source_ref[start:end])

        return self.strip_version(self.last_path_segment(source_ref))

    def strip_version(self, candidate: str) -> str:
        """
        Removes the version number from the file name of an app package and
        makes sure the result carries the archive extension.

        The name is cut at the first whitespace character or at the first run
        of ``-``/``_`` that is immediately followed by a digit.
        """
        if not candidate:
            return ""

        name = candidate[: self._version_cut(candidate)]
        if not name.endswith(self.config.archive_extension):
            name += self.config.archive_extension
        return name

    @staticmethod
    def last_path_segment(source_ref: str) -> str:
        """Returns the text after the last ``/`` or ``\\`` separator."""
        cut = max(source_ref.rfind("/"), source_ref.rfind("\\"))
        return source_ref[cut + 1 :]

    @staticmethod
    def _version_cut(candidate: str) -> int:
        i = 0
        while i < len(candidate):
            ch = candidate[i]
            if ch.isspace():
                return i
            if ch in _VERSION_SEPARATORS:
                j = i
                while j < len(candidate) and candidate[j] in _VERSION_SEPARATORS:
                    j += 1
                if j < len(candidate) and candidate[j] in string.digits:
                    return i
                # a later start inside the same run ends at the same character
                i = j
                continue
            i += 1
        return len(candidate)
