"""
This module contains the exceptions raised by the owatools package.
"""


class OwaException(Exception):
    """
    Base exception for all owatools errors.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OwaConfigError(OwaException):
    """Raised when an owa.toml configuration is invalid."""

    pass


class ArchiveReadError(OwaException):
    """
    Raised when the app package cannot be opened or one of its entries cannot be read.
    """

    def __init__(self, archive_path: str, reason: str):
        super().__init__(f"Unable to read app package {archive_path}: {reason}")
        self.archive_path = archive_path
        self.reason = reason


class ManifestMissingError(OwaException):
    """Raised when the app package has no manifest entry."""

    def __init__(self, archive_path: str, entry_name: str):
        super().__init__(f"App package {archive_path} does not contain {entry_name}")
        self.archive_path = archive_path
        self.entry_name = entry_name


class ManifestParseError(OwaException):
    """
    Raised when the manifest entry exists but does not decode into an app manifest.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(f"Invalid manifest in {source}: {reason}")
        self.source = source
        self.reason = reason


class MalformedVersionExpression(OwaException):
    """Raised when a version or version range cannot be interpreted."""

    def __init__(self, expression: str, reason: str):
        super().__init__(f"Malformed version expression '{expression}': {reason}")
        self.expression = expression
        self.reason = reason
