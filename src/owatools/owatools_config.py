"""
Configuration parameters for owatools.

Defaults reproduce the behaviour expected by an OpenMRS host. A workspace may
override them with an ``owa.toml`` file:

```toml
[owa]
manifest_entry_name = "manifest.webapp"
archive_extension = ".zip"
source_marker = "file_path="
platform_name = "OpenMRS-core"
namespace_prefixes = ["org.openmrs.module.", "org.openmrs."]
absent_version_marker = "unspecified"
```
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional, Tuple

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from owatools.owatools_exceptions import OwaConfigError
from owatools.owatools_logger import OwaLogger

OWA_TOML_FILE_NAME = "owa.toml"


@dataclass(frozen=True)
class OwaConfig:
    """
    Configuration parameters
    """

    manifest_entry_name: str = "manifest.webapp"
    archive_extension: str = ".zip"
    source_marker: str = "file_path="
    platform_name: str = "OpenMRS-core"
    namespace_prefixes: Tuple[str, ...] = ("org.openmrs.module.", "org.openmrs.")
    absent_version_marker: str = "unspecified"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "OwaConfig":
        """
        Create an OwaConfig from a dictionary (loaded from TOML).

        Args:
            config_dict: Dictionary loaded from owa.toml

        Returns:
            OwaConfig instance

        Raises:
            OwaConfigError: If configuration is invalid
        """
        owa_section = config_dict.get("owa", {})
        if not isinstance(owa_section, dict):
            raise OwaConfigError("'owa' must be a table")

        known = {f.name for f in fields(cls)}
        unknown = set(owa_section) - known
        if unknown:
            raise OwaConfigError(f"Unknown configuration keys: {sorted(unknown)}")

        values: Dict[str, Any] = {}
        for key, value in owa_section.items():
            if key == "namespace_prefixes":
                if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                    raise OwaConfigError("'namespace_prefixes' must be a list of strings")
                values[key] = tuple(value)
            else:
                if not isinstance(value, str) or not value:
                    raise OwaConfigError(f"'{key}' must be a non-empty string")
                values[key] = value

        return cls(**values)

    @classmethod
    def from_toml_file(cls, toml_path: str) -> "OwaConfig":
        """
        Load an OwaConfig from a TOML file.

        Raises:
            OwaConfigError: If the file cannot be read or parsed
        """
        try:
            with open(toml_path, "rb") as f:
                toml_dict = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise OwaConfigError(f"Failed to load {toml_path}: {e}") from e
        return cls.from_dict(toml_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert OwaConfig to the dictionary shape accepted by from_dict."""
        values = asdict(self)
        values["namespace_prefixes"] = list(self.namespace_prefixes)
        return {"owa": values}


def load_config(workspace_root: Optional[str] = None, logger: Optional[OwaLogger] = None) -> OwaConfig:
    """
    Load owa.toml from the workspace root, falling back to the defaults when it is missing.

    Args:
        workspace_root: Directory containing owa.toml. If None, uses current directory.
        logger: Logger for configuration messages

    Returns:
        OwaConfig instance
    """
    logger = logger or OwaLogger()
    toml_path = os.path.join(workspace_root or os.getcwd(), OWA_TOML_FILE_NAME)

    if not os.path.exists(toml_path):
        logger.log(f"No {OWA_TOML_FILE_NAME} found at {toml_path}, using defaults", logging.DEBUG)
        return OwaConfig()

    config = OwaConfig.from_toml_file(toml_path)
    logger.log(f"Loaded owatools configuration from {toml_path}", logging.INFO)
    return config
