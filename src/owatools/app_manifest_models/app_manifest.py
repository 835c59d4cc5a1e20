"""
Pydantic data models for the manifest.webapp document embedded in app packages.

The models are schema tolerant: unknown fields anywhere in the document are
ignored, and every optional block that is missing from the document stays
``None`` so that an absent block can be told apart from an empty one.

Recognized shape:
{
  "name": "...",
  "version": "...",
  "activities": {
    "openmrs": {
      "href": "...",
      "requirements": {
        "core_version": "<version-expression>",
        "required_modules": [
          {"name": "<dotted.module.id>", "version": "<version-expression>"},
          ...
        ]
      }
    }
  }
}
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Requirements
# ============================================================================


class AppRequiredModule(BaseModel):
    """A module that must be started on the host for the app to work."""

    name: str = Field(..., description="Package name of the module, e.g. org.openmrs.module.webservices.rest")
    version: Optional[str] = Field(None, description="Required version expression")

    class Config:
        extra = "ignore"
        frozen = True


class AppRequirements(BaseModel):
    """Requirements block of the openmrs activity."""

    core_version: Optional[str] = Field(None, description="Required platform version expression")
    required_modules: Optional[Tuple[AppRequiredModule, ...]] = Field(
        None, description="Modules the app depends on, in declaration order"
    )

    class Config:
        extra = "ignore"
        frozen = True

    @property
    def platform_min_version(self) -> Optional[str]:
        return self.core_version

    @property
    def dependencies(self) -> Tuple[AppRequiredModule, ...]:
        """Declared modules, empty when the manifest lists none."""
        return self.required_modules or ()


# ============================================================================
# Activities
# ============================================================================


class OpenmrsActivity(BaseModel):
    """The ``openmrs`` activity the host reads when installing an app."""

    href: Optional[str] = Field(None, description="Entry point of the app")
    requirements: Optional[AppRequirements] = None

    class Config:
        extra = "ignore"
        frozen = True


class AppActivities(BaseModel):
    openmrs: Optional[OpenmrsActivity] = None

    class Config:
        extra = "ignore"
        frozen = True


# ============================================================================
# Manifest
# ============================================================================


def _descriptive_text(value: Any) -> Optional[str]:
    """Keeps strings, turns numbers into strings and drops anything else."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class AppDeveloper(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None

    class Config:
        extra = "ignore"
        frozen = True

    @field_validator("name", "url", mode="before")
    @classmethod
    def text_fields(cls, value: Any) -> Optional[str]:
        return _descriptive_text(value)


class AppManifest(BaseModel):
    """
    Complete manifest.webapp document.

    This is the top-level model. Only the activities block takes part in
    requirement checks; the descriptive fields are decoded for callers that
    display or register the app.
    """

    name: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    launch_path: Optional[str] = None
    developer: Optional[AppDeveloper] = None
    icons: Optional[Dict[str, Any]] = None
    activities: Optional[AppActivities] = None

    class Config:
        extra = "ignore"
        frozen = True

    # a descriptive value of the wrong shape is dropped, not rejected
    @field_validator("name", "version", "description", "launch_path", mode="before")
    @classmethod
    def text_fields(cls, value: Any) -> Optional[str]:
        return _descriptive_text(value)

    @field_validator("developer", "icons", mode="before")
    @classmethod
    def mapping_fields(cls, value: Any) -> Any:
        if isinstance(value, (dict, BaseModel)):
            return value
        return None

    @property
    def requirements(self) -> Optional[AppRequirements]:
        """
        Requirements of the openmrs activity.

        Returns:
            AppRequirements or None if any block on the path is absent
        """
        if self.activities is None or self.activities.openmrs is None:
            return None
        return self.activities.openmrs.requirements

    @classmethod
    def from_dict(cls, manifest_dict: Dict[str, Any]) -> "AppManifest":
        return cls(**manifest_dict)
