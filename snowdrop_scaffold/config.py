"""snowdrop-scaffold configuration.

Typed settings for a single scaffolding run. The models are Pydantic v2 so a
bad value (an empty service URL, a negative timeout) is rejected when the CLI
builds them rather than halfway through a download.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_SERVICE_URL = "http://spring-boot-generator.195.201.87.126.nip.io"
USER_AGENT = "snowdrop-scaffold/1.0"
UNAVAILABLE_MARKER = "Application is not available"


class ProjectDefaults(BaseModel):
    """Answers offered as defaults for the free-text project prompts."""

    group_id: str = Field(default="me.snowdrop")
    artifact_id: str = Field(default="myproject")
    version: str = Field(default="1.0.0-SNAPSHOT")

    def package_name_for(self, group_id: str, artifact_id: str) -> str:
        """Return the default Java package name ``<groupId>.<artifactId>``."""
        return f"{group_id}.{artifact_id}"


class ScaffoldConfig(BaseModel):
    """Settings for talking to the remote project generator.

    Instances are created once by the CLI entry point and handed to the
    ``GeneratorClient`` and the ``Scaffolder``.
    """

    service_url: str = Field(default=DEFAULT_SERVICE_URL, min_length=1)
    user_agent: str = Field(default=USER_AGENT)
    timeout: float | None = Field(
        default=None, gt=0, description="Per-request timeout in seconds; None blocks until done"
    )
    unavailable_marker: str = Field(default=UNAVAILABLE_MARKER)
    defaults: ProjectDefaults = Field(default_factory=ProjectDefaults)

    @field_validator("service_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")
