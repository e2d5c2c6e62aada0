"""Pydantic models for the generator service payloads and the project request.

``RemoteConfig`` and ``ModuleDescriptor`` mirror the YAML documents served by
the ``/config`` and ``/modules/<version>`` endpoints. ``ProjectDescriptor``
holds every answer collected from the user and knows how to encode itself as
the query string of the ``/app`` request.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# /config
# ---------------------------------------------------------------------------


class TemplateDescriptor(BaseModel):
    """A pre-curated project skeleton offered instead of module selection."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    description: str = Field(default="")


class BomVersion(BaseModel):
    """Bill-of-materials record for one Spring Boot version.

    ``supported`` lists alternate bom references backed by a support
    subscription. The service sends either a single string or a list.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    community: str = Field(..., description="Spring Boot version label")
    snowdrop: str = Field(default="", description="Primary bom reference")
    supported: list[str] = Field(default_factory=list)
    default: bool = Field(default=False)

    @field_validator("community", "snowdrop", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        # YAML reads ``2.1`` as a float
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("supported", mode="before")
    @classmethod
    def _coerce_supported(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, int, float)):
            return [str(value)] if str(value) else []
        return [str(v) for v in value]


class RemoteConfig(BaseModel):
    """Read-only snapshot of the generator configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    templates: list[TemplateDescriptor] = Field(default_factory=list)
    bom_versions: list[BomVersion] = Field(default_factory=list, alias="bomversions")

    @field_validator("templates", "bom_versions", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def bom_map(self) -> tuple[dict[str, BomVersion], str | None]:
        """Return ``({version: bom}, default_version)``.

        The default is the first entry flagged ``default``; ``None`` when the
        service does not recommend one.
        """
        versions = {bom.community: bom for bom in self.bom_versions}
        default = next((bom.community for bom in self.bom_versions if bom.default), None)
        return versions, default

    def template_names(self) -> list[str]:
        return [t.name for t in self.templates]

    def supported_version_for(self, version: str) -> str:
        """Return the first supported bom for ``version``, or ``""``."""
        versions, _ = self.bom_map()
        bom = versions.get(version)
        if bom is None or not bom.supported:
            return ""
        return bom.supported[0]


# ---------------------------------------------------------------------------
# /modules/<version>
# ---------------------------------------------------------------------------


class ModuleDescriptor(BaseModel):
    """An optional starter that can be added to the generated project."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    description: str = Field(default="")
    versions: list[str] = Field(
        default_factory=list,
        description="Compatible Spring Boot versions; empty means all",
    )

    @field_validator("versions", mode="before")
    @classmethod
    def _coerce_versions(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, int, float)):
            return [str(value)]
        return [str(v) for v in value]

    def supports(self, version: str) -> bool:
        return not self.versions or version in self.versions


def module_names_for(modules: list[ModuleDescriptor], version: str) -> list[str]:
    """Names of the modules compatible with ``version``, in service order."""
    return [m.name for m in modules if m.supports(version)]


# ---------------------------------------------------------------------------
# Project request
# ---------------------------------------------------------------------------


# Query parameter name for each descriptor field, in the order they are
# encoded (alphabetical by parameter name).
QUERY_FIELDS: list[tuple[str, str]] = [
    ("artifactid", "artifact_id"),
    ("groupid", "group_id"),
    ("module", "modules"),
    ("outdir", "out_dir"),
    ("packagename", "package_name"),
    ("snowdropbom", "snowdrop_bom_version"),
    ("springbootversion", "spring_boot_version"),
    ("template", "template"),
    ("version", "version"),
]


class ProjectDescriptor(BaseModel):
    """Every choice needed to request one generated project.

    Built once after all answers are collected. Exactly one of ``template``
    and ``modules`` must be non-empty.
    """

    model_config = ConfigDict(frozen=True)

    service_url: str
    spring_boot_version: str = Field(default="")
    snowdrop_bom_version: str = Field(default="")
    template: str = Field(default="")
    modules: list[str] = Field(default_factory=list)
    group_id: str = Field(default="")
    artifact_id: str = Field(default="")
    version: str = Field(default="")
    package_name: str = Field(default="")
    out_dir: str = Field(..., description="Output directory, relative to the working directory")

    @model_validator(mode="after")
    def _check_selection(self) -> "ProjectDescriptor":
        has_modules = any(self.modules)
        if self.template and has_modules:
            raise ValueError("a project is created either from a template or from modules, not both")
        if not self.template and not has_modules:
            raise ValueError("either a template or at least one module must be selected")
        if not self.out_dir.strip():
            raise ValueError("the project location must not be empty")
        return self

    def query_params(self) -> list[tuple[str, str]]:
        """Encode the populated fields as ``/app`` query parameters.

        Each non-empty module becomes its own ``module`` parameter, in
        selection order. Empty fields are left out.
        """
        params: list[tuple[str, str]] = []
        for key, attr in QUERY_FIELDS:
            value = getattr(self, attr)
            if attr == "modules":
                params.extend((key, module) for module in value if module)
            elif value:
                params.append((key, value))
        return params

    def summary(self) -> dict[str, str]:
        """Human-readable view used for the pre-download summary table."""
        return {
            "Spring Boot version": self.spring_boot_version,
            "Snowdrop bom": self.snowdrop_bom_version,
            "Template": self.template or "-",
            "Modules": ", ".join(m for m in self.modules if m) or "-",
            "Group Id": self.group_id,
            "Artifact Id": self.artifact_id,
            "Version": self.version,
            "Package name": self.package_name,
            "Location": self.out_dir,
        }
