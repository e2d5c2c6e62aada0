"""snowdrop-scaffold -- create Spring Boot projects from the Snowdrop generator.

Quick usage::

    from snowdrop_scaffold import Overrides, ScaffoldConfig, Scaffolder

    config = ScaffoldConfig(service_url="http://localhost:8080")
    project_dir = Scaffolder(config).run(Overrides(template="rest", out_dir="demo"))
"""

from snowdrop_scaffold.archive import ArchiveError, materialize
from snowdrop_scaffold.cli import Overrides, ScaffoldError, Scaffolder
from snowdrop_scaffold.client import (
    ConfigFetchError,
    GeneratorClient,
    GeneratorServiceError,
    ServiceUnavailableError,
)
from snowdrop_scaffold.config import ScaffoldConfig
from snowdrop_scaffold.models import ModuleDescriptor, ProjectDescriptor, RemoteConfig
from snowdrop_scaffold.prompts import Prompter

__all__ = [
    "ArchiveError",
    "ConfigFetchError",
    "GeneratorClient",
    "GeneratorServiceError",
    "ModuleDescriptor",
    "Overrides",
    "ProjectDescriptor",
    "Prompter",
    "RemoteConfig",
    "ScaffoldConfig",
    "ScaffoldError",
    "Scaffolder",
    "ServiceUnavailableError",
    "materialize",
]
