"""snowdrop-scaffold command line.

Runs the scaffolding steps in a fixed order:

1. Fetch the generator configuration.
2. Choose the Spring Boot version and its Snowdrop bom.
3. Choose a template, or the modules to include.
4. Collect the Maven coordinates, package name and project location.
5. Download the generated project and extract it.

Any answer can be supplied up front with a flag, in which case the matching
prompt is skipped.

Usage::

    snowdrop-scaffold scaffold
    snowdrop-scaffold scaffold -s 2.1.3.RELEASE -t rest -g com.example -i demo -o demo
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from snowdrop_scaffold.archive import ArchiveError, materialize
from snowdrop_scaffold.client import GeneratorClient, GeneratorServiceError
from snowdrop_scaffold.config import DEFAULT_SERVICE_URL, ScaffoldConfig
from snowdrop_scaffold.models import ProjectDescriptor, RemoteConfig, module_names_for
from snowdrop_scaffold.prompts import Prompter
from snowdrop_scaffold.utils import print_error, print_success, print_summary_table, print_warning

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Raised for invalid flag combinations or an incomplete project."""


# ---------------------------------------------------------------------------
# Pre-supplied answers
# ---------------------------------------------------------------------------


@dataclass
class Overrides:
    """Answers given on the command line; empty values are asked for."""

    template: str = ""
    modules: list[str] = field(default_factory=list)
    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    package_name: str = ""
    spring_boot_version: str = ""
    snowdrop_bom_version: str = ""
    out_dir: str = ""

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Overrides":
        return cls(
            template=args.template,
            modules=list(args.module),
            group_id=args.groupid,
            artifact_id=args.artifactid,
            version=args.version,
            package_name=args.packagename,
            spring_boot_version=args.springbootversion,
            snowdrop_bom_version=args.snowdropbom,
            out_dir=args.outdir,
        )


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class Scaffolder:
    """Sequences the prompts and service calls for one project.

    Args:
        config: Service and default settings.
        client: Generator client; built from ``config`` when omitted.
        prompter: Prompt implementation; the interactive one when omitted.
        cwd: Directory relative project locations are resolved against.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        client: GeneratorClient | None = None,
        prompter: Prompter | None = None,
        cwd: Path | None = None,
    ) -> None:
        self.config = config
        self.client = client or GeneratorClient(config)
        self.prompter = prompter or Prompter()
        self.cwd = cwd or Path.cwd()

    def choose_versions(self, remote: RemoteConfig, overrides: Overrides) -> tuple[str, str]:
        """Return ``(spring_boot_version, snowdrop_bom_version)``."""
        versions, default_version = remote.bom_map()

        spring_boot_version = overrides.spring_boot_version
        if not spring_boot_version:
            spring_boot_version = self.prompter.select(
                "Spring Boot version", list(versions), default_version
            )

        if overrides.snowdrop_bom_version:
            return spring_boot_version, overrides.snowdrop_bom_version

        bom = versions.get(spring_boot_version)
        if bom is None:
            print_warning(f"No Snowdrop bom is known for Spring Boot {escape(spring_boot_version)}")
            return spring_boot_version, ""

        bom_version = bom.snowdrop
        if bom.supported and self.prompter.confirm("Use supported version"):
            if len(bom.supported) == 1:
                bom_version = remote.supported_version_for(spring_boot_version)
            else:
                bom_version = self.prompter.select("Supported version", bom.supported)
        return spring_boot_version, bom_version

    def choose_contents(
        self, remote: RemoteConfig, spring_boot_version: str, overrides: Overrides
    ) -> tuple[str, list[str]]:
        """Return ``(template, modules)``; exactly one of them is filled in."""
        if overrides.template and overrides.modules:
            raise ScaffoldError("--template and --module cannot be used together")
        if overrides.template:
            return overrides.template, []
        if overrides.modules:
            return "", list(overrides.modules)

        if self.prompter.confirm("Create from template"):
            return self.prompter.select("Available templates", remote.template_names()), []

        modules = self.client.get_modules(spring_boot_version)
        names = module_names_for(modules, spring_boot_version)
        return "", self.prompter.multi_select("Select modules", names)

    def choose_coordinates(self, overrides: Overrides) -> dict[str, str]:
        """Collect group id, artifact id, version, package name and location."""
        defaults = self.config.defaults
        group_id = overrides.group_id or self.prompter.ask("Group Id", defaults.group_id)
        artifact_id = overrides.artifact_id or self.prompter.ask("Artifact Id", defaults.artifact_id)
        version = overrides.version or self.prompter.ask("Version", defaults.version)
        package_name = overrides.package_name or self.prompter.ask(
            "Package name", defaults.package_name_for(group_id, artifact_id)
        )
        out_dir = overrides.out_dir or self.prompter.ask(
            f"Project location (immediate child directory of {escape(str(self.cwd))})"
        )
        return {
            "group_id": group_id,
            "artifact_id": artifact_id,
            "version": version,
            "package_name": package_name,
            "out_dir": out_dir,
        }

    def collect(self, remote: RemoteConfig, overrides: Overrides) -> ProjectDescriptor:
        """Run the prompt steps and build the project descriptor.

        Raises:
            ScaffoldError: If the answers do not describe a valid project.
        """
        spring_boot_version, bom_version = self.choose_versions(remote, overrides)
        template, modules = self.choose_contents(remote, spring_boot_version, overrides)
        coordinates = self.choose_coordinates(overrides)
        try:
            return ProjectDescriptor(
                service_url=self.config.service_url,
                spring_boot_version=spring_boot_version,
                snowdrop_bom_version=bom_version,
                template=template,
                modules=modules,
                **coordinates,
            )
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            raise ScaffoldError(f"Invalid project: {messages}") from exc

    def generate(self, descriptor: ProjectDescriptor) -> Path:
        """Download the project archive and extract it under ``cwd``."""
        dest = self.cwd / descriptor.out_dir
        body = self.client.download_app(descriptor)
        return materialize(body, dest)

    def run(self, overrides: Overrides) -> Path:
        remote = self.client.get_config()
        descriptor = self.collect(remote, overrides)
        print_summary_table(descriptor.summary(), title="Project")
        return self.generate(descriptor)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snowdrop-scaffold",
        description="Create Spring Boot maven projects from the Snowdrop generator service",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scaffold = subparsers.add_parser(
        "scaffold",
        help="Create a Spring Boot maven project",
        description="Create a Spring Boot maven project.",
    )
    scaffold.add_argument("name", nargs="?", default=None, help=argparse.SUPPRESS)
    scaffold.add_argument(
        "--template", "-t", default="",
        help="Template name used to select the project to be created",
    )
    scaffold.add_argument(
        "--urlservice", "-u", default=DEFAULT_SERVICE_URL,
        help="URL of the HTTP Server exposing the spring boot service",
    )
    scaffold.add_argument(
        "--module", "-m", action="append", default=[],
        help="Spring Boot modules/starters (repeatable)",
    )
    scaffold.add_argument("--groupid", "-g", default="", help="GroupId: com.example")
    scaffold.add_argument("--artifactid", "-i", default="", help="ArtifactId: demo")
    scaffold.add_argument("--version", "-v", default="", help="Version: 0.0.1-SNAPSHOT")
    scaffold.add_argument("--packagename", "-p", default="", help="Package Name: com.example.demo")
    scaffold.add_argument("--springbootversion", "-s", default="", help="Spring Boot Version")
    scaffold.add_argument("--snowdropbom", "-b", default="", help="Snowdrop Bom Version")
    scaffold.add_argument(
        "--outdir", "-o", default="",
        help="Project location, relative to the current directory",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``snowdrop-scaffold`` and ``python -m snowdrop_scaffold``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = ScaffoldConfig(service_url=args.urlservice)
    except ValidationError:
        print_error(f"Error: invalid service URL {escape(repr(args.urlservice))}")
        return 1

    scaffolder = Scaffolder(config)
    try:
        project_dir = scaffolder.run(Overrides.from_args(args))
    except (GeneratorServiceError, ArchiveError, ScaffoldError) as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 1

    print_success(f"Project created in {escape(str(project_dir))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
