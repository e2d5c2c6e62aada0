"""Shared pytest fixtures for the snowdrop-scaffold test suite.

Provides reusable fixtures for:
- Scripted prompt input and a quiet Rich console
- Sample ``/config`` and ``/modules`` YAML bodies
- In-memory zip archives
- A mocked generator service built on ``httpx.MockTransport``
"""

from __future__ import annotations

import io
import textwrap
import zipfile
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from snowdrop_scaffold.client import GeneratorClient
from snowdrop_scaffold.config import ScaffoldConfig
from snowdrop_scaffold.prompts import Prompter

SERVICE_URL = "http://generator.test"


# ---------------------------------------------------------------------------
# Prompt input
# ---------------------------------------------------------------------------


class ScriptedInput:
    """File-like answer source for ``Prompter``.

    Each ``readline`` returns the next scripted answer. Once the script runs
    out it raises ``EOFError`` like ``input()`` does on a closed terminal.
    An answer that is an exception instance is raised instead of returned.
    """

    def __init__(self, answers: list[str | BaseException]) -> None:
        self.answers = list(answers)
        self.consumed = 0

    def readline(self) -> str:
        if not self.answers:
            raise EOFError("no more scripted answers")
        answer = self.answers.pop(0)
        self.consumed += 1
        if isinstance(answer, BaseException):
            raise answer
        return answer + "\n"


@pytest.fixture
def quiet_console() -> Console:
    """Console that renders into a buffer instead of the terminal."""
    return Console(file=io.StringIO(), width=400, color_system=None)


@pytest.fixture
def make_prompter(quiet_console: Console) -> Callable[..., Prompter]:
    """Factory: ``make_prompter("1", "y")`` answers prompts in order."""

    def _make(*answers: str | BaseException) -> Prompter:
        return Prompter(console=quiet_console, stream=ScriptedInput(list(answers)))

    return _make


# ---------------------------------------------------------------------------
# Service payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def config_yaml() -> str:
    return textwrap.dedent("""\
        templates:
          - name: simple
            description: Spring Boot Hello World endpoint
          - name: rest
            description: Spring Boot REST endpoint
          - name: crud
            description: Spring Boot CRUD with JPA
        bomversions:
          - community: 1.5.19.RELEASE
            snowdrop: 1.5.19.Final
          - community: 2.1.0
            snowdrop: x.y
            supported: [a.b]
            default: true
        """)


@pytest.fixture
def modules_yaml() -> str:
    return textwrap.dedent("""\
        - name: web
          description: Web support with embedded Tomcat
          versions: [2.1.0]
        - name: data-jpa
          description: Spring Data JPA
        - name: security
          description: Spring Security
          versions: [1.5.19.RELEASE]
        """)


def build_zip(entries: dict[str, bytes | None], modes: dict[str, int] | None = None) -> bytes:
    """Build a zip archive in memory.

    ``None`` content marks a directory entry. ``modes`` sets unix file modes.
    """
    modes = modes or {}
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in entries.items():
            info = zipfile.ZipInfo(name)
            if content is None:
                info.external_attr = (0o40755 << 16) | 0x10
                archive.writestr(info, b"")
            else:
                if name in modes:
                    info.external_attr = (0o100000 | modes[name]) << 16
                archive.writestr(info, content)
    return buffer.getvalue()


@pytest.fixture
def zip_builder() -> Callable[..., bytes]:
    return build_zip


@pytest.fixture
def project_zip() -> bytes:
    return build_zip(
        {
            "demo/": None,
            "demo/pom.xml": b"<project/>\n",
            "demo/src/main/java/App.java": b"class App {}\n",
        },
        modes={"demo/pom.xml": 0o644, "demo/src/main/java/App.java": 0o644},
    )


# ---------------------------------------------------------------------------
# Mocked generator service
# ---------------------------------------------------------------------------


class FakeGenerator:
    """Records requests and serves canned ``/config``, ``/modules`` and ``/app`` bodies."""

    def __init__(self, config_body: str, modules_body: str, app_body: bytes) -> None:
        self.config_body = config_body
        self.modules_body = modules_body
        self.app_body = app_body
        self.app_status = 200
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/config":
            return httpx.Response(200, text=self.config_body)
        if path.startswith("/modules/"):
            return httpx.Response(200, text=self.modules_body)
        if path == "/app":
            return httpx.Response(self.app_status, content=self.app_body)
        return httpx.Response(404, text="Not found")

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def fake_generator(config_yaml: str, modules_yaml: str, project_zip: bytes) -> FakeGenerator:
    return FakeGenerator(config_yaml, modules_yaml, project_zip)


@pytest.fixture
def scaffold_config() -> ScaffoldConfig:
    return ScaffoldConfig(service_url=SERVICE_URL)


@pytest.fixture
def generator_client(scaffold_config: ScaffoldConfig, fake_generator: FakeGenerator) -> GeneratorClient:
    return GeneratorClient(scaffold_config, transport=httpx.MockTransport(fake_generator))


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Directory standing in for the user's current working directory."""
    cwd = tmp_path / "work"
    cwd.mkdir()
    return cwd
