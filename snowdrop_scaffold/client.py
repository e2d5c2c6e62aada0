"""Client for the Spring Boot project generator service.

Wraps the three endpoints the scaffolder needs:

* ``GET /config`` -- versions, boms and templates (YAML)
* ``GET /modules/<version>`` -- modules compatible with a version (YAML)
* ``GET /app?<query>`` -- the generated project as a zip archive

Every request carries the ``User-Agent: snowdrop-scaffold/1.0`` header and no
body. Calls are synchronous and fully buffered; there are no retries.

Typical usage::

    client = GeneratorClient(ScaffoldConfig(service_url="http://localhost:8080"))
    config = client.get_config()
    body = client.download_app(descriptor)
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
import yaml
from rich.markup import escape
from pydantic import BaseModel, TypeAdapter, ValidationError

from snowdrop_scaffold.archive import ArchiveError
from snowdrop_scaffold.config import ScaffoldConfig
from snowdrop_scaffold.models import ModuleDescriptor, ProjectDescriptor, RemoteConfig
from snowdrop_scaffold.utils import print_info

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GeneratorServiceError(Exception):
    """Raised when the generator configuration cannot be obtained."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class ServiceUnavailableError(GeneratorServiceError):
    """The service answered with its "not available" page."""


class ConfigFetchError(GeneratorServiceError):
    """The request failed or the body could not be decoded."""


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class GeneratorClient:
    """Synchronous client for the generator REST API.

    Args:
        config: Service URL, user agent and timeout settings.
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ScaffoldConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or ScaffoldConfig()
        self.transport = transport

    def _client(self) -> httpx.Client:
        """Return a fresh ``Client`` with our base URL, headers and timeout."""
        return httpx.Client(
            base_url=self.config.service_url,
            headers={"User-Agent": self.config.user_agent},
            timeout=httpx.Timeout(self.config.timeout),
            transport=self.transport,
        )

    # ------------------------------------------------------------------
    # YAML endpoints
    # ------------------------------------------------------------------

    def fetch_yaml(self, path: str, model: type[T] | Any) -> T:
        """GET ``<service_url>/<path>`` and decode the YAML body into ``model``.

        Args:
            path: Endpoint path relative to the service URL.
            model: A Pydantic model class or any type ``TypeAdapter`` accepts
                (e.g. ``list[ModuleDescriptor]``).

        Raises:
            ServiceUnavailableError: The body contains the unavailability marker.
            ConfigFetchError: Transport failure, invalid YAML or a body that
                does not match ``model``.
        """
        url = f"{self.config.service_url}/{path}"
        try:
            with self._client() as client:
                response = client.get(path)
                body = response.text
        except httpx.HTTPError as exc:
            raise ConfigFetchError(url, f"Cannot reach generator service at {url}: {exc}") from exc

        if self.config.unavailable_marker in body:
            raise ServiceUnavailableError(url, "Generator service is not available")

        try:
            data = yaml.safe_load(body)
        except yaml.YAMLError as exc:
            raise ConfigFetchError(url, f"Invalid YAML returned by {url}: {exc}") from exc

        try:
            if isinstance(model, type) and issubclass(model, BaseModel):
                return model.model_validate(data or {})
            return TypeAdapter(model).validate_python(data or [])
        except ValidationError as exc:
            raise ConfigFetchError(url, f"Unexpected response from {url}: {exc}") from exc

    def get_config(self) -> RemoteConfig:
        """Fetch versions, boms and templates."""
        return self.fetch_yaml("config", RemoteConfig)

    def get_modules(self, version: str) -> list[ModuleDescriptor]:
        """Fetch the modules the service offers for ``version``."""
        return self.fetch_yaml(f"modules/{version}", list[ModuleDescriptor])

    # ------------------------------------------------------------------
    # Archive endpoint
    # ------------------------------------------------------------------

    def build_app_request(self, client: httpx.Client, descriptor: ProjectDescriptor) -> httpx.Request:
        """Build the ``GET /app`` request with the descriptor as query string."""
        return client.build_request("GET", "app", params=descriptor.query_params())

    def download_app(self, descriptor: ProjectDescriptor) -> bytes:
        """Request the generated project and return the zip archive bytes.

        Raises:
            ArchiveError: With ``step="download"`` on transport failure or an
                HTTP error status.
        """
        with self._client() as client:
            request = self.build_app_request(client, descriptor)
            url = str(request.url)
            print_info(f"URL of the request calling the service is {escape(url)}")
            try:
                response = client.send(request)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise ArchiveError(
                    "download", url, f"service returned HTTP {exc.response.status_code}"
                ) from exc
            except httpx.HTTPError as exc:
                raise ArchiveError("download", url, str(exc)) from exc
            return response.content
