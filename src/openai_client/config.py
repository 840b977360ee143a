"""Configuration constants and the immutable client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .errors import ConfigError, OpenAiClientException
from .result import Err, Ok, Result

DEFAULT_BASE_URL = "https://api.openai.com"
DEFAULT_API_VERSION = "v1"
DEFAULT_TIMEOUT = 60.0
API_KEY_ENV_VAR = "OPENAI_API_KEY"
ORGANIZATION_ENV_VAR = "OPENAI_ORG_ID"
BASE_URL_ENV_VAR = "OPENAI_BASE_URL"

# Operation paths, relative to the versioned API url
MODELS_PATH = "models"
COMPLETIONS_PATH = "completions"
EDITS_PATH = "edits"
IMAGES_GENERATIONS_PATH = "images/generations"


@dataclass(frozen=True, slots=True)
class OpenAiConfig:
    """Credentials and endpoint for the API.

    Usage:
        config = OpenAiConfig("sk-...", organization="org-...")
        config.endpoint_url("edits")  # https://api.openai.com/v1/edits

    Construction raises ``OpenAiClientException`` wrapping a ``ConfigError``
    when the token is empty; use ``create()`` or ``from_env()`` to get a
    ``Result`` instead.
    """

    access_token: str = field(repr=False)
    organization: str | None = None
    base_url: str = DEFAULT_BASE_URL
    version: str = DEFAULT_API_VERSION

    def __post_init__(self) -> None:
        if not self.access_token or not self.access_token.strip():
            raise OpenAiClientException(
                ConfigError(
                    message=f"Access token required. Set {API_KEY_ENV_VAR} or pass access_token.",
                    code="AUTH_REQUIRED",
                )
            )

    @classmethod
    def create(
        cls,
        access_token: str,
        organization: str | None = None,
        base_url: str | None = None,
        version: str = DEFAULT_API_VERSION,
    ) -> Result[OpenAiConfig, ConfigError]:
        """Build a config, returning the ``ConfigError`` instead of raising it."""
        try:
            return Ok(
                cls(
                    access_token=access_token,
                    organization=organization or None,
                    base_url=base_url or DEFAULT_BASE_URL,
                    version=version,
                )
            )
        except OpenAiClientException as e:
            return Err(e.error)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls) -> Result[OpenAiConfig, ConfigError]:
        """Read token, organization and base url from the environment."""
        return cls.create(
            access_token=os.environ.get(API_KEY_ENV_VAR, ""),
            organization=os.environ.get(ORGANIZATION_ENV_VAR),
            base_url=os.environ.get(BASE_URL_ENV_VAR),
        )

    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.version}"

    def endpoint_url(self, path: str) -> str:
        return f"{self.api_url()}/{path.lstrip('/')}"

    def headers(self) -> dict[str, str]:
        """Headers attached to every request."""
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        return headers
