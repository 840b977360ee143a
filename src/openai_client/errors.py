"""Error types for the openai-client library."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Discriminator for the failure outcomes of the client."""

    CONFIG = "config"
    VALIDATION = "validation"
    TRANSPORT = "transport"
    API = "api"
    DECODE = "decode"


@dataclass(frozen=True, slots=True)
class ClientError:
    """Base error type for client operations. Only its subclasses are instantiated."""

    message: str
    code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if type(self) is ClientError:
            raise TypeError("ClientError is abstract; use one of its subclasses")

    @property
    def kind(self) -> ErrorKind:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class ConfigError(ClientError):
    """Invalid client configuration, e.g. an empty access token."""

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.CONFIG


@dataclass(frozen=True, slots=True)
class ValidationError(ClientError):
    """A request could not be built from the supplied fields.

    Raised before any network activity; ``field`` names the offending
    parameter.
    """

    field: str | None = None

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.VALIDATION


@dataclass(frozen=True, slots=True)
class TransportError(ClientError):
    """Connection, DNS, TLS or timeout failure. Never retried by the client."""

    timed_out: bool = False

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.TRANSPORT


@dataclass(frozen=True, slots=True)
class ApiError(ClientError):
    """Failure reported by the API itself.

    ``code``, ``error_type`` and ``param`` come from the ``{"error": {...}}``
    envelope when the server sends one, as strings; ``details`` holds the
    envelope with its original values.
    """

    status_code: int | None = None
    error_type: str | None = None
    param: str | None = None
    raw_body: str | None = None

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.API


@dataclass(frozen=True, slots=True)
class DecodeError(ClientError):
    """A success response whose body did not match the expected shape."""

    status_code: int | None = None
    raw_body: str | None = None

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.DECODE


class OpenAiClientException(Exception):
    """Raised where an error value cannot be returned as a ``Result``."""

    def __init__(self, error: ClientError) -> None:
        super().__init__(error.message)
        self.error = error

    def __str__(self) -> str:
        return f"{self.error.kind.value} error: {self.error.message}"
