"""Type definitions for the OpenAI client."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


# === Enums ===

class ImageSize(str, Enum):
    """Sizes accepted by the image generation endpoint."""

    SMALL = "256x256"
    MEDIUM = "512x512"
    LARGE = "1024x1024"


class ImageResponseFormat(str, Enum):
    """How generated images are returned."""

    URL = "url"
    B64_JSON = "b64_json"


# === Request Types ===

def _payload(request: Any) -> dict[str, Any]:
    """Serialize a request dataclass, omitting fields that were never set."""
    payload: dict[str, Any] = {}
    for f in fields(request):
        value = getattr(request, f.name)
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        elif isinstance(value, dict):
            value = dict(value)
        payload[f.name] = value
    return payload


@dataclass(frozen=True, slots=True, kw_only=True)
class CompletionRequest:
    """Parameters for ``POST /v1/completions``."""

    model: str
    prompt: str | tuple[str, ...] | None = None
    suffix: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    n: int | None = None
    logprobs: int | None = None
    echo: bool | None = None
    stop: str | tuple[str, ...] | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    best_of: int | None = None
    logit_bias: dict[str, int] | None = None
    user: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return _payload(self)


@dataclass(frozen=True, slots=True, kw_only=True)
class EditRequest:
    """Parameters for ``POST /v1/edits``."""

    model: str
    input: str | None = None
    instruction: str
    n: int | None = None
    temperature: float | None = None
    top_p: float | None = None

    def to_payload(self) -> dict[str, Any]:
        return _payload(self)


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateImageRequest:
    """Parameters for ``POST /v1/images/generations``."""

    prompt: str
    n: int | None = None
    size: ImageSize | str | None = None
    response_format: ImageResponseFormat | str | None = None
    user: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return _payload(self)


# === Response Types ===

@dataclass(frozen=True, slots=True)
class Usage:
    """Token usage statistics."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass(frozen=True, slots=True)
class TextChoice:
    """A single generated text."""

    text: str
    index: int
    logprobs: dict[str, Any] | None = None
    finish_reason: str | None = None


@dataclass(frozen=True, slots=True)
class TextResult:
    """Response from the completions and edits endpoints.

    Edit responses carry neither ``id`` nor ``model``.
    """

    object: str
    created: int
    choices: list[TextChoice]
    id: str | None = None
    model: str | None = None
    usage: Usage | None = None

    @property
    def text(self) -> str:
        """Text of the first choice."""
        if self.choices:
            return self.choices[0].text
        return ""


@dataclass(frozen=True, slots=True)
class ImageItem:
    """One generated image, as a url or base64 payload."""

    url: str | None = None
    b64_json: str | None = None


@dataclass(frozen=True, slots=True)
class ImageResult:
    """Response from the image generation endpoint."""

    created: int
    data: list[ImageItem] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ModelPermission:
    """Permission entry attached to a model."""

    id: str
    object: str
    created: int
    allow_create_engine: bool
    allow_sampling: bool
    allow_logprobs: bool
    allow_search_indices: bool
    allow_view: bool
    allow_fine_tuning: bool
    organization: str
    group: str | None = None
    is_blocking: bool = False


@dataclass(frozen=True, slots=True)
class Model:
    """A model available through the API."""

    id: str
    object: str
    created: int
    owned_by: str
    permission: list[ModelPermission] = field(default_factory=list)
    root: str | None = None
    parent: str | None = None


@dataclass(frozen=True, slots=True)
class ModelList:
    """Response from ``GET /v1/models``."""

    data: list[Model]
    object: str | None = None
