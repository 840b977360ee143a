"""OpenAI API client implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar
from urllib.parse import quote

import httpx

from .config import (
    COMPLETIONS_PATH,
    DEFAULT_TIMEOUT,
    EDITS_PATH,
    IMAGES_GENERATIONS_PATH,
    MODELS_PATH,
    OpenAiConfig,
)
from .errors import (
    ApiError,
    ClientError,
    ConfigError,
    DecodeError,
    TransportError,
    ValidationError,
)
from .result import Err, Ok, Result
from .types import (
    CompletionRequest,
    CreateImageRequest,
    EditRequest,
    ImageItem,
    ImageResult,
    Model,
    ModelList,
    ModelPermission,
    TextChoice,
    TextResult,
    Usage,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# === Response Parsing ===

class _ShapeError(Exception):
    """JSON body is valid but does not have the documented shape."""


def _field(
    data: Any,
    key: str,
    expected: type | tuple[type, ...],
    optional: bool = False,
) -> Any:
    if not isinstance(data, dict):
        raise _ShapeError(f"expected an object holding '{key}', got {type(data).__name__}")
    value = data.get(key)
    if value is None:
        if optional:
            return None
        raise _ShapeError(f"missing field '{key}'")
    # bool is an int subclass; never accept it for numeric fields
    if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
        raise _ShapeError(f"field '{key}' has unexpected type {type(value).__name__}")
    return value


def _parse_usage(data: dict[str, Any]) -> Usage | None:
    u = _field(data, "usage", dict, optional=True)
    if u is None:
        return None
    return Usage(
        prompt_tokens=_field(u, "prompt_tokens", int),
        completion_tokens=_field(u, "completion_tokens", int),
        total_tokens=_field(u, "total_tokens", int),
    )


def _parse_text_result(data: Any) -> TextResult:
    choices = [
        TextChoice(
            text=_field(c, "text", str),
            index=_field(c, "index", int),
            logprobs=_field(c, "logprobs", dict, optional=True),
            finish_reason=_field(c, "finish_reason", str, optional=True),
        )
        for c in _field(data, "choices", list)
    ]
    return TextResult(
        id=_field(data, "id", str, optional=True),
        object=_field(data, "object", str),
        created=_field(data, "created", int),
        model=_field(data, "model", str, optional=True),
        choices=choices,
        usage=_parse_usage(data),
    )


def _parse_image_result(data: Any) -> ImageResult:
    items = []
    for item in _field(data, "data", list):
        url = _field(item, "url", str, optional=True)
        b64_json = _field(item, "b64_json", str, optional=True)
        if url is None and b64_json is None:
            raise _ShapeError("image item holds neither 'url' nor 'b64_json'")
        items.append(ImageItem(url=url, b64_json=b64_json))
    return ImageResult(created=_field(data, "created", int), data=items)


def _parse_permission(data: Any) -> ModelPermission:
    return ModelPermission(
        id=_field(data, "id", str),
        object=_field(data, "object", str),
        created=_field(data, "created", int),
        allow_create_engine=_field(data, "allow_create_engine", bool),
        allow_sampling=_field(data, "allow_sampling", bool),
        allow_logprobs=_field(data, "allow_logprobs", bool),
        allow_search_indices=_field(data, "allow_search_indices", bool),
        allow_view=_field(data, "allow_view", bool),
        allow_fine_tuning=_field(data, "allow_fine_tuning", bool),
        organization=_field(data, "organization", str),
        group=_field(data, "group", str, optional=True),
        is_blocking=bool(_field(data, "is_blocking", bool, optional=True)),
    )


def _parse_model(data: Any) -> Model:
    return Model(
        id=_field(data, "id", str),
        object=_field(data, "object", str),
        created=_field(data, "created", int),
        owned_by=_field(data, "owned_by", str),
        permission=[
            _parse_permission(p) for p in _field(data, "permission", list, optional=True) or []
        ],
        root=_field(data, "root", str, optional=True),
        parent=_field(data, "parent", str, optional=True),
    )


def _parse_model_list(data: Any) -> ModelList:
    return ModelList(
        data=[_parse_model(m) for m in _field(data, "data", list)],
        object=_field(data, "object", str, optional=True),
    )


def _parse_api_error(response: httpx.Response, data: Any) -> ApiError:
    """Map an error reply, using the ``{"error": {...}}`` envelope when present.

    ``code``, ``error_type`` and ``param`` are normalized to strings; the
    envelope itself is kept unchanged in ``details``.
    """
    message: Any = response.reason_phrase or f"HTTP {response.status_code}"
    error_type = code = param = None
    details: dict[str, Any] = {}

    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        details = dict(error)
        if isinstance(error.get("message"), str):
            message = error["message"]
        error_type = error.get("type")
        code = error.get("code")
        param = error.get("param")
    elif isinstance(error, str):
        message = error

    return ApiError(
        message=str(message),
        code=str(code) if code is not None else None,
        details=details,
        status_code=response.status_code,
        error_type=str(error_type) if error_type is not None else None,
        param=str(param) if param is not None else None,
        raw_body=response.text,
    )


def _has_error_envelope(data: Any) -> bool:
    return isinstance(data, dict) and isinstance(data.get("error"), (dict, str))


# === Client Class ===

@dataclass
class OpenAiClient:
    """Client for the OpenAI API.

    Every operation performs exactly one HTTP exchange and returns
    ``Ok(response)`` or ``Err(error)`` where the error is an ``ApiError``,
    ``DecodeError``, ``TransportError`` or ``ValidationError``. Nothing is
    retried or cached.

    Usage:
        client = OpenAiClient(OpenAiConfig("sk-..."))

        request = (
            EditRequestBuilder()
            .model("text-davinci-edit-001")
            .input("What day of the wek is it?")
            .instruction("Fix the spelling mistakes")
            .build()
            .unwrap()
        )
        result = await client.create_edit(request)
        if result.is_ok():
            print(result.value.text)
        else:
            print(f"Error: {result.error.message}")
    """

    config: OpenAiConfig
    timeout: float = DEFAULT_TIMEOUT
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    _http: httpx.AsyncClient | None = field(init=False, repr=False, default=None)

    @classmethod
    def from_env(cls, timeout: float = DEFAULT_TIMEOUT) -> Result[OpenAiClient, ConfigError]:
        """Create a client configured from OPENAI_API_KEY and friends."""
        return OpenAiConfig.from_env().map(lambda config: cls(config, timeout=timeout))

    async def __aenter__(self) -> OpenAiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the http client bound to an injected transport, if one was opened."""
        if self._http is not None:
            http, self._http = self._http, None
            await http.aclose()

    def _shared_client(self) -> httpx.AsyncClient:
        """One long-lived http client per injected transport.

        The transport is shared by every call and closed only by ``aclose()``.
        """
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self._http

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        json_body: dict[str, Any] | None,
    ) -> httpx.Response:
        return await client.request(
            method=method,
            url=url,
            json=json_body,
            headers=self.config.headers(),
        )

    async def _request(
        self,
        method: str,
        path: str,
        json_body: dict[str, Any] | None = None,
    ) -> Result[httpx.Response, TransportError]:
        """Perform one HTTP exchange. Only transport failures are errors here."""
        url = self.config.endpoint_url(path)
        logger.debug(f"{method} {url}")

        try:
            if self.transport is None:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._send(client, method, url, json_body)
            else:
                response = await self._send(self._shared_client(), method, url, json_body)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {url} timed out: {e}")
            return Err(TransportError(message="Request timed out", code="TIMEOUT", timed_out=True))
        except httpx.RequestError as e:
            logger.warning(f"{method} {url} failed: {e}")
            return Err(TransportError(message=f"Request failed: {e}", code="REQUEST_ERROR"))
        except (httpx.InvalidURL, ValueError) as e:
            # Malformed base url, or a token/organization that cannot be sent as a header
            logger.warning(f"{method} {url} could not be built: {type(e).__name__}")
            return Err(
                TransportError(
                    message=f"Invalid request: {type(e).__name__}: {e}",
                    code="INVALID_REQUEST",
                )
            )

        logger.debug(f"{method} {url} -> {response.status_code}")
        return Ok(response)

    def _decode(
        self,
        response: httpx.Response,
        parse: Callable[[Any], T],
    ) -> Result[T, ClientError]:
        """Turn a reply into the typed response, an ``ApiError`` or a ``DecodeError``."""
        try:
            data = response.json()
            is_json = True
        except ValueError:
            data = None
            is_json = False

        if not response.is_success or _has_error_envelope(data):
            error = _parse_api_error(response, data)
            logger.warning(
                f"API error {error.status_code} ({error.error_type or 'unknown'}): {error.message}"
            )
            return Err(error)

        if not is_json:
            logger.warning(f"Response with status {response.status_code} is not valid JSON")
            return Err(
                DecodeError(
                    message="Response body is not valid JSON",
                    code="INVALID_JSON",
                    status_code=response.status_code,
                    raw_body=response.text,
                )
            )

        try:
            return Ok(parse(data))
        except _ShapeError as e:
            logger.warning(f"Unexpected response shape: {e}")
            return Err(
                DecodeError(
                    message=f"Unexpected response shape: {e}",
                    code="UNEXPECTED_SHAPE",
                    status_code=response.status_code,
                    raw_body=response.text,
                )
            )

    async def _call(
        self,
        method: str,
        path: str,
        parse: Callable[[Any], T],
        json_body: dict[str, Any] | None = None,
    ) -> Result[T, ClientError]:
        result = await self._request(method, path, json_body=json_body)
        if result.is_err():
            return result  # type: ignore
        return self._decode(result.value, parse)

    # === Public Methods ===

    async def get_models(self) -> Result[ModelList, ClientError]:
        """List the models available to the configured account."""
        return await self._call("GET", MODELS_PATH, _parse_model_list)

    async def get_model(self, model_id: str) -> Result[Model, ClientError]:
        """Describe a single model."""
        if not model_id or not model_id.strip():
            return Err(
                ValidationError(
                    message="Missing required field: model_id",
                    code="MISSING_FIELD",
                    field="model_id",
                )
            )
        path = f"{MODELS_PATH}/{quote(model_id.strip(), safe=':')}"
        return await self._call("GET", path, _parse_model)

    async def create_completion(
        self, request: CompletionRequest
    ) -> Result[TextResult, ClientError]:
        """Create completions for a prompt."""
        return await self._call(
            "POST", COMPLETIONS_PATH, _parse_text_result, json_body=request.to_payload()
        )

    async def create_edit(self, request: EditRequest) -> Result[TextResult, ClientError]:
        """Create an edited version of the input following the instruction."""
        return await self._call(
            "POST", EDITS_PATH, _parse_text_result, json_body=request.to_payload()
        )

    async def create_image(
        self, request: CreateImageRequest
    ) -> Result[ImageResult, ClientError]:
        """Generate images from a prompt."""
        return await self._call(
            "POST", IMAGES_GENERATIONS_PATH, _parse_image_result, json_body=request.to_payload()
        )
