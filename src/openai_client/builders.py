"""Fluent builders for the request types.

Setters only record values; every check happens in ``build()``, which
returns ``Ok(request)`` or ``Err(ValidationError)`` naming the first
offending field. Builders can be reused: each ``build()`` snapshots the
current fields into a new immutable request.

Usage:
    result = (
        EditRequestBuilder()
        .model("text-davinci-edit-001")
        .input("What day of the wek is it?")
        .instruction("Fix the spelling mistakes")
        .build()
    )
    if result.is_ok():
        request = result.value
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import fields
from typing import Any, Callable, Generic, TypeVar

from .errors import ValidationError
from .result import Err, Ok, Result
from .types import (
    CompletionRequest,
    CreateImageRequest,
    EditRequest,
    ImageResponseFormat,
    ImageSize,
)

R = TypeVar("R")

Check = Callable[[str, Any], "ValidationError | None"]

MAX_STOP_SEQUENCES = 4
MAX_IMAGE_PROMPT_LENGTH = 1000


# === Field checks ===

def _missing(name: str) -> ValidationError:
    return ValidationError(
        message=f"Missing required field: {name}",
        code="MISSING_FIELD",
        field=name,
    )


def _invalid(name: str, message: str) -> ValidationError:
    return ValidationError(message=message, code="INVALID_VALUE", field=name)


def _out_of_range(name: str, message: str) -> ValidationError:
    return ValidationError(message=message, code="OUT_OF_RANGE", field=name)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_string(name: str, value: Any) -> ValidationError | None:
    if not isinstance(value, str):
        return _invalid(name, f"{name} must be a string")
    return None


def _is_flag(name: str, value: Any) -> ValidationError | None:
    if not isinstance(value, bool):
        return _invalid(name, f"{name} must be a boolean")
    return None


def _between(low: float, high: float) -> Check:
    """Number within the closed interval [low, high]."""

    def check(name: str, value: Any) -> ValidationError | None:
        if not _is_number(value):
            return _invalid(name, f"{name} must be a number")
        if math.isnan(value) or not low <= value <= high:
            return _out_of_range(name, f"{name} must be between {low} and {high}, got {value}")
        return None

    return check


def _int_between(low: int, high: int | None = None) -> Check:
    """Integer >= low, and <= high when given."""

    def check(name: str, value: Any) -> ValidationError | None:
        if not _is_int(value):
            return _invalid(name, f"{name} must be an integer")
        if value < low or (high is not None and value > high):
            bound = f"between {low} and {high}" if high is not None else f"at least {low}"
            return _out_of_range(name, f"{name} must be {bound}, got {value}")
        return None

    return check


def _one_of(allowed: Iterable[str]) -> Check:
    allowed = tuple(allowed)

    def check(name: str, value: Any) -> ValidationError | None:
        raw = getattr(value, "value", value)
        if raw not in allowed:
            return _invalid(name, f"{name} must be one of {', '.join(allowed)}, got {raw!r}")
        return None

    return check


def _text_or_list(max_items: int | None = None) -> Check:
    """A string, or a non-empty list of strings with at most ``max_items``."""

    def check(name: str, value: Any) -> ValidationError | None:
        if isinstance(value, str):
            return None
        if isinstance(value, Mapping) or not isinstance(value, Iterable):
            return _invalid(name, f"{name} must be a string or a list of strings")
        items = list(value)
        if not all(isinstance(item, str) for item in items):
            return _invalid(name, f"{name} must be a string or a list of strings")
        if max_items is not None and not 1 <= len(items) <= max_items:
            return _out_of_range(
                name, f"{name} must hold between 1 and {max_items} entries, got {len(items)}"
            )
        return None

    return check


def _logit_bias(name: str, value: Any) -> ValidationError | None:
    if not isinstance(value, Mapping):
        return _invalid(name, f"{name} must map token ids to bias values")
    for token, bias in value.items():
        if not _is_number(bias) or not -100 <= bias <= 100:
            return _out_of_range(name, f"{name} for token {token} must be between -100 and 100")
    return None


def _frozen(value: Any) -> Any:
    """Copy a collection value so later caller mutation cannot reach the request."""
    if isinstance(value, str) or value is None:
        return value
    if isinstance(value, Mapping):
        return {str(k): v for k, v in value.items()}
    if isinstance(value, Iterable):
        return tuple(value)
    return value


# === Base Builder ===

class _RequestBuilder(Generic[R]):
    """Accumulates fields for one request type and validates them on build."""

    _request_type: type
    _required: tuple[str, ...] = ()
    _checks: dict[str, Check] = {}

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}

    def _set(self, name: str, value: Any) -> Any:
        self._fields[name] = value
        return self

    def _check_combined(self, values: dict[str, Any]) -> ValidationError | None:
        """Constraints spanning more than one field."""
        return None

    def build(self) -> Result[R, ValidationError]:
        """Validate the accumulated fields and produce an immutable request."""
        values = {name: _frozen(v) for name, v in self._fields.items() if v is not None}

        for name in self._required:
            if name not in values:
                return Err(_missing(name))

        for f in fields(self._request_type):
            if f.name not in values:
                continue
            check = self._checks.get(f.name)
            error = check(f.name, values[f.name]) if check else None
            if error is not None:
                return Err(error)

        error = self._check_combined(values)
        if error is not None:
            return Err(error)

        return Ok(self._request_type(**values))


# === Builders ===

class CompletionRequestBuilder(_RequestBuilder[CompletionRequest]):
    """Builder for ``CompletionRequest``. Requires ``model``."""

    _request_type = CompletionRequest
    _required = ("model",)
    _checks = {
        "model": _is_string,
        "prompt": _text_or_list(),
        "suffix": _is_string,
        "max_tokens": _int_between(1),
        "temperature": _between(0, 2),
        "top_p": _between(0, 1),
        "n": _int_between(1),
        "logprobs": _int_between(0, 5),
        "echo": _is_flag,
        "stop": _text_or_list(MAX_STOP_SEQUENCES),
        "presence_penalty": _between(-2, 2),
        "frequency_penalty": _between(-2, 2),
        "best_of": _int_between(1),
        "logit_bias": _logit_bias,
        "user": _is_string,
    }

    def _check_combined(self, values: dict[str, Any]) -> ValidationError | None:
        best_of, n = values.get("best_of"), values.get("n")
        if best_of is not None and n is not None and best_of < n:
            return _out_of_range("best_of", f"best_of must be at least n ({n}), got {best_of}")
        return None

    def model(self, model: str) -> CompletionRequestBuilder:
        return self._set("model", model)

    def prompt(self, prompt: str | Iterable[str]) -> CompletionRequestBuilder:
        return self._set("prompt", prompt)

    def suffix(self, suffix: str) -> CompletionRequestBuilder:
        return self._set("suffix", suffix)

    def max_tokens(self, max_tokens: int) -> CompletionRequestBuilder:
        return self._set("max_tokens", max_tokens)

    def temperature(self, temperature: float) -> CompletionRequestBuilder:
        return self._set("temperature", temperature)

    def top_p(self, top_p: float) -> CompletionRequestBuilder:
        return self._set("top_p", top_p)

    def n(self, n: int) -> CompletionRequestBuilder:
        return self._set("n", n)

    def logprobs(self, logprobs: int) -> CompletionRequestBuilder:
        return self._set("logprobs", logprobs)

    def echo(self, echo: bool) -> CompletionRequestBuilder:
        return self._set("echo", echo)

    def stop(self, stop: str | Iterable[str]) -> CompletionRequestBuilder:
        return self._set("stop", stop)

    def presence_penalty(self, presence_penalty: float) -> CompletionRequestBuilder:
        return self._set("presence_penalty", presence_penalty)

    def frequency_penalty(self, frequency_penalty: float) -> CompletionRequestBuilder:
        return self._set("frequency_penalty", frequency_penalty)

    def best_of(self, best_of: int) -> CompletionRequestBuilder:
        return self._set("best_of", best_of)

    def logit_bias(self, logit_bias: Mapping[str, int]) -> CompletionRequestBuilder:
        return self._set("logit_bias", logit_bias)

    def user(self, user: str) -> CompletionRequestBuilder:
        return self._set("user", user)


class EditRequestBuilder(_RequestBuilder[EditRequest]):
    """Builder for ``EditRequest``. Requires ``model`` and ``instruction``."""

    _request_type = EditRequest
    _required = ("model", "instruction")
    _checks = {
        "model": _is_string,
        "input": _is_string,
        "instruction": _is_string,
        "n": _int_between(1),
        "temperature": _between(0, 2),
        "top_p": _between(0, 1),
    }

    def model(self, model: str) -> EditRequestBuilder:
        return self._set("model", model)

    def input(self, input: str) -> EditRequestBuilder:
        return self._set("input", input)

    def instruction(self, instruction: str) -> EditRequestBuilder:
        return self._set("instruction", instruction)

    def n(self, n: int) -> EditRequestBuilder:
        return self._set("n", n)

    def temperature(self, temperature: float) -> EditRequestBuilder:
        return self._set("temperature", temperature)

    def top_p(self, top_p: float) -> EditRequestBuilder:
        return self._set("top_p", top_p)


def _image_prompt(name: str, value: Any) -> ValidationError | None:
    error = _is_string(name, value)
    if error is None and len(value) > MAX_IMAGE_PROMPT_LENGTH:
        return _out_of_range(
            name, f"{name} must be at most {MAX_IMAGE_PROMPT_LENGTH} characters, got {len(value)}"
        )
    return error


class CreateImageRequestBuilder(_RequestBuilder[CreateImageRequest]):
    """Builder for ``CreateImageRequest``. Requires ``prompt``."""

    _request_type = CreateImageRequest
    _required = ("prompt",)
    _checks = {
        "prompt": _image_prompt,
        "n": _int_between(1, 10),
        "size": _one_of(s.value for s in ImageSize),
        "response_format": _one_of(f.value for f in ImageResponseFormat),
        "user": _is_string,
    }

    def prompt(self, prompt: str) -> CreateImageRequestBuilder:
        return self._set("prompt", prompt)

    def n(self, n: int) -> CreateImageRequestBuilder:
        return self._set("n", n)

    def size(self, size: ImageSize | str) -> CreateImageRequestBuilder:
        return self._set("size", size)

    def response_format(
        self, response_format: ImageResponseFormat | str
    ) -> CreateImageRequestBuilder:
        return self._set("response_format", response_format)

    def user(self, user: str) -> CreateImageRequestBuilder:
        return self._set("user", user)
