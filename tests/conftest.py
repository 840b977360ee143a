"""Pytest fixtures for all test modules."""
import asyncio
from typing import Any, Optional

import httpx
import pytest

from openai_client import OpenAiClient, OpenAiConfig


class StubTransport(httpx.MockTransport):
    """Mock transport that replies with one canned response and records requests."""

    def __init__(
        self,
        status_code: int = 200,
        json: Any = None,
        content: bytes = b"",
        exc: Optional[Exception] = None,
    ):
        """Initialize stub transport."""
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if exc is not None:
                raise exc
            if json is not None:
                return httpx.Response(status_code, json=json)
            return httpx.Response(status_code, content=content)

        super().__init__(handler)


class SlowTransport(httpx.AsyncBaseTransport):
    """Transport that holds each request open briefly and records closes."""

    def __init__(self, json: Any, delay: float = 0.01):
        """Initialize slow transport."""
        self.json = json
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.closes: list[int] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return httpx.Response(200, json=self.json)
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        self.closes.append(self.in_flight)


@pytest.fixture
def config():
    """Configuration pointing at a fake host with a test token."""
    return OpenAiConfig("sk-test", base_url="https://api.test")


@pytest.fixture
def make_client(config):
    """
    Build a client whose every exchange goes through a StubTransport.

    Returns:
        callable: (**stub kwargs) -> (OpenAiClient, StubTransport)
    """

    def factory(client_config: Optional[OpenAiConfig] = None, **kwargs):
        transport = StubTransport(**kwargs)
        client = OpenAiClient(client_config or config, transport=transport)
        return client, transport

    return factory


@pytest.fixture
def edit_response():
    """Success body of POST /v1/edits."""
    return {
        "object": "edit",
        "created": 1589478378,
        "choices": [{"text": "What day of the week is it?", "index": 0}],
        "usage": {"prompt_tokens": 25, "completion_tokens": 32, "total_tokens": 57},
    }


@pytest.fixture
def completion_response():
    """Success body of POST /v1/completions."""
    return {
        "id": "cmpl-uqkvlQyYK7bGYrRHQ0eXlWi7",
        "object": "text_completion",
        "created": 1589478378,
        "model": "text-davinci-003",
        "choices": [
            {
                "text": " sleep for a week.",
                "index": 0,
                "logprobs": None,
                "finish_reason": "length",
            }
        ],
        "usage": {"prompt_tokens": 5, "completion_tokens": 7, "total_tokens": 12},
    }


@pytest.fixture
def model_response():
    """Success body of GET /v1/models/text-davinci-003."""
    return {
        "id": "text-davinci-003",
        "object": "model",
        "created": 1669599635,
        "owned_by": "openai-internal",
        "permission": [
            {
                "id": "modelperm-jepinXYt59ncUQrjQEIUEDyC",
                "object": "model_permission",
                "created": 1688551385,
                "allow_create_engine": False,
                "allow_sampling": True,
                "allow_logprobs": True,
                "allow_search_indices": False,
                "allow_view": True,
                "allow_fine_tuning": False,
                "organization": "*",
                "group": None,
                "is_blocking": False,
            }
        ],
        "root": "text-davinci-003",
        "parent": None,
    }


@pytest.fixture
def models_response(model_response):
    """Success body of GET /v1/models."""
    return {
        "object": "list",
        "data": [
            model_response,
            {
                "id": "text-davinci-edit-001",
                "object": "model",
                "created": 1649809179,
                "owned_by": "openai",
            },
        ],
    }


@pytest.fixture
def image_response():
    """Success body of POST /v1/images/generations."""
    return {
        "created": 1589478378,
        "data": [
            {"url": "https://images.test/otter-1.png"},
            {"url": "https://images.test/otter-2.png"},
        ],
    }


@pytest.fixture
def error_response():
    """Error envelope returned for a bad model name."""
    return {
        "error": {
            "message": "The model `text-davinci-999` does not exist",
            "type": "invalid_request_error",
            "param": "model",
            "code": "model_not_found",
        }
    }


@pytest.fixture
def slow_transport():
    """SlowTransport answering every request with an empty model list."""
    return SlowTransport(json={"object": "list", "data": []})
