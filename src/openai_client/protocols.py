"""Protocol interface for OpenAI API clients."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .errors import ClientError
from .result import Result
from .types import (
    CompletionRequest,
    CreateImageRequest,
    EditRequest,
    ImageResult,
    Model,
    ModelList,
    TextResult,
)


@runtime_checkable
class OpenAiApi(Protocol):
    """One async method per supported API operation.

    ``OpenAiClient`` implements it over HTTP; test doubles and alternative
    transports can implement it directly.
    """

    async def get_models(self) -> Result[ModelList, ClientError]:
        ...

    async def get_model(self, model_id: str) -> Result[Model, ClientError]:
        ...

    async def create_completion(
        self, request: CompletionRequest
    ) -> Result[TextResult, ClientError]:
        ...

    async def create_edit(self, request: EditRequest) -> Result[TextResult, ClientError]:
        ...

    async def create_image(
        self, request: CreateImageRequest
    ) -> Result[ImageResult, ClientError]:
        ...
