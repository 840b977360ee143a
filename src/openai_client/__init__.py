"""
openai-client - typed async client for the OpenAI API

Usage:
    from openai_client import OpenAiClient, OpenAiConfig, EditRequestBuilder

    client = OpenAiClient(OpenAiConfig("sk-..."))  # or OpenAiClient.from_env()

    request = (
        EditRequestBuilder()
        .model("text-davinci-edit-001")
        .input("What day of the wek is it?")
        .instruction("Fix the spelling mistakes")
        .build()
    )
    if request.is_err():
        print(f"Invalid request: {request.error.message}")

    result = await client.create_edit(request.value)
    if result.is_ok():
        print(result.value.choices[0].text)
    else:
        print(f"Error ({result.error.kind.value}): {result.error.message}")

Supported operations:
    get_models, get_model, create_completion, create_edit, create_image
"""

from .builders import (
    CompletionRequestBuilder,
    CreateImageRequestBuilder,
    EditRequestBuilder,
)
from .client import OpenAiClient
from .config import DEFAULT_BASE_URL, OpenAiConfig
from .errors import (
    ApiError,
    ClientError,
    ConfigError,
    DecodeError,
    ErrorKind,
    OpenAiClientException,
    TransportError,
    ValidationError,
)
from .protocols import OpenAiApi
from .result import Err, Ok, Result
from .types import (
    CompletionRequest,
    CreateImageRequest,
    EditRequest,
    ImageItem,
    ImageResponseFormat,
    ImageResult,
    ImageSize,
    Model,
    ModelList,
    ModelPermission,
    TextChoice,
    TextResult,
    Usage,
)

__all__ = [
    # Client
    "OpenAiClient",
    "OpenAiApi",
    "OpenAiConfig",
    "DEFAULT_BASE_URL",
    # Builders
    "CompletionRequestBuilder",
    "EditRequestBuilder",
    "CreateImageRequestBuilder",
    # Requests
    "CompletionRequest",
    "EditRequest",
    "CreateImageRequest",
    "ImageSize",
    "ImageResponseFormat",
    # Responses
    "TextResult",
    "TextChoice",
    "Usage",
    "ImageResult",
    "ImageItem",
    "Model",
    "ModelList",
    "ModelPermission",
    # Errors
    "ErrorKind",
    "ClientError",
    "ConfigError",
    "ValidationError",
    "TransportError",
    "ApiError",
    "DecodeError",
    "OpenAiClientException",
    # Result
    "Result",
    "Ok",
    "Err",
]

__version__ = "0.1.0"
