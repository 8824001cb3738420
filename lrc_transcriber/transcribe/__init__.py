from .client import SYSTEM_INSTRUCTION, USER_PROMPT, TranscriptionClient, strip_code_fences
from .endpoint import GeminiEndpoint, ModelEndpoint
from .errors import (
    AudioRejected,
    AudioTooLarge,
    EmptyResult,
    NotAudio,
    RateLimited,
    RemoteFailure,
    RetryExhausted,
    TranscriptionError,
)
from .types import EndpointResponse, TranscriptionRequest

__all__ = [
    "AudioRejected",
    "AudioTooLarge",
    "EmptyResult",
    "EndpointResponse",
    "GeminiEndpoint",
    "ModelEndpoint",
    "NotAudio",
    "RateLimited",
    "RemoteFailure",
    "RetryExhausted",
    "SYSTEM_INSTRUCTION",
    "TranscriptionClient",
    "TranscriptionError",
    "TranscriptionRequest",
    "USER_PROMPT",
    "strip_code_fences",
]
