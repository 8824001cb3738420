from __future__ import annotations

import logging
import random
import re
import time
from typing import Callable

from .endpoint import ModelEndpoint
from .errors import EmptyResult, RemoteFailure, RetryExhausted
from .types import TranscriptionRequest

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """\
You are an expert audio transcription system. Transcribe the entire audio file provided. \
You MUST output the transcription in the LRC (Lyric) format.

LRC format rules:
- Every line must start with a time tag in the format [mm:ss.xx], where mm is minutes, \
ss is seconds, and xx are hundredths of a second.
- Timestamps must be chronological.
- Do not include any metadata tags like [ar:], [ti:], etc.
- If there is a pause, use an empty line with a timestamp.
- Only output the raw LRC text. Do not include any conversational text, explanations, \
or markdown fences (e.g., ```lrc)."""

USER_PROMPT = (
    "Please transcribe the attached audio recording and format the output "
    "strictly as raw LRC lyrics file content."
)

# ```lrc / ```text / ``` opening a line, ``` closing one
_OPEN_FENCE_RE = re.compile(r"^[ \t]*```[\w-]*", re.MULTILINE)
_CLOSE_FENCE_RE = re.compile(r"```[ \t]*$", re.MULTILINE)


def strip_code_fences(text: str) -> str:
    text = _CLOSE_FENCE_RE.sub("", text)
    return _OPEN_FENCE_RE.sub("", text).strip()


class TranscriptionClient:
    def __init__(
        self,
        endpoint: ModelEndpoint,
        *,
        max_retries: int = 5,
        backoff_base_s: float = 1.0,
        jitter_s: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        rand: Callable[[float, float], float] = random.uniform,
    ):
        self.endpoint = endpoint
        self.max_retries = max_retries
        self.backoff_base_s = backoff_base_s
        self.jitter_s = jitter_s
        self._sleep = sleep
        self._rand = rand

    def backoff_delay(self, attempt: int) -> float:
        # attempt is 0-indexed: ~1s, 2s, 4s, 8s, 16s before jitter
        return (2**attempt) * self.backoff_base_s + self._rand(0.0, self.jitter_s)

    def transcribe(self, request: TranscriptionRequest, max_retries: int | None = None) -> str:
        """
        Send one transcription request and return raw LRC text.

        Only rate limiting (HTTP 429) is retried, with exponential backoff.
        Raises RetryExhausted, RemoteFailure or EmptyResult; nothing partial
        is ever returned.
        """
        attempts = self.max_retries if max_retries is None else max_retries
        if attempts < 1:
            raise ValueError("max_retries must be a positive integer")

        for attempt in range(attempts):
            logger.info("Transcription request (attempt %s/%s, %s)", attempt + 1, attempts, request.mime_type)
            res = self.endpoint.generate(request, system_instruction=SYSTEM_INSTRUCTION, prompt=USER_PROMPT)

            if res.rate_limited:
                if attempt == attempts - 1:
                    break
                delay = self.backoff_delay(attempt)
                logger.warning(
                    "Rate limited (attempt %s/%s), retrying in %.2fs", attempt + 1, attempts, delay
                )
                self._sleep(delay)
                continue

            if not res.ok:
                message = res.error_message or f"API request failed with status {res.status_code}"
                raise RemoteFailure(message, status_code=res.status_code)

            text = strip_code_fences(res.text or "")
            if not text:
                raise EmptyResult("Received an empty response from the AI model.")
            logger.info("Transcription finished: %s lines", text.count("\n") + 1)
            return text

        raise RetryExhausted(attempts)
