from __future__ import annotations

import logging
from typing import Any

import requests

from .errors import RemoteFailure
from .types import EndpointResponse, TranscriptionRequest

logger = logging.getLogger(__name__)


class ModelEndpoint:
    name: str

    def generate(
        self, request: TranscriptionRequest, *, system_instruction: str, prompt: str
    ) -> EndpointResponse:
        raise NotImplementedError


def _first_text(data: dict[str, Any]) -> str | None:
    candidates = data.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    for part in parts:
        text = part.get("text")
        if text:
            return str(text)
    return None


class GeminiEndpoint(ModelEndpoint):
    """
    Gemini REST `generateContent` over plain HTTPS.

    Only the status code, the first text part and `error.message` are used;
    deciding what to do with them is left to TranscriptionClient.
    """

    name = "gemini"

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str,
        timeout_s: float,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    @staticmethod
    def build_payload(request: TranscriptionRequest, *, system_instruction: str, prompt: str) -> dict[str, Any]:
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": prompt},
                        {"inlineData": {"mimeType": request.mime_type, "data": request.audio_base64}},
                    ],
                }
            ],
            "systemInstruction": {"parts": [{"text": system_instruction}]},
        }

    def generate(
        self, request: TranscriptionRequest, *, system_instruction: str, prompt: str
    ) -> EndpointResponse:
        payload = self.build_payload(request, system_instruction=system_instruction, prompt=prompt)
        try:
            r = self.session.post(
                self.url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            raise RemoteFailure(f"Request to {self.model} failed: {e}") from e

        logger.debug("%s responded with HTTP %s", self.model, r.status_code)
        try:
            data = r.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not 200 <= r.status_code < 300:
            err = data.get("error") or {}
            message = err.get("message") if isinstance(err, dict) else None
            return EndpointResponse(status_code=r.status_code, error_message=message)

        return EndpointResponse(status_code=r.status_code, text=_first_text(data))
