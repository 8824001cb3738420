from __future__ import annotations

import base64
from dataclasses import dataclass
import mimetypes
from pathlib import Path

from .errors import AudioTooLarge, NotAudio

DEFAULT_MIME_TYPE = "audio/mpeg"


@dataclass(frozen=True, slots=True)
class TranscriptionRequest:
    audio_base64: str
    mime_type: str

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "TranscriptionRequest":
        return cls(audio_base64=base64.b64encode(data).decode("ascii"), mime_type=mime_type)

    @classmethod
    def from_path(
        cls, path: Path, mime_type: str | None = None, *, max_bytes: int | None = None
    ) -> "TranscriptionRequest":
        if mime_type is None:
            guessed, _enc = mimetypes.guess_type(path.name)
            mime_type = guessed or DEFAULT_MIME_TYPE
        if not mime_type.lower().startswith("audio/"):
            raise NotAudio(mime_type)
        # size comes from stat; an oversized file is never read
        size = path.stat().st_size
        if max_bytes is not None and size > max_bytes:
            raise AudioTooLarge(size, max_bytes)
        return cls.from_bytes(path.read_bytes(), mime_type)


@dataclass(frozen=True, slots=True)
class EndpointResponse:
    status_code: int
    text: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429
