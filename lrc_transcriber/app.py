from __future__ import annotations

import enum
import logging
from pathlib import Path

from lrc_transcriber.lrc.model import LyricDocument
from lrc_transcriber.lrc.parse import parse_lrc
from lrc_transcriber.transcribe.client import TranscriptionClient
from lrc_transcriber.transcribe.errors import TranscriptionError
from lrc_transcriber.transcribe.types import TranscriptionRequest

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024


class AppState(enum.Enum):
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    READY = "READY"
    ERROR = "ERROR"


class TranscriptionSession:
    """
    One audio file and its editable transcript:
    load -> transcribe -> (edit -> preview)* -> save.

    The raw text is the source of truth; `document` re-parses it on access.
    """

    def __init__(self, client: TranscriptionClient, *, max_upload_bytes: int | None = DEFAULT_MAX_UPLOAD_BYTES):
        self.client = client
        self.max_upload_bytes = max_upload_bytes
        self.state = AppState.IDLE
        self.audio: TranscriptionRequest | None = None
        self.source_name: str | None = None
        self.raw_text = ""
        self.error: str | None = None
        self._generation = 0

    def load_audio(self, path: Path, mime_type: str | None = None) -> None:
        # raises AudioRejected and leaves the session untouched
        self.audio = TranscriptionRequest.from_path(path, mime_type, max_bytes=self.max_upload_bytes)
        self.source_name = path.name
        self.raw_text = ""
        self.error = None
        # results of a transcription started for the previous file are dropped
        self._generation += 1
        self.state = AppState.IDLE
        logger.debug("Loaded %s (%s)", path, self.audio.mime_type)

    def transcribe(self, max_retries: int | None = None) -> str:
        if self.audio is None:
            raise RuntimeError("No audio loaded")

        self._generation += 1
        generation = self._generation
        self.state = AppState.PROCESSING
        self.error = None
        try:
            text = self.client.transcribe(self.audio, max_retries)
        except (TranscriptionError, ValueError) as e:
            if generation == self._generation:
                self.state = AppState.ERROR
                self.error = str(e)
            raise

        if generation != self._generation:
            logger.info("Discarding stale transcription result")
            return text
        self.raw_text = text
        self.state = AppState.READY
        return text

    def edit(self, raw_text: str) -> None:
        self.raw_text = raw_text
        if self.state in (AppState.IDLE, AppState.ERROR) and raw_text:
            self.state = AppState.READY

    @property
    def document(self) -> LyricDocument:
        return parse_lrc(self.raw_text)

    def default_output_name(self) -> str:
        if not self.source_name:
            return "lyrics.lrc"
        return Path(self.source_name).stem + ".lrc"

    def save(self, path: Path | None = None) -> Path:
        if not self.raw_text.strip():
            raise ValueError("Transcript is empty")
        out = path or Path(self.default_output_name())
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(self.raw_text.rstrip("\n") + "\n", encoding="utf-8")
        logger.info("Wrote %s", out)
        return out
