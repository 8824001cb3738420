from __future__ import annotations

import base64
from pathlib import Path
from unittest.mock import patch

import pytest

from lrc_transcriber.app import AppState, TranscriptionSession
from lrc_transcriber.transcribe.client import TranscriptionClient
from lrc_transcriber.transcribe.errors import AudioTooLarge, EmptyResult, NotAudio, RetryExhausted
from tests.mocks.fake_endpoint import FakeEndpoint, ok


def _session(endpoint: FakeEndpoint) -> TranscriptionSession:
    return TranscriptionSession(TranscriptionClient(endpoint, sleep=lambda s: None))


@pytest.fixture
def audio(tmp_path):
    p = tmp_path / "My Song.mp3"
    p.write_bytes(b"ID3fake")
    return p


def test_load_audio_encodes_and_guesses_mime(audio):
    s = _session(FakeEndpoint([]))
    s.load_audio(audio)
    assert s.state is AppState.IDLE
    assert s.audio.mime_type == "audio/mpeg"
    assert base64.b64decode(s.audio.audio_base64) == b"ID3fake"


def test_unknown_extension_falls_back(tmp_path):
    p = tmp_path / "clip.unknownext"
    p.write_bytes(b"x")
    s = _session(FakeEndpoint([]))
    s.load_audio(p)
    assert s.audio.mime_type == "audio/mpeg"
    s.load_audio(p, "audio/wav")
    assert s.audio.mime_type == "audio/wav"


def test_transcribe_without_audio():
    with pytest.raises(RuntimeError):
        _session(FakeEndpoint([])).transcribe()


def test_transcribe_success_then_edit_and_save(audio, tmp_path):
    s = _session(FakeEndpoint([ok("[00:02.00]b\n[00:01.00]a")]))
    s.load_audio(audio)
    s.transcribe()
    assert s.state is AppState.READY
    assert [ln.text for ln in s.document] == ["a", "b"]

    s.edit("[00:01.00]a\n[00:03.00]c")
    assert [ln.text for ln in s.document] == ["a", "c"]

    assert s.default_output_name() == "My Song.lrc"
    out = s.save(tmp_path / "out" / "x.lrc")
    assert out.read_text(encoding="utf-8") == "[00:01.00]a\n[00:03.00]c\n"


def test_transcribe_failure_sets_error(audio):
    s = _session(FakeEndpoint.always_rate_limited())
    s.load_audio(audio)
    with pytest.raises(RetryExhausted):
        s.transcribe(max_retries=2)
    assert s.state is AppState.ERROR
    assert "2 attempts" in s.error
    assert s.raw_text == ""


def test_retry_after_error(audio):
    s = _session(FakeEndpoint([ok(""), ok("[00:01.00]ok")]))
    s.load_audio(audio)
    with pytest.raises(EmptyResult):
        s.transcribe()
    assert s.state is AppState.ERROR
    s.transcribe()
    assert s.state is AppState.READY
    assert s.error is None


def test_stale_result_is_discarded(audio, tmp_path):
    other = tmp_path / "other.wav"
    other.write_bytes(b"RIFF")

    class SwitchingEndpoint(FakeEndpoint):
        def generate(self, request, *, system_instruction, prompt):
            # user picks another file while the request is in flight
            session.load_audio(other)
            return super().generate(request, system_instruction=system_instruction, prompt=prompt)

    session = _session(SwitchingEndpoint([ok("[00:01.00]old")]))
    session.load_audio(audio)
    assert session.transcribe() == "[00:01.00]old"
    assert session.raw_text == ""
    assert session.state is AppState.IDLE
    assert session.source_name == "other.wav"


def test_save_refuses_empty():
    s = _session(FakeEndpoint([]))
    assert s.default_output_name() == "lyrics.lrc"
    with pytest.raises(ValueError):
        s.save()


def test_non_audio_file_rejected(audio, tmp_path):
    notes = tmp_path / "notes.txt"
    notes.write_text("not music", encoding="utf-8")
    s = _session(FakeEndpoint([]))
    s.load_audio(audio)

    with pytest.raises(NotAudio) as exc:
        s.load_audio(notes)
    assert exc.value.mime_type == "text/plain"
    assert isinstance(exc.value, ValueError)
    # previous file stays loaded
    assert s.source_name == "My Song.mp3"

    with pytest.raises(NotAudio):
        s.load_audio(audio, "text/plain")


def test_oversized_file_rejected_without_reading(tmp_path):
    big = tmp_path / "long.wav"
    big.write_bytes(b"\0" * 11)
    s = TranscriptionSession(TranscriptionClient(FakeEndpoint([])), max_upload_bytes=10)

    with patch.object(Path, "read_bytes", side_effect=AssertionError("file was read")):
        with pytest.raises(AudioTooLarge) as exc:
            s.load_audio(big)
    assert (exc.value.size_bytes, exc.value.max_bytes) == (11, 10)
    assert s.audio is None

    big.write_bytes(b"\0" * 10)
    s.load_audio(big)
    assert s.audio.mime_type.startswith("audio/")


def test_default_upload_limit_is_20_mib(tmp_path):
    s = _session(FakeEndpoint([]))
    assert s.max_upload_bytes == 20 * 1024 * 1024
