from __future__ import annotations

from pathlib import Path
import typer

from lrc_transcriber.app import TranscriptionSession
from lrc_transcriber.config import AppConfig, ConfigError, load_config, save_config_lang
from lrc_transcriber.i18n import normalize_lang, set_lang, t
from lrc_transcriber.logging_setup import setup_logging
from lrc_transcriber.lrc.export import export_json, export_srt, format_lrc
from lrc_transcriber.lrc.parse import parse_lrc, parse_lrc_with_stats
from lrc_transcriber.render.ansi import AnsiRenderer
from lrc_transcriber.sync.tracker import LineTracker
from lrc_transcriber.transcribe.client import TranscriptionClient
from lrc_transcriber.transcribe.endpoint import GeminiEndpoint
from lrc_transcriber.transcribe.errors import (
    AudioTooLarge,
    EmptyResult,
    NotAudio,
    RemoteFailure,
    RetryExhausted,
)


app = typer.Typer(no_args_is_help=True, add_completion=False)


@app.callback()
def _init_lang() -> None:
    # every command speaks the configured language, including its usage errors
    set_lang(load_config().lang)


def build_client(cfg: AppConfig) -> TranscriptionClient:
    endpoint = GeminiEndpoint(
        api_key=cfg.require_api_key(),
        model=cfg.model,
        base_url=cfg.api_base_url,
        timeout_s=cfg.request_timeout_s,
    )
    return TranscriptionClient(
        endpoint,
        max_retries=cfg.max_retries,
        backoff_base_s=cfg.backoff_base_s,
        jitter_s=cfg.jitter_s,
    )


def _mb(n: int) -> str:
    return f"{n / (1024 * 1024):.1f}"


@app.command()
def transcribe(
    audio_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Audio file (mp3, wav, ...)"),
    out: Path | None = typer.Option(None, "--out", help="Output .lrc file (default: <audio name>.lrc)"),
    model: str | None = typer.Option(None, "--model", help="Model name, e.g. gemini-2.5-flash"),
    mime_type: str | None = typer.Option(None, "--mime-type", help="Override detected MIME type"),
    max_retries: int | None = typer.Option(None, "--max-retries", min=1, help="Attempts on rate limiting"),
    print_only: bool = typer.Option(False, "--print", help="Print LRC to stdout instead of saving"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """
    Transcribe an audio file into synced LRC lyrics.
    """
    cfg = load_config()
    if model is not None:
        cfg = cfg.__class__(**{**cfg.__dict__, "model": model})
    setup_logging(debug)

    try:
        client = build_client(cfg)
    except ConfigError:
        typer.echo(t("no_api_key"), err=True)
        raise typer.Exit(code=1)

    session = TranscriptionSession(client, max_upload_bytes=cfg.max_upload_bytes)
    try:
        session.load_audio(audio_path, mime_type)
    except NotAudio as e:
        typer.echo(t("not_audio", mime=e.mime_type), err=True)
        raise typer.Exit(code=1)
    except AudioTooLarge as e:
        typer.echo(t("audio_too_large", size_mb=_mb(e.size_bytes), limit_mb=_mb(e.max_bytes)), err=True)
        raise typer.Exit(code=1)
    typer.echo(t("transcribing", name=audio_path.name), err=True)

    try:
        session.transcribe(max_retries)
    except RetryExhausted as e:
        typer.echo(t("rate_limited", attempts=e.attempts), err=True)
        raise typer.Exit(code=1)
    except EmptyResult:
        typer.echo(t("empty_result"), err=True)
        raise typer.Exit(code=1)
    except RemoteFailure as e:
        typer.echo(t("remote_failure", message=str(e)), err=True)
        raise typer.Exit(code=1)

    if print_only:
        typer.echo(session.raw_text)
        return

    if out is None:
        out = audio_path.with_name(session.default_output_name())
    saved = session.save(out)
    typer.echo(t("saved_to", path=str(saved)))


@app.command()
def parse(lrc_path: Path):
    """Parse LRC and print stats."""
    text = lrc_path.read_text(encoding="utf-8")
    doc, stats = parse_lrc_with_stats(text)
    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"lines_with_timestamps={stats.lines_with_timestamps}")
    typer.echo(f"lines_ignored={stats.lines_ignored}")
    typer.echo(f"events_total={stats.events_total}")
    if doc.lines:
        typer.echo(f"duration_s={doc.lines[-1].timestamp_s:.2f}")


@app.command()
def export(
    lrc_path: Path,
    fmt: str = typer.Option("lrc", "--format", case_sensitive=False, help="lrc|srt|json"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
):
    """Export LRC to LRC (sorted, untagged lines dropped), SRT or JSON."""
    text = lrc_path.read_text(encoding="utf-8")
    doc = parse_lrc(text)
    fmt_l = fmt.lower()
    if fmt_l == "json":
        data = export_json(doc) + "\n"
    elif fmt_l == "lrc":
        data = format_lrc(doc) + "\n"
    elif fmt_l == "srt":
        data = export_srt(doc)
    else:
        raise typer.BadParameter(t("bad_format"))

    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


@app.command()
def preview(
    lrc_path: Path,
    at: float | None = typer.Option(None, "--at", min=0.0, help="Highlight the line active at this second"),
    no_color: bool = typer.Option(False, "--no-color", help="Plain output"),
):
    """Show parsed lyrics with their timestamps."""
    doc = parse_lrc(lrc_path.read_text(encoding="utf-8"))
    current_idx = -1
    if at is not None:
        current_idx = LineTracker.from_document(doc).current_index(at)
    AnsiRenderer(color=not no_color).render(lrc_path.name, doc, current_idx=current_idx)


@app.command()
def config(
    lang: str = typer.Option(..., "--lang", help="Interface language: EN or RU"),
):
    """Persist CLI settings."""
    code = normalize_lang(lang)
    if code is None:
        raise typer.BadParameter(t("bad_lang"))
    save_config_lang(code)
    set_lang(code)
    typer.echo(t("lang_saved", lang=code))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
