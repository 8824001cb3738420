from __future__ import annotations

import json

from .model import LyricDocument


def format_lrc(doc: LyricDocument) -> str:
    # tags are emitted verbatim and in document order; sorting is parse_lrc's job
    return "\n".join(f"{ln.raw_tag}{ln.text}" for ln in doc.lines)


def export_json(doc: LyricDocument) -> str:
    return json.dumps(
        [{"t": ln.timestamp_s, "tag": ln.raw_tag, "text": ln.text} for ln in doc.lines],
        ensure_ascii=False,
        indent=2,
    )


def _fmt_srt_time(seconds: float) -> str:
    # HH:MM:SS,mmm
    ms = int(round(seconds * 1000))
    h, rem = divmod(ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms2:03d}"


def export_srt(doc: LyricDocument, last_line_duration_s: float = 2.0) -> str:
    """
    End time is next start time, last line ends at +last_line_duration_s.
    Pause markers (empty text) end the previous cue and are not emitted.
    """
    lines = doc.lines
    out: list[str] = []
    n = 0
    for i, ln in enumerate(lines):
        if not ln.text:
            continue
        start = ln.timestamp_s
        if i + 1 < len(lines):
            end = max(lines[i + 1].timestamp_s, start + 0.001)
        else:
            end = start + last_line_duration_s
        n += 1
        out.append(str(n))
        out.append(f"{_fmt_srt_time(start)} --> {_fmt_srt_time(end)}")
        out.append(ln.text)
        out.append("")
    return "\n".join(out)
