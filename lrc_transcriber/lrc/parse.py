from __future__ import annotations

from dataclasses import dataclass
import re

from .model import LyricDocument, LyricLine

# [m:ss] / [mm:ss] / [mm:ss.x] / [mm:ss.xx] / [mm:ss.xxx], at the start of the line
_LINE_RE = re.compile(r"^(\[(\d{1,2}):(\d{2})(?:\.(\d{1,3}))?\])(.*)$")

# fraction digits -> divisor: tenths, hundredths, milliseconds
_FRACTION_DIVISORS = {1: 10, 2: 100, 3: 1000}


@dataclass(frozen=True, slots=True)
class LrcParseStats:
    lines_total: int
    events_total: int
    lines_with_timestamps: int
    lines_ignored: int


def _tag_to_seconds(minutes: str, seconds: str, frac: str | None) -> float:
    # no range check on seconds: [00:75.00] is 75s
    value = int(minutes) * 60 + int(seconds)
    if not frac:
        return float(value)
    return value + int(frac) / _FRACTION_DIVISORS[len(frac)]


def parse_lrc_with_stats(text: str | None) -> tuple[LyricDocument, LrcParseStats]:
    """
    Parse raw LRC text, keeping counts for CLI diagnostics.

    Lines that do not start with a timestamp tag (metadata, stray model
    chatter, blank lines) are dropped. The tag is kept verbatim in
    `raw_tag`, so formatting a parsed document reproduces the input lines.
    """
    lines: list[LyricLine] = []
    total = 0
    ignored = 0

    raw_lines = (text or "").split("\n")
    if raw_lines[-1] == "":
        # trailing newline, or no input at all
        raw_lines.pop()

    for raw in raw_lines:
        total += 1
        m = _LINE_RE.match(raw.strip())
        if not m:
            ignored += 1
            continue

        ts = _tag_to_seconds(m.group(2), m.group(3), m.group(4))
        lines.append(LyricLine(timestamp_s=ts, text=m.group(5).strip(), raw_tag=m.group(1)))

    # list.sort is stable: equal timestamps keep input order
    lines.sort(key=lambda ln: ln.timestamp_s)

    doc = LyricDocument(lines=tuple(lines))
    stats = LrcParseStats(
        lines_total=total,
        events_total=len(doc.lines),
        lines_with_timestamps=len(doc.lines),
        lines_ignored=ignored,
    )
    return doc, stats


def parse_lrc(text: str | None) -> LyricDocument:
    doc, _stats = parse_lrc_with_stats(text)
    return doc
