from .export import export_json, export_srt, format_lrc
from .model import LyricDocument, LyricLine
from .parse import LrcParseStats, parse_lrc, parse_lrc_with_stats

__all__ = [
    "LrcParseStats",
    "LyricDocument",
    "LyricLine",
    "export_json",
    "export_srt",
    "format_lrc",
    "parse_lrc",
    "parse_lrc_with_stats",
]
