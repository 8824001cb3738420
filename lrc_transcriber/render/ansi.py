from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass
from typing import TextIO

import colorama
from colorama import Fore, Style

from lrc_transcriber.i18n import t
from lrc_transcriber.lrc.model import LyricDocument


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = Fore.CYAN + Style.BRIGHT
    current: str = Fore.GREEN + Style.BRIGHT
    tag: str = Style.DIM
    dim: str = Fore.LIGHTBLACK_EX
    warning: str = Fore.YELLOW + Style.BRIGHT
    reset: str = Style.RESET_ALL


class AnsiRenderer:
    """
    Static preview of a parsed transcript: tag column + text, the line
    active at the playback position highlighted.
    """

    def __init__(self, theme: Theme | None = None, color: bool = True):
        self.theme = theme or Theme()
        self.color = color
        if color:
            colorama.just_fix_windows_console()

    def _paint(self, style: str, s: str) -> str:
        if not self.color:
            return s
        return f"{style}{s}{self.theme.reset}"

    def format_lines(self, doc: LyricDocument, current_idx: int = -1) -> list[str]:
        cols, _rows = shutil.get_terminal_size(fallback=(80, 24))
        tag_w = max((len(ln.raw_tag) for ln in doc.lines), default=0)

        out: list[str] = []
        for i, ln in enumerate(doc.lines):
            # pause markers have no text
            text = ln.text or "♪"
            text = text[: max(cols - tag_w - 2, 1)]
            tag = self._paint(self.theme.tag, ln.raw_tag.ljust(tag_w))
            if i == current_idx:
                out.append(f"{tag}  {self._paint(self.theme.current, text)}")
            else:
                out.append(f"{tag}  {self._paint(self.theme.dim, text)}")
        return out

    def render(
        self,
        title: str,
        doc: LyricDocument,
        current_idx: int = -1,
        stream: TextIO | None = None,
    ) -> None:
        stream = stream or sys.stdout
        out = [self._paint(self.theme.title, f"♫ {title} ♫")]
        if doc.lines:
            out.extend(self.format_lines(doc, current_idx))
        else:
            out.append(self._paint(self.theme.warning, t("no_lyric_lines")))
        stream.write("\n".join(out) + "\n")
        stream.flush()
