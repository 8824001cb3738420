from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, slots=True)
class LyricLine:
    timestamp_s: float
    text: str
    raw_tag: str


@dataclass(frozen=True, slots=True)
class LyricDocument:
    lines: tuple[LyricLine, ...] = ()

    def __iter__(self) -> Iterator[LyricLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)
