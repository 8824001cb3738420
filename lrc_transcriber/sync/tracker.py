from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from lrc_transcriber.lrc.model import LyricDocument


@dataclass(slots=True)
class LineTracker:
    """
    Current-line lookup for a playback position: O(log n) via bisect.
    """

    times_s: list[float]
    last_idx: int = -1

    @classmethod
    def from_document(cls, doc: LyricDocument) -> "LineTracker":
        return cls(times_s=[ln.timestamp_s for ln in doc.lines])

    def current_index(self, position_s: float) -> int:
        i = bisect_right(self.times_s, position_s) - 1
        return i if i >= 0 else -1

    def changed_index(self, position_s: float) -> int | None:
        i = self.current_index(position_s)
        if i != self.last_idx:
            self.last_idx = i
            return i
        return None
