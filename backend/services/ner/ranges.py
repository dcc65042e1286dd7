"""Call-scoped set of claimed ``[start, end)`` spans.

Extractors run in priority order and must query before inserting, so the
stored intervals never overlap and stay sorted by start offset.
"""

from bisect import bisect_left, insort


class ProcessedRanges:
    def __init__(self) -> None:
        self._spans: list[tuple[int, int]] = []

    def __len__(self) -> int:
        return len(self._spans)

    def is_claimed(self, start: int, end: int) -> bool:
        """True if ``[start, end)`` intersects any claimed span."""
        idx = bisect_left(self._spans, (start, start))
        # Only the neighbours on either side can intersect a disjoint sorted set.
        if idx > 0 and self._spans[idx - 1][1] > start:
            return True
        if idx < len(self._spans) and self._spans[idx][0] < end:
            return True
        return False

    def claim(self, start: int, end: int) -> bool:
        """Claim ``[start, end)`` if it is free. Returns whether it was claimed."""
        if end <= start or self.is_claimed(start, end):
            return False
        insort(self._spans, (start, end))
        return True

    def snapshot(self) -> list[tuple[int, int]]:
        return list(self._spans)

    def restore(self, spans: list[tuple[int, int]]) -> None:
        """Roll back to a previous :meth:`snapshot`."""
        self._spans = list(spans)
