"""Row highlight classification.

``RowHighlighter`` turns a caller ``Classifier`` into an advisory
``Highlight`` per row. It only consults the classifier while highlighting is
switched on; the toggle is independent of whether a classifier exists.

``NewRowTracker`` models the short-lived "new" tag as an expiring map
``row id -> deadline``. Expiry is evaluated on read against an injectable
clock, so no timer thread is involved and tests can drive time explicitly.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from datagrid import settings
from datagrid.models import Classifier, Highlight

__all__ = ["NewRowTracker", "RowHighlighter", "coerce_highlight"]

T = TypeVar("T")
Clock = Callable[[], float]

_log = logging.getLogger(__name__)


def coerce_highlight(value: object) -> Highlight:
    """Normalize classifier output (``None``, str or ``Highlight``)."""
    if value is None:
        return Highlight.NONE
    try:
        return Highlight(value)
    except ValueError:
        _log.warning("Unknown highlight classification %r; treating as none", value)
        return Highlight.NONE


class NewRowTracker:
    def __init__(self, ttl: float = settings.NEW_ROW_TTL, clock: Clock = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._deadlines: Dict[str, float] = {}

    def mark(self, row_ids: Iterable[str]) -> None:
        deadline = self._clock() + self.ttl
        for row_id in row_ids:
            self._deadlines[row_id] = deadline

    def observe(self, previous_ids: Iterable[str], current_ids: Iterable[str]) -> List[str]:
        """Tag ids present now but absent before.

        Nothing is tagged when there was no previous collection (first load).
        """
        before = set(previous_ids)
        if not before:
            return []
        fresh = [i for i in current_ids if i not in before]
        if fresh:
            self.mark(fresh)
        return fresh

    def retain(self, row_ids: Iterable[str]) -> None:
        """Forget tags for ids that are no longer in the data."""
        keep = set(row_ids)
        for row_id in [i for i in self._deadlines if i not in keep]:
            del self._deadlines[row_id]

    def is_new(self, row_id: str) -> bool:
        deadline = self._deadlines.get(row_id)
        if deadline is None:
            return False
        if self._clock() >= deadline:
            del self._deadlines[row_id]
            return False
        return True

    def active_ids(self) -> List[str]:
        now = self._clock()
        expired = [i for i, d in self._deadlines.items() if now >= d]
        for row_id in expired:
            del self._deadlines[row_id]
        return list(self._deadlines)

    def clear(self) -> None:
        self._deadlines.clear()


class RowHighlighter(Generic[T]):
    def __init__(
        self,
        classifier: Optional[Classifier[T]] = None,
        *,
        enabled: bool = False,
        tracker: Optional[NewRowTracker] = None,
    ):
        self.classifier = classifier
        self.enabled = enabled
        self.tracker = tracker

    @property
    def toggle_available(self) -> bool:
        return self.classifier is not None

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def classify(self, row: T, row_id: str) -> Highlight:
        if not self.enabled:
            return Highlight.NONE
        if self.tracker is not None and self.tracker.is_new(row_id):
            return Highlight.NEW
        if self.classifier is None:
            return Highlight.NONE
        return coerce_highlight(self.classifier(row))
