from datagrid.models import Highlight
from datagrid.services.highlight import NewRowTracker, RowHighlighter, coerce_highlight


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _classify(row):
    if row["status"] == "Completed":
        return "success"
    if row["status"] == "On Hold":
        return Highlight.WARNING
    return None


def test_disabled_highlighter_returns_none_without_calling_classifier():
    calls = []

    def classifier(row):
        calls.append(row)
        return "danger"

    hl = RowHighlighter(classifier)
    assert hl.classify({"status": "x"}, "1") is Highlight.NONE
    assert calls == []


def test_enabled_highlighter_classifies():
    hl = RowHighlighter(_classify, enabled=True)
    assert hl.classify({"status": "Completed"}, "1") is Highlight.SUCCESS
    assert hl.classify({"status": "On Hold"}, "2") is Highlight.WARNING
    assert hl.classify({"status": "Active"}, "3") is Highlight.NONE


def test_toggle_available_only_with_classifier():
    assert RowHighlighter().toggle_available is False
    assert RowHighlighter(_classify).toggle_available is True


def test_coerce_unknown_value():
    assert coerce_highlight("sparkly") is Highlight.NONE
    assert coerce_highlight("info") is Highlight.INFO


def test_new_tag_expires_on_read():
    clock = FakeClock()
    tracker = NewRowTracker(ttl=3.0, clock=clock)
    tracker.mark(["a"])
    assert tracker.is_new("a")
    clock.now += 2.9
    assert tracker.active_ids() == ["a"]
    clock.now += 0.2
    assert not tracker.is_new("a")
    assert tracker.active_ids() == []


def test_observe_tags_only_after_first_load():
    tracker = NewRowTracker(clock=FakeClock())
    assert tracker.observe([], ["a", "b"]) == []
    assert tracker.observe(["a", "b"], ["c", "a", "b"]) == ["c"]
    assert tracker.is_new("c")


def test_new_tag_overrides_classifier():
    clock = FakeClock()
    tracker = NewRowTracker(ttl=1.0, clock=clock)
    hl = RowHighlighter(_classify, enabled=True, tracker=tracker)
    tracker.mark(["1"])
    row = {"status": "Completed"}
    assert hl.classify(row, "1") is Highlight.NEW
    clock.now += 1.0
    assert hl.classify(row, "1") is Highlight.SUCCESS


def test_retain_forgets_ids_that_left_the_data():
    tracker = NewRowTracker(clock=FakeClock())
    tracker.mark(["a", "b"])
    tracker.retain(["b", "c"])
    assert tracker.active_ids() == ["b"]
