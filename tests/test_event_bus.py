from datagrid.services.event_bus import EventBus, GridEvent


def test_subscribe_and_publish_order():
    bus = EventBus()
    order = []

    def h1(e):
        order.append(("h1", e.name))

    def h2(e):
        order.append(("h2", e.name))

    bus.subscribe(GridEvent.SELECTION_CHANGED, h1)
    bus.subscribe(GridEvent.SELECTION_CHANGED, h2)
    bus.publish(GridEvent.SELECTION_CHANGED, ["1"])
    assert order == [
        ("h1", GridEvent.SELECTION_CHANGED.value),
        ("h2", GridEvent.SELECTION_CHANGED.value),
    ]


def test_once_subscription():
    bus = EventBus()
    calls = []
    bus.subscribe(GridEvent.ROWS_REPLACED, lambda e: calls.append(e.name), once=True)
    bus.publish(GridEvent.ROWS_REPLACED)
    bus.publish(GridEvent.ROWS_REPLACED)
    assert calls == [GridEvent.ROWS_REPLACED.value]


def test_unsubscribe():
    bus = EventBus()
    calls = []
    sub = bus.subscribe(GridEvent.SORT_CHANGED, lambda e: calls.append(1))
    bus.publish(GridEvent.SORT_CHANGED)
    bus.unsubscribe(sub)
    bus.publish(GridEvent.SORT_CHANGED)
    assert calls == [1]
    assert bus.subscriber_count(GridEvent.SORT_CHANGED) == 0


def test_error_isolation():
    bus = EventBus()
    calls = []

    def bad(e):
        raise RuntimeError("boom")

    bus.subscribe(GridEvent.VIEW_CHANGED, bad)
    bus.subscribe(GridEvent.VIEW_CHANGED, lambda e: calls.append("ok"))
    bus.publish(GridEvent.VIEW_CHANGED)
    assert calls == ["ok"]
    assert len(bus.errors) == 1


def test_subscribe_all_covers_every_event():
    bus = EventBus()
    seen = []
    bus.subscribe_all(lambda e: seen.append(e.name))
    for evt in GridEvent:
        bus.publish(evt)
    assert seen == [evt.value for evt in GridEvent]
