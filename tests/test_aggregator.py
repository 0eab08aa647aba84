import queue
from datetime import datetime, timezone

from httptop import Aggregator

from .helpers import event, wait_for

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


def test_record_creates_sections_lazily():
    agg = Aggregator()
    assert agg.sections == {}

    agg.record(event("/a", size=10))
    agg.record(event("/a", size=20, is_error=True))

    section = agg.section("/a")
    assert (section.hits, section.bytes, section.errors) == (2, 30, 1)
    assert agg.section("/b") is None
    assert (agg.hits, agg.bytes, agg.errors) == (2, 30, 1)


def test_section_hits_sum_to_global_hits():
    agg = Aggregator()
    for name in ["/a", "/b", "/a", "/c", "/b", "/a"]:
        agg.record(event(name))

    assert sum(s.hits for s in agg.sections.values()) == agg.hits == 6
    assert agg.busiest == "/a"


def test_busiest_tie_keeps_incumbent():
    agg = Aggregator()
    for _ in range(5):
        agg.record(event("/a"))
    for _ in range(5):
        agg.record(event("/b"))

    assert agg.busiest == "/a"

    agg.record(event("/b"))
    assert agg.busiest == "/b"


def test_window_scenario():
    agg = Aggregator()
    agg.record(event("/a", is_error=True))
    agg.record(event("/a"))
    agg.record(event("/a"))
    for _ in range(5):
        agg.record(event("/b"))

    summary = agg.take_window(NOW)

    assert summary.busiest == "/b"
    assert summary.busiest_hits == 5
    assert summary.errors == 1
    assert summary.hits == 8
    assert summary.time == NOW
    for section in agg.sections.values():
        assert (section.hits, section.bytes, section.errors) == (0, 0, 0)
    assert set(agg.sections) == {"/a", "/b"}


def test_kilobytes_truncate():
    agg = Aggregator()
    agg.record(event("/a", size=2047))
    assert agg.take_window(NOW).kilobytes == 1


def test_reset_is_idempotent():
    agg = Aggregator()
    agg.record(event("/a"))
    agg.take_window(NOW)

    summary = agg.take_window(NOW)

    assert summary.idle
    assert summary.busiest is None
    assert (summary.hits, summary.bytes, summary.errors) == (0, 0, 0)
    assert agg.busiest is None
    assert (agg.hits, agg.bytes, agg.errors) == (0, 0, 0)


def test_window_counters_are_independent():
    agg = Aggregator()
    for _ in range(3):
        agg.record(event("/a"))

    agg.take_window(NOW)
    assert agg.traffic_hits == 3

    agg.record(event("/a"))
    assert agg.take_traffic_hits() == 4
    assert agg.take_traffic_hits() == 0
    assert agg.hits == 1


def test_section_counters_restart_after_reset():
    agg = Aggregator()
    for _ in range(4):
        agg.record(event("/a"))
    agg.take_window(NOW)

    agg.record(event("/b"))
    agg.record(event("/a"))

    assert agg.busiest == "/b"
    assert agg.section("/a").hits == 1


def test_run_consumes_queue_in_order():
    events = queue.Queue()
    agg = Aggregator(events)
    agg.start()

    for name in ["/x", "/y", "/y"]:
        events.put(event(name))

    assert wait_for(lambda: agg.hits == 3)
    assert agg.busiest == "/y"
    assert events.empty()
