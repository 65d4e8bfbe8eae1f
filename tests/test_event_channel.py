"""Tests for the warning and error side channel."""

from scssdoc.event_channel import ERROR, NOTICE, WARNING, Event, EventChannel


def test_events_are_collected_and_forwarded() -> None:
    """Verify that events are kept in order and passed to the sink."""
    seen: list[Event] = []
    channel = EventChannel(sink=seen.append)

    channel.warn("syntax", "bad value", "a.scss", 3)
    channel.notice("cycle", "loop")
    channel.error("boom")

    assert [e.level for e in channel.events] == [WARNING, NOTICE, ERROR]
    assert seen == channel.events
    assert [e.message for e in channel.warnings] == ["bad value"]
    assert [e.kind for e in channel.errors] == ["fatal"]
    assert channel.of_kind("cycle")[0].message == "loop"


def test_event_str_includes_location() -> None:
    """Verify event formatting."""
    assert str(Event(WARNING, "syntax", "oops", "a.scss", 4)) == "oops (a.scss:4)"
    assert str(Event(WARNING, "file", "oops", "a.scss")) == "oops (a.scss)"
    assert str(Event(ERROR, "fatal", "oops")) == "oops"
