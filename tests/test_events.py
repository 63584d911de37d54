"""Refresh broadcast and notification tests."""

from __future__ import annotations

import asyncio

from planroom.browser import EventBus, Notification, Notifier, pluralize


def test_publish_awaits_async_handlers_in_order() -> None:
    bus = EventBus()
    heard: list[str] = []

    async def async_handler(project_id: str) -> None:
        await asyncio.sleep(0)
        heard.append(f"async:{project_id}")

    bus.subscribe("p1", lambda project_id: heard.append(f"sync:{project_id}"))
    unsubscribe = bus.subscribe("p1", async_handler)
    bus.subscribe("p2", lambda project_id: heard.append("other project"))

    asyncio.run(bus.publish("p1"))
    unsubscribe()
    asyncio.run(bus.publish("p1"))

    assert heard == ["sync:p1", "async:p1", "sync:p1"]
    assert bus.subscriber_count("p1") == 1


def test_notifier_forwards_to_sink() -> None:
    received: list[Notification] = []
    notifier = Notifier(received.append)

    notifier.success("Created folder /a")
    notifier.error("Failed to move files")

    assert received == notifier.history
    assert notifier.last == Notification(level="error", message="Failed to move files")
    notifier.clear()
    assert notifier.last is None


def test_pluralize() -> None:
    assert pluralize(1, "file") == "1 file"
    assert pluralize(0, "file") == "0 files"
    assert pluralize(3, "file") == "3 files"


def test_failing_handler_does_not_stop_later_handlers(caplog) -> None:
    bus = EventBus()
    heard: list[str] = []

    def broken(project_id: str) -> None:
        raise RuntimeError("sidebar gone")

    bus.subscribe("p1", broken)
    bus.subscribe("p1", lambda project_id: heard.append(project_id))

    with caplog.at_level("ERROR", logger="planroom.browser.events"):
        asyncio.run(bus.publish("p1"))

    assert heard == ["p1"]
    assert "docs-nav-refresh handler failed for project p1" in caplog.text
