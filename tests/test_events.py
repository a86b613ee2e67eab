"""
Unit Tests for Domain Events and the EventBus

Tests publish/subscribe routing, handler isolation and clearing.
"""

from vly_player.domain.shared.events import (
    DomainEvent,
    EventBus,
    PlaylistsChanged,
    SessionFinished,
)


class TestDomainEvent:
    def test_events_have_unique_ids(self):
        assert DomainEvent().event_id != DomainEvent().event_id

    def test_occurred_at_is_aware(self):
        event = SessionFinished(handle=1, item_id="a", duration=10.0)

        assert event.occurred_at.tzinfo is not None


class TestEventBus:
    """Tests for EventBus routing."""

    async def test_publish_with_no_handlers(self):
        await EventBus().publish(PlaylistsChanged(reason="created"))

    async def test_routes_by_exact_type(self):
        """Should only call handlers subscribed to the published type."""
        bus = EventBus()
        finished, changed = [], []

        async def on_finished(event):
            finished.append(event)

        async def on_changed(event):
            changed.append(event)

        bus.subscribe(SessionFinished, on_finished)
        bus.subscribe(PlaylistsChanged, on_changed)
        await bus.publish(SessionFinished(handle=1, item_id="a"))

        assert len(finished) == 1
        assert changed == []

    async def test_unsubscribe_handler(self):
        bus = EventBus()
        calls = []

        async def handler(event):
            calls.append(event)

        bus.subscribe(PlaylistsChanged, handler)
        bus.unsubscribe(PlaylistsChanged, handler)
        await bus.publish(PlaylistsChanged(reason="created"))

        assert calls == []
        assert bus.handler_count(PlaylistsChanged) == 0

    async def test_unsubscribe_nonexistent_handler(self):
        async def handler(event):
            pass

        EventBus().unsubscribe(PlaylistsChanged, handler)

    async def test_failing_handler_does_not_block_others(self):
        """Should log handler errors and still run the remaining handlers."""
        bus = EventBus()
        calls = []

        async def broken(event):
            raise RuntimeError("boom")

        async def healthy(event):
            calls.append(event.reason)

        bus.subscribe(PlaylistsChanged, broken)
        bus.subscribe(PlaylistsChanged, healthy)
        await bus.publish(PlaylistsChanged(reason="renamed"))

        assert calls == ["renamed"]

    async def test_clear_removes_all_handlers(self):
        bus = EventBus()

        async def handler(event):
            pass

        bus.subscribe(PlaylistsChanged, handler)
        bus.subscribe(SessionFinished, handler)
        bus.clear()

        assert bus.handler_count(PlaylistsChanged) == 0
        assert bus.handler_count(SessionFinished) == 0
