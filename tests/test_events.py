"""Tests for the publish/subscribe bus."""

from unittest.mock import Mock

from spothost.events import EventBus


class TestEventBus:
    """Tests for EventBus."""

    def test_emit_calls_subscriber(self):
        """Emitted arguments reach the subscriber."""
        bus = EventBus()
        callback = Mock()
        bus.subscribe("topic", callback)

        bus.emit("topic", "a", {"b": 1})

        callback.assert_called_once_with("a", {"b": 1})

    def test_emit_in_subscription_order(self):
        """Subscribers are called in the order they subscribed."""
        bus = EventBus()
        calls = []
        bus.subscribe("topic", lambda: calls.append("first"))
        bus.subscribe("topic", lambda: calls.append("second"))

        bus.emit("topic")

        assert calls == ["first", "second"]

    def test_duplicate_subscription_delivers_once(self):
        """The same callback subscribed twice sees each event once."""
        bus = EventBus()
        callback = Mock()
        bus.subscribe("topic", callback)
        bus.subscribe("topic", callback)

        bus.emit("topic")

        assert callback.call_count == 1
        assert bus.subscriber_count("topic") == 1

    def test_topics_are_isolated(self):
        """Subscribers only see their own topic."""
        bus = EventBus()
        callback = Mock()
        bus.subscribe("one", callback)

        bus.emit("two")

        callback.assert_not_called()

    def test_unsubscribe_function(self):
        """The returned function removes the subscription."""
        bus = EventBus()
        callback = Mock()
        unsubscribe = bus.subscribe("topic", callback)

        unsubscribe()
        bus.emit("topic")

        callback.assert_not_called()
        assert bus.subscriber_count("topic") == 0

    def test_unsubscribe_unknown(self):
        """Unsubscribing something never subscribed returns False."""
        bus = EventBus()
        assert bus.unsubscribe("topic", Mock()) is False

    def test_failing_subscriber_does_not_stop_others(self, caplog):
        """A raising subscriber is logged and later ones still run."""
        bus = EventBus()
        later = Mock()
        bus.subscribe("topic", Mock(side_effect=RuntimeError("boom")))
        bus.subscribe("topic", later)

        bus.emit("topic", 1)

        later.assert_called_once_with(1)
        assert "Subscriber error for topic" in caplog.text

    def test_subscriber_may_unsubscribe_while_handling(self):
        """Unsubscribing during delivery does not break the emit."""
        bus = EventBus()
        calls = []

        def once():
            calls.append("once")
            bus.unsubscribe("topic", once)

        bus.subscribe("topic", once)
        bus.emit("topic")
        bus.emit("topic")

        assert calls == ["once"]
