"""Publish/subscribe bus for service updates."""

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Subscriber = Callable[..., Any]


class EventBus:
    """Deliver published events to subscribers by topic.

    Subscribers are kept per topic in subscription order. Subscribing the
    same callback twice to one topic has no effect, so each subscriber sees
    an event at most once.

    Usage:
        bus = EventBus()
        unsubscribe = bus.subscribe("join-code-change", on_join_code)
        bus.emit("join-code-change", {"joinCode": "meet123a1b"})
        unsubscribe()
    """

    def __init__(self):
        # dict keys preserve insertion order and reject duplicates
        self._subscribers: dict[str, dict[Subscriber, None]] = {}

    def subscribe(self, topic: str, callback: Subscriber) -> Callable[[], None]:
        """Subscribe a callback to a topic.

        Args:
            topic: Topic name.
            callback: Called with the emitted arguments.

        Returns:
            Function that removes this subscription.
        """
        self._subscribers.setdefault(topic, {})[callback] = None
        logger.debug(f"Subscribed to: {topic}")

        def unsubscribe() -> None:
            self.unsubscribe(topic, callback)

        return unsubscribe

    def unsubscribe(self, topic: str, callback: Subscriber) -> bool:
        """Remove a subscription.

        Returns:
            True if the subscription existed, False otherwise.
        """
        callbacks = self._subscribers.get(topic)
        if not callbacks or callback not in callbacks:
            return False

        del callbacks[callback]
        if not callbacks:
            del self._subscribers[topic]
        return True

    def subscriber_count(self, topic: str) -> int:
        """Number of subscribers for a topic."""
        return len(self._subscribers.get(topic, {}))

    def emit(self, topic: str, *args: Any) -> None:
        """Deliver an event to every subscriber of a topic.

        A failing subscriber is logged and does not stop delivery to the
        others.
        """
        # Snapshot so subscribers may (un)subscribe while handling
        callbacks = list(self._subscribers.get(topic, {}))

        for callback in callbacks:
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Subscriber error for {topic}: {e}")
