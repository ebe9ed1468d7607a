"""
Join-code rotation for the room host.

The join code a remote types to pair is the room name followed by the
room lock, e.g. room "meet123" with lock "a1b" gives "meet123a1b".
Rotating the lock invalidates every previously issued join code.

Rotation can be one-shot or self-rescheduling: each successful rotation
schedules the next one relative to its own completion. At most one
rotation is ever pending; starting a new rotation or cancelling drops the
pending timer and marks any rotation still waiting on the channel as
stale, so it neither publishes nor reschedules.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from spothost.constants import ServiceUpdates
from spothost.protocols import ChannelAdapterProtocol
from spothost.tokens import LOCK_LENGTH, generate_random_string

logger = logging.getLogger(__name__)


class JoinCodeManager:
    """Owns the room lock and its derived join code.

    Usage:
        manager = JoinCodeManager(channel, bus.emit)

        # Rotate now and every 5 minutes after that
        await manager.refresh(300.0)

        manager.get_join_code()  # "meet123a1b"

        # On disconnect
        manager.cancel()
    """

    def __init__(
        self,
        channel: ChannelAdapterProtocol,
        emit: Callable[..., None],
        random_string: Callable[[int], str] = generate_random_string,
    ):
        """Initialize the join-code manager.

        Args:
            channel: Channel adapter that stores the room lock.
            emit: Publishes service updates (topic, *args).
            random_string: Lock generator, injectable for testing.
        """
        self._channel = channel
        self._emit = emit
        self._random_string = random_string

        self._next_update: Optional[asyncio.TimerHandle] = None
        # Bumped on every cancel; a rotation only publishes if unchanged
        self._rotation = 0
        self._tasks: set[asyncio.Task] = set()

    @property
    def has_pending_refresh(self) -> bool:
        """True if a rotation is scheduled."""
        return self._next_update is not None

    def get_join_code(self) -> str:
        """Get the join code for the current room and lock.

        Returns:
            Room name followed by the lock, or "" without a room.
        """
        full_jid = self._channel.get_room_full_jid()
        if not full_jid:
            return ""

        room_name = full_jid.split("@")[0]
        room_lock = self._channel.get_lock() or ""

        return f"{room_name}{room_lock}"

    def cancel(self) -> None:
        """Cancel the scheduled rotation and invalidate in-flight ones.

        Safe to call when nothing is scheduled.
        """
        self._rotation += 1
        if self._next_update is not None:
            self._next_update.cancel()
            self._next_update = None

    async def refresh(self, next_interval: Optional[float] = None) -> Optional[str]:
        """Rotate the room lock.

        Args:
            next_interval: If set, rotate again this many seconds after
                this rotation completes.

        Returns:
            The new join code, or None if there is no room or the rotation
            was superseded while the lock was being set.

        Raises:
            Whatever the channel raises from set_lock. Nothing is published
            or rescheduled in that case and the previous lock stays valid.
        """
        self.cancel()
        rotation = self._rotation

        if not self._channel.get_room_full_jid():
            logger.debug("No room to refresh join code for")
            return None

        room_lock = self._random_string(LOCK_LENGTH)
        await self._channel.set_lock(room_lock)

        if rotation != self._rotation:
            logger.info("Join code rotation superseded, not publishing")
            return None

        if next_interval:
            loop = asyncio.get_running_loop()
            self._next_update = loop.call_later(
                next_interval, self._on_refresh_due, next_interval
            )

        join_code = self.get_join_code()
        logger.info("Join code refreshed")
        self._emit(ServiceUpdates.JOIN_CODE_CHANGE, {"joinCode": join_code})

        return join_code

    def _on_refresh_due(self, next_interval: float) -> None:
        """Timer callback: run the next rotation."""
        self._next_update = None

        task = asyncio.ensure_future(self.refresh(next_interval))
        self._tasks.add(task)
        task.add_done_callback(self._on_refresh_done)

    def _on_refresh_done(self, task: "asyncio.Task[Any]") -> None:
        self._tasks.discard(task)

        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            # Loop stops here; the previous lock remains valid
            logger.error(f"Scheduled join code refresh failed: {error}")
