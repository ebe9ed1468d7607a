"""In-memory channel adapter.

Implements ChannelAdapterProtocol without a network so the host service
can run standalone (CLI simulation) and be exercised in tests. Remote
controls are simulated with the deliver_* helpers, which invoke the
handlers the service registered.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from spothost.errors import NotConnectedError
from spothost.protocols import (
    CommandAck,
    CommandHandler,
    ConnectOptions,
    DisconnectHandler,
    InboundCommand,
    MessageHandler,
    PresenceEvent,
    PresenceHandler,
)

logger = logging.getLogger(__name__)

DEFAULT_ROOM_JID = "spot@conference.local/tv"


@dataclass(frozen=True)
class ChannelHandle:
    """Handle returned by InMemoryChannel.connect."""

    room_jid: str
    connection_id: int


@dataclass(frozen=True)
class SentMessage:
    """A message sent through the channel."""

    peer: str
    kind: str
    data: dict


class InMemoryChannel:
    """Channel adapter that keeps all state in process."""

    def __init__(self, room_jid: str = DEFAULT_ROOM_JID):
        self._default_room_jid = room_jid
        self._room_jid: Optional[str] = None
        self._lock = ""
        self._connections = 0

        self.status: dict[str, Any] = {}
        self.sent: list[SentMessage] = []
        self.lock_history: list[str] = []
        self.connect_calls = 0
        self.disconnect_calls = 0

        self._failures: dict[str, Exception] = {}

        self._command_handler: Optional[CommandHandler] = None
        self._presence_handler: Optional[PresenceHandler] = None
        self._disconnect_handler: Optional[DisconnectHandler] = None
        self._message_handler: Optional[MessageHandler] = None

    @property
    def connected(self) -> bool:
        return self._room_jid is not None

    # Fault injection

    def fail_next(self, operation: str, error: Exception) -> None:
        """Make the next call of operation raise error.

        Args:
            operation: One of "connect", "disconnect", "set_lock",
                "send_message".
            error: Exception to raise.
        """
        self._failures[operation] = error

    def _maybe_fail(self, operation: str) -> None:
        error = self._failures.pop(operation, None)
        if error is not None:
            raise error

    # ChannelAdapterProtocol

    async def connect(self, options: ConnectOptions) -> ChannelHandle:
        self.connect_calls += 1
        self._maybe_fail("connect")

        room_jid = self._default_room_jid
        if options.room_name:
            room_jid = f"{options.room_name}@{room_jid.split('@', 1)[1]}"

        self._room_jid = room_jid
        self._connections += 1
        logger.debug(f"In-memory channel joined {room_jid}")

        return ChannelHandle(room_jid=room_jid, connection_id=self._connections)

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._maybe_fail("disconnect")
        self._room_jid = None
        self._lock = ""
        self.status.clear()

    def get_room_full_jid(self) -> Optional[str]:
        return self._room_jid

    def get_lock(self) -> str:
        return self._lock

    async def set_lock(self, lock: str) -> None:
        self._maybe_fail("set_lock")
        self._lock = lock
        self.lock_history.append(lock)

    async def send_message(self, peer: str, kind: str, data: dict) -> dict:
        self._maybe_fail("send_message")
        if not self.connected:
            raise NotConnectedError(f"Cannot send to {peer}: channel closed")

        self.sent.append(SentMessage(peer=peer, kind=kind, data=data))
        return {"to": peer, "type": "result"}

    def update_status(self, status: dict) -> None:
        self.status.update(status)

    def on_command(self, handler: CommandHandler) -> None:
        self._command_handler = handler

    def on_presence(self, handler: PresenceHandler) -> None:
        self._presence_handler = handler

    def on_disconnect(self, handler: DisconnectHandler) -> None:
        self._disconnect_handler = handler

    def on_message(self, handler: MessageHandler) -> None:
        self._message_handler = handler

    # Simulated remote side

    def deliver_command(
        self,
        sender: str,
        command_type: str,
        text: str = "",
        request_id: str = "1",
    ) -> Optional[CommandAck]:
        """Deliver a command from a remote. Returns the host's acknowledgment."""
        if self._command_handler is None:
            return None
        return self._command_handler(
            InboundCommand(
                request_id=request_id,
                sender=sender,
                command_type=command_type,
                text=text,
            )
        )

    def deliver_presence(self, sender: str, availability: str) -> None:
        if self._presence_handler is not None:
            self._presence_handler(PresenceEvent(sender=sender, availability=availability))

    def deliver_message(self, kind: str, sender: str, data: Any) -> None:
        if self._message_handler is not None:
            self._message_handler(kind, sender, data)

    def drop(self) -> None:
        """Simulate the channel going away without a disconnect call."""
        self._room_jid = None
        self._lock = ""
        if self._disconnect_handler is not None:
            self._disconnect_handler()
