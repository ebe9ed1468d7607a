"""Protocols, enums and data types shared across the Spot host service."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol


class ServiceState(Enum):
    """Connection state of the host service."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


# ============================================================================
# Channel Data Classes
# ============================================================================


@dataclass
class ConnectOptions:
    """Options passed through to the channel adapter on connect.

    Attributes:
        join_code_refresh_rate: Seconds between join-code rotations.
            None disables automatic rotation.
        server: Channel server address, adapter specific.
        room_name: Room to join, adapter specific.
        extras: Any further adapter specific options.
    """

    join_code_refresh_rate: Optional[float] = None
    server: Optional[str] = None
    room_name: Optional[str] = None
    extras: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InboundCommand:
    """A command sent by a remote control to the host."""

    request_id: str
    sender: str  # e.g., "p1@conf"
    command_type: str  # e.g., "go-home"
    text: str = ""  # JSON encoded payload, possibly empty or malformed


@dataclass(frozen=True)
class PresenceEvent:
    """Availability change of a peer in the room."""

    sender: str
    availability: str  # "available", "unavailable", ...

    @property
    def is_unavailable(self) -> bool:
        return self.availability == "unavailable"


@dataclass(frozen=True)
class CommandAck:
    """Acknowledgment returned to the sender of an inbound command."""

    request_id: str
    to: str
    type: str = "result"
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.request_id,
            "to": self.to,
            "type": self.type,
            "success": self.success,
        }


# Handler types registered on the channel adapter
CommandHandler = Callable[[InboundCommand], CommandAck]
PresenceHandler = Callable[[PresenceEvent], None]
DisconnectHandler = Callable[..., None]
MessageHandler = Callable[[str, str, Any], None]


# ============================================================================
# Collaborator Protocols
# ============================================================================


class ChannelAdapterProtocol(Protocol):
    """Protocol for the presence-and-messaging channel.

    The host service drives the channel through this interface and never
    touches the underlying transport directly.
    """

    async def connect(self, options: ConnectOptions) -> Any:
        """Establish the channel. Returns an opaque handle."""
        ...

    async def disconnect(self) -> None:
        """Tear down the channel."""
        ...

    def get_room_full_jid(self) -> Optional[str]:
        """Full room identity (e.g. "meet123@conference.host/tv"), or None."""
        ...

    def get_lock(self) -> str:
        """Current room lock."""
        ...

    async def set_lock(self, lock: str) -> None:
        """Replace the room lock."""
        ...

    async def send_message(self, peer: str, kind: str, data: dict) -> Any:
        """Send a message to a peer. Returns the peer's acknowledgment."""
        ...

    def update_status(self, status: dict) -> None:
        """Merge status into the host's broadcast presence."""
        ...

    def on_command(self, handler: CommandHandler) -> None:
        """Set handler for commands from remotes."""
        ...

    def on_presence(self, handler: PresenceHandler) -> None:
        """Set handler for presence updates."""
        ...

    def on_disconnect(self, handler: DisconnectHandler) -> None:
        """Set handler for unexpected channel loss."""
        ...

    def on_message(self, handler: MessageHandler) -> None:
        """Set handler for messages routed from the application layer."""
        ...


class DebugRegistryProtocol(Protocol):
    """Protocol for an optional debug/introspection registry."""

    def register(self, name: str, instance: Any) -> None:
        ...
