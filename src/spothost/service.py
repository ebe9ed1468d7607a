"""
Host-side control service for Spot remote controls.

Composes the channel adapter, join-code rotation and message routing:

    channel events -> MessageRouter -> EventBus -> application subscribers
    application    -> SpotTvControlService -> channel adapter

State machine:

    DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED

Any transition into DISCONNECTED, voluntary or forced by the channel,
cancels join-code rotation.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from spothost.constants import DEBUG_REGISTRY_NAME, Messages, ServiceUpdates
from spothost.errors import NotConnectedError
from spothost.events import EventBus, Subscriber
from spothost.join_code import JoinCodeManager
from spothost.protocols import (
    ChannelAdapterProtocol,
    ConnectOptions,
    DebugRegistryProtocol,
    ServiceState,
)
from spothost.router import MessageRouter
from spothost.tokens import generate_random_string

logger = logging.getLogger(__name__)


class SpotTvControlService:
    """Lets a Spot-TV talk to Spot-Remotes over a shared channel.

    Usage:
        service = SpotTvControlService(channel)
        service.subscribe(ServiceUpdates.JOIN_CODE_CHANGE, on_join_code)
        service.subscribe(
            ServiceUpdates.SPOT_REMOTE_MESSAGE_RECEIVED, on_remote_message
        )

        await service.connect(ConnectOptions(join_code_refresh_rate=300.0))
        await service.send_message_to_remote_control("r1@conf", {"muted": True})
        await service.disconnect()
    """

    def __init__(
        self,
        channel: ChannelAdapterProtocol,
        debugger: Optional[DebugRegistryProtocol] = None,
        random_string: Callable[[int], str] = generate_random_string,
    ):
        """Initialize the service and register channel callbacks.

        Args:
            channel: Channel adapter to drive.
            debugger: Optional registry the service registers itself with.
            random_string: Lock generator, injectable for testing.
        """
        self._channel = channel
        self._events = EventBus()
        self._router = MessageRouter(self._notify_spot_remote_message_received)
        self._join_codes = JoinCodeManager(
            channel, self._events.emit, random_string=random_string
        )

        self._state = ServiceState.DISCONNECTED
        self._handle: Any = None
        self._connect_task: Optional[asyncio.Task] = None
        # Bumped on every disconnect; a pending connect only completes if unchanged
        self._generation = 0

        channel.on_command(self._router.on_command_received)
        channel.on_presence(self._router.on_presence_received)
        channel.on_message(self._router.process_message)
        channel.on_disconnect(self._on_disconnect)

        if debugger is not None:
            debugger.register(DEBUG_REGISTRY_NAME, self)

    @property
    def state(self) -> ServiceState:
        """Current connection state."""
        return self._state

    @property
    def join_codes(self) -> JoinCodeManager:
        """Join-code manager driving lock rotation for this room."""
        return self._join_codes

    def has_connection(self) -> bool:
        """True if a channel is established."""
        return self._handle is not None

    def subscribe(self, topic: str, callback: Subscriber) -> Callable[[], None]:
        """Subscribe to a service update topic. Returns an unsubscribe function."""
        return self._events.subscribe(topic, callback)

    def unsubscribe(self, topic: str, callback: Subscriber) -> bool:
        """Remove a subscription. Returns False if it did not exist."""
        return self._events.unsubscribe(topic, callback)

    async def connect(self, options: Optional[ConnectOptions] = None) -> Any:
        """Connect to the channel.

        Returns the existing handle if already connected. Callers arriving
        while a connection is in progress share its result.

        Args:
            options: Connect options. join_code_refresh_rate starts join-code
                rotation once connected.

        Returns:
            The channel handle.

        Raises:
            NotConnectedError: If the service was disconnected before the
                channel finished connecting.
            Whatever the channel raises from connect.
        """
        if self.has_connection():
            return self._handle

        if self._connect_task is None:
            self._connect_task = asyncio.ensure_future(
                self._connect(options or ConnectOptions())
            )
            self._connect_task.add_done_callback(self._on_connect_done)

        return await asyncio.shield(self._connect_task)

    async def _connect(self, options: ConnectOptions) -> Any:
        self._set_state(ServiceState.CONNECTING)
        generation = self._generation

        try:
            handle = await self._channel.connect(options)
        except Exception as e:
            logger.error(f"Failed to connect: {e}")
            if generation == self._generation:
                self._set_state(ServiceState.DISCONNECTED)
            raise
        finally:
            self._connect_task = None

        if generation != self._generation:
            # Disconnected while the channel was connecting
            logger.warning("Connection superseded by disconnect, closing channel")
            await self._channel.disconnect()
            raise NotConnectedError("Disconnected while connecting")

        self._handle = handle
        self._set_state(ServiceState.CONNECTED)
        logger.info("Connected to channel")

        if options.join_code_refresh_rate:
            try:
                await self._join_codes.refresh(options.join_code_refresh_rate)
            except Exception as e:
                # Connection stands; the room keeps its current lock
                logger.error(f"Initial join code refresh failed: {e}")

        return handle

    def _on_connect_done(self, task: "asyncio.Task[Any]") -> None:
        # Callers may all have gone away; the failure was logged in _connect
        if not task.cancelled():
            task.exception()

    async def disconnect(self) -> None:
        """Stop join-code rotation and disconnect from the channel.

        Safe to call when not connected. A connection still in progress is
        abandoned and closed once the channel finishes connecting.
        """
        self._join_codes.cancel()

        if not self.has_connection() and self._connect_task is None:
            return

        self._generation += 1
        self._handle = None
        try:
            await self._channel.disconnect()
        finally:
            self._set_state(ServiceState.DISCONNECTED)
            logger.info("Disconnected from channel")

    def get_join_code(self) -> str:
        """Get the code a Spot-Remote needs to pair with this Spot-TV."""
        return self._join_codes.get_join_code()

    async def refresh_join_code(
        self, next_interval: Optional[float] = None
    ) -> Optional[str]:
        """Generate a new join code, optionally rotating it periodically.

        Args:
            next_interval: If set, keep rotating every next_interval seconds.

        Returns:
            The new join code, or None if not connected.
        """
        return await self._join_codes.refresh(next_interval)

    async def send_message_to_remote_control(self, peer: str, data: dict) -> Any:
        """Send a status update to a Spot-Remote.

        Args:
            peer: Address of the remote control.
            data: Information to pass to the remote control.

        Returns:
            The channel's acknowledgment.

        Raises:
            NotConnectedError: If no channel is established.
        """
        if not self.has_connection():
            raise NotConnectedError(f"Cannot send to {peer}: not connected")

        return await self._channel.send_message(
            peer, Messages.JITSI_MEET_UPDATE, data
        )

    def update_status(self, new_status: Optional[dict] = None) -> None:
        """Merge new_status into this Spot-TV's presence.

        Ignored until a channel is established; the application may push
        status before the connection is up.
        """
        if not self.has_connection():
            return

        self._channel.update_status(new_status or {})

    def _notify_spot_remote_message_received(self, message_type: str, data: Any) -> None:
        self._events.emit(
            ServiceUpdates.SPOT_REMOTE_MESSAGE_RECEIVED,
            message_type,
            data,
        )

    def _on_disconnect(self, *args: Any) -> None:
        """Handle unexpected loss of the channel."""
        self._join_codes.cancel()

        if self._state == ServiceState.DISCONNECTED:
            return

        self._generation += 1
        logger.warning("Channel disconnected unexpectedly")
        self._handle = None
        self._set_state(ServiceState.DISCONNECTED)

    def _set_state(self, state: ServiceState) -> None:
        if state == self._state:
            return

        logger.debug(f"State {self._state.value} -> {state.value}")
        self._state = state
        self._events.emit(ServiceUpdates.CONNECTION_STATE_CHANGED, state)
