"""Translate channel events into service updates."""

import json
import logging
import xml.etree.ElementTree as ET
from typing import Any, Callable

from spothost.constants import Messages
from spothost.protocols import CommandAck, InboundCommand, PresenceEvent

logger = logging.getLogger(__name__)

JINGLE_NS = "urn:xmpp:jingle:1"

# Receives (message_type, data) for every normalized event
Notify = Callable[[str, Any], None]


def decode_payload(text: str) -> Any:
    """Decode a command payload, falling back to an empty dict.

    Args:
        text: JSON text from the command, possibly empty.

    Returns:
        Decoded payload, or {} if it is empty or not valid JSON.
    """
    if not text:
        return {}

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Failed to parse command data: {e}")
        return {}

    return data


def build_peer_left_notification() -> str:
    """Build the IQ telling the meeting that a remote control left.

    The meeting may have wireless screensharing to clean up for the
    departed remote. This is handed to the application, never sent over
    the channel.
    """
    iq = ET.Element("iq", {"type": "set", "xmlns": "jabber:client"})
    jingle = ET.SubElement(
        iq, "jingle", {"xmlns": JINGLE_NS, "action": "unavailable"}
    )
    details = ET.SubElement(jingle, "details")
    details.text = "unavailable"

    return ET.tostring(iq, encoding="unicode")


class MessageRouter:
    """Route commands, presence and relayed messages to the application.

    Usage:
        router = MessageRouter(notify)
        channel.on_command(router.on_command_received)
        channel.on_presence(router.on_presence_received)
        channel.on_message(router.process_message)
    """

    def __init__(self, notify: Notify):
        """Initialize router.

        Args:
            notify: Called with (message_type, data) for each event the
                application should see.
        """
        self._notify = notify

    def on_command_received(self, command: InboundCommand) -> CommandAck:
        """Handle a command from a remote control.

        The acknowledgment is always successful: a payload that fails to
        decode is replaced with {} but the command itself is still valid.
        """
        logger.info(f"Received command: {command.command_type}")

        data = decode_payload(command.text)
        self._notify(command.command_type, data)

        return CommandAck(request_id=command.request_id, to=command.sender)

    def on_presence_received(self, presence: PresenceEvent) -> None:
        """Handle a presence update, reporting remotes that left."""
        if not presence.is_unavailable:
            return

        logger.info(f"Remote control left: {presence.sender}")

        self._notify(
            Messages.SPOT_REMOTE_LEFT,
            {
                "from": presence.sender,
                "data": {"iq": build_peer_left_notification()},
            },
        )

    def process_message(self, message_type: str, sender: str, data: Any) -> None:
        """Relay a message from the application toward a remote control."""
        if message_type == Messages.REMOTE_CONTROL_UPDATE:
            self._notify(
                Messages.SPOT_REMOTE_PROXY_MESSAGE,
                {
                    "data": data,
                    "from": sender,
                },
            )
            return

        logger.debug(f"Ignoring message type: {message_type}")
