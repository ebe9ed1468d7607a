"""Message and service update identifiers."""


class Messages:
    """Message kinds exchanged with remote controls and the application."""

    # Host -> remote status update
    JITSI_MEET_UPDATE = "jitsi-meet-update"

    # Application -> host, to be proxied toward a remote
    REMOTE_CONTROL_UPDATE = "remote-control-update"

    # Local-only signal that a remote left the room
    SPOT_REMOTE_LEFT = "spot-remote-left"

    SPOT_REMOTE_PROXY_MESSAGE = "spot-remote-proxy-message"


class ServiceUpdates:
    """Topics published by the host service."""

    JOIN_CODE_CHANGE = "join-code-change"
    SPOT_REMOTE_MESSAGE_RECEIVED = "spot-remote-message-received"
    CONNECTION_STATE_CHANGED = "connection-state-changed"


# Name used when registering the service with a debug registry.
DEBUG_REGISTRY_NAME = "spotTvRemoteControlService"
