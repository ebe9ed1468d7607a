"""Base exceptions for the Spot host service."""


class SpotHostError(Exception):
    """Base exception for all Spot host errors."""

    pass


class TransportError(SpotHostError):
    """Channel operation failed."""

    pass


class NotConnectedError(TransportError):
    """Operation requires an established channel."""

    pass


class ConfigError(SpotHostError):
    """Invalid configuration value."""

    pass
