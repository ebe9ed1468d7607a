"""Spot host: pairs a room host with remote controls and relays commands."""

__version__ = "0.1.0"
