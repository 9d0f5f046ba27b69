"""Chat relay: forwards chat messages to an automation webhook and keeps history."""

__version__ = "0.1.0"
