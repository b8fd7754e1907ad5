"""Event handlers."""

from .user_events import UserEventHandler

__all__ = ["UserEventHandler"]
