"""Notification of change authors."""

from camel_leaked.notify.notifier import NotificationError, Notifier

__all__ = ["NotificationError", "Notifier"]
