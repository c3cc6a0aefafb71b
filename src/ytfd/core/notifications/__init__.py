"""Notification toggling for new-video alerts."""

from .switch import NotificationSwitch, Notifier

__all__ = ['NotificationSwitch', 'Notifier']
