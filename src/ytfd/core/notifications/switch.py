#!/usr/bin/env python3
"""
Process-wide notification switch.

Notifications are best effort: the first notifier failure turns them off
for the rest of the process lifetime.
"""

import logging
import threading
from typing import Optional, Protocol

from ..models.video import Video

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Anything that can announce a new video. Raises on failure."""

    def notify(self, channel_key: str, video: Video) -> None:
        ...


class NotificationSwitch:
    """Holds the enabled flag and the notifier it guards."""

    def __init__(self, notifier: Optional[Notifier] = None, enabled: bool = True):
        """
        Initialize switch.

        Args:
            notifier: Backend used for alerts; with None, the switch is off
            enabled: Initial state of the flag
        """
        self._notifier = notifier
        self._enabled = enabled and notifier is not None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def notify(self, channel_key: str, video: Video) -> bool:
        """
        Announce one video.

        Returns:
            True when the notifier succeeded, False when the switch is off
            or the notifier failed (which turns the switch off)
        """
        if not self.enabled:
            return False
        try:
            self._notifier.notify(channel_key, video)
            return True
        except Exception as e:
            logger.warning(f"Notifier failed, disabling notifications: {e}")
            self.disable()
            return False
