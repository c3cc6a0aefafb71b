#!/usr/bin/env python3
"""
In-memory subscription store.

Maps a normalized channel key to its Channel record and merges freshly
fetched feeds into what is already known, announcing videos that are new
since the last merge.
"""

import logging
from typing import Dict, List, Optional

from .config import MAX_FEED_SIZE
from .exceptions import EmptyFeedError, NotSubscribedError
from .models.video import Channel
from .notifications.switch import NotificationSwitch
from .rwlock import RWLock

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Lower-case a channel name and remove all whitespace from it."""
    return ''.join(name.lower().split())


class SubscriptionStore:
    """
    Thread-safe map of normalized channel key -> Channel.

    Reads (get, list) share the lock; add and remove hold it exclusively.
    Notifications for new videos are sent from inside add while the write
    lock is held, so a slow notifier delays every other store call.
    """

    def __init__(self,
                 notifications: Optional[NotificationSwitch] = None,
                 max_feed_size: int = MAX_FEED_SIZE,
                 enforce_cap: bool = False):
        """
        Initialize empty store.

        Args:
            notifications: Switch used to announce new videos on merge
            max_feed_size: Videos retained from each side of a merge
            enforce_cap: Truncate the merged list to max_feed_size as well;
                off by default, where a merge may grow a record past the cap
        """
        self._channels: Dict[str, Channel] = {}
        self._lock = RWLock()
        self.notifications = notifications or NotificationSwitch(enabled=False)
        self.max_feed_size = max_feed_size
        self.enforce_cap = enforce_cap

    def add(self, name: str, incoming: Channel) -> None:
        """
        Insert a channel or merge a fresh fetch into the stored record.

        Args:
            name: Channel name as given by the caller
            incoming: Freshly fetched channel, newest video first

        Raises:
            EmptyFeedError: If incoming has no videos (store unchanged)
        """
        if not incoming.videos:
            raise EmptyFeedError(name)

        key = normalize_name(name)
        with self._lock.write_locked():
            existing = self._channels.get(key)
            if existing is None or not existing.videos:
                incoming.videos = list(incoming.videos[:self.max_feed_size])
                self._channels[key] = incoming
                logger.debug(f"Stored new channel '{key}' with {len(incoming.videos)} videos")
                return

            new_count = self._count_new(existing, incoming)
            if new_count > 0:
                self._announce(key, incoming, new_count)

            merged = list(incoming.videos[:new_count]) + list(existing.videos[:self.max_feed_size])
            if self.enforce_cap:
                merged = merged[:self.max_feed_size]
            existing.videos = merged
            logger.debug(f"Merged channel '{key}': {new_count} new, {len(merged)} kept")

    def _count_new(self, existing: Channel, incoming: Channel) -> int:
        """
        Index in incoming of the previously newest video.

        Everything before it is new. When the previous newest video is not
        in the incoming list at all the result is 0 and the fetch is treated
        as containing nothing new.
        """
        latest_id = existing.latest.video_id
        for index, video in enumerate(incoming.videos):
            if video.video_id == latest_id:
                return index
        logger.debug(f"Latest known video {latest_id} missing from fresh fetch of '{existing.name}'")
        return 0

    def _announce(self, key: str, incoming: Channel, new_count: int) -> None:
        """Notify newest-first, stopping at the first failure."""
        for video in incoming.videos[:new_count]:
            if not self.notifications.notify(key, video):
                break

    def get(self, name: str) -> Channel:
        """
        Look up a channel by name.

        Raises:
            NotSubscribedError: If the normalized key is not stored
        """
        key = normalize_name(name)
        with self._lock.read_locked():
            channel = self._channels.get(key)
            if channel is None:
                raise NotSubscribedError(key)
            return channel.snapshot()

    def contains(self, name: str) -> bool:
        key = normalize_name(name)
        with self._lock.read_locked():
            return key in self._channels

    def remove(self, name: str) -> None:
        """Delete a channel; removing an unknown channel is a no-op."""
        key = normalize_name(name)
        with self._lock.write_locked():
            if self._channels.pop(key, None) is not None:
                logger.debug(f"Removed channel '{key}'")

    def list(self) -> List[Channel]:
        """Snapshot of every stored channel, in no particular order."""
        with self._lock.read_locked():
            return [channel.snapshot() for channel in self._channels.values()]

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._channels)
