#!/usr/bin/env python3
"""
Refresh scheduler - re-fetches every subscribed channel.

A refresh snapshots the store, fetches every channel's feed in parallel
(one worker per channel, no rate limiting) and merges each result back.
One failing channel never affects the others.

Refreshes run either on demand (a connection to the refresh socket) or
once from a timer armed at startup. The timer does not re-arm: after it
fires, further refreshes happen only on demand.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional, Protocol

from .models.video import Channel
from .store import SubscriptionStore

logger = logging.getLogger(__name__)


class FeedFetcher(Protocol):
    def fetch(self, name: str, feed_url: str) -> Channel:
        ...


class RefreshScheduler:
    """Drives store-wide refreshes."""

    def __init__(self, store: SubscriptionStore, fetcher: FeedFetcher, interval_seconds: float = 15 * 60):
        """
        Initialize scheduler.

        Args:
            store: Store whose channels are refreshed
            fetcher: Fetches a channel from its known feed address
            interval_seconds: Delay before the startup timer fires
        """
        self.store = store
        self.fetcher = fetcher
        self.interval_seconds = interval_seconds
        self._timer: Optional[threading.Timer] = None

    def refresh(self) -> int:
        """
        Refresh every subscribed channel and wait for all of them.

        Returns:
            Number of channels refreshed successfully
        """
        channels = self.store.list()
        if not channels:
            logger.debug("Refresh: no subscriptions")
            return 0

        logger.info(f"Refreshing {len(channels)} channels")
        with ThreadPoolExecutor(max_workers=len(channels), thread_name_prefix="ytfd-refresh") as executor:
            futures = [executor.submit(self._refresh_channel, channel) for channel in channels]
            wait(futures)

        refreshed = sum(1 for future in futures if future.result())
        logger.info(f"Refresh done: {refreshed}/{len(channels)} channels updated")
        return refreshed

    def _refresh_channel(self, channel: Channel) -> bool:
        try:
            fetched = self.fetcher.fetch(channel.name, channel.feed_url)
        except Exception as e:
            logger.error(f"Failed to fetch '{channel.name}' for refresh: {e}")
            return False

        try:
            self.store.add(channel.name, fetched)
        except Exception as e:
            logger.warning(f"Failed to refresh channel '{channel.name}': {e}")
            return False
        return True

    def start_timer(self) -> threading.Timer:
        """Arm the one-shot startup refresh."""
        self._timer = threading.Timer(self.interval_seconds, self._timer_fired)
        self._timer.name = "ytfd-refresh-timer"
        self._timer.daemon = True
        self._timer.start()
        logger.info(f"Scheduled one-shot refresh in {self.interval_seconds:.0f}s")
        return self._timer

    def _timer_fired(self) -> None:
        logger.info("Refresh timer fired")
        self.refresh()

    def cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
