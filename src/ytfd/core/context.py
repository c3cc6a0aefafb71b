#!/usr/bin/env python3
"""
Daemon context - the shared state every endpoint task works against.

Replaces process-global state: the store, the notification switch and the
external collaborators are created once and handed to every handler.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .config import Config
from .models.video import Channel
from .notifications.switch import NotificationSwitch, Notifier
from .scheduler import FeedFetcher, RefreshScheduler
from .server.listeners import ListenerPool
from .store import SubscriptionStore

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def resolve(self, name: str) -> str:
        ...


class Searcher(Protocol):
    def search(self, query: str) -> str:
        ...


@dataclass
class DaemonContext:
    """Everything a handler may touch."""
    config: Config
    store: SubscriptionStore
    notifications: NotificationSwitch
    resolver: Resolver
    fetcher: FeedFetcher
    searcher: Searcher
    scheduler: RefreshScheduler
    listeners: ListenerPool

    def resolve_and_fetch(self, name: str) -> Channel:
        """Resolve a channel name and fetch its feed (no store access)."""
        feed_url = self.resolver.resolve(name)
        return self.fetcher.fetch(name, feed_url)


def build_context(config: Config,
                  resolver: Resolver,
                  fetcher: FeedFetcher,
                  searcher: Searcher,
                  notifier: Optional[Notifier] = None,
                  enforce_cap: bool = False) -> DaemonContext:
    """
    Wire a context from configuration and collaborators.

    Args:
        config: Daemon configuration
        resolver: Channel name -> feed address
        fetcher: Feed address -> Channel
        searcher: Query -> result text
        notifier: New-video notifier; notifications stay off without one
        enforce_cap: Keep merged records within the feed size cap
    """
    notifications = NotificationSwitch(notifier, enabled=config.daemon.notify)
    store = SubscriptionStore(notifications=notifications, enforce_cap=enforce_cap)
    scheduler = RefreshScheduler(store, fetcher, interval_seconds=config.refresh_interval_seconds)
    logger.debug(f"Context built (notifications {'on' if notifications.enabled else 'off'})")
    return DaemonContext(
        config=config,
        store=store,
        notifications=notifications,
        resolver=resolver,
        fetcher=fetcher,
        searcher=searcher,
        scheduler=scheduler,
        listeners=ListenerPool(),
    )
