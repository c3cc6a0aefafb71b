#!/usr/bin/env python3
"""
Channel handlers: fetch, add, get, rm and subs.
"""

import logging
from typing import Optional

from .base import BaseHandler
from ..core.exceptions import AlreadySubscribedError
from ..core.formatters import go_quote

logger = logging.getLogger(__name__)


class FetchHandler(BaseHandler):
    """Fetch a channel's feed without subscribing."""

    name = "fetch"

    def handle(self, request: bytes) -> Optional[str]:
        name = self.operand(request)
        channel = self.context.resolve_and_fetch(name)
        return channel.render()


class AddHandler(BaseHandler):
    """Subscribe to a channel."""

    name = "add"

    def handle(self, request: bytes) -> Optional[str]:
        name = self.operand(request)
        if self.store.contains(name):
            raise AlreadySubscribedError(name)

        # Network calls happen before the store lock is taken
        channel = self.context.resolve_and_fetch(name)
        self.store.add(name, channel)
        self.logger.info(f"Subscribed to channel '{name}'")
        return f"subscribed to channel {go_quote(name)}"


class GetHandler(BaseHandler):
    """Return the stored videos of a subscribed channel."""

    name = "get"

    def handle(self, request: bytes) -> Optional[str]:
        return self.store.get(self.operand(request)).render()


class RemoveHandler(BaseHandler):
    """Unsubscribe from a channel; unknown channels are not an error."""

    name = "rm"

    def handle(self, request: bytes) -> Optional[str]:
        name = self.operand(request)
        self.store.remove(name)
        return f"unsubscribed from channel {go_quote(name)}"


class SubsHandler(BaseHandler):
    """List subscribed channel names."""

    name = "subs"
    reads_request = False

    def handle(self, request: bytes) -> Optional[str]:
        names = [channel.name for channel in self.store.list()]
        return "\n".join(names) or "no subscriptions"
