#!/usr/bin/env python3
"""
Channel resolver - turns a channel handle into its feed address.

Loads the channel page at ``https://www.youtube.com/@<name>`` and looks for
the ``feeds/videos.xml?channel_id=...`` address it advertises.
"""

import logging
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup

from ..core.config import CHANNEL_URL_BASE, FEED_URL_BASE, NetworkConfig
from ..core.exceptions import ChannelNotFoundError, EmptyChannelNameError, SourceConnectionError
from .session import create_session

logger = logging.getLogger(__name__)

FEED_URL_PATTERN = re.compile(re.escape(FEED_URL_BASE) + r"[a-zA-Z0-9_-]{24}")


class ChannelResolver:
    """Resolves channel names to feed addresses."""

    def __init__(self, network: Optional[NetworkConfig] = None, session: Optional[requests.Session] = None):
        self.network = network or NetworkConfig()
        self.session = session or create_session(self.network)

    def resolve(self, name: str) -> str:
        """
        Find the feed address of a channel.

        Args:
            name: Channel handle as sent by the client; newlines are dropped

        Returns:
            Feed address

        Raises:
            EmptyChannelNameError: If nothing is left after dropping newlines
            SourceConnectionError: If the channel page cannot be loaded
            ChannelNotFoundError: If the page advertises no feed
        """
        name = name.replace("\n", "")
        if not name:
            raise EmptyChannelNameError()

        url = CHANNEL_URL_BASE + name
        try:
            response = self.session.get(url, timeout=self.network.http_timeout)
        except requests.RequestException as e:
            raise SourceConnectionError(url, e)

        feed_url = self.find_feed_url(response.text)
        if feed_url is None:
            raise ChannelNotFoundError(name)

        logger.debug(f"Resolved '{name}' to {feed_url}")
        return feed_url

    @staticmethod
    def find_feed_url(html: str) -> Optional[str]:
        """Feed address from the page's alternate link, else the first one in the text."""
        soup = BeautifulSoup(html, 'html.parser')
        link = soup.find('link', attrs={'rel': 'alternate', 'type': 'application/rss+xml'})
        if link is not None:
            match = FEED_URL_PATTERN.search(link.get('href', ''))
            if match:
                return match.group(0)

        match = FEED_URL_PATTERN.search(html)
        return match.group(0) if match else None
