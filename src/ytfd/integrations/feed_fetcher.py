#!/usr/bin/env python3
"""
Channel feed fetcher.

Downloads a channel's Atom feed and turns its entries into Video objects,
newest first, capped at MAX_FEED_SIZE.
"""

import logging
from typing import List, Optional

import feedparser
import requests

from ..core.config import CHANNEL_URL_BASE, CHANNEL_URL_BY_ID_BASE, MAX_FEED_SIZE, NetworkConfig
from ..core.exceptions import SourceConnectionError, SourceParseError
from ..core.models.video import Channel, Video
from .session import create_session

logger = logging.getLogger(__name__)


def channel_page_url(name: str, feed_url: str) -> str:
    """Channel page address derived from the channel id in the feed address."""
    if '=' in feed_url:
        return CHANNEL_URL_BY_ID_BASE + feed_url.split('=')[1]
    return CHANNEL_URL_BASE + name


class FeedFetcher:
    """Fetches and parses YouTube channel feeds."""

    def __init__(self,
                 network: Optional[NetworkConfig] = None,
                 session: Optional[requests.Session] = None,
                 max_feed_size: int = MAX_FEED_SIZE):
        self.network = network or NetworkConfig()
        self.session = session or create_session(self.network)
        self.max_feed_size = max_feed_size

    def fetch(self, name: str, feed_url: str) -> Channel:
        """
        Fetch a channel feed.

        Args:
            name: Display name to give the channel
            feed_url: Feed address

        Returns:
            Channel with up to max_feed_size videos (possibly none)

        Raises:
            SourceConnectionError: If the download fails
            SourceParseError: If the document is not a readable feed
        """
        try:
            logger.debug(f"Fetching feed from: {feed_url}")
            response = self.session.get(feed_url, timeout=self.network.http_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SourceConnectionError(feed_url, e)

        feed = feedparser.parse(response.content)
        if feed.bozo and not feed.entries:
            raise SourceParseError(feed_url, feed.get('bozo_exception', 'not a feed'))

        videos = self.parse_entries(feed)
        logger.info(f"Fetched {len(videos)} videos for '{name.strip()}'")
        return Channel(
            name=name,
            url=channel_page_url(name, feed_url),
            feed_url=feed_url,
            videos=videos[:self.max_feed_size],
        )

    @staticmethod
    def parse_entries(feed: feedparser.FeedParserDict) -> List[Video]:
        """Convert feed entries to videos, skipping entries without an id."""
        videos = []
        for entry in feed.entries:
            video_id = entry.get('yt_videoid') or ''
            if not video_id:
                # Fall back to the "yt:video:<id>" entry id
                video_id = entry.get('id', '').rsplit(':', 1)[-1]
            if not video_id:
                logger.debug(f"Skipping entry without video id: {entry.get('title', '')}")
                continue
            videos.append(Video(
                title=entry.get('title', ''),
                video_id=video_id,
                description=entry.get('media_description') or entry.get('summary', ''),
            ))
        return videos
