"""External collaborators: YouTube resolution, feed fetching, search and desktop alerts."""

from .channel_resolver import ChannelResolver
from .feed_fetcher import FeedFetcher
from .channel_search import ChannelSearch
from .desktop_notifier import DunstNotifier

__all__ = ['ChannelResolver', 'FeedFetcher', 'ChannelSearch', 'DunstNotifier']
