#!/usr/bin/env python3
"""
Channel search - finds channel handles matching a query on YouTube's results page.
"""

import logging
import re
from typing import List, Optional

import requests

from ..core.config import SEARCH_URL_BASE, NetworkConfig
from ..core.exceptions import SearchError
from ..core.formatters import go_quote
from .session import create_session

logger = logging.getLogger(__name__)


class ChannelSearch:
    """Searches YouTube for channel handles."""

    def __init__(self, network: Optional[NetworkConfig] = None, session: Optional[requests.Session] = None):
        self.network = network or NetworkConfig()
        self.session = session or create_session(self.network)

    def search(self, query: str) -> str:
        """
        Search for channels whose handle contains the query.

        Args:
            query: Free text; spaces become '+' and it is lower-cased

        Returns:
            Comma-separated handles, or a "found no channel like" sentence

        Raises:
            SearchError: If the results page cannot be loaded
        """
        query = query.replace(" ", "+").lower()
        try:
            response = self.session.get(SEARCH_URL_BASE + query, timeout=self.network.http_timeout)
        except requests.RequestException as e:
            raise SearchError(query, e)

        handles = self.find_handles(response.text, query)
        if not handles:
            return f"found no channel like {go_quote(query)}"
        return ", ".join(handles)

    @staticmethod
    def find_handles(page: str, query: str) -> List[str]:
        """
        Unique ``"/@handle"`` occurrences containing the query, in page order.

        Matching is case-insensitive; handles keep the page's spelling.
        Handle characters are ASCII letters, digits and underscores only.
        """
        pattern = re.compile(r'"/@\w*' + re.escape(query) + r'\w*"', re.ASCII)
        lowered = page.lower()
        source = page if len(lowered) == len(page) else lowered
        seen = {}
        for match in pattern.finditer(lowered):
            handle = source[match.start() + 3:match.end() - 1]
            seen.setdefault(handle, None)
        return list(seen)
