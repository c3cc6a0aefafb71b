#!/usr/bin/env python3
"""
Search handler - looks up channel handles matching a query.
"""

from typing import Optional

from .base import BaseHandler


class SearchHandler(BaseHandler):
    """Search YouTube for channel handles."""

    name = "search"

    def handle(self, request: bytes) -> Optional[str]:
        return self.context.searcher.search(self.operand(request))
