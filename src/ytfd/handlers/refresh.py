#!/usr/bin/env python3
"""
Refresh handler - re-fetches every subscription on demand.
"""

from typing import Optional

from .base import BaseHandler


class RefreshHandler(BaseHandler):
    """
    Run a full refresh and close the connection.

    The client is held until every channel has been refreshed and then sees
    the connection close without any response bytes.
    """

    name = "refresh"
    reads_request = False

    def handle(self, request: bytes) -> Optional[str]:
        refreshed = self.context.scheduler.refresh()
        self.logger.info(f"On-demand refresh updated {refreshed} channels")
        return None
