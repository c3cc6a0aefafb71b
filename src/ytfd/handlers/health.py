#!/usr/bin/env python3
"""
Health handler - echoes the request back, quoted.
"""

from typing import Optional

from .base import BaseHandler
from ..core.formatters import decode_operand, go_quote


class HealthHandler(BaseHandler):
    """
    Liveness probe.

    Echoes the raw request, trailing newline included. This endpoint's
    accept loop runs on the main thread and keeps the daemon alive.
    """

    name = "health"
    blocking = True

    def handle(self, request: bytes) -> Optional[str]:
        return go_quote(decode_operand(request))
