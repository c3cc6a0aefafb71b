#!/usr/bin/env python3
"""
Base handler class for socket operations.

Each handler implements one endpoint's operation against the daemon
context. Handlers return the success payload, or None to send nothing,
and raise YtfdError subclasses for failures; the endpoint turns both into
wire responses.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..core.context import DaemonContext
from ..core.formatters import decode_operand, strip_line_terminator

logger = logging.getLogger(__name__)


class BaseHandler(ABC):
    """
    Base class for all socket operations.

    Class attributes describe how the endpoint drives the handler:
    ``reads_request`` (read the request first) and ``blocking`` (run the
    accept loop on the main thread).
    """

    name: str = ""
    reads_request: bool = True
    blocking: bool = False

    def __init__(self, context: DaemonContext):
        """
        Initialize handler with the daemon context.

        Args:
            context: Shared store, switch and collaborators
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._context = context

    @property
    def store(self):
        return self._context.store

    @property
    def context(self) -> DaemonContext:
        return self._context

    @staticmethod
    def operand(request: bytes) -> str:
        """Request text without its trailing line terminator."""
        return strip_line_terminator(decode_operand(request))

    @abstractmethod
    def handle(self, request: bytes) -> Optional[str]:
        """
        Run the operation.

        Args:
            request: Raw request bytes (empty when reads_request is False)

        Returns:
            Success payload, or None to close without a response
        """
        pass

    def __call__(self, request: bytes) -> Optional[str]:
        return self.handle(request)
