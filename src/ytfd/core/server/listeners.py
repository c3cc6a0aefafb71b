#!/usr/bin/env python3
"""
Bounded registry of listening sockets.

Every endpoint registers its listening socket here at startup so that a
shutdown signal can close them all at once. The capacity equals the number
of configured endpoints; exceeding it means the endpoint table is wrong, so
the daemon closes everything and exits instead of raising.
"""

import logging
import socket
import sys
import threading
from typing import List

from ..config import LISTENERS_SIZE

logger = logging.getLogger(__name__)


def _describe(listener: socket.socket) -> str:
    try:
        return str(listener.getsockname())
    except OSError:
        return "<closed>"


class ListenerPool:
    """Fixed-capacity collection of listening sockets."""

    def __init__(self, capacity: int = LISTENERS_SIZE):
        self.capacity = capacity
        self._listeners: List[socket.socket] = []
        # reentrant: the signal handler may close the pool while register() holds it
        self._lock = threading.RLock()
        self._closed = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def register(self, listener: socket.socket) -> None:
        """
        Add a listening socket.

        Exits the process with status 1 after closing every listener,
        including this one, if the pool is already full.
        """
        with self._lock:
            if len(self._listeners) + 1 <= self.capacity:
                self._listeners.append(listener)
                return

        logger.critical(f"Too many listeners opened (capacity {self.capacity})")
        listener.close()
        self.close_all()
        sys.exit(1)

    def close_all(self) -> None:
        """Close every registered listener once. Safe to call repeatedly."""
        with self._lock:
            listeners, self._listeners = self._listeners, []
            self._closed = True

        for listener in listeners:
            logger.info(f"Closing listener: {_describe(listener)}")
            try:
                # shutdown wakes a thread blocked in accept(); close alone does not
                listener.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            try:
                listener.close()
            except OSError as e:
                logger.warning(f"Failed to close listener: {e}")
