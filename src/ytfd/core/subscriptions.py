#!/usr/bin/env python3
"""
Bulk subscription from a file of channel names, one per line.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional

from .context import DaemonContext

logger = logging.getLogger(__name__)


def read_channel_names(path: str) -> List[str]:
    """
    Channel names listed in a file, blank lines skipped.

    Raises:
        OSError: If the file cannot be read
    """
    text = Path(path).read_text(encoding='utf-8', errors='surrogateescape')
    return [line.rstrip('\r') for line in text.split('\n') if line.strip()]


def subscribe_one(context: DaemonContext, name: str) -> bool:
    """Resolve, fetch and store one channel; failures are logged, not raised."""
    try:
        channel = context.resolve_and_fetch(name)
    except Exception as e:
        logger.error(f"Failed to fetch '{name}': {e}")
        return False

    try:
        context.store.add(name, channel)
    except Exception as e:
        logger.warning(f"Failed to subscribe to channel '{name}': {e}")
        return False

    logger.info(f"Channel '{name}' stored")
    return True


def subscribe_from_file(context: DaemonContext, path: Optional[str], wait: bool = False) -> List[threading.Thread]:
    """
    Subscribe to every channel listed in a file, one thread per channel.

    Args:
        context: Daemon context
        path: File with one channel name per line; None or empty skips
        wait: Join the worker threads before returning

    Returns:
        The started worker threads
    """
    if not path:
        logger.info("No subs filename provided")
        return []

    try:
        names = read_channel_names(path)
    except OSError as e:
        logger.error(f"Failed to read subs file '{path}': {e}")
        return []

    logger.info(f"Subscribing to {len(names)} channels from '{path}'")
    workers = []
    for name in names:
        worker = threading.Thread(
            target=subscribe_one,
            args=(context, name),
            name=f"ytfd-subscribe-{name}",
            daemon=True,
        )
        worker.start()
        workers.append(worker)

    if wait:
        for worker in workers:
            worker.join()
    return workers
