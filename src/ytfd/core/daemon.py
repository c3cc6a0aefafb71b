#!/usr/bin/env python3
"""
Daemon assembly and lifecycle.

Builds the daemon context, creates one endpoint per operation, installs
signal handlers and runs until the blocking endpoint stops or a signal
arrives. On SIGINT/SIGTERM every listener is closed and the process exits
with status 0 without waiting for in-flight connections.
"""

import logging
import signal
import sys
import threading
from typing import List, Optional

from .config import Config, SOCKET_NAMES
from .context import DaemonContext, build_context
from .exceptions import ConfigurationError
from .server.endpoint import Endpoint
from .subscriptions import subscribe_from_file
from ..handlers import get_handler_class
from ..integrations import ChannelResolver, ChannelSearch, DunstNotifier, FeedFetcher
from ..integrations.session import create_session

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(config: Config) -> None:
    """
    Configure root logging: stderr in debug mode, otherwise a fresh log file.

    Raises:
        ConfigurationError: If the log file cannot be opened
    """
    if config.daemon.debug:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        try:
            handler = logging.FileHandler(config.daemon.log_file, mode='w', encoding='utf-8')
        except OSError as e:
            raise ConfigurationError('log_file', f"failed to open log file: {e}")

    logging.basicConfig(
        level=getattr(logging, config.daemon.log_level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[handler],
        force=True,
    )


def build_default_context(config: Config) -> DaemonContext:
    """Context wired to the real YouTube collaborators and dunstify."""
    session = create_session(config.network)
    return build_context(
        config,
        resolver=ChannelResolver(config.network, session=session),
        fetcher=FeedFetcher(config.network, session=session),
        searcher=ChannelSearch(config.network, session=session),
        notifier=DunstNotifier(),
    )


class Daemon:
    """Owns the endpoints and the process lifecycle."""

    def __init__(self, config: Config, context: Optional[DaemonContext] = None):
        """
        Initialize daemon.

        Args:
            config: Daemon configuration
            context: Prebuilt context (tests); built from config if None
        """
        self.config = config
        self.context = context or build_default_context(config)
        self.endpoints = self.build_endpoints()
        self._stopping = threading.Event()

    def build_endpoints(self) -> List[Endpoint]:
        """One endpoint per operation, in SOCKET_NAMES order."""
        endpoints = []
        for operation in SOCKET_NAMES:
            handler = get_handler_class(operation)(self.context)
            endpoints.append(Endpoint(
                name=operation,
                socket_path=self.config.daemon.socket_path(operation),
                operation=handler,
                listeners=self.context.listeners,
                blocking=handler.blocking,
                reads_request=handler.reads_request,
            ))
        return endpoints

    def install_signal_handlers(self) -> None:
        """Close every listener and exit 0 on SIGINT/SIGTERM."""
        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, shutting down")
            self.shutdown()
            sys.exit(0)

        signal.signal(signal.SIGINT, shutdown_handler)
        signal.signal(signal.SIGTERM, shutdown_handler)

    def shutdown(self) -> None:
        if self._stopping.is_set():
            return
        self._stopping.set()
        self.context.scheduler.cancel_timer()
        self.context.listeners.close_all()

    def run(self, install_signals: bool = True) -> int:
        """
        Start background work and serve until the blocking endpoint stops.

        Returns:
            Process exit code
        """
        if install_signals:
            self.install_signal_handlers()

        logger.info(f"Starting ytfd (notifications {'on' if self.context.notifications.enabled else 'off'})")
        self.context.scheduler.start_timer()
        threading.Thread(
            target=subscribe_from_file,
            args=(self.context, self.config.daemon.subs_file),
            name="ytfd-subs-file",
            daemon=True,
        ).start()

        try:
            for endpoint in self.endpoints:
                served = endpoint.serve()
                if not served and endpoint.blocking:
                    logger.critical(f"Required endpoint '{endpoint.name}' could not start")
                    return 1
        finally:
            self.shutdown()
        return 0
