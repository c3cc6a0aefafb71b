#!/usr/bin/env python3
"""
Unix socket endpoint.

One endpoint binds one operation to one socket path. Each accepted
connection gets its own thread which reads a single request of at most
REQUEST_SIZE bytes, runs the operation, writes at most one response and
closes the connection. There is no framing: whatever the first read
returns is the whole request.
"""

import logging
import os
import shutil
import socket
import threading
from typing import Optional, Callable

from ..config import REQUEST_SIZE
from ..exceptions import YtfdError, RequestReadError
from ..formatters import first_line
from ..protocol import HEADER_SIZE, Status, encode_response
from .listeners import ListenerPool

logger = logging.getLogger(__name__)

# request bytes -> response payload, or None to send nothing
Operation = Callable[[bytes], Optional[str]]


class Endpoint:
    """A listening Unix socket dispatching connections to one operation."""

    def __init__(self,
                 name: str,
                 socket_path: str,
                 operation: Operation,
                 listeners: ListenerPool,
                 blocking: bool = False,
                 reads_request: bool = True,
                 backlog: int = 128):
        """
        Initialize endpoint (does not bind).

        Args:
            name: Operation name, used in log messages and thread names
            socket_path: Filesystem address to bind
            operation: Callable producing the success payload; raising
                turns into a failure response
            listeners: Pool the listening socket is registered with
            blocking: Run the accept loop on the calling thread
            reads_request: Read the request before running the operation
            backlog: listen() backlog
        """
        self.name = name
        self.socket_path = socket_path
        self.operation = operation
        self.listeners = listeners
        self.blocking = blocking
        self.reads_request = reads_request
        self.backlog = backlog
        self._listener: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None

    def _remove_stale(self) -> None:
        if os.path.isdir(self.socket_path) and not os.path.islink(self.socket_path):
            shutil.rmtree(self.socket_path)
        elif os.path.lexists(self.socket_path):
            os.unlink(self.socket_path)

    def bind(self) -> socket.socket:
        """
        Replace any stale file at the socket path and start listening.

        Raises:
            OSError: If the stale file cannot be removed or binding fails
        """
        self._remove_stale()
        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            listener.bind(self.socket_path)
            listener.listen(self.backlog)
        except OSError:
            listener.close()
            raise
        self.listeners.register(listener)
        self._listener = listener
        logger.info(f"'{self.name}' listening on {self.socket_path}")
        return listener

    def serve(self) -> bool:
        """
        Bind and run the accept loop.

        Blocking endpoints return only when their loop ends; others start a
        daemon thread and return immediately.

        Returns:
            False if the socket could not be set up, True otherwise
        """
        try:
            listener = self.bind()
        except OSError as e:
            logger.error(f"Failed to listen on socket '{self.socket_path}': {e}")
            return False

        if self.blocking:
            self.accept_loop(listener)
        else:
            self._thread = threading.Thread(
                target=self.accept_loop,
                args=(listener,),
                name=f"ytfd-{self.name}",
                daemon=True,
            )
            self._thread.start()
        return True

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def accept_loop(self, listener: socket.socket) -> None:
        """Accept until the listener fails or is closed."""
        while True:
            try:
                conn, _ = listener.accept()
            except OSError as e:
                if self.listeners.closed:
                    logger.info(f"'{self.name}' listener closed, stopping")
                else:
                    logger.error(f"'{self.name}' handler failed to accept connection: {e}")
                return

            threading.Thread(
                target=self.handle_connection,
                args=(conn,),
                name=f"ytfd-{self.name}-conn",
                daemon=True,
            ).start()

    def handle_connection(self, conn: socket.socket) -> None:
        """Serve one request; never raises."""
        with conn:
            request = b''
            try:
                if self.reads_request:
                    request = self._read_request(conn)
                payload = self.operation(request)
            except YtfdError as e:
                logger.error(f"'{self.name}' failed for {request!r}: {e}")
                logger.debug(f"'{self.name}' error details: {e.to_dict()}")
                self._send(conn, Status.FAILURE, str(e))
                return
            except Exception as e:
                logger.exception(f"'{self.name}' crashed for {request!r}: {e}")
                self._send(conn, Status.FAILURE, str(e))
                return

            if payload is not None:
                self._send(conn, Status.SUCCESS, payload)

    def _read_request(self, conn: socket.socket) -> bytes:
        try:
            request = conn.recv(REQUEST_SIZE)
        except OSError as e:
            raise RequestReadError(self.name, str(e))
        if not request:
            raise RequestReadError(self.name, "EOF")
        return request

    def _send(self, conn: socket.socket, status: Status, payload: str) -> None:
        message = encode_response(status, payload)
        try:
            conn.sendall(message)
        except OSError as e:
            logger.warning(f"'{self.name}' failed to send response: {e}")
            return
        if payload:
            logger.info(f"Sending {len(message) - HEADER_SIZE} bytes, '{first_line(payload)}...'")
        else:
            logger.warning("Sending empty response")
