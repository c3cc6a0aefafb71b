#!/usr/bin/env python3
"""
CLI router for ytfd.

Command structure:
- python run.py daemon --subs ./example.subs --refrate 7 --notify
- python run.py daemon --no-notify --debug
- python run.py client add somechannel
- python run.py client subs
"""

import argparse
import logging
import socket
import sys
from typing import Optional, List

from .core.config import SOCKET_NAMES, ConfigManager, get_config_manager
from .core.daemon import Daemon, setup_logging
from .core.exceptions import ConfigurationError, ProtocolError
from .core.protocol import decode_response

logger = logging.getLogger(__name__)


class CLIRouter:
    """CLI router for the daemon and its bundled client."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize CLI router."""
        self.parser = self._create_parser()
        self._config_manager = config_manager

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            prog="ytfd",
            description="YouTube feed daemon: tracks channels and serves their latest videos over Unix sockets",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_examples_text()
        )

        subparsers = parser.add_subparsers(
            dest='command',
            help='Available commands',
            metavar='{daemon,client}'
        )

        self._add_daemon_parser(subparsers)
        self._add_client_parser(subparsers)
        return parser

    def _add_daemon_parser(self, subparsers):
        """Add daemon command parser."""
        daemon_parser = subparsers.add_parser('daemon', help='Run the feed daemon')
        daemon_parser.add_argument('--notify', dest='notify', action='store_true', default=None,
                                   help='Show a dunstify notification for every new video (default: on). '
                                        'Turned off for good after the first failure')
        daemon_parser.add_argument('--no-notify', dest='notify', action='store_false',
                                   help='Disable new-video notifications')
        daemon_parser.add_argument('--subs', dest='subs_file', default=None,
                                   help='File with channel names to subscribe to, one per line')
        daemon_parser.add_argument('--refrate', dest='refresh_rate_minutes', type=int, default=None,
                                   help='Minutes until the startup refresh runs (default: 15)')
        daemon_parser.add_argument('--debug', action='store_true', default=None,
                                   help='Log to stderr instead of the log file')
        daemon_parser.add_argument('--log-file', dest='log_file', default=None,
                                   help='Log file path (default: /tmp/ytfd.log)')
        daemon_parser.add_argument('--socket-dir', dest='socket_dir', default=None,
                                   help='Directory for the endpoint sockets (default: /tmp)')

    def _add_client_parser(self, subparsers):
        """Add client command parser."""
        client_parser = subparsers.add_parser('client', help='Send one request to a running daemon')
        client_parser.add_argument('operation', choices=list(SOCKET_NAMES), help='Endpoint to call')
        client_parser.add_argument('operand', nargs='*', help='Channel name or search text')
        client_parser.add_argument('--socket-dir', dest='socket_dir', default=None,
                                   help='Directory for the endpoint sockets (default: /tmp)')

    def _get_examples_text(self) -> str:
        """Get examples text for help."""
        return """
Examples:
  python run.py daemon --subs ./example.subs --refrate 7 --notify
  python run.py daemon --subs ./example.subs --refrate 7 --no-notify --debug
  python run.py client add somechannel
  python run.py client get somechannel
  python run.py client search lofi beats
  python run.py client refresh
"""

    @property
    def config_manager(self) -> ConfigManager:
        return self._config_manager or get_config_manager()

    def route_command(self, args: Optional[List[str]] = None) -> int:
        """
        Route command to appropriate handler.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            Exit code
        """
        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        if parsed_args.command == 'daemon':
            return self.run_daemon(parsed_args)
        return self.run_client(parsed_args)

    def run_daemon(self, args: argparse.Namespace) -> int:
        """Run the daemon until it is signalled."""
        overrides = {
            'notify': args.notify,
            'subs_file': args.subs_file,
            'refresh_rate_minutes': args.refresh_rate_minutes,
            'debug': args.debug,
            'log_file': args.log_file,
            'socket_dir': args.socket_dir,
        }
        try:
            config = self.config_manager.get_config(overrides)
            setup_logging(config)
        except (ValueError, ConfigurationError) as e:
            print(f"ytfd: {e}", file=sys.stderr)
            return 1

        return Daemon(config).run()

    def run_client(self, args: argparse.Namespace) -> int:
        """Send one request and print the decoded response."""
        try:
            config = self.config_manager.get_config({'socket_dir': args.socket_dir})
        except ValueError as e:
            print(f"ytfd: {e}", file=sys.stderr)
            return 1

        path = config.daemon.socket_path(args.operation)
        operand = ' '.join(args.operand)
        try:
            message = send_request(path, operand.encode('utf-8'))
        except OSError as e:
            print(f"ytfd: cannot reach '{path}': {e}", file=sys.stderr)
            return 1

        if not message:
            # refresh answers by closing the connection
            return 0
        try:
            response = decode_response(message)
        except ProtocolError as e:
            print(f"ytfd: {e}", file=sys.stderr)
            return 1

        stream = sys.stdout if response.ok else sys.stderr
        print(response.text, file=stream)
        return 0 if response.ok else 1


def send_request(path: str, request: bytes, timeout: Optional[float] = None) -> bytes:
    """Write one request to an endpoint socket and read until it closes."""
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.settimeout(timeout)
        sock.connect(path)
        if request:
            sock.sendall(request)
        # an endpoint waiting on an empty request sees EOF instead of hanging
        sock.shutdown(socket.SHUT_WR)
        chunks = []
        while True:
            try:
                chunk = sock.recv(4096)
            except ConnectionResetError:
                # endpoint closed with part of an oversized request unread
                break
            if not chunk:
                break
            chunks.append(chunk)
    return b''.join(chunks)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    router = CLIRouter()
    return router.route_command(argv)


if __name__ == "__main__":
    sys.exit(main())
