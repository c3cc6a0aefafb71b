import pytest

from ytfd.cli_router import CLIRouter
from ytfd.core.config import ConfigManager


@pytest.fixture
def router():
    return CLIRouter(config_manager=ConfigManager(environ={}))


def test_no_command_prints_help(router, capsys):
    """Test that running without a subcommand prints help and fails."""
    assert router.route_command([]) == 1
    assert "daemon" in capsys.readouterr().out


def test_daemon_flags_are_parsed(router):
    """Test that daemon flags map onto config override names."""
    args = router.parser.parse_args(["daemon", "--subs", "a.subs", "--refrate", "7", "--no-notify", "--debug"])
    assert args.subs_file == "a.subs"
    assert args.refresh_rate_minutes == 7
    assert args.notify is False
    assert args.debug is True


def test_daemon_flags_default_to_unset(router):
    """Test that omitted daemon flags leave the environment values in charge."""
    args = router.parser.parse_args(["daemon"])
    assert args.notify is None
    assert args.refresh_rate_minutes is None


def test_unknown_operation_is_rejected(router):
    """Test that the client refuses operations without a socket."""
    with pytest.raises(SystemExit):
        router.parser.parse_args(["client", "delete", "x"])


def test_invalid_refresh_rate_fails_before_starting(router, capsys):
    """Test that invalid configuration stops the daemon before it binds anything."""
    assert router.route_command(["daemon", "--refrate", "0", "--debug"]) == 1
    assert "YTFD_REFRESH_RATE" in capsys.readouterr().err


def test_client_prints_successful_response(router, running_daemon, socket_dir, capsys):
    """Test that successful payloads are printed to stdout."""
    assert router.route_command(["client", "add", "LofiGirl", "--socket-dir", socket_dir]) == 0
    assert router.route_command(["client", "subs", "--socket-dir", socket_dir]) == 0

    out = capsys.readouterr().out
    assert out == 'subscribed to channel "LofiGirl"\nLofiGirl\n'


def test_client_prints_failure_to_stderr(router, running_daemon, socket_dir, capsys):
    """Test that failure payloads go to stderr with exit status 1."""
    assert router.route_command(["client", "get", "nobody", "--socket-dir", socket_dir]) == 1
    assert "not subscribed to channel 'nobody'\n" in capsys.readouterr().err


def test_client_refresh_has_no_output(router, running_daemon, socket_dir, capsys):
    """Test that refresh closes without a response and the client prints nothing."""
    assert router.route_command(["client", "refresh", "--socket-dir", socket_dir]) == 0
    assert capsys.readouterr().out == ""


def test_client_reports_unreachable_daemon(router, socket_dir, capsys):
    """Test that a missing daemon is reported instead of raising."""
    assert router.route_command(["client", "health", "x", "--socket-dir", socket_dir]) == 1
    assert "cannot reach" in capsys.readouterr().err
