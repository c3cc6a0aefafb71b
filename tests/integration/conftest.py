import shutil
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from ytfd.core.config import Config, DaemonConfig  # noqa: E402
from ytfd.core.context import build_context  # noqa: E402
from ytfd.core.daemon import Daemon  # noqa: E402
from ytfd.core.exceptions import ChannelNotFoundError, NotificationError, SourceConnectionError  # noqa: E402
from ytfd.core.models.video import Channel, Video  # noqa: E402


def make_videos(*ids: str) -> List[Video]:
    return [Video(title=f"Video {video_id}", video_id=video_id, description="") for video_id in ids]


def make_channel(name: str, *ids: str, feed_url: str = "") -> Channel:
    return Channel(
        name=name,
        url=f"https://www.youtube.com/channel/{name}",
        feed_url=feed_url or f"feed://{name}",
        videos=make_videos(*ids),
    )


class FakeResolver:
    def __init__(self, known: Optional[Dict[str, str]] = None) -> None:
        self.known = known or {}
        self.calls: List[str] = []

    def resolve(self, name: str) -> str:
        self.calls.append(name)
        name = name.replace("\n", "")
        if name not in self.known:
            raise ChannelNotFoundError(name)
        return self.known[name]


class FakeFetcher:
    """Serves queued video-id lists per feed address; the last list repeats."""

    def __init__(self) -> None:
        self.feeds: Dict[str, List[List[str]]] = {}
        self.failing: Dict[str, Exception] = {}
        self.calls: List[str] = []

    def set_feed(self, feed_url: str, *batches: List[str]) -> None:
        self.feeds[feed_url] = [list(batch) for batch in batches]

    def fetch(self, name: str, feed_url: str) -> Channel:
        self.calls.append(feed_url)
        if feed_url in self.failing:
            raise self.failing[feed_url]
        if feed_url not in self.feeds:
            raise SourceConnectionError(feed_url, RuntimeError("no such feed"))
        batches = self.feeds[feed_url]
        ids = batches.pop(0) if len(batches) > 1 else batches[0]
        return Channel(
            name=name,
            url=f"https://www.youtube.com/channel/{feed_url.rsplit('/', 1)[-1]}",
            feed_url=feed_url,
            videos=make_videos(*ids),
        )


class FakeNotifier:
    def __init__(self, fail_on_call: Optional[int] = None) -> None:
        self.fail_on_call = fail_on_call
        self.notified: List[str] = []
        self.calls = 0

    def notify(self, channel_key: str, video: Video) -> None:
        self.calls += 1
        if self.fail_on_call is not None and self.calls >= self.fail_on_call:
            raise NotificationError("fake-notify", RuntimeError("display unavailable"))
        self.notified.append(video.video_id)


class FakeSearcher:
    def __init__(self, result: str = "lofigirl, lofibeats") -> None:
        self.result = result
        self.queries: List[str] = []

    def search(self, query: str) -> str:
        self.queries.append(query)
        return self.result


@pytest.fixture
def socket_dir():
    # AF_UNIX paths are short; pytest's tmp_path can exceed the limit
    path = tempfile.mkdtemp(prefix="ytfd-")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def fake_resolver() -> FakeResolver:
    return FakeResolver({"LofiGirl": "feed://UClofi", "Some Channel": "feed://UCsome"})


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    fetcher = FakeFetcher()
    fetcher.set_feed("feed://UClofi", ["l3", "l2", "l1"])
    fetcher.set_feed("feed://UCsome", ["s2", "s1"])
    return fetcher


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def fake_searcher() -> FakeSearcher:
    return FakeSearcher()


@pytest.fixture
def daemon_config(socket_dir) -> Config:
    return Config(daemon=DaemonConfig(notify=True, socket_dir=socket_dir, debug=True))


@pytest.fixture
def context(daemon_config, fake_resolver, fake_fetcher, fake_searcher, fake_notifier):
    return build_context(
        daemon_config,
        resolver=fake_resolver,
        fetcher=fake_fetcher,
        searcher=fake_searcher,
        notifier=fake_notifier,
    )


@pytest.fixture
def running_daemon(daemon_config, context):
    """All endpoints served on background threads."""
    daemon = Daemon(daemon_config, context)
    for endpoint in daemon.endpoints:
        endpoint.blocking = False
        assert endpoint.serve()
    yield daemon
    daemon.shutdown()
    for endpoint in daemon.endpoints:
        endpoint.join(timeout=2)
