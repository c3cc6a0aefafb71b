import threading
import time

import pytest

from ytfd.core.exceptions import EmptyFeedError, NotSubscribedError
from ytfd.core.notifications import NotificationSwitch
from ytfd.core.store import SubscriptionStore, normalize_name

from conftest import FakeNotifier, make_channel


def ids(channel):
    return [video.video_id for video in channel.videos]


def store_with(notifier=None, enforce_cap=False):
    switch = NotificationSwitch(notifier, enabled=notifier is not None)
    return SubscriptionStore(notifications=switch, enforce_cap=enforce_cap)


def test_normalize_name_lowercases_and_strips_whitespace():
    """Test that keys ignore case and whitespace."""
    assert normalize_name("Some Channel") == "somechannel"
    assert normalize_name("  LOFI\tGirl\n") == "lofigirl"


def test_remove_unknown_channel_is_a_noop():
    """Test that removing an unknown channel never fails."""
    store = store_with()
    store.remove("nobody")
    store.remove("nobody")
    assert len(store) == 0


def test_add_with_no_videos_fails_and_leaves_store_unchanged():
    """Test that an empty fetch never overwrites a stored record."""
    store = store_with()
    store.add("chan", make_channel("chan", "a1"))

    with pytest.raises(EmptyFeedError) as excinfo:
        store.add("chan", make_channel("chan"))

    assert str(excinfo.value) == "channel with no videos"
    assert ids(store.get("chan")) == ["a1"]


def test_add_with_no_videos_does_not_create_record():
    """Test that an empty fetch never creates a record."""
    store = store_with()
    with pytest.raises(EmptyFeedError):
        store.add("ghost", make_channel("ghost"))
    with pytest.raises(NotSubscribedError):
        store.get("ghost")


def test_get_ignores_case_and_spaces():
    """Test lookup by a differently spelled name."""
    store = store_with()
    store.add("Some Channel", make_channel("Some Channel", "s1"))

    record = store.get("someCHANNEL")

    assert record.name == "Some Channel"
    assert ids(record) == ["s1"]


def test_get_unknown_reports_normalized_key():
    """Test the error message for a missing channel."""
    store = store_with()
    with pytest.raises(NotSubscribedError) as excinfo:
        store.get("Not Here")
    assert str(excinfo.value) == "not subscribed to channel 'nothere'"


def test_new_record_is_truncated_to_max_feed_size():
    """Test that new records keep at most seven videos."""
    store = store_with()
    store.add("big", make_channel("big", *[f"v{i}" for i in range(10, 0, -1)]))
    assert ids(store.get("big")) == ["v10", "v9", "v8", "v7", "v6", "v5", "v4"]


def test_repeat_add_keeps_original_name_and_address():
    """Test that merges never replace the stored name or feed address."""
    store = store_with()
    store.add("Lofi Girl", make_channel("Lofi Girl", "v1", feed_url="feed://first"))
    store.add("lofigirl", make_channel("lofigirl", "v2", "v1", feed_url="feed://second"))

    record = store.get("lofigirl")
    assert record.name == "Lofi Girl"
    assert record.feed_url == "feed://first"
    assert ids(record) == ["v2", "v1"]


def test_merge_with_overlap_prepends_new_videos_and_notifies_newest_first():
    """Test that new videos are prepended and announced newest first."""
    notifier = FakeNotifier()
    store = store_with(notifier)
    store.add("chan", make_channel("chan", "v3", "v2", "v1"))

    store.add("chan", make_channel("chan", "v5", "v4", "v3", "v2", "v1"))

    assert notifier.notified == ["v5", "v4"]
    assert ids(store.get("chan")) == ["v5", "v4", "v3", "v2", "v1"]


def test_merge_without_overlap_keeps_existing_videos_and_does_not_notify():
    """Test that a fetch missing the latest known video changes nothing."""
    notifier = FakeNotifier()
    store = store_with(notifier)
    store.add("chan", make_channel("chan", "v3", "v2", "v1"))

    store.add("chan", make_channel("chan", "x9", "x8"))

    assert notifier.notified == []
    assert ids(store.get("chan")) == ["v3", "v2", "v1"]


def test_merge_with_unchanged_feed_is_a_noop():
    """Test that an unchanged feed neither notifies nor modifies the record."""
    notifier = FakeNotifier()
    store = store_with(notifier)
    store.add("chan", make_channel("chan", "v2", "v1"))

    store.add("chan", make_channel("chan", "v2", "v1"))

    assert notifier.notified == []
    assert ids(store.get("chan")) == ["v2", "v1"]


def test_merge_can_grow_past_the_cap_by_default():
    """Test that merged records are not re-truncated by default."""
    store = store_with()
    existing = [f"e{i}" for i in range(7, 0, -1)]
    store.add("chan", make_channel("chan", *existing))

    store.add("chan", make_channel("chan", "n3", "n2", "n1", *existing))

    assert ids(store.get("chan")) == ["n3", "n2", "n1"] + existing
    assert len(store.get("chan").videos) == 10


def test_merge_respects_cap_when_enforced():
    """Test that enforce_cap truncates merged records."""
    store = store_with(enforce_cap=True)
    existing = [f"e{i}" for i in range(7, 0, -1)]
    store.add("chan", make_channel("chan", *existing))

    store.add("chan", make_channel("chan", "n3", "n2", "n1", *existing))

    assert ids(store.get("chan")) == ["n3", "n2", "n1", "e7", "e6", "e5", "e4"]


def test_notifier_failure_stops_announcements_and_disables_switch():
    """Test that the first notifier failure turns notifications off for good."""
    notifier = FakeNotifier(fail_on_call=2)
    store = store_with(notifier)
    store.add("chan", make_channel("chan", "v1"))

    store.add("chan", make_channel("chan", "v4", "v3", "v2", "v1"))

    assert notifier.notified == ["v4"]
    assert notifier.calls == 2
    assert store.notifications.enabled is False
    # merge still applied
    assert ids(store.get("chan")) == ["v4", "v3", "v2", "v1"]

    store.add("chan", make_channel("chan", "v5", "v4"))
    assert notifier.calls == 2


def test_disabled_notifications_never_call_notifier():
    """Test that a disabled switch never reaches the notifier."""
    notifier = FakeNotifier()
    switch = NotificationSwitch(notifier, enabled=False)
    store = SubscriptionStore(notifications=switch)
    store.add("chan", make_channel("chan", "v1"))
    store.add("chan", make_channel("chan", "v2", "v1"))
    assert notifier.calls == 0


def test_list_returns_all_records():
    """Test that list returns every stored channel."""
    store = store_with()
    store.add("a", make_channel("a", "a1"))
    store.add("b", make_channel("b", "b1"))
    assert sorted(channel.name for channel in store.list()) == ["a", "b"]


def test_returned_records_are_snapshots():
    """Test that returned records do not change after later merges."""
    store = store_with()
    store.add("chan", make_channel("chan", "v1"))
    record = store.get("chan")
    store.add("chan", make_channel("chan", "v2", "v1"))
    assert ids(record) == ["v1"]


class SlowNotifier:
    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.started = threading.Event()

    def notify(self, channel_key, video) -> None:
        self.started.set()
        time.sleep(self.delay)


def test_readers_see_whole_merges_only():
    """Test that concurrent readers never observe a half-applied merge."""
    notifier = SlowNotifier(delay=0.05)
    store = store_with(notifier)
    before = ["v3", "v2", "v1"]
    after = ["v6", "v5", "v4", "v3", "v2", "v1"]
    store.add("chan", make_channel("chan", *before))

    observed = []
    errors = []

    def reader():
        try:
            for _ in range(20):
                observed.append(ids(store.get("chan")))
                observed.extend(ids(channel) for channel in store.list())
        except Exception as e:  # noqa: BLE001
            errors.append(e)

    writer = threading.Thread(target=store.add, args=("chan", make_channel("chan", *after)))
    writer.start()
    notifier.started.wait(timeout=2)
    readers = [threading.Thread(target=reader) for _ in range(8)]
    for thread in readers:
        thread.start()
    for thread in readers + [writer]:
        thread.join(timeout=5)

    assert not errors
    assert observed
    assert all(seen in (before, after) for seen in observed)
    # readers started while the merge held the write lock
    assert after in observed
