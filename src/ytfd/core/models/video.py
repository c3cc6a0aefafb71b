#!/usr/bin/env python3
"""
Video and channel data models.

A Channel is the record the subscription store keeps per subscribed source:
display name, channel page address and its newest videos, newest first.
"""

from dataclasses import dataclass, field, replace
from typing import List, Iterable

from ..config import WATCH_URL_BASE


@dataclass(frozen=True)
class Video:
    """A single video entry from a channel feed."""
    title: str
    video_id: str
    description: str = ""

    @property
    def watch_url(self) -> str:
        return f"{WATCH_URL_BASE}{self.video_id}"

    def render(self) -> str:
        """Title, then the indented watch address, newline-terminated."""
        return f"{self.title}\n\t{self.watch_url}\n"


def render_videos(videos: Iterable[Video]) -> str:
    """Concatenate video renderings, dropping the final newline."""
    text = ''.join(video.render() for video in videos)
    if text:
        text = text[:-1]
    return text


@dataclass
class Channel:
    """
    A subscribed (or freshly fetched) channel.

    ``name`` keeps the caller's original spelling; the store derives its
    lookup key from it. ``url`` is the channel page address, while
    ``feed_url`` is the address refreshes re-fetch.
    """
    name: str
    url: str
    feed_url: str = ""
    videos: List[Video] = field(default_factory=list)

    @property
    def latest(self) -> Video:
        return self.videos[0]

    def snapshot(self) -> 'Channel':
        """Copy safe to hand out after the store lock is released."""
        return replace(self, videos=list(self.videos))

    def render(self) -> str:
        """Multi-line rendering used by the fetch, get and add endpoints."""
        return f"{self.name}\n\t{self.url}\n\n{render_videos(self.videos)}"

    def __str__(self) -> str:
        return self.render()
