#!/usr/bin/env python3
"""
Desktop notifications through dunstify.
"""

import logging
import subprocess
from typing import List

from ..core.exceptions import NotificationError
from ..core.models.video import Video

logger = logging.getLogger(__name__)


class DunstNotifier:
    """Shows a low-urgency dunst notification per new video."""

    def __init__(self, command: str = "dunstify", app_name: str = "notifyVid",
                 timeout_ms: int = 10000, stack_tag: str = "ytfd"):
        self.command = command
        self.app_name = app_name
        self.timeout_ms = timeout_ms
        self.stack_tag = stack_tag

    def build_args(self, channel_key: str, video: Video) -> List[str]:
        notice = f"New video from {channel_key}:\n{video.title}"
        return [
            self.command,
            "-a", self.app_name,
            "-t", str(self.timeout_ms),
            "-u", "low",
            "-h", f"string:x-dunst-stack-tag:{self.stack_tag}",
            notice,
        ]

    def notify(self, channel_key: str, video: Video) -> None:
        """
        Show the notification.

        Raises:
            NotificationError: If dunstify is missing or exits non-zero
        """
        try:
            subprocess.run(self.build_args(channel_key, video), check=True, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise NotificationError(self.command, e)
        logger.debug(f"Notified new video {video.video_id} from '{channel_key}'")
