"""Data models for ytfd."""

from .video import Video, Channel, render_videos

__all__ = ['Video', 'Channel', 'render_videos']
