"""
ytfd - YouTube feed daemon.

Tracks subscribed channels, keeps their latest videos in memory and serves
them to local clients over Unix domain sockets.
"""

__version__ = "0.1.0"
