"""Unix socket endpoints and the listener pool they register with."""

from .listeners import ListenerPool
from .endpoint import Endpoint

__all__ = ['ListenerPool', 'Endpoint']
