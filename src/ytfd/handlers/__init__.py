#!/usr/bin/env python3
"""
Socket operation handlers.

One handler class per endpoint; HANDLERS lists them in the order the
daemon starts their endpoints. The last one blocks.
"""

from typing import Dict, Type

from .base import BaseHandler
from .channels import FetchHandler, AddHandler, GetHandler, RemoveHandler, SubsHandler
from .refresh import RefreshHandler
from .search import SearchHandler
from .health import HealthHandler

# Handler registry, keyed by operation name
HANDLERS: Dict[str, Type[BaseHandler]] = {
    'fetch': FetchHandler,
    'add': AddHandler,
    'get': GetHandler,
    'rm': RemoveHandler,
    'refresh': RefreshHandler,
    'search': SearchHandler,
    'subs': SubsHandler,
    'health': HealthHandler,
}


def get_handler_class(operation: str) -> Type[BaseHandler]:
    """Get a handler class by operation name."""
    if operation not in HANDLERS:
        available = ', '.join(HANDLERS.keys())
        raise ValueError(f"Unknown operation '{operation}'. Available: {available}")
    return HANDLERS[operation]
