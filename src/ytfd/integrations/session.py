#!/usr/bin/env python3
"""
Shared HTTP session setup for YouTube requests.
"""

from typing import Optional

import requests

from ..core.config import NetworkConfig


def create_session(network: Optional[NetworkConfig] = None) -> requests.Session:
    """Create a requests session with the configured User-Agent."""
    network = network or NetworkConfig()
    session = requests.Session()
    session.headers.update({
        'User-Agent': network.user_agent,
        'Accept-Language': 'en;q=0.9',
    })
    return session
