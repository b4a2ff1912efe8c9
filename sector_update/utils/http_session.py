"""HTTP session set-up for talking to the sector distribution site."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Generator

import requests
from requests.adapters import HTTPAdapter

if TYPE_CHECKING:
    from ..config import UpdaterSettings

log = logging.getLogger(__name__)


def create_session(settings: "UpdaterSettings") -> requests.Session:
    """Create a session that looks like a regular browser to the download site."""
    session = requests.Session()

    # Failures are terminal for an entry, so the adapter never retries.
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=1, max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update(
        {
            "User-Agent": settings.user_agent,
            "Accept": (
                "text/html,application/xhtml+xml,application/xml;q=0.9,"
                "image/avif,image/webp,*/*;q=0.8"
            ),
            "Accept-Encoding": "gzip, deflate",
            "Accept-Language": "en-US;q=0.7,en;q=0.3",
            "Connection": "keep-alive",
            "DNT": "1",
            "Referer": f"{settings.base_url}/",
            "Upgrade-Insecure-Requests": "1",
        }
    )
    log.debug("Created HTTP session for: %s", settings.base_url)
    return session


@contextmanager
def http_session(settings: "UpdaterSettings") -> Generator[requests.Session, None, None]:
    """Context manager yielding a configured session that is closed afterwards."""
    session = create_session(settings)
    try:
        yield session
    finally:
        session.close()
        log.debug("Closed HTTP session for: %s", settings.base_url)
