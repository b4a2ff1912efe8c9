"""Locate the current sector package on the distribution site's listing page."""
from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from .exceptions import DownloadError, ErrorContext, LinkNotFound

log = logging.getLogger(__name__)


def listing_url(base_url: str, fir: str) -> str:
    """URL of the page listing every package published for ``fir``."""
    return f"{base_url.rstrip('/')}/{fir}"


def fetch_listing(
    session: requests.Session, base_url: str, fir: str, *, timeout: int = 60
) -> Tuple[str, str]:
    """Download the listing page for ``fir``; returns ``(html, url)``."""
    url = listing_url(base_url, fir)
    log.info("🌐 Getting sector link from %s", url)
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise DownloadError(
            f"Listing page returned HTTP {status}: {url}",
            url=url,
            status_code=status,
            context=ErrorContext(fir=fir, operation="fetch_listing"),
            cause=e,
        ) from e
    except requests.RequestException as e:
        raise DownloadError(
            f"Failed to fetch listing page {url}: {e}",
            url=url,
            context=ErrorContext(fir=fir, operation="fetch_listing"),
            cause=e,
        ) from e
    return resp.text, url


def find_download_url(
    listing_page: str,
    package_name: str,
    page_url: Optional[str] = None,
    *,
    archive_suffix: str = ".zip",
) -> str:
    """Return the URL of the package link matching ``package_name``.

    A link matches when the file name in its href or its text contains
    ``package_name``; the directory part of the href is ignored. Links
    pointing at an archive are preferred over other matches, and the last
    candidate on the page wins since listings put the newest release last.
    Relative hrefs are resolved against ``page_url``.
    """
    soup = BeautifulSoup(listing_page, "html.parser")

    matches: List[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        text = anchor.get_text(strip=True)
        if not href:
            continue
        file_name = PurePosixPath(urlparse(href).path).name
        if package_name in file_name or package_name in text:
            matches.append(href)

    if not matches:
        raise LinkNotFound(
            f"No link matching '{package_name}' found on listing page",
            package_name=package_name,
            context=ErrorContext(operation="find_link", url=page_url),
        )

    archives = [href for href in matches if href.lower().endswith(archive_suffix.lower())]
    if archives:
        chosen = archives[-1]
    else:
        log.warning(
            "⚠️ No '%s' link matches '%s', using last matching link",
            archive_suffix,
            package_name,
        )
        chosen = matches[-1]

    file_url = urljoin(page_url, chosen) if page_url else chosen
    log.info("🔗 Got url: %s", file_url)
    return file_url


__all__ = ["fetch_listing", "find_download_url", "listing_url"]
