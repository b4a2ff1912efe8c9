"""Public re‑exports so callers can simply ``from sector_update.utils import download``."""

from .io import CHUNK, copy_tree, download, extract_zip  # noqa: F401
from .http_session import create_session, http_session  # noqa: F401
from .run_summary import Summary  # noqa: F401

__all__ = [
    "CHUNK",
    "copy_tree",
    "download",
    "extract_zip",
    "create_session",
    "http_session",
    "Summary",
]
