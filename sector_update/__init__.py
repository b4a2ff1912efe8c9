"""EuroScope sector updater – expose a single convenience *run()* function."""

from pathlib import Path
from typing import Any

from .pipeline import Pipeline  # noqa: E402 (lazy import)

__version__ = "0.3.0"


def run(entries: str | Path = "config.json", **kwargs: Any) -> bool:
    """Update every configured FIR (mainly for notebooks / interactive use)."""
    return Pipeline(Path(entries), **kwargs).run()


__all__ = ["run", "Pipeline", "__version__"]
