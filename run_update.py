# run_update.py
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from sector_update import __version__
from sector_update.config import load_settings
from sector_update.exceptions import ConfigurationError, UpdaterError
from sector_update.pipeline import Pipeline
from sector_update.utils.logging_cfg import configure_logging
from sector_update.utils.run_summary import Summary

DEFAULT_ENTRIES = Path("config.json")
DEFAULT_SETTINGS = Path("settings.yaml")


# ---------------------------------------------------------------------------
# CLI entry-point
# ---------------------------------------------------------------------------
def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    # 1) determine file paths (allow overrides via CLI args)
    entries_path = Path(args[0]) if len(args) > 0 else DEFAULT_ENTRIES
    settings_path = Path(args[1]) if len(args) > 1 else DEFAULT_SETTINGS

    # 2) load settings, then set up logs (summary file + debug file + console)
    try:
        settings = load_settings(settings_path)
    except ConfigurationError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1
    configure_logging(level_on_console=settings.log_level, log_dir=settings.log_dir)
    lg_sum = logging.getLogger("summary")
    lg_sum.info("ES Sector Update version %s", __version__)

    # 3) run the pipeline
    summary = Summary()
    try:
        ok = Pipeline(entries_path, settings=settings, summary=summary).run()
    except UpdaterError as exc:
        lg_sum.error("❌ %s", exc)
        return 1
    finally:
        # 4) print the emoji-style storybook block
        summary.dump()

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
