# sector_update/utils/logging_cfg.py
from __future__ import annotations

import logging
import logging.config
from datetime import datetime
from pathlib import Path
from typing import Any, Dict


def build_logging_config(level_on_console: str, summary_file: Path, debug_file: Path) -> Dict[str, Any]:
    """dictConfig body: console and day log share the short format, debug log adds origin."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "short": {
                "format": "%(asctime)s  %(levelname)-7s  %(message)s",
                "datefmt": "%H:%M:%S",
            },
            "debug": {
                "format": (
                    "%(asctime)s  %(levelname)-7s  "
                    "[%(name)s:%(lineno)d]  %(message)s"
                ),
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level_on_console,
                "formatter": "short",
            },
            "summary_file": {
                "class": "logging.FileHandler",
                "level": "INFO",
                "filename": str(summary_file),
                "encoding": "utf-8",
                "formatter": "short",
            },
            "debug_file": {
                "class": "logging.FileHandler",
                "level": "DEBUG",
                "filename": str(debug_file),
                "encoding": "utf-8",
                "formatter": "debug",
            },
        },
        "loggers": {
            # end-of-run block: console and day log only
            "summary": {
                "level": "INFO",
                "handlers": ["console", "summary_file"],
                "propagate": False,
            },
            # download progress is too chatty for the console
            "sector_update.utils.io": {
                "level": "DEBUG",
                "handlers": ["summary_file", "debug_file"],
                "propagate": False,
            },
            "sector_update": {
                "level": "DEBUG",
                "handlers": ["console", "summary_file", "debug_file"],
                "propagate": False,
            },
        },
        "root": {
            "level": "DEBUG",
            "handlers": ["console", "debug_file"],
        },
    }


def configure_logging(level_on_console: str = "INFO", log_dir: Path | str = "logs") -> Path:
    """Set up the day log, the debug log and console output. Returns the log folder."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    today = datetime.now().strftime("%Y%m%d")

    cfg = build_logging_config(
        level_on_console,
        summary_file=log_dir / f"sector-update-{today}.log",
        debug_file=log_dir / f"sector-update-{today}-debug.log",
    )
    logging.config.dictConfig(cfg)
    logging.getLogger("summary").info("🟢 Logging initialised → %s", log_dir)
    return log_dir
