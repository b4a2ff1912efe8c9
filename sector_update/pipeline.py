# sector_update/pipeline.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import requests

from .config import UpdaterSettings, load_entries
from .exceptions import UpdaterError, format_error_for_logging
from .models import ConfigEntry
from .updater import SectorUpdater
from .utils import http_session
from .utils.run_summary import Summary

log = logging.getLogger(__name__)


class Pipeline:
    """Update every configured FIR in turn: Find link → Download → Install → Patch."""

    def __init__(
        self,
        entries_path: Path,
        *,
        settings: Optional[UpdaterSettings] = None,
        session: Optional[requests.Session] = None,
        summary: Optional[Summary] = None,
    ) -> None:
        self.entries_path = Path(entries_path)
        self.settings = settings or UpdaterSettings()
        self.session = session
        self.summary = summary or Summary()

    def run(self) -> bool:
        """Process all entries; returns ``True`` when every entry succeeded."""
        entries = load_entries(self.entries_path)
        log.info("📋 Found entries to process: %d", len(entries))

        if self.session is not None:
            self._run_entries(entries, self.session)
        else:
            with http_session(self.settings) as session:
                self._run_entries(entries, session)

        return not self.summary.failed

    def _run_entries(self, entries: List[ConfigEntry], session: requests.Session) -> None:
        for entry in entries:
            try:
                with SectorUpdater(
                    entry, self.settings, session=session, summary=self.summary
                ) as updater:
                    updater.run()
                self.summary.log_entry("done")
            except UpdaterError as exc:
                self.summary.log_entry("error")
                self.summary.log_error(entry.fir, exc.message)
                log.error("❌ FIR %s failed: %s", entry.fir, exc)
                log.debug("Error details: %s", format_error_for_logging(exc))

                if not self.settings.continue_on_failure:
                    raise
