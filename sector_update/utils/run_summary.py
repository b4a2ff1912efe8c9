# sector_update/utils/run_summary.py
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class Summary:
    entries: Counter = field(default_factory=Counter)
    files: Counter = field(default_factory=Counter)
    errors: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------ API
    def log_entry(self, status: str) -> None:
        self.entries[status] += 1

    def log_files(self, kind: str, count: int) -> None:
        """📝 Track how many files of a kind (prf, asr, navdata) were written."""
        self.files[kind] += count

    def log_error(self, fir: str, msg: str) -> None:
        if len(self.errors) < 10:
            self.errors.append(f"{fir}: {msg}")

    @property
    def failed(self) -> bool:
        return self.entries["error"] > 0

    # ------------------------------------------------------------------ dump
    def dump(self) -> None:
        lg = logging.getLogger("summary")
        lg.info("🗺️ Entry summary ▸ done=%d error=%d total=%d",
                self.entries["done"], self.entries["error"],
                sum(self.entries.values()))
        lg.info("📝 Files updated ▸ prf=%d asr=%d navdata=%d",
                self.files["prf"], self.files["asr"], self.files["navdata"])

        if self.errors:
            lg.info("🚨 First errors:")
            for line in self.errors:
                lg.info("    • %s", line)
