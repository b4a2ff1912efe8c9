"""Point EuroScope profile (PRF) and radar-screen (ASR) files at a sector file.

Files are read and written as latin-1 without newline translation, so any
byte and line ending outside the rewritten lines survives untouched.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path, PureWindowsPath
from typing import Final, List

from .exceptions import ErrorContext, ExtractError, NoPrfFound

log = logging.getLogger(__name__)

TEXT_ENCODING: Final = "latin-1"
SECTOR_SUFFIX: Final = ".sct"

_PRF_SECTOR_RE: Final = re.compile(r"^Settings\tsector\t[^\r\n]*", re.MULTILINE)
_ASR_SECTORFILE_RE: Final = re.compile(r"^SECTORFILE:[^\r\n]*", re.MULTILINE)
_ASR_SECTORTITLE_RE: Final = re.compile(r"^SECTORTITLE:[^\r\n]*", re.MULTILINE)


def _read_text(path: Path) -> str:
    with path.open("r", encoding=TEXT_ENCODING, newline="") as fh:
        return fh.read()


def _write_text(path: Path, text: str) -> None:
    with path.open("w", encoding=TEXT_ENCODING, newline="") as fh:
        fh.write(text)


def euroscope_path(relative: str) -> str:
    """Format a path relative to the EuroScope folder the way profiles store it.

    ``"Sector/EDMM.sct"`` -> ``"\\Sector\\EDMM.sct"``
    """
    parts = PureWindowsPath(relative.replace("/", "\\")).parts
    return "\\" + "\\".join(part for part in parts if part not in ("\\", ""))


def find_sector_file(extracted: Path) -> str:
    """Return the name of the sector file at the top of an extracted package."""
    candidates = sorted(
        p.name for p in extracted.iterdir()
        if p.is_file() and p.suffix.lower() == SECTOR_SUFFIX
    )
    if not candidates:
        raise ExtractError(
            f"No '{SECTOR_SUFFIX}' file found in package",
            file_path=str(extracted),
        )
    if len(candidates) > 1:
        log.warning(
            "⚠️ Several sector files in package (%s), using '%s'",
            ", ".join(candidates),
            candidates[-1],
        )
    log.info("🗺️ Got sector file: %s", candidates[-1])
    return candidates[-1]


def update_prf(es_path: Path, prf_prefix: str, new_navdata_path: str) -> List[Path]:
    """Rewrite the sector line of every matching profile in ``es_path``.

    A profile matches when its name starts with ``prf_prefix`` and ends with
    ``.prf``. ``new_navdata_path`` is the sector file path relative to
    ``es_path``. Returns every matching profile; raises ``NoPrfFound`` when
    there is none.
    """
    log.info("📝 Changing sectorfile in PRFs")
    sector_line = f"Settings\tsector\t{euroscope_path(new_navdata_path)}"

    matched: List[Path] = []
    for path in sorted(es_path.iterdir()):
        if not path.is_file():
            continue
        if not (path.name.startswith(prf_prefix) and path.suffix.lower() == ".prf"):
            continue
        matched.append(path)

        contents = _read_text(path)
        new, count = _PRF_SECTOR_RE.subn(lambda _m: sector_line, contents)
        if count == 0:
            log.warning("⚠️ %s has no sector line, left unchanged", path.name)
            continue
        if new != contents:
            _write_text(path, new)
        log.info("\t%s", path.name)

    if not matched:
        raise NoPrfFound(
            f"No PRF file starting with '{prf_prefix}' found in {es_path}",
            es_path=str(es_path),
            prf_prefix=prf_prefix,
            context=ErrorContext(operation="update_prf"),
        )
    return matched


def update_asr(
    es_path: Path,
    asr_path: str,
    fir: str,
    new_navdata_path: str,
    *,
    mode: str = "rewrite",
) -> List[Path]:
    """Rewrite the sector binding of every ASR below ``es_path/asr_path/fir``.

    ``rewrite`` points ``SECTORFILE:`` at ``new_navdata_path`` and clears
    ``SECTORTITLE:``; ``clear`` empties both so EuroScope keeps whatever
    sector is loaded. Returns the ASR files processed.
    """
    asr_dir = es_path / asr_path / fir
    if not asr_dir.is_dir():
        log.warning("⚠️ ASR folder not found, skipping: %s", asr_dir)
        return []

    if mode == "clear":
        log.info("🧹 Clearing ASRs in %s", asr_dir)
        sectorfile_line = "SECTORFILE:"
    else:
        log.info("📝 Pointing ASRs in %s at new sector", asr_dir)
        sectorfile_line = f"SECTORFILE:{euroscope_path(new_navdata_path)}"

    processed: List[Path] = []
    for path in sorted(asr_dir.rglob("*")):
        if not path.is_file() or path.suffix.lower() != ".asr":
            continue
        contents = _read_text(path)
        new = _ASR_SECTORFILE_RE.sub(lambda _m: sectorfile_line, contents)
        new = _ASR_SECTORTITLE_RE.sub(lambda _m: "SECTORTITLE:", new)
        if new != contents:
            _write_text(path, new)
        processed.append(path)
        log.info("\t%s", path.relative_to(asr_dir))

    return processed


__all__ = [
    "TEXT_ENCODING",
    "euroscope_path",
    "find_sector_file",
    "update_asr",
    "update_prf",
]
