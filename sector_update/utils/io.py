from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path, PurePosixPath
from typing import Final, List, Optional
from zipfile import ZipFile

import requests

log: Final = logging.getLogger(__name__)
CHUNK: Final[int] = 8192  # 8 KiB streaming buffer


def _format_bytes(bytes_val: int) -> str:
    """🔄 Format bytes to human-readable string."""
    val: float = float(bytes_val)
    for unit in ["B", "KB", "MB", "GB"]:
        if val < 1024.0:
            return f"{val:.1f} {unit}"
        val /= 1024.0
    return f"{val:.1f} TB"


def download(
    url: str,
    dest: Path,
    *,
    session: Optional[requests.Session] = None,
    timeout: int = 60,
) -> Path:
    """🔄 Stream ``url`` into ``dest`` with progress logging.

    Raises ``requests.RequestException`` on network or HTTP failure.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    client = session or requests

    with client.get(url, stream=True, timeout=timeout) as resp:
        resp.raise_for_status()

        content_length: Optional[str] = resp.headers.get("content-length")
        total_size: Optional[int] = int(content_length) if content_length else None
        if total_size:
            log.info("⬇ %s (%s)", dest.name, _format_bytes(total_size))
        else:
            log.info("⬇ %s", dest.name)

        downloaded: int = 0
        last_progress_log: float = time.time()
        progress_interval: float = 5.0

        with dest.open("wb") as fh:
            for chunk in resp.iter_content(CHUNK):
                if chunk:  # Filter out keep-alive chunks
                    fh.write(chunk)
                    downloaded += len(chunk)

                    current_time = time.time()
                    if current_time - last_progress_log >= progress_interval:
                        if total_size:
                            log.debug(
                                "📊 %s: %.1f%% (%s / %s)",
                                dest.name,
                                (downloaded / total_size) * 100,
                                _format_bytes(downloaded),
                                _format_bytes(total_size),
                            )
                        else:
                            log.debug(
                                "📊 %s: %s downloaded",
                                dest.name,
                                _format_bytes(downloaded),
                            )
                        last_progress_log = current_time

        log.info("✅ %s (%s)", dest.name, _format_bytes(downloaded))

    return dest


def _is_safe_member(name: str) -> bool:
    """Reject absolute member names and names that climb out of the target."""
    member = PurePosixPath(name.replace("\\", "/"))
    return not member.is_absolute() and ".." not in member.parts and bool(member.parts)


def extract_zip(archive: Path, dest: Path) -> List[Path]:
    """Extract ``archive`` into ``dest`` and return the extracted file paths.

    Raises ``zipfile.BadZipFile`` when the archive is corrupt; a damaged or
    encrypted member surfaces as ``zlib.error`` or ``RuntimeError``.
    """
    log.info("📦 Extracting %s → %s", archive.name, dest)
    dest.mkdir(parents=True, exist_ok=True)
    extracted: List[Path] = []
    with ZipFile(archive) as zf:
        for member in zf.infolist():
            if not _is_safe_member(member.filename):
                log.warning("⚠️ Skipping unsafe archive member: %s", member.filename)
                continue
            target = Path(zf.extract(member, dest))
            if not member.is_dir():
                extracted.append(target)
    log.debug("Extracted %d files from %s", len(extracted), archive.name)
    return extracted


def copy_tree(src: Path, dest: Path) -> List[Path]:
    """Copy every file below ``src`` into ``dest``, overwriting existing files."""
    copied: List[Path] = []
    for path in sorted(src.rglob("*")):
        target = dest / path.relative_to(src)
        if path.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, target)
        copied.append(target)
        log.debug("    %s", target)
    return copied
