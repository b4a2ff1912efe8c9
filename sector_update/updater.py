"""Per-FIR update procedure: find, download, install and wire up a sector package."""
from __future__ import annotations

import logging
import shutil
import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import List, Optional

import requests

from .config import UpdaterSettings
from .exceptions import DownloadError, ErrorContext, ExtractError, UpdaterError
from .listing import fetch_listing, find_download_url
from .models import ConfigEntry
from .profiles import find_sector_file, update_asr, update_prf
from .utils import copy_tree, create_session, download, extract_zip
from .utils.run_summary import Summary

log = logging.getLogger(__name__)

ARCHIVE_NAME = "sector.zip"
TMP_PREFIX = "es-sector-updater-"

# What zipfile raises for a corrupt, truncated, encrypted or unsupported archive
ARCHIVE_ERRORS = (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError, EOFError)


def fetch_and_extract(
    url: str,
    destination: Path,
    *,
    session: Optional[requests.Session] = None,
    timeout: int = 60,
) -> Path:
    """Download the archive at ``url`` and unpack it into ``destination``.

    The archive itself is removed once extracted so ``destination`` holds only
    the package contents.
    """
    archive = destination / ARCHIVE_NAME
    log.info("⬇️ Downloading package to %s", archive)
    try:
        download(url, archive, session=session, timeout=timeout)
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise DownloadError(
            f"Package download returned HTTP {status}: {url}",
            url=url,
            status_code=status,
            cause=e,
        ) from e
    except requests.RequestException as e:
        raise DownloadError(f"Package download failed for {url}: {e}", url=url, cause=e) from e

    try:
        extract_zip(archive, destination)
    except ARCHIVE_ERRORS as e:
        raise ExtractError(
            f"Downloaded file is not a valid ZIP archive: {url} ({e})",
            file_path=str(archive),
            cause=e,
        ) from e
    finally:
        archive.unlink(missing_ok=True)

    return destination


def install_package(extracted: Path, es_path: Path) -> List[Path]:
    """Copy the extracted package into the EuroScope folder."""
    log.info("📂 Copying files to ES dir %s", es_path)
    es_path.mkdir(parents=True, exist_ok=True)
    return copy_tree(extracted, es_path)


def copy_navdata(extracted: Path, navdata_path: str, es_path: Path, navdata_dir: str = "NavData") -> List[Path]:
    """Copy the package's navigation data subtree into ``es_path/navdata_dir``."""
    source = extracted / navdata_path
    if not source.is_dir():
        raise ExtractError(
            f"NavData folder '{navdata_path}' not found in package",
            file_path=str(source),
        )
    target = es_path / navdata_dir
    log.info("🧭 Copying NavData to %s", target)
    return copy_tree(source, target)


class SectorUpdater:
    """
    Runs the update procedure for one configuration entry.
    Any failure raises an ``UpdaterError`` tagged with the entry's FIR; the
    temporary working directory is always removed.
    """

    def __init__(
        self,
        entry: ConfigEntry,
        settings: Optional[UpdaterSettings] = None,
        *,
        session: Optional[requests.Session] = None,
        summary: Optional[Summary] = None,
    ):
        self.entry = entry
        self.settings = settings or UpdaterSettings()
        self._owned_session: Optional[requests.Session] = None
        if session is None:
            session = self._owned_session = create_session(self.settings)
        self.session = session
        self.summary = summary or Summary()
        self._tmp_dir: Optional[Path] = None

    def resolve_download_url(self) -> str:
        html, page_url = fetch_listing(
            self.session,
            self.settings.base_url,
            self.entry.fir,
            timeout=self.settings.timeout,
        )
        return find_download_url(
            html,
            self.entry.package_name,
            page_url,
            archive_suffix=self.settings.archive_suffix,
        )

    def run(self) -> None:
        """Update the entry's EuroScope installation to the latest package."""
        entry = self.entry
        log.info("✈️ -- FIR %s --", entry.fir)
        try:
            # Resolve the link first: a missing package must not touch anything.
            file_url = self.resolve_download_url()

            self._tmp_dir = Path(tempfile.mkdtemp(prefix=TMP_PREFIX))
            extracted = fetch_and_extract(
                file_url,
                self._tmp_dir,
                session=self.session,
                timeout=self.settings.timeout,
            )

            sector_file = find_sector_file(extracted)
            install_package(extracted, entry.es_path)

            prfs = update_prf(entry.es_path, entry.prf_prefix, sector_file)
            self.summary.log_files("prf", len(prfs))

            asrs = update_asr(
                entry.es_path,
                entry.asr_path,
                entry.fir,
                sector_file,
                mode=self.settings.asr_mode,
            )
            self.summary.log_files("asr", len(asrs))

            navdata = copy_navdata(
                extracted, entry.navdata_path, entry.es_path, self.settings.navdata_dir
            )
            self.summary.log_files("navdata", len(navdata))
        except UpdaterError as e:
            e.context.fir = entry.fir
            raise
        except OSError as e:
            raise UpdaterError(
                f"File system error: {e}",
                context=ErrorContext(fir=entry.fir, operation="install", file_path=e.filename),
                cause=e,
            ) from e
        finally:
            self.cleanup()

        log.info("✅ FIR %s updated", entry.fir)

    def cleanup(self) -> None:
        if self._tmp_dir is not None:
            shutil.rmtree(self._tmp_dir, ignore_errors=True)
            log.debug("Removed working directory %s", self._tmp_dir)
            self._tmp_dir = None
        if self._owned_session is not None:
            self._owned_session.close()
            self._owned_session = None

    def __enter__(self) -> "SectorUpdater":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()


__all__ = [
    "SectorUpdater",
    "copy_navdata",
    "fetch_and_extract",
    "install_package",
]
