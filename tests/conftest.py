"""Shared fixtures for the sector updater tests."""
import io
import zipfile
from typing import Dict
from unittest.mock import MagicMock

import pytest
import requests

from sector_update.models import ConfigEntry


PRF_TEMPLATE = (
    "Settings\tsector\t\\OLD_SECTOR_2023.sct\r\n"
    "Settings\tasr\t\\ASR\\EDMM\\APP.asr\r\n"
    "LastSession\tcallsign\tEDMM_CTR\r\n"
)

ASR_TEMPLATE = (
    "DisplayTypeName:Standard ES radar screen\n"
    "SECTORFILE:\\OLD_SECTOR_2023.sct\n"
    "SECTORTITLE:EDMM 2023/13\n"
    "SHOWC:1\n"
)


@pytest.fixture
def temp_dir(tmp_path):
    """A scratch directory that is removed after the test."""
    return tmp_path


@pytest.fixture
def es_dir(tmp_path):
    """A minimal EuroScope folder with two matching profiles and one foreign one."""
    root = tmp_path / "euroscope"
    root.mkdir()
    (root / "EDMM_APP.prf").write_text(PRF_TEMPLATE, newline="")
    (root / "EDMM_CTR.prf").write_text(PRF_TEMPLATE, newline="")
    (root / "LOVV_CTR.prf").write_text(PRF_TEMPLATE, newline="")
    asr_dir = root / "ASR" / "EDMM"
    asr_dir.mkdir(parents=True)
    (asr_dir / "APP.asr").write_text(ASR_TEMPLATE, newline="")
    other = root / "ASR" / "LOVV"
    other.mkdir(parents=True)
    (other / "CTR.asr").write_text(ASR_TEMPLATE, newline="")
    return root


@pytest.fixture
def entry(es_dir):
    return ConfigEntry(
        fir="EDMM",
        package_name="EDMM",
        es_path=es_dir,
        asr_path="ASR",
        navdata_path="EDMM/NavData",
        prf_prefix="EDMM",
    )


def build_zip(files: Dict[str, str]) -> bytes:
    """Return the bytes of a ZIP archive holding ``files`` (name -> text)."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, text in files.items():
            zf.writestr(name, text)
    return buf.getvalue()


def build_corrupt_zip(name: str = "EDMM_2024_01.sct") -> bytes:
    """A ZIP whose single deflated member carries an invalid deflate stream."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(name, "SECTOR " * 200)
        info = zf.getinfo(name)
    data = bytearray(buf.getvalue())
    # local header is 30 bytes + file name, no extra field
    start = info.header_offset + 30 + len(name.encode())
    data[start:start + info.compress_size] = b"\xff" * info.compress_size
    return bytes(data)


@pytest.fixture
def package_files():
    return {
        "EDMM_2024_01.sct": "[INFO]\nEDMM 2024/01\n",
        "EDMM_2024_01.ese": "[POSITIONS]\n",
        "EDMM/NavData/airway.txt": "A1 ...\n",
        "EDMM/NavData/isec.txt": "ABC 48.0 11.0\n",
        "EDMM/Plugins/readme.txt": "plugins\n",
    }


@pytest.fixture
def package_zip(package_files):
    return build_zip(package_files)


def make_response(*, text: str = "", content: bytes = b"", status_code: int = 200) -> MagicMock:
    """A stand-in for ``requests.Response`` usable with or without ``with``."""
    resp = MagicMock()
    resp.__enter__.return_value = resp
    resp.status_code = status_code
    resp.text = text
    resp.headers = {"content-length": str(len(content))} if content else {}
    resp.iter_content.side_effect = lambda chunk_size: [
        content[i:i + chunk_size] for i in range(0, len(content), chunk_size)
    ]
    if status_code >= 400:
        error = requests.HTTPError(f"{status_code} Error")
        error.response = resp
        resp.raise_for_status.side_effect = error
    return resp


LISTING_HTML = """
<html><body><table>
<tr><td><a href="/EDMM/EDMM_2023_13.zip">EDMM_2023_13</a></td></tr>
<tr><td><a href="/EDMM/EDMM_2024_01.zip">EDMM_2024_01</a></td></tr>
<tr><td><a href="/EDMM/LOVV_2024_01.zip">LOVV_2024_01</a></td></tr>
</table></body></html>
"""


@pytest.fixture
def listing_html():
    return LISTING_HTML


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def zip_factory():
    return build_zip


@pytest.fixture
def corrupt_zip():
    return build_corrupt_zip()
