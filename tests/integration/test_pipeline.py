"""Integration tests for sector_update.pipeline and the run_update CLI."""
import json
from unittest.mock import MagicMock, patch

import pytest

import run_update
from sector_update.config import UpdaterSettings
from sector_update.exceptions import ConfigurationError, LinkNotFound
from sector_update.pipeline import Pipeline
from sector_update.utils.run_summary import Summary


def _write_entries(path, es_dir, firs):
    path.write_text(json.dumps([
        {
            "fir": fir,
            "package_name": fir,
            "es_path": str(es_dir),
            "asr_path": "ASR",
            "navdata_path": f"{fir}/NavData",
            "prf_prefix": fir,
        }
        for fir in firs
    ]))
    return path


@pytest.fixture
def two_fir_site(response_factory, package_zip):
    """EDMM is published, LOVV has no package on its listing page."""
    pages = {
        "http://files.aero-nav.com/LOVV": response_factory(text="<html><a href='/'>back</a></html>"),
    }

    def get(url, **kwargs):
        if url == "http://files.aero-nav.com/EDMM":
            return response_factory(text='<a href="/EDMM/EDMM_2024_01.zip">EDMM_2024_01</a>')
        if url == "http://files.aero-nav.com/EDMM/EDMM_2024_01.zip":
            return response_factory(content=package_zip)
        if url in pages:
            return pages[url]
        return response_factory(status_code=404)

    session = MagicMock()
    session.get.side_effect = get
    return session


class TestPipeline:
    """Test running several entries in sequence."""

    @pytest.mark.integration
    def test_failed_entry_does_not_stop_others(self, temp_dir, es_dir, two_fir_site):
        entries = _write_entries(temp_dir / "config.json", es_dir, ["LOVV", "EDMM"])
        summary = Summary()

        ok = Pipeline(entries, session=two_fir_site, summary=summary).run()

        assert ok is False
        assert summary.entries["done"] == 1
        assert summary.entries["error"] == 1
        assert summary.errors[0].startswith("LOVV: No link matching 'LOVV'")
        assert (es_dir / "NavData" / "airway.txt").exists()

    @pytest.mark.integration
    def test_corrupt_archive_does_not_stop_others(
        self, temp_dir, es_dir, response_factory, package_zip, corrupt_zip
    ):
        served = {
            "http://files.aero-nav.com/LOVV": response_factory(
                text='<a href="/LOVV/LOVV_2024_01.zip">LOVV_2024_01</a>'
            ),
            "http://files.aero-nav.com/LOVV/LOVV_2024_01.zip": response_factory(content=corrupt_zip),
            "http://files.aero-nav.com/EDMM": response_factory(
                text='<a href="/EDMM/EDMM_2024_01.zip">EDMM_2024_01</a>'
            ),
            "http://files.aero-nav.com/EDMM/EDMM_2024_01.zip": response_factory(content=package_zip),
        }
        session = MagicMock()
        session.get.side_effect = lambda url, **kwargs: served[url]
        entries = _write_entries(temp_dir / "config.json", es_dir, ["LOVV", "EDMM"])
        summary = Summary()

        ok = Pipeline(entries, session=session, summary=summary).run()

        assert ok is False
        assert summary.entries["done"] == 1
        assert summary.entries["error"] == 1
        assert summary.errors[0].startswith("LOVV: Downloaded file is not a valid ZIP")
        assert (es_dir / "NavData" / "airway.txt").exists()

    @pytest.mark.integration
    def test_all_entries_succeed(self, temp_dir, es_dir, two_fir_site):
        entries = _write_entries(temp_dir / "config.json", es_dir, ["EDMM"])
        assert Pipeline(entries, session=two_fir_site).run() is True

    @pytest.mark.integration
    def test_stop_on_first_failure(self, temp_dir, es_dir, two_fir_site):
        entries = _write_entries(temp_dir / "config.json", es_dir, ["LOVV", "EDMM"])
        settings = UpdaterSettings(continue_on_failure=False)

        with pytest.raises(LinkNotFound):
            Pipeline(entries, settings=settings, session=two_fir_site).run()

        assert not (es_dir / "NavData").exists()

    @pytest.mark.integration
    def test_bad_entries_file(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("{}")
        with pytest.raises(ConfigurationError):
            Pipeline(path, session=MagicMock()).run()

    @pytest.mark.integration
    def test_opens_and_closes_own_session(self, temp_dir, es_dir, two_fir_site):
        entries = _write_entries(temp_dir / "config.json", es_dir, ["EDMM"])
        with patch("sector_update.utils.http_session.requests.Session", return_value=two_fir_site):
            assert Pipeline(entries).run() is True
        two_fir_site.close.assert_called_once()


class TestCli:
    """Test the run_update entry point."""

    @pytest.fixture(autouse=True)
    def _no_logging_setup(self):
        with patch("run_update.configure_logging") as mock_cfg:
            yield mock_cfg

    @pytest.mark.integration
    def test_exit_code_zero_on_success(self, temp_dir, es_dir):
        entries = _write_entries(temp_dir / "config.json", es_dir, ["EDMM"])
        with patch.object(Pipeline, "run", return_value=True):
            assert run_update.main([str(entries), str(temp_dir / "settings.yaml")]) == 0

    @pytest.mark.integration
    def test_exit_code_one_on_failed_entry(self, temp_dir, es_dir):
        entries = _write_entries(temp_dir / "config.json", es_dir, ["EDMM"])
        with patch.object(Pipeline, "run", return_value=False):
            assert run_update.main([str(entries), str(temp_dir / "settings.yaml")]) == 1

    @pytest.mark.integration
    def test_exit_code_one_on_missing_config(self, temp_dir):
        assert run_update.main([str(temp_dir / "missing.json"), str(temp_dir / "settings.yaml")]) == 1

    @pytest.mark.integration
    def test_exit_code_one_on_bad_settings(self, temp_dir, capsys):
        settings = temp_dir / "settings.yaml"
        settings.write_text("asr_mode: delete\n")
        assert run_update.main([str(temp_dir / "config.json"), str(settings)]) == 1
        assert "Invalid asr_mode" in capsys.readouterr().err
