from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from municipalities.common.config_loader import ExportSettings
from municipalities.common.errors import PersistError
from municipalities.pipeline.export_abolished import export_abolished_municipalities


def _settings(tmp_path: Path) -> ExportSettings:
    return ExportSettings(
        cadastral_csv=tmp_path / "codes.csv",
        abolished_json=tmp_path / "abolished.json",
        municipalities_dir=tmp_path / "out" / "municipalities",
        summary_path=tmp_path / "out" / "reports" / "summary.json",
        max_workers=2,
        max_attempts=1,
        run_id="run-it",
    )


def _logger() -> logging.Logger:
    return logging.getLogger("municipalities.tests")


class RecordingPersist:
    def __init__(self, fail_codes: set[str] | None = None) -> None:
        self.calls: list[str] = []
        self.fail_codes = fail_codes or set()

    def __call__(self, municipality):
        self.calls.append(municipality.codice_catastale)
        if municipality.codice_catastale in self.fail_codes:
            raise PersistError(f"cannot write {municipality.codice_catastale}")


@pytest.mark.integration
def test_missing_comune_aborts_without_persisting(tmp_path: Path, capsys):
    settings = _settings(tmp_path)
    settings.cadastral_csv.write_text("A123,Example Town\n", encoding="utf-8")
    settings.abolished_json.write_text(json.dumps([{"provincia": "EX"}]), encoding="utf-8")
    persist = RecordingPersist()

    result = export_abolished_municipalities(settings, _logger(), persist=persist)

    assert result is None
    assert persist.calls == []
    assert not settings.summary_path.exists()
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["[1/2] Start generation of abolished municipalities from local dataset"]
    assert captured.err.startswith("Error while exporting abolished municipalities: ")
    assert "[0].comune: missing required field" in captured.err


@pytest.mark.integration
def test_cadastral_failure_skips_abolished_load(monkeypatch, tmp_path: Path):
    from municipalities.pipeline import export_abolished

    settings = _settings(tmp_path)
    called = {"abolished": False}

    def _never(_path):
        called["abolished"] = True
        return []

    monkeypatch.setattr(export_abolished, "load_abolished_municipalities", _never)
    persist = RecordingPersist()

    assert export_abolished_municipalities(settings, _logger(), persist=persist) is None
    assert called["abolished"] is False
    assert persist.calls == []


@pytest.mark.integration
def test_unmatched_entries_are_skipped_and_run_succeeds(tmp_path: Path):
    settings = _settings(tmp_path)
    settings.cadastral_csv.write_text("A123,Example Town\n", encoding="utf-8")
    settings.abolished_json.write_text(
        json.dumps(
            [
                {"comune": "Unknown Town", "provincia": "ZZ"},
                {"comune": "Example Town", "provincia": "EX"},
            ]
        ),
        encoding="utf-8",
    )
    persist = RecordingPersist()

    summary = export_abolished_municipalities(settings, _logger(), persist=persist)

    assert persist.calls == ["A123"]
    assert summary["status"] == "success"
    assert summary["counts"]["abolished_records"] == 2
    assert summary["counts"]["matched"] == 1


@pytest.mark.integration
def test_persist_failures_make_the_run_partial(tmp_path: Path):
    settings = _settings(tmp_path)
    settings.cadastral_csv.write_text("A001,Alfa\nB002,Bravo\nC003,Charlie\n", encoding="utf-8")
    settings.abolished_json.write_text(
        json.dumps([{"comune": name, "provincia": "XX"} for name in ("Alfa", "Bravo", "Charlie")]),
        encoding="utf-8",
    )
    persist = RecordingPersist(fail_codes={"B002"})

    summary = export_abolished_municipalities(settings, _logger(), persist=persist)

    assert sorted(persist.calls) == ["A001", "B002", "C003"]
    assert summary["status"] == "partial"
    assert summary["counts"]["written"] == 2
    assert summary["failures"] == [{"codice_catastale": "B002", "error": "cannot write B002"}]
    assert json.loads(settings.summary_path.read_text(encoding="utf-8"))["counts"]["failed"] == 1


@pytest.mark.integration
def test_same_name_in_two_provinces_leaves_the_last_one_on_disk(tmp_path: Path):
    settings = _settings(tmp_path)
    settings.cadastral_csv.write_text("A001,Alfa\n", encoding="utf-8")
    settings.abolished_json.write_text(
        json.dumps([{"comune": "Alfa", "provincia": "AA"}, {"comune": "ALFA", "provincia": "BB"}]),
        encoding="utf-8",
    )

    summary = export_abolished_municipalities(settings, _logger())

    files = list(settings.municipalities_dir.rglob("*.json"))
    assert [p.name for p in files] == ["A001.json"]
    payload = json.loads(files[0].read_text(encoding="utf-8"))
    assert payload["municipality"]["siglaProvincia"] == "BB"
    assert payload["municipality"]["denominazione"] == "ALFA"
    assert summary["status"] == "success"
    assert summary["counts"]["matched"] == 2
    assert summary["counts"]["written"] == 1
    assert summary["counts"]["overwritten"] == 1
