"""Run report for the abolished municipalities export."""

from __future__ import annotations

from pathlib import Path

from municipalities.common.fs import write_json
from municipalities.common.models import CadastralIndex
from municipalities.pipeline.export import DispatchSummary


def build_export_summary(
    run_id: str,
    index: CadastralIndex,
    abolished_count: int,
    matched_count: int,
    dispatch: DispatchSummary,
) -> dict:
    status = "partial" if dispatch.failed else "success"
    return {
        "run_id": run_id,
        "status": status,
        "counts": {
            "cadastral_rows": index.rows_read,
            "cadastral_rows_dropped": index.rows_dropped,
            "cadastral_codes": len(index),
            "abolished_records": abolished_count,
            "matched": matched_count,
            "unmatched": abolished_count - matched_count,
            "written": dispatch.written,
            "overwritten": dispatch.overwritten,
            "failed": dispatch.failed_count,
        },
        "failures": [{"codice_catastale": code, "error": error} for code, error in dispatch.failed],
    }


def write_export_summary(path: Path, payload: dict) -> Path:
    write_json(path, payload)
    return path
