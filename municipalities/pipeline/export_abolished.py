"""Export of abolished municipalities enriched with their cadastral codes.

Two datasets feed the export: a list of abolished municipalities (JSON) and
the cadastral codes of every municipality (CSV). Each abolished municipality
whose name has a cadastral code is written out as one JSON document.
"""

from __future__ import annotations

import logging
import time

from municipalities.common.config_loader import ExportSettings
from municipalities.common.constants import EXPORT_ERROR_MESSAGE
from municipalities.common.errors import LoadError
from municipalities.common.logging import log_event, log_failure, log_warning, report_error, report_progress
from municipalities.common.time_utils import elapsed_ms
from municipalities.pipeline.abolished import load_abolished_municipalities
from municipalities.pipeline.cadastral_index import load_cadastral_index
from municipalities.pipeline.export import Persist, dispatch_municipalities, json_writer
from municipalities.pipeline.reports import build_export_summary, write_export_summary
from municipalities.pipeline.transform import join_abolished_with_cadastral

STAGE = "export-abolished"


def export_abolished_municipalities(
    settings: ExportSettings,
    logger: logging.Logger,
    *,
    persist: Persist | None = None,
) -> dict | None:
    """Run the export; returns the run report, or ``None`` when an input failed to load."""
    run_id = settings.run_id
    started_at = time.monotonic()
    report_progress(1, 2, "Start generation of abolished municipalities from local dataset")

    try:
        index = load_cadastral_index(settings.cadastral_csv)
        log_event(
            logger,
            f"cadastral index loaded with {index.rows_dropped} rows dropped",
            run_id=run_id,
            stage=STAGE,
            event="CADASTRAL_LOADED",
            status="ok",
            rows_in=index.rows_read + index.rows_dropped,
            rows_out=len(index),
        )
        records = load_abolished_municipalities(settings.abolished_json)
    except LoadError as exc:
        report_error(EXPORT_ERROR_MESSAGE, exc)
        log_failure(
            logger,
            f"{EXPORT_ERROR_MESSAGE}: {exc}",
            run_id=run_id,
            stage=STAGE,
            event="STAGE_FAIL",
            status="error",
            error_code=exc.error_code,
            duration_ms=elapsed_ms(started_at),
        )
        return None

    municipalities = join_abolished_with_cadastral(index, records)
    log_event(
        logger,
        "abolished municipalities matched",
        run_id=run_id,
        stage=STAGE,
        event="JOINED",
        status="ok",
        rows_in=len(records),
        rows_out=len(municipalities),
    )

    writer = persist or json_writer(settings.municipalities_dir, max_attempts=settings.max_attempts)
    dispatch = dispatch_municipalities(municipalities, writer, max_workers=settings.max_workers)
    if dispatch.overwritten:
        log_warning(
            logger,
            f"{dispatch.overwritten} records share a cadastral code with a later record and were overwritten",
            run_id=run_id,
            stage=STAGE,
            event="OVERWRITTEN",
            status="warning",
        )
    for code, error in dispatch.failed:
        log_failure(
            logger,
            f"cannot persist {code}: {error}",
            run_id=run_id,
            stage=STAGE,
            event="PERSIST_FAIL",
            status="error",
            error_code="PERSIST_ERROR",
        )

    summary = build_export_summary(run_id, index, len(records), len(municipalities), dispatch)
    write_export_summary(settings.summary_path, summary)
    log_event(
        logger,
        "abolished municipalities exported",
        run_id=run_id,
        stage=STAGE,
        event="STAGE_END",
        status=summary["status"],
        rows_in=len(municipalities),
        rows_out=dispatch.written,
        duration_ms=elapsed_ms(started_at),
    )
    report_progress(2, 2, "Generation of abolished municipalities completed")
    return summary
