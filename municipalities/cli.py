"""CLI entrypoint for the abolished municipalities export."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from municipalities.common.config_loader import load_export_config, resolve_settings
from municipalities.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from municipalities.common.errors import PipelineError
from municipalities.common.ids import generate_run_id
from municipalities.common.logging import build_logger, close_logger, log_event, log_failure
from municipalities.pipeline.export_abolished import export_abolished_municipalities


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=STAGES)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    try:
        cfg = load_export_config(config_dir, overlay_config_dir=overlay_config_dir)
        settings = resolve_settings(cfg, data_dir, run_id)
        log_event(logger, "stage start", run_id=run_id, stage=args.command, event="STAGE_START", status="ok")
        summary = export_abolished_municipalities(settings, logger)
    except PipelineError:
        raise
    except Exception:
        log_failure(
            logger,
            "unexpected failure",
            run_id=run_id,
            stage=args.command,
            event="STAGE_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        raise
    finally:
        close_logger(logger)

    if summary is None:
        return EXIT_HARD_FAIL
    if summary["status"] != "success":
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError as exc:
        print(f"{exc.error_code}: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL
    except Exception as exc:
        print(f"UNEXPECTED_ERROR: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
