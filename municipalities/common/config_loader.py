"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from municipalities.common.constants import EXPORT_CONFIG_FILENAME
from municipalities.common.errors import ConfigError
from municipalities.common.fs import read_yaml
from municipalities.common.schema import validate_export_config


@dataclass(frozen=True)
class ExportSettings:
    cadastral_csv: Path
    abolished_json: Path
    municipalities_dir: Path
    summary_path: Path
    max_workers: int
    max_attempts: int
    run_id: str = "run-local"


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config(path: Path):
    try:
        return read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = _read_config(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = _read_config(overlay_path)
    return _deep_merge(base, overlay)


def load_export_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> dict:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / EXPORT_CONFIG_FILENAME
    cfg = _load_yaml_with_overlay(config_dir / EXPORT_CONFIG_FILENAME, overlay_path)
    return validate_export_config(cfg, allow_unknown=allow_unknown)


def resolve_settings(cfg: dict, data_dir: Path, run_id: str) -> ExportSettings:
    """Turn a validated config mapping into concrete paths under ``data_dir``."""
    return ExportSettings(
        cadastral_csv=data_dir / cfg["inputs"]["cadastral_csv"],
        abolished_json=data_dir / cfg["inputs"]["abolished_json"],
        municipalities_dir=data_dir / cfg["output"]["municipalities_dir"],
        summary_path=data_dir / "out" / "reports" / cfg["output"]["summary_filename"],
        max_workers=cfg["dispatch"]["max_workers"],
        max_attempts=cfg["dispatch"]["max_attempts"],
        run_id=run_id,
    )
