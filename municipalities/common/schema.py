"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from municipalities.common.errors import ConfigError


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_non_empty_string(value, ctx: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{ctx} must be a non-empty string")


def _assert_positive_int(value, ctx: str) -> None:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{ctx} must be a positive integer")


def validate_export_config(cfg, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "export config")
    sections = {
        "inputs": {"cadastral_csv", "abolished_json"},
        "output": {"municipalities_dir", "summary_filename"},
        "dispatch": {"max_workers", "max_attempts"},
    }
    _assert_required_keys(cfg, set(sections), "export config")
    _assert_no_unknown_keys(cfg, set(sections), "export config", allow_unknown)

    for name, keys in sections.items():
        _assert_mapping(cfg[name], name)
        _assert_required_keys(cfg[name], keys, name)
        _assert_no_unknown_keys(cfg[name], keys, name, allow_unknown)

    for name in ("inputs", "output"):
        for key in sorted(sections[name]):
            _assert_non_empty_string(cfg[name][key], f"{name}.{key}")
    for key in sorted(sections["dispatch"]):
        _assert_positive_int(cfg["dispatch"][key], f"dispatch.{key}")

    return cfg
