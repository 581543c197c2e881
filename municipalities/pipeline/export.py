"""Per-record JSON export and the concurrent dispatch of all records."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from municipalities.common.errors import PersistError
from municipalities.common.fs import write_json
from municipalities.common.models import SerializableMunicipality

Persist = Callable[[SerializableMunicipality], Path]

UNSAFE_CODE_CHARS = ("/", "\\", "\x00")


@dataclass(frozen=True)
class WriteRetryConfig:
    max_attempts: int = 3
    initial_wait: float = 0.1
    max_wait: float = 2.0


@dataclass
class DispatchSummary:
    written: int = 0
    overwritten: int = 0
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


def municipality_output_path(output_dir: Path, municipality: SerializableMunicipality) -> Path:
    code = municipality.codice_catastale
    if not code or code in {".", ".."} or any(char in code for char in UNSAFE_CODE_CHARS):
        raise PersistError(f"Unsafe cadastral code for an output path: {code!r}")
    shard = code.lower()
    out_path = output_dir / shard[0] / shard[1:2] / f"{code}.json"
    if not out_path.resolve().is_relative_to(output_dir.resolve()):
        raise PersistError(f"Output path for {code!r} escapes {output_dir}")
    return out_path


def write_municipality_json(
    output_dir: Path,
    municipality: SerializableMunicipality,
    retry_config: WriteRetryConfig | None = None,
) -> Path:
    cfg = retry_config or WriteRetryConfig()
    out_path = municipality_output_path(output_dir, municipality)

    @retry(
        stop=stop_after_attempt(cfg.max_attempts),
        wait=wait_exponential_jitter(initial=cfg.initial_wait, max=cfg.max_wait, jitter=cfg.initial_wait),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _wrapped() -> None:
        write_json(out_path, municipality.to_dict())

    try:
        _wrapped()
    except OSError as exc:
        raise PersistError(f"Cannot write {out_path}: {exc}") from exc
    return out_path


def json_writer(output_dir: Path, max_attempts: int = 3) -> Persist:
    retry_config = WriteRetryConfig(max_attempts=max_attempts)

    def _persist(municipality: SerializableMunicipality) -> Path:
        return write_municipality_json(output_dir, municipality, retry_config)

    return _persist


def group_by_code(
    municipalities: Iterable[SerializableMunicipality],
) -> dict[str, list[SerializableMunicipality]]:
    """Records sharing a cadastral code share an output file, keep them in input order."""
    groups: dict[str, list[SerializableMunicipality]] = {}
    for municipality in municipalities:
        groups.setdefault(municipality.codice_catastale, []).append(municipality)
    return groups


def _persist_in_order(group: list[SerializableMunicipality], persist: Persist) -> None:
    for municipality in group:
        persist(municipality)


def dispatch_municipalities(
    municipalities: Iterable[SerializableMunicipality],
    persist: Persist,
    *,
    max_workers: int = 8,
) -> DispatchSummary:
    """Persist every record concurrently and wait until all calls have settled.

    Records with the same code are written one after another on the same
    worker, so the last one in input order is the one left on disk. A failing
    group is recorded in the summary; it never cancels the others.
    """
    summary = DispatchSummary()
    groups = group_by_code(municipalities)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_code = {
            executor.submit(_persist_in_order, group, persist): code
            for code, group in groups.items()
        }
        for future in as_completed(future_to_code):
            code = future_to_code[future]
            try:
                future.result()
            except Exception as exc:
                summary.failed.append((code, str(exc)))
            else:
                summary.written += 1
                summary.overwritten += len(groups[code]) - 1
    summary.failed.sort()
    return summary
