"""Cadastral code lookup built from the comma-delimited reference file."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable

from municipalities.common.constants import CADASTRAL_CSV_DELIMITER
from municipalities.common.errors import ParseError
from municipalities.common.fs import read_utf8_text
from municipalities.common.models import CadastralIndex


def _read_rows(text: str) -> tuple[list[list[str]], int]:
    rows: list[list[str]] = []
    rejected = 0
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=CADASTRAL_CSV_DELIMITER, strict=True)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return rows, rejected
        except csv.Error:
            # the reader resets on the next call, so only the offending line is lost
            rejected += 1
            continue
        fields = [value.strip() for value in row]
        if any(fields):
            rows.append(fields)
        elif len(fields) > 1:
            # delimiters with nothing between them, unlike a blank line
            rejected += 1


def parse_cadastral_rows(text: str) -> tuple[list[tuple[str, str]], int]:
    """Return ``(code, name)`` pairs in file order and the number of rows dropped.

    Parsing starts at the first line, blank lines are ignored, and rows the
    reader rejects or that lack a code and a name are skipped.
    """
    rows, dropped = _read_rows(text)
    pairs: list[tuple[str, str]] = []
    for fields in rows:
        if len(fields) < 2 or not fields[0] or not fields[1]:
            dropped += 1
            continue
        pairs.append((fields[0], fields[1]))
    return pairs, dropped


def build_cadastral_index(pairs: Iterable[tuple[str, str]], rows_dropped: int = 0) -> CadastralIndex:
    codes: dict[str, str] = {}
    rows_read = 0
    for code, name in pairs:
        codes[name.lower()] = code
        rows_read += 1
    return CadastralIndex(codes=codes, rows_read=rows_read, rows_dropped=rows_dropped)


def load_cadastral_index(path: Path) -> CadastralIndex:
    text = read_utf8_text(path)
    pairs, dropped = parse_cadastral_rows(text)
    if not pairs and dropped:
        raise ParseError(f"No usable rows in {path}: all {dropped} rows were rejected")
    return build_cadastral_index(pairs, rows_dropped=dropped)
