from pathlib import Path

import pytest

from municipalities.common.errors import ParseError, ReadError
from municipalities.pipeline.cadastral_index import (
    build_cadastral_index,
    load_cadastral_index,
    parse_cadastral_rows,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_single_row_is_found_case_insensitively(tmp_path: Path):
    index = load_cadastral_index(_write(tmp_path / "codes.csv", "A123,Example Town\n"))

    assert index.lookup("Example Town") == "A123"
    assert index.lookup("EXAMPLE TOWN") == "A123"
    assert index.codes == {"example town": "A123"}


def test_fields_are_trimmed_and_blank_lines_skipped(tmp_path: Path):
    text = "  A001 ,  Abano Terme  \n\n   \nA002,Abbadia Cerreto\n"
    index = load_cadastral_index(_write(tmp_path / "codes.csv", text))

    assert index.lookup("abano terme") == "A001"
    assert index.lookup("Abbadia Cerreto") == "A002"
    assert index.rows_read == 2
    assert index.rows_dropped == 0


def test_later_duplicate_name_overwrites_earlier(tmp_path: Path):
    index = load_cadastral_index(_write(tmp_path / "codes.csv", "A001,Borgo\nB002,BORGO\n"))

    assert len(index) == 1
    assert index.lookup("borgo") == "B002"


def test_malformed_rows_are_skipped_and_later_rows_still_load():
    text = 'A001,Primo\nonly-one-field\n"A002"x,Broken Quote\nA003,Terzo,extra\n'
    pairs, dropped = parse_cadastral_rows(text)

    assert pairs == [("A001", "Primo"), ("A003", "Terzo")]
    assert dropped == 2


def test_rows_with_empty_code_or_name_are_dropped():
    pairs, dropped = parse_cadastral_rows(",Senza Codice\nA004,\nA005,Quinto\n")

    assert pairs == [("A005", "Quinto")]
    assert dropped == 2


def test_quoted_names_with_commas_are_kept():
    pairs, _dropped = parse_cadastral_rows('A006,"Castel San Pietro, Terme"\n')

    assert pairs == [("A006", "Castel San Pietro, Terme")]


def test_header_row_is_loaded_like_any_other_row():
    index = build_cadastral_index(parse_cadastral_rows("codice,comune\nA001,Primo\n")[0])

    assert index.lookup("comune") == "codice"
    assert index.lookup("primo") == "A001"


def test_missing_file_raises_read_error(tmp_path: Path):
    with pytest.raises(ReadError):
        load_cadastral_index(tmp_path / "missing.csv")


def test_non_utf8_file_raises_parse_error(tmp_path: Path):
    path = tmp_path / "codes.csv"
    path.write_bytes(b"A001,Citt\xe0\n")

    with pytest.raises(ParseError):
        load_cadastral_index(path)


def test_file_with_only_rejected_rows_raises_parse_error(tmp_path: Path):
    with pytest.raises(ParseError):
        load_cadastral_index(_write(tmp_path / "codes.csv", "nothing\nto see\n"))


def test_empty_file_gives_empty_index(tmp_path: Path):
    index = load_cadastral_index(_write(tmp_path / "codes.csv", ""))

    assert len(index) == 0
    assert index.lookup("anything") is None


def test_rows_of_only_delimiters_count_as_dropped(tmp_path: Path):
    index = load_cadastral_index(_write(tmp_path / "codes.csv", "A001,Primo\n,,\n , \n\nA002,Secondo\n"))

    assert index.rows_read == 2
    assert index.rows_dropped == 2
