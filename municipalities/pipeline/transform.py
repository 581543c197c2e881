"""Join abolished municipalities with their cadastral codes."""

from __future__ import annotations

from typing import Iterable

from municipalities.common.models import (
    AbolishedMunicipality,
    CadastralIndex,
    Municipality,
    SerializableMunicipality,
)


def to_serializable_municipality(record: AbolishedMunicipality, codice_catastale: str) -> SerializableMunicipality:
    # province and region codes are unknown for abolished municipalities
    return SerializableMunicipality(
        codice_catastale=codice_catastale,
        municipality=Municipality(
            denominazione=record.comune,
            denominazione_in_italiano=record.comune,
            sigla_provincia=record.provincia,
            codice_provincia="",
            codice_regione="",
            denominazione_regione="",
        ),
    )


def join_abolished_with_cadastral(
    index: CadastralIndex,
    records: Iterable[AbolishedMunicipality],
) -> list[SerializableMunicipality]:
    """Keep records whose name has a cadastral code, in input order."""
    out: list[SerializableMunicipality] = []
    for record in records:
        code = index.lookup(record.comune)
        if code is None:
            continue
        out.append(to_serializable_municipality(record, code))
    return out
