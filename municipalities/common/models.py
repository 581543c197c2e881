"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class CadastralIndex:
    """Lowercase municipality name -> cadastral code, read-only after loading."""

    codes: Mapping[str, str]
    rows_read: int = 0
    rows_dropped: int = 0

    def lookup(self, name: str) -> str | None:
        return self.codes.get(name.lower())

    def __len__(self) -> int:
        return len(self.codes)


@dataclass(frozen=True)
class AbolishedMunicipality:
    comune: str
    provincia: str
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {**self.extra, "comune": self.comune, "provincia": self.provincia}


@dataclass(frozen=True)
class Municipality:
    denominazione: str
    denominazione_in_italiano: str
    sigla_provincia: str
    codice_provincia: str = ""
    codice_regione: str = ""
    denominazione_regione: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "codiceProvincia": self.codice_provincia,
            "codiceRegione": self.codice_regione,
            "denominazione": self.denominazione,
            "denominazioneInItaliano": self.denominazione_in_italiano,
            "denominazioneRegione": self.denominazione_regione,
            "siglaProvincia": self.sigla_provincia,
        }


@dataclass(frozen=True)
class SerializableMunicipality:
    codice_catastale: str
    municipality: Municipality

    def to_dict(self) -> dict[str, Any]:
        return {
            "codiceCatastale": self.codice_catastale,
            "municipality": self.municipality.to_dict(),
        }
