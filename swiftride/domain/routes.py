"""
Static fare table: base fares (PHP) from CIT to each supported stop.

Look-ups are case-insensitive; the canonical spelling is the one below.
"""

from __future__ import annotations

from typing import Iterator, Mapping, Optional

FARES_FROM_CIT: dict[str, float] = {
    "Ayala Center": 75.00,
    "Banawa": 70.00,
    "Banilad": 110.00,
    "Basak San Nicolas": 30.00,
    "Bulacao": 70.00,
    "Calamba": 40.00,
    "Capitol Site": 65.00,
    "Carbon": 45.00,
    "Carreta": 75.00,
    "Cebu Doctors Hospital V Rama": 60.00,
    "Cebu South Bus Terminal (CSBT)": 25.00,
    "Colon": 45.00,
    "Duljo Fatima": 30.00,
    "Ermita": 45.00,
    "Fuente Osmeña": 60.00,
    "Guadalupe": 75.00,
    "Hipodromo": 80.00,
    "Il Corso (SRP)": 70.00,
    "Inayawan": 60.00,
    "IT Park": 95.00,
    "Kamputhaw": 70.00,
    "Labangon": 40.00,
    "Lahug": 100.00,
    "Mabolo": 85.00,
    "Mambaling": 20.00,
    "Pahina Central": 35.00,
    "Pahina San Nicolas": 35.00,
    "Pardo": 55.00,
    "Parian": 50.00,
    "Pier Area": 55.00,
    "Pooc": 115.00,
    "Punta Princesa": 35.00,
    "Quiot Pardo": 45.00,
    "Robinsons Galleria": 65.00,
    "San Antonio": 40.00,
    "San Nicolas Bukid": 35.00,
    "San Nicolas Proper": 35.00,
    "Sambag I": 45.00,
    "Sambag II": 45.00,
    "SM City Cebu": 85.00,
    "SM Seaside": 80.00,
    "Sto. Niño Basilica": 50.00,
    "Taboan Market": 40.00,
    "Tabunok": 85.00,
    "Talamban": 140.00,
    "Talisay": 110.00,
    "Tisa": 40.00,
}


class FareTable(Mapping[str, float]):
    """Read-only, case-insensitive view over a destination -> fare mapping."""

    def __init__(self, fares: Mapping[str, float]):
        self._fares = dict(fares)
        self._names = {name.casefold(): name for name in self._fares}

    def __getitem__(self, destination: str) -> float:
        name = self.canonical(destination)
        if name is None:
            raise KeyError(destination)
        return self._fares[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fares)

    def __len__(self) -> int:
        return len(self._fares)

    def canonical(self, destination: str) -> Optional[str]:
        return self._names.get(destination.casefold())

    def base_fare(self, destination: str) -> Optional[float]:
        return self.get(destination)

    def destinations(self) -> list[str]:
        return list(self._fares)
