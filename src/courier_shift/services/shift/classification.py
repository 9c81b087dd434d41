"""Classification of freshly scanned packages.

Production deployments look codes up in the depot manifest; ``RandomClassifier``
stands in for that lookup when no manifest is available.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

from ...config import Settings, settings
from ...models.domain import Coordinates, PackageType


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    type: PackageType
    recipient_name: str
    address: str
    phone_number: str
    coordinates: Coordinates
    cod_amount: int = 0

    def __post_init__(self) -> None:
        if self.type is PackageType.COD and self.cod_amount <= 0:
            raise ValueError("COD packages need a positive cod_amount.")
        if self.type is PackageType.NON_COD and self.cod_amount:
            raise ValueError("cod_amount is only allowed on COD packages.")


class PackageClassifier(Protocol):
    def classify(self, tracking_number: str) -> ManifestEntry:
        ...


class RandomClassifier:
    """Randomly labels packages COD or non-COD with placeholder recipient data."""

    def __init__(self, rng: Optional[random.Random] = None, config: Settings = settings) -> None:
        self.rng = rng or random.Random()
        self.config = config

    def classify(self, tracking_number: str) -> ManifestEntry:
        is_cod = self.rng.random() < self.config.cod_probability
        cod_amount = 0
        if is_cod:
            # never zero: a COD package always has something to collect
            units = max(1, int(self.rng.random() * self.config.cod_max_units))
            cod_amount = units * self.config.cod_unit_amount
        return ManifestEntry(
            type=PackageType.COD if is_cod else PackageType.NON_COD,
            recipient_name="Auto Recipient",
            address="Jl. Contoh Alamat No. 123",
            phone_number="6281234567890",
            coordinates=Coordinates(lat=-6.2, lng=106.816666),
            cod_amount=cod_amount,
        )


class ManifestClassifier:
    """Looks tracking numbers up in a known manifest.

    Unknown codes are delegated to ``fallback``; without one they raise
    ``KeyError``.
    """

    def __init__(
        self,
        entries: Mapping[str, ManifestEntry],
        fallback: Optional[PackageClassifier] = None,
    ) -> None:
        self.entries = {code.lower(): entry for code, entry in entries.items()}
        self.fallback = fallback

    def classify(self, tracking_number: str) -> ManifestEntry:
        entry = self.entries.get(tracking_number.lower())
        if entry is not None:
            return entry
        if self.fallback is None:
            raise KeyError(tracking_number)
        return self.fallback.classify(tracking_number)
