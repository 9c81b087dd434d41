import random
from datetime import datetime, timezone

import pytest

from courier_shift.config import Settings
from courier_shift.models.domain import Coordinates, Package, PackageStatus, PackageType, Role, User
from courier_shift.services.shift.classification import ManifestClassifier, ManifestEntry, RandomClassifier
from courier_shift.services.shift.links import RecordingLinkOpener, maps_link, open_link, whatsapp_link
from courier_shift.services.shift.session import ShiftSession
from courier_shift.services.shift.stats import compute_shift_stats


def _package(code: str, status: PackageStatus, cod_amount: int = 0) -> Package:
    return Package(
        id=f"pkg-{code}",
        tracking_number=code,
        type=PackageType.COD if cod_amount else PackageType.NON_COD,
        recipient_name="Siti Aminah",
        address="Jl. Melati No. 4, Jakarta Selatan",
        phone_number="6281234567890",
        coordinates=Coordinates(lat=-6.2088, lng=106.8456),
        status=status,
        timestamp=datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc),
        cod_amount=cod_amount,
    )


def test_random_classifier_always_cod():
    classifier = RandomClassifier(rng=random.Random(1), config=Settings(cod_probability=1.0))

    entry = classifier.classify("SPX-ID-1")

    assert entry.type is PackageType.COD
    assert entry.cod_amount > 0
    assert entry.cod_amount % 1000 == 0


def test_random_classifier_never_cod():
    classifier = RandomClassifier(rng=random.Random(1), config=Settings(cod_probability=0.0))

    entry = classifier.classify("SPX-ID-1")

    assert entry.type is PackageType.NON_COD
    assert entry.cod_amount == 0


def test_manifest_entry_rejects_inconsistent_cod():
    with pytest.raises(ValueError):
        ManifestEntry(
            type=PackageType.COD,
            recipient_name="X",
            address="Y",
            phone_number="1",
            coordinates=Coordinates(lat=0, lng=0),
        )
    with pytest.raises(ValueError):
        ManifestEntry(
            type=PackageType.NON_COD,
            recipient_name="X",
            address="Y",
            phone_number="1",
            coordinates=Coordinates(lat=0, lng=0),
            cod_amount=5000,
        )


def test_manifest_classifier_falls_back_for_unknown_codes():
    known = ManifestEntry(
        type=PackageType.NON_COD,
        recipient_name="PT. Maju Mundur",
        address="Ruko Business Park Block C",
        phone_number="6282112345678",
        coordinates=Coordinates(lat=-6.1751, lng=106.865),
    )
    fallback = RandomClassifier(rng=random.Random(3), config=Settings(cod_probability=0.0))
    classifier = ManifestClassifier({"SPX-ID-991231": known}, fallback=fallback)

    assert classifier.classify("spx-id-991231") is known
    assert classifier.classify("SPX-ID-42").recipient_name == "Auto Recipient"
    with pytest.raises(KeyError):
        ManifestClassifier({}).classify("SPX-ID-42")


def test_deep_links():
    package = _package("SPX-ID-1", PackageStatus.LOADED)

    assert whatsapp_link(package, base_url="https://wa.me") == "https://wa.me/6281234567890"
    assert (
        maps_link(package, base_url="https://maps.example/dir")
        == "https://maps.example/dir?destination=-6.2088,106.8456"
    )


def test_open_link_is_fire_and_forget():
    opener = RecordingLinkOpener()

    assert open_link(opener, "https://wa.me/6281234567890") is None
    assert opener.opened == ["https://wa.me/6281234567890"]


def test_shift_stats():
    session = ShiftSession(
        user=User(id="u1", name="Andi Kurir", role=Role.COURIER),
        packages=(
            _package("A", PackageStatus.DELIVERED, cod_amount=150000),
            _package("B", PackageStatus.DELIVERED),
            _package("C", PackageStatus.FAILED, cod_amount=50000),
            _package("D", PackageStatus.RETURNED, cod_amount=20000),
            _package("E", PackageStatus.LOADED),
        ),
    )

    stats = compute_shift_stats(session)

    assert stats.total == 5
    assert stats.delivered == 2
    assert stats.failed == 1
    assert stats.returned == 1
    assert stats.loaded == 1
    assert stats.remaining == 2
    assert stats.cod_collected == 150000
    assert stats.cod_outstanding == 50000
    assert stats.success_rate == 40.0


def test_shift_stats_empty_session():
    stats = compute_shift_stats(ShiftSession(user=User(id="u1", name="Andi", role=Role.COURIER)))

    assert stats.total == 0
    assert stats.success_rate == 0.0
