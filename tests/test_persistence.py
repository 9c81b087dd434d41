from datetime import date
from pathlib import Path

import pytest

from courier_shift.persistence.filesystem import ShiftArchive
from courier_shift.services.reports import list_attendance_history


def _record(day: str, status: str = "PRESENT", delivered: int = 3, user_id: str = "u1") -> dict:
    return {
        "attendance": {
            "id": f"att-{day}",
            "user_id": user_id,
            "date": day,
            "check_in": f"{day}T07:55:00+00:00",
            "check_out": f"{day}T17:10:00+00:00",
            "status": status,
        },
        "summary": {"total_cod": 1, "total_non_cod": 3, "total_packages": 4},
        "packages": [],
        "stats": {"delivered": delivered, "returned": 4 - delivered, "cod_collected": 150000, "success_rate": 75.0},
    }


def test_archive_creates_shift_directory(tmp_path: Path) -> None:
    archive = ShiftArchive(root=tmp_path)

    assert archive.shift_root.exists()
    assert archive.shift_root.is_dir()
    assert archive.shift_root.parent == tmp_path


def test_archive_writes_one_file_per_courier_day(tmp_path: Path) -> None:
    archive = ShiftArchive(root=tmp_path)

    path = archive.save_shift("u1", date(2026, 10, 3), _record("2026-10-03"))
    archive.save_shift("u1", date(2026, 10, 3), _record("2026-10-03", delivered=4))

    assert path == tmp_path / "shifts" / "u1" / "2026-10-03.json"
    assert list(archive.iter_shift_files("u1")) == [path]
    assert archive.load_shift(path)["stats"]["delivered"] == 4


def test_archive_skips_corrupt_files(tmp_path: Path) -> None:
    archive = ShiftArchive(root=tmp_path)
    broken = archive.shift_path("u1", date(2026, 10, 4))
    broken.parent.mkdir(parents=True)
    broken.write_text("{not json", encoding="utf-8")

    assert archive.load_shift(broken) is None
    assert list_attendance_history("u1", archive=archive) == []


def test_history_is_newest_first_and_filtered_by_period(tmp_path: Path) -> None:
    archive = ShiftArchive(root=tmp_path)
    for day in ("2026-10-01", "2026-10-15", "2026-10-16", "2026-09-30"):
        archive.save_shift("u1", date.fromisoformat(day), _record(day))
    archive.save_shift("u2", date(2026, 10, 2), _record("2026-10-02", user_id="u2"))

    everything = list_attendance_history("u1", archive=archive)
    early = list_attendance_history("u1", period="EARLY", month="2026-10", archive=archive)
    late = list_attendance_history("u1", period="LATE", archive=archive)

    assert [entry["date"].isoformat() for entry in everything] == [
        "2026-10-16",
        "2026-10-15",
        "2026-10-01",
        "2026-09-30",
    ]
    assert [entry["date"].day for entry in early] == [15, 1]
    assert [entry["date"].isoformat() for entry in late] == ["2026-10-16", "2026-09-30"]
    assert everything[0]["total_packages"] == 4
    assert everything[0]["success_rate"] == 75.0
    assert list_attendance_history("u1", limit=1, archive=archive)[0]["date"] == date(2026, 10, 16)


def test_history_only_includes_the_requested_courier(tmp_path: Path) -> None:
    archive = ShiftArchive(root=tmp_path)
    archive.save_shift("u1", date(2026, 10, 3), _record("2026-10-03"))
    archive.save_shift("u1_b", date(2026, 10, 3), _record("2026-10-03", user_id="u1_b"))
    # a record filed under the wrong courier is not reported for them
    archive.save_shift("u1", date(2026, 10, 4), _record("2026-10-04", user_id="u9"))

    history = list_attendance_history("u1", archive=archive)

    assert [entry["date"].isoformat() for entry in history] == ["2026-10-03"]
    assert len(list(archive.iter_shift_files())) == 3


@pytest.mark.parametrize("user_id", ["../../escaped", "..", "u1/../u2", "u*", "", ".hidden"])
def test_archive_rejects_unsafe_courier_ids(tmp_path: Path, user_id: str) -> None:
    archive = ShiftArchive(root=tmp_path / "data")

    with pytest.raises(ValueError):
        archive.save_shift(user_id, date(2026, 10, 3), _record("2026-10-03"))

    assert not any(tmp_path.rglob("*.json"))
