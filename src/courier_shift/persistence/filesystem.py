"""File-based archive of completed shifts."""

from __future__ import annotations

import json
import re
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

from ..config import settings

# One directory per courier, so ids are limited to plain path segments.
USER_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]{0,63}")


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums and datetimes into plain JSON values."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


class ShiftArchive:
    """One JSON document per shift, stored as ``shifts/<courier>/<day>.json``."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.shift_root = self.root / "shifts"
        self.shift_root.mkdir(parents=True, exist_ok=True)

    def user_root(self, user_id: str) -> Path:
        if not isinstance(user_id, str) or not USER_ID_PATTERN.fullmatch(user_id):
            raise ValueError(f"Invalid courier id for the shift archive: {user_id!r}")
        path = (self.shift_root / user_id).resolve()
        if path.parent != self.shift_root:
            raise ValueError(f"Courier id {user_id!r} escapes the shift archive")
        return path

    def shift_path(self, user_id: str, day: date) -> Path:
        return self.user_root(user_id) / f"{day.isoformat()}.json"

    def save_shift(self, user_id: str, day: date, record: dict) -> Path:
        path = self.shift_path(user_id, day)
        self.write_json(path, to_jsonable(record))
        return path

    def iter_shift_files(self, user_id: str | None = None) -> Iterator[Path]:
        if user_id is None:
            yield from sorted(self.shift_root.glob("*/*.json"))
            return
        yield from sorted(self.user_root(user_id).glob("*.json"))

    def load_shift(self, path: Path) -> dict | None:
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)
