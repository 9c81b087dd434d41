"""Messaging and navigation deep links for a package."""

from __future__ import annotations

import logging
from typing import Protocol
from urllib.parse import quote

from ...config import settings
from ...models.domain import Package

logger = logging.getLogger(__name__)


class LinkOpener(Protocol):
    def open(self, url: str) -> None:
        ...


class RecordingLinkOpener:
    """Keeps opened URLs instead of launching anything."""

    def __init__(self) -> None:
        self.opened: list[str] = []

    def open(self, url: str) -> None:
        self.opened.append(url)


def whatsapp_link(package: Package, base_url: str | None = None) -> str:
    base = (base_url or settings.messaging_base_url).rstrip("/")
    return f"{base}/{quote(package.phone_number.strip())}"


def maps_link(package: Package, base_url: str | None = None) -> str:
    base = (base_url or settings.maps_base_url).rstrip("/")
    return f"{base}?destination={package.coordinates.lat},{package.coordinates.lng}"


def open_link(opener: LinkOpener, url: str) -> None:
    """Fire-and-forget: the workflow never waits on, or reacts to, the opener."""
    logger.info("Opening external link %s", url)
    opener.open(url)
