"""Barcode scanner collaborator.

A scan is a single cooperative operation: it resolves to exactly one code after
the configured delay or is cancelled by closing the scanner. Real camera
decoding plugs in as another ``CodeSource``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Iterable, Optional, Protocol

from ...config import settings
from .errors import ScannerBusyError

logger = logging.getLogger(__name__)


class CodeSource(Protocol):
    def next_code(self) -> str:
        ...


class RandomCodeSource:
    """Produces simulated tracking codes such as ``SPX-ID-48213``."""

    def __init__(self, prefix: Optional[str] = None, rng: Optional[random.Random] = None) -> None:
        self.prefix = settings.tracking_prefix if prefix is None else prefix
        self.rng = rng or random.Random()

    def next_code(self) -> str:
        return f"{self.prefix}{self.rng.randint(0, 99999)}"


class SequenceCodeSource:
    """Replays a fixed list of codes, in order."""

    def __init__(self, codes: Iterable[str]) -> None:
        self._codes = list(codes)
        self._position = 0

    def next_code(self) -> str:
        if self._position >= len(self._codes):
            raise LookupError("No more codes to replay.")
        code = self._codes[self._position]
        self._position += 1
        return code


class Scanner:
    """Runs at most one pending scan at a time."""

    def __init__(self, source: CodeSource, delay_seconds: Optional[float] = None) -> None:
        self.source = source
        self.delay_seconds = settings.scan_delay_seconds if delay_seconds is None else delay_seconds
        self._pending: Optional[asyncio.Task] = None

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def scan(self) -> str:
        """Wait for the next code.

        Raises ``asyncio.CancelledError`` if ``cancel`` closes the scan first.
        """
        if self.busy:
            raise ScannerBusyError("A scan is already in progress.")
        self._pending = asyncio.ensure_future(self._resolve())
        try:
            code = await self._pending
        finally:
            self._pending = None
        logger.info("Scanner produced code %s", code)
        return code

    def cancel(self) -> bool:
        """Close the scanner. Returns False when nothing was pending."""
        if not self.busy:
            return False
        self._pending.cancel()
        logger.info("Pending scan cancelled")
        return True

    async def _resolve(self) -> str:
        await asyncio.sleep(self.delay_seconds)
        return self.source.next_code()
