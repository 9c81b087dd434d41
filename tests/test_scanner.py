import asyncio
import random

import pytest

from courier_shift.services.shift.errors import ScannerBusyError
from courier_shift.services.shift.scanner import RandomCodeSource, Scanner, SequenceCodeSource


def test_scan_resolves_to_one_code():
    scanner = Scanner(SequenceCodeSource(["SPX-ID-1", "SPX-ID-2"]), delay_seconds=0)

    async def scan_twice():
        return [await scanner.scan(), await scanner.scan()]

    assert asyncio.run(scan_twice()) == ["SPX-ID-1", "SPX-ID-2"]
    assert not scanner.busy


def test_second_scan_while_pending_is_refused():
    scanner = Scanner(SequenceCodeSource(["SPX-ID-1"]), delay_seconds=0.05)

    async def overlapping():
        first = asyncio.ensure_future(scanner.scan())
        await asyncio.sleep(0)
        with pytest.raises(ScannerBusyError):
            await scanner.scan()
        return await first

    assert asyncio.run(overlapping()) == "SPX-ID-1"


def test_cancel_aborts_pending_scan_without_a_code():
    source = SequenceCodeSource(["SPX-ID-1"])
    scanner = Scanner(source, delay_seconds=10)

    async def cancelled():
        pending = asyncio.ensure_future(scanner.scan())
        await asyncio.sleep(0)
        assert scanner.cancel() is True
        with pytest.raises(asyncio.CancelledError):
            await pending

    asyncio.run(cancelled())
    assert not scanner.busy
    # the code was never consumed
    assert source.next_code() == "SPX-ID-1"


def test_cancel_without_pending_scan():
    scanner = Scanner(SequenceCodeSource([]), delay_seconds=0)
    assert scanner.cancel() is False


def test_random_code_source_uses_prefix():
    source = RandomCodeSource(prefix="SPX-ID-", rng=random.Random(7))
    code = source.next_code()

    assert code.startswith("SPX-ID-")
    assert 0 <= int(code.removeprefix("SPX-ID-")) <= 99999


def test_sequence_code_source_runs_out():
    source = SequenceCodeSource(["A"])
    assert source.next_code() == "A"
    with pytest.raises(LookupError):
        source.next_code()
