import asyncio
import enum
import logging
from typing import NamedTuple, Optional

import aiohttp

from twitch_recover.errors import VodNotFoundError
from twitch_recover.settings import get_probe_batch_size, get_probe_timeout


logger = logging.getLogger(__name__)


class ProbeStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class ProbeOutcome(NamedTuple):
    url: str
    status: ProbeStatus
    reason: Optional[str] = None


class FoundSlot:
    """Holds the first live URL of a scan; later offers are ignored."""

    def __init__(self):
        self._url = None
        self._lock = asyncio.Lock()

    async def offer(self, url):
        async with self._lock:
            if self._url is not None:
                return False
            self._url = url
            return True

    async def read(self):
        async with self._lock:
            return self._url


def partition(items, size):
    if size <= 0:
        raise ValueError(f"batch size must be positive, got {size}")
    items = list(items)
    return [items[i:i + size] for i in range(0, len(items), size)]


async def fetch_status(session, url):
    try:
        async with session.get(url) as response:
            if response.status == 200:
                return ProbeOutcome(url, ProbeStatus.FOUND)
            return ProbeOutcome(url, ProbeStatus.NOT_FOUND, str(response.status))
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        return ProbeOutcome(url, ProbeStatus.FAILED, str(e) or type(e).__name__)


async def _probe_into(slot, session, url, probe):
    try:
        outcome = await probe(session, url)
    except Exception as e:
        outcome = ProbeOutcome(url, ProbeStatus.FAILED, str(e) or type(e).__name__)

    if outcome.status is ProbeStatus.FOUND:
        await slot.offer(outcome.url)
    elif outcome.status is ProbeStatus.FAILED:
        logger.debug("Probe of %s failed: %s", url, outcome.reason)
    return outcome


async def find_first_live(candidates, batch_size=None, probe=None, timeout=None, on_batch=None):
    """Probe candidates batch by batch and return the first URL answering 200.

    Probes inside a batch run concurrently; the next batch is only issued
    once every probe of the current one has completed. When several
    candidates of one batch are live, which of them is returned is not
    defined.
    """
    candidates = list(candidates)
    if batch_size is None:
        batch_size = get_probe_batch_size()
    if probe is None:
        probe = fetch_status
    if timeout is None:
        timeout = get_probe_timeout()

    batches = partition(candidates, batch_size)
    slot = FoundSlot()
    probed = 0

    logger.info("Probing %d candidate URLs in %d batches", len(candidates), len(batches))
    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
        for index, batch in enumerate(batches, 1):
            await asyncio.gather(*(_probe_into(slot, session, url, probe) for url in batch))
            probed += len(batch)
            if on_batch is not None:
                on_batch(probed, len(candidates))

            found = await slot.read()
            if found is not None:
                logger.info("Found live URL in batch %d/%d: %s", index, len(batches), found)
                return found

    logger.info("No live URL among %d candidates", probed)
    raise VodNotFoundError()


def run_find_first_live(candidates, batch_size=None, probe=None, timeout=None, on_batch=None):
    return asyncio.run(find_first_live(candidates, batch_size=batch_size, probe=probe, timeout=timeout, on_batch=on_batch))
