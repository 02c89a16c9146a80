import logging
from typing import NamedTuple, Optional

from twitch_recover.candidates import generate_links
from twitch_recover.errors import TwitchRecoverError
from twitch_recover.fetcher import fetch_page
from twitch_recover.probe import run_find_first_live
from twitch_recover.settings import RETENTION_DAYS, get_max_bulk_links
from twitch_recover.tracker import (
    VodIdentity,
    VodRecord,
    days_since_broadcast,
    parse_datetime,
    parse_duration,
    parse_timestamp,
    parse_tracker_url,
    tracker_page_url,
)


logger = logging.getLogger(__name__)


class BulkResult(NamedTuple):
    link: str
    url: Optional[str] = None
    error: Optional[TwitchRecoverError] = None


def read_tracker_page(url, fetch=fetch_page):
    """Returns the VOD record and the broadcast duration in minutes (or None)."""
    identity = parse_tracker_url(url)
    page = fetch(tracker_page_url(identity))
    return VodRecord(identity, parse_timestamp(page)), parse_duration(page)


def record_from_url(url, fetch=fetch_page):
    record, _ = read_tracker_page(url, fetch=fetch)
    return record


def record_from_manual(streamer, vod_id, start_time):
    # Accepts either a Unix timestamp or "YYYY-MM-DD HH:MM:SS"
    if isinstance(start_time, str):
        start_time = parse_datetime(start_time)
    return VodRecord(VodIdentity(streamer, vod_id), int(start_time))


def vod_recover(record, batch_size=None, window=None, probe=None, on_batch=None):
    vod_age = days_since_broadcast(record.start_time)
    if vod_age > RETENTION_DAYS:
        logger.warning("%s [%s] is %d days old, recovery is unlikely", record.streamer, record.vod_id, vod_age)

    links = generate_links(record, window=window)
    return run_find_first_live(links, batch_size=batch_size, probe=probe, on_batch=on_batch)


def recover_from_url(url, batch_size=None, window=None, fetch=fetch_page, probe=None, on_batch=None, on_record=None):
    record, duration = read_tracker_page(url, fetch=fetch)
    logger.info("Recovering %s [%s] from %d, duration %s minutes", record.streamer, record.vod_id, record.start_time, duration)
    if on_record is not None:
        on_record(record, duration)
    return vod_recover(record, batch_size=batch_size, window=window, probe=probe, on_batch=on_batch)


def recover_manual(streamer, vod_id, start_time, batch_size=None, window=None, probe=None, on_batch=None):
    record = record_from_manual(streamer, vod_id, start_time)
    return vod_recover(record, batch_size=batch_size, window=window, probe=probe, on_batch=on_batch)


def bulk_recover(links, max_links=None, batch_size=None, window=None, fetch=fetch_page, probe=None, on_result=None):
    """Recover each link in turn; one failing link does not stop the rest."""
    if max_links is None:
        max_links = get_max_bulk_links()
    if len(links) > max_links:
        logger.warning("Only the first %d of %d links will be recovered", max_links, len(links))

    results = []
    for link in links[:max_links]:
        try:
            url = recover_from_url(link, batch_size=batch_size, window=window, fetch=fetch, probe=probe)
            result = BulkResult(link, url=url)
        except TwitchRecoverError as e:
            result = BulkResult(link, error=e)
        results.append(result)
        if on_result is not None:
            on_result(result)
    return results
