import hashlib

from twitch_recover.settings import get_search_window
from twitch_recover.tables import get_domains


PLAYLIST_SUFFIX = "/chunked/index-dvr.m3u8"


def hash_prefix(base_link):
    return hashlib.sha1(base_link.encode("utf-8")).hexdigest()[:20]


def generate_links(record, domains=None, window=None):
    """Every URL the legacy storage layout could hold the VOD under.

    Seconds are the outer loop and domains the inner one, so consecutive
    runs of ``len(domains)`` links share a single start-time offset.
    """
    if domains is None:
        domains = get_domains()
    if window is None:
        window = get_search_window()
    if window <= 0:
        raise ValueError(f"search window must be positive, got {window}")

    links = []
    for seconds in range(window):
        base_link = f"{record.streamer}_{record.vod_id}_{record.start_time + seconds}"
        prefix = hash_prefix(base_link)
        for domain in domains:
            links.append(f"{domain}{prefix}_{base_link}{PLAYLIST_SUFFIX}")
    return links
