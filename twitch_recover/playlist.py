import logging
from concurrent.futures import ThreadPoolExecutor

import requests

from twitch_recover.fetcher import fetch_page, return_user_agent
from twitch_recover.settings import get_request_timeout
from twitch_recover.tables import RESOLUTIONS


logger = logging.getLogger(__name__)

PLAYLIST_NAME = "index-dvr.m3u8"


def get_base_link(m3u8_link):
    return m3u8_link.replace(PLAYLIST_NAME, "")


def ensure_absolute_uri(uri, base_link):
    uri = uri.strip()
    if uri.startswith("http://") or uri.startswith("https://"):
        return uri
    return f"{base_link}{uri}"


def parse_streamer_and_vod_id_from_m3u8_link(m3u8_link):
    # {prefix}_{streamer}_{vod_id}_{timestamp}; streamer names may hold underscores
    indices = [i for i, char in enumerate(m3u8_link) if char == "_"]
    if len(indices) < 3:
        return None, None
    return m3u8_link[indices[0] + 1:indices[-2]], m3u8_link[indices[-2] + 1:indices[-1]]


def find_resolution(m3u8_link):
    for resolution in RESOLUTIONS:
        if f"/{resolution}/" in m3u8_link:
            return resolution
    return None


def return_supported_qualities(m3u8_link, timeout=None):
    """Renditions of a recovered VOD that answer 200, best first."""
    found_quality = find_resolution(m3u8_link)
    if found_quality is None:
        return []
    if timeout is None:
        timeout = get_request_timeout()

    def check_quality(resolution):
        url = m3u8_link.replace(f"/{found_quality}/", f"/{resolution}/")
        try:
            response = requests.get(url, headers=return_user_agent(), timeout=timeout)
        except requests.RequestException as e:
            logger.debug("Quality check of %s failed: %s", url, e)
            return None
        return resolution if response.status_code == 200 else None

    with ThreadPoolExecutor() as executor:
        results = list(executor.map(check_quality, RESOLUTIONS))

    return [resolution for resolution in results if resolution]


def is_video_muted(playlist):
    return "unmuted" in playlist


def _rewrite_map_line(line, base_link):
    prefix, uri_part = line.split("URI=", 1)
    if uri_part.startswith('"'):
        end_quote = uri_part.find('"', 1)
        if end_quote == -1:
            return line
        absolute_uri = ensure_absolute_uri(uri_part[1:end_quote], base_link)
        return f'{prefix}URI="{absolute_uri}"{uri_part[end_quote + 1:]}'
    raw_uri, _, rest = uri_part.partition(",")
    absolute_uri = ensure_absolute_uri(raw_uri, base_link)
    return f'{prefix}URI="{absolute_uri}"' + (f",{rest}" if rest else "")


def unmute_playlist(m3u8_link, playlist):
    """Rewrite a VOD playlist so every segment resolves.

    Muted segments are listed as ``N-unmuted.ts`` but stored as
    ``N-muted.ts``. Segment and ``#EXT-X-MAP`` URIs are made absolute
    against the playlist location so the result plays from anywhere.
    """
    base_link = get_base_link(m3u8_link)
    lines = []
    for line in playlist.splitlines():
        if line.startswith("#"):
            if line.startswith("#EXT-X-MAP") and "URI=" in line:
                line = _rewrite_map_line(line, base_link)
            lines.append(line)
            continue

        segment_uri = line.strip()
        if not segment_uri:
            lines.append(line)
            continue

        if "-unmuted" in segment_uri:
            segment_uri = segment_uri.replace("-unmuted", "-muted")
        lines.append(ensure_absolute_uri(segment_uri, base_link))

    return "\n".join(lines) + "\n"


def unmute_vod(m3u8_link, fetch=fetch_page):
    """Fetch a recovered playlist; returns ``(was_muted, rewritten_playlist)``."""
    playlist = fetch(m3u8_link)
    is_muted = is_video_muted(playlist)
    if not is_muted:
        logger.info("%s has no muted segments", m3u8_link)
    return is_muted, unmute_playlist(m3u8_link, playlist)
