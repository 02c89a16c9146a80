import re
from datetime import datetime, timezone
from typing import NamedTuple

from bs4 import BeautifulSoup

from twitch_recover.errors import PageParseTimestampError, UrlParseStreamerError, UrlParseVodIdError


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_PATTERN = re.compile(r"stream-timestamp-dt[^>]*>\s*(?P<timestamp>[^<]+?)\s*<")


class VodIdentity(NamedTuple):
    streamer: str
    vod_id: str


class VodRecord(NamedTuple):
    identity: VodIdentity
    start_time: int

    @property
    def streamer(self):
        return self.identity.streamer

    @property
    def vod_id(self):
        return self.identity.vod_id


def parse_tracker_url(url: str) -> VodIdentity:
    parts = url.split("com/", 1)
    if len(parts) < 2:
        raise UrlParseStreamerError(url)
    streamer = parts[1].split("/", 1)[0]
    if not streamer:
        raise UrlParseStreamerError(url)

    parts = url.split("streams/", 1)
    if len(parts) < 2 or not parts[1]:
        raise UrlParseVodIdError(url)
    # Taken verbatim, query strings included
    vod_id = parts[1]

    return VodIdentity(streamer, vod_id)


def tracker_page_url(identity):
    return f"https://twitchtracker.com/{identity.streamer}/streams/{identity.vod_id}"


def parse_datetime(datetime_string):
    # Tracker pages carry no zone; they are read as UTC
    try:
        stream_datetime = datetime.strptime(datetime_string.strip(), TIMESTAMP_FORMAT)
    except ValueError as e:
        raise PageParseTimestampError(datetime_string) from e
    return int(stream_datetime.replace(tzinfo=timezone.utc).timestamp())


def parse_timestamp(page: str) -> int:
    match = TIMESTAMP_PATTERN.search(page)
    if match is None:
        raise PageParseTimestampError("stream-timestamp-dt marker not found")
    return parse_datetime(match.group("timestamp"))


def calculate_broadcast_duration_in_minutes(hours, minutes):
    return (int(hours) * 60) + int(minutes)


def parse_website_duration(duration_string):
    if isinstance(duration_string, list):
        duration_string = " ".join(duration_string)
    pattern = r"(\d+)\s*(h(?:ou)?r?s?|m(?:in)?(?:ute)?s?)"
    matches = re.findall(pattern, duration_string, re.IGNORECASE)
    if not matches:
        try:
            return calculate_broadcast_duration_in_minutes(0, int(duration_string))
        except ValueError:
            return None

    time_units = {"h": 0, "m": 0}
    for value, unit in matches:
        time_units[unit[0].lower()] = int(value)

    return calculate_broadcast_duration_in_minutes(time_units["h"], time_units["m"])


def parse_duration(page):
    bs = BeautifulSoup(page, "html.parser")
    duration_block = bs.find("div", {"class": "g-x-s-value"})
    if duration_block is None:
        return None
    return parse_website_duration(duration_block.text.strip())


def days_since_broadcast(start_time, now=None):
    if now is None:
        now = datetime.now(timezone.utc)
    vod_age = now - datetime.fromtimestamp(start_time, timezone.utc)
    return max(vod_age.days, 0)
