from datetime import datetime, timezone

import pytest

from twitch_recover.errors import PageParseTimestampError, UrlParseStreamerError, UrlParseVodIdError
from twitch_recover.tracker import (
    VodIdentity,
    days_since_broadcast,
    parse_datetime,
    parse_duration,
    parse_timestamp,
    parse_tracker_url,
    parse_website_duration,
    tracker_page_url,
)


class TestParseTrackerUrl:
    def test_streamer_and_vod_id(self):
        identity = parse_tracker_url("https://twitchtracker.com/streamer_name/streams/10000000")
        assert identity == VodIdentity("streamer_name", "10000000")

    def test_vod_id_keeps_remainder_verbatim(self):
        identity = parse_tracker_url("https://twitchtracker.com/streamer_name/streams/10000000?utm=1")
        assert identity.vod_id == "10000000?utm=1"

    def test_missing_com_marker(self):
        with pytest.raises(UrlParseStreamerError):
            parse_tracker_url("https://twitchtracker.net/streamer_name/streams/10000000")

    def test_empty_streamer_segment(self):
        with pytest.raises(UrlParseStreamerError):
            parse_tracker_url("https://twitchtracker.com/")

    def test_missing_streams_marker(self):
        with pytest.raises(UrlParseVodIdError):
            parse_tracker_url("https://twitchtracker.com/streamer_name/videos/10000000")

    def test_empty_vod_id(self):
        with pytest.raises(UrlParseVodIdError):
            parse_tracker_url("https://twitchtracker.com/streamer_name/streams/")

    def test_error_carries_url(self):
        with pytest.raises(UrlParseVodIdError) as excinfo:
            parse_tracker_url("https://twitchtracker.com/streamer_name")
        assert excinfo.value.url == "https://twitchtracker.com/streamer_name"

    def test_page_url(self):
        identity = VodIdentity("streamer_name", "10000000")
        assert tracker_page_url(identity) == "https://twitchtracker.com/streamer_name/streams/10000000"


class TestParseTimestamp:
    def test_marker_in_page(self, tracker_page):
        assert parse_timestamp(tracker_page) == 1667141822

    def test_bare_marker(self):
        assert parse_timestamp('stream-timestamp-dt ...>2022-10-30 14:57:02<') == 1667141822

    def test_missing_marker(self):
        with pytest.raises(PageParseTimestampError):
            parse_timestamp("<html><body>nothing here</body></html>")

    def test_unparsable_date(self):
        with pytest.raises(PageParseTimestampError):
            parse_timestamp('<div class="stream-timestamp-dt">30 October 2022</div>')

    def test_out_of_range_date(self):
        with pytest.raises(PageParseTimestampError):
            parse_timestamp('<div class="stream-timestamp-dt">2022-13-45 99:00:00</div>')

    def test_manual_datetime_is_utc(self):
        assert parse_datetime("1970-01-02 03:46:40") == 100000


class TestDuration:
    @pytest.mark.parametrize("text, minutes", [
        ("5h 30m", 330),
        ("2 hours 5 minutes", 125),
        ("45 min", 45),
        ("90", 90),
        ("unknown", None),
    ])
    def test_parse_website_duration(self, text, minutes):
        assert parse_website_duration(text) == minutes

    def test_parse_duration_from_page(self, tracker_page):
        assert parse_duration(tracker_page) == 330

    def test_parse_duration_missing_block(self):
        assert parse_duration("<html></html>") is None


def test_days_since_broadcast():
    now = datetime(2022, 12, 30, 14, 57, 2, tzinfo=timezone.utc)
    assert days_since_broadcast(1667141822, now=now) == 61


def test_days_since_broadcast_never_negative():
    now = datetime(2022, 10, 29, tzinfo=timezone.utc)
    assert days_since_broadcast(1667141822, now=now) == 0
