"""Recover the playback URL of Twitch VODs that are no longer listed."""

from twitch_recover.errors import (
    BadRequestError,
    BadResponseCodeError,
    PageParseTimestampError,
    TwitchRecoverError,
    UrlParseStreamerError,
    UrlParseVodIdError,
    UserAgentError,
    VodNotFoundError,
)
from twitch_recover.recover import bulk_recover, recover_from_url, recover_manual
from twitch_recover.tracker import VodIdentity, VodRecord


__version__ = "0.1.0"
