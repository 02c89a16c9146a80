from twitch_recover.settings import RETENTION_DAYS


class TwitchRecoverError(Exception):
    pass


class UrlParseStreamerError(TwitchRecoverError):
    def __init__(self, url):
        self.url = url
        super().__init__(f"Unable to parse the streamer ({url})")


class UrlParseVodIdError(TwitchRecoverError):
    def __init__(self, url):
        self.url = url
        super().__init__(f"Unable to parse the vod id ({url})")


class PageParseTimestampError(TwitchRecoverError):
    def __init__(self, detail):
        self.detail = detail
        super().__init__(f"Unable to parse the timestamp ({detail})")


class UserAgentError(TwitchRecoverError):
    def __init__(self):
        super().__init__("Unable to select a user agent for the request")


class BadRequestError(TwitchRecoverError):
    def __init__(self, url, reason):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class BadResponseCodeError(TwitchRecoverError):
    def __init__(self, status, url):
        self.status = status
        self.url = url
        super().__init__(f"{status} from ({url})")


class VodNotFoundError(TwitchRecoverError):
    def __init__(self, hint=None):
        if hint is None:
            hint = f"if the vod is older than {RETENTION_DAYS} days, it may be deleted"
        self.hint = hint
        super().__init__(f"Unable to find the vod for the current link ({hint})")
