import pytest

from twitch_recover.probe import ProbeOutcome, ProbeStatus
from twitch_recover.tracker import VodIdentity, VodRecord


TRACKER_PAGE = """
<html>
<head><title>streamer_name stream</title></head>
<body>
<div class="g-x-s-block">
  <div class="g-x-s-value">5h 30m</div>
  <div class="g-x-s-label">Duration</div>
</div>
<div class="stream-timestamp-dt to-dowdatetime">2022-10-30 14:57:02</div>
</body>
</html>
"""


@pytest.fixture()
def tracker_page():
    return TRACKER_PAGE


@pytest.fixture()
def record():
    return VodRecord(VodIdentity("streamer_name", "vod_id"), 100000)


class RecordingProbe:
    """Fake probe reporting the given URLs as live and counting calls."""

    def __init__(self, live=(), failing=(), raising=()):
        self.live = set(live)
        self.failing = set(failing)
        self.raising = set(raising)
        self.calls = []

    async def __call__(self, session, url):
        self.calls.append(url)
        if url in self.raising:
            raise RuntimeError("probe crashed")
        if url in self.failing:
            return ProbeOutcome(url, ProbeStatus.FAILED, "connection reset")
        if url in self.live:
            return ProbeOutcome(url, ProbeStatus.FOUND)
        return ProbeOutcome(url, ProbeStatus.NOT_FOUND, "403")


@pytest.fixture()
def recording_probe():
    return RecordingProbe
