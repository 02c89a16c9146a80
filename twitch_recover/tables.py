import os
from functools import lru_cache


RESOLUTIONS = ("chunked", "2160p60", "2160p30", "2160p20", "1440p60", "1440p30", "1440p20", "1080p60", "1080p30", "1080p20", "720p60", "720p30", "720p20", "480p60", "480p30", "360p60", "360p30", "160p60", "160p30")


def get_package_directory():
    return os.path.dirname(os.path.realpath(__file__))


def read_text_file(text_file_path):
    lines = []
    with open(text_file_path, "r", encoding="utf-8") as text_file:
        for line in text_file:
            line = line.strip()
            if line:
                lines.append(line)
    return lines


@lru_cache(maxsize=None)
def get_domains():
    """CDN origins known to host legacy VOD storage, in probe order."""
    return tuple(read_text_file(os.path.join(get_package_directory(), "lib", "domains.txt")))


@lru_cache(maxsize=None)
def get_user_agents():
    return tuple(read_text_file(os.path.join(get_package_directory(), "lib", "user_agents.txt")))
