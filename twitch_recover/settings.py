import json
import logging
import os

from twitch_recover.tables import get_domains, get_package_directory


logger = logging.getLogger(__name__)

DEFAULT_SEARCH_WINDOW = 60
DEFAULT_REQUEST_TIMEOUT = 10
DEFAULT_PROBE_TIMEOUT = 20
DEFAULT_MAX_BULK_LINKS = 20
RETENTION_DAYS = 60


def get_config_path(config_file):
    return os.path.join(get_package_directory(), "config", f"{config_file}.json")


def read_config_by_key(config_file, key):
    config_path = get_config_path(config_file)
    if not os.path.exists(config_path):
        logger.debug("Config file %s not found", config_path)
        return None

    with open(config_path, "r", encoding="utf-8") as input_config_file:
        config = json.load(input_config_file)

    return config.get(key, None)


def _read_positive_number(key, default, cast=int):
    value = read_config_by_key("settings", key)
    if value is None or isinstance(value, bool):
        return default
    try:
        value = cast(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s setting: %r", key, value)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s setting: %r", key, value)
        return default
    return value


def get_probe_batch_size():
    # One batch per time offset unless configured otherwise
    return _read_positive_number("PROBE_BATCH_SIZE", len(get_domains()))


def get_search_window():
    return _read_positive_number("SEARCH_WINDOW_SECONDS", DEFAULT_SEARCH_WINDOW)


def get_request_timeout():
    return _read_positive_number("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, cast=float)


def get_probe_timeout():
    return _read_positive_number("PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT, cast=float)


def get_max_bulk_links():
    return _read_positive_number("MAX_BULK_LINKS", DEFAULT_MAX_BULK_LINKS)


def get_use_progress_bar():
    use_progress_bar = read_config_by_key("settings", "USE_PROGRESS_BAR")
    return use_progress_bar if isinstance(use_progress_bar, bool) else True


def get_default_directory():
    default_directory = read_config_by_key("settings", "DEFAULT_DIRECTORY")

    if not default_directory:
        default_directory = "~/Downloads/"

    default_directory = os.path.expanduser(default_directory)
    os.makedirs(default_directory, exist_ok=True)
    return default_directory
