import logging
import random

import requests

from twitch_recover.errors import BadRequestError, BadResponseCodeError, UserAgentError
from twitch_recover.settings import get_request_timeout
from twitch_recover.tables import get_user_agents


logger = logging.getLogger(__name__)


def return_user_agent(user_agents=None):
    if user_agents is None:
        user_agents = get_user_agents()
    if not user_agents:
        raise UserAgentError()
    return {"user-agent": random.choice(user_agents)}


def fetch_page(url, timeout=None):
    """GET a page with a random user agent and return its decoded body."""
    if timeout is None:
        timeout = get_request_timeout()
    headers = return_user_agent()

    logger.debug("Fetching %s", url)
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise BadRequestError(url, str(e)) from e

    if response.status_code != 200:
        raise BadResponseCodeError(response.status_code, url)
    return response.text
