"""HTTP transport for listing and article pages."""

import requests

from .config import FETCH_TIMEOUT, USER_AGENT
from .log import get_logger


class FetchError(Exception):
    """Transport failure: timeout, connection error or non-2xx status."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


def fetch_page(url: str, timeout: float = FETCH_TIMEOUT) -> str:
    """GET a page and return its body text. Raises FetchError on failure."""
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "pt-BR,pt;q=0.9,es;q=0.8,en;q=0.7",
    }
    get_logger("fetch").debug("GET %s", url)
    try:
        r = requests.get(url, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        raise FetchError(url, f"Timeout after {timeout}s on {url}") from e
    except requests.RequestException as e:
        raise FetchError(url, f"Request failed on {url}: {e}") from e

    if not r.ok:
        raise FetchError(url, f"HTTP {r.status_code} on {url}")
    return r.text
