"""
URL normalization: default a missing scheme to http.
"""

from typing import Iterable, List
from urllib.parse import urlsplit

DEFAULT_SCHEME = "http"


def normalize_url(url: str) -> str:
    """
    Return ``url`` with a scheme.

    ``urlsplit`` reads ``host:port`` as a scheme, so a scheme only counts
    when a host follows it. Unparseable input is returned unchanged.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    if parts.scheme and parts.netloc:
        return url
    if url.startswith('//'):
        return f"{DEFAULT_SCHEME}:{url}"
    return f"{DEFAULT_SCHEME}://{url}"


def normalize_urls(urls: Iterable[str]) -> List[str]:
    return [normalize_url(url) for url in urls]
