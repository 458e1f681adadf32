# ABOUTME: Network access to the wikis that hold device, processor and firmware tables
# ABOUTME: Pages are fetched with httpx and handed to extraction/ as parsed documents

from appledata.utils.retry import (
    FetchConnectionError,
    FetchError,
    FetchRateLimitError,
    FetchServerError,
    FetchStatusError,
    FetchTimeoutError,
)

from .client import WikiClient

__all__ = [
    "FetchConnectionError",
    "FetchError",
    "FetchRateLimitError",
    "FetchServerError",
    "FetchStatusError",
    "FetchTimeoutError",
    "WikiClient",
]
