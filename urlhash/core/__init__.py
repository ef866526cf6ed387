"""
Fetch, hash and collect: the bounded-concurrency core.
"""

from .errors import ERROR_PREFIX, FetchError, TransportError, HTTPStatusError, ResponseTooLargeError
from .fetcher import Fetcher, MAX_BODY_SIZE
from .hasher import ContentHasher, hash_content
from .results import Outcome, ResultEntry, ResultCollector
from .runner import TaskRunner, run

__all__ = [
    'ERROR_PREFIX', 'FetchError', 'TransportError', 'HTTPStatusError', 'ResponseTooLargeError',
    'Fetcher', 'MAX_BODY_SIZE',
    'ContentHasher', 'hash_content',
    'Outcome', 'ResultEntry', 'ResultCollector',
    'TaskRunner', 'run'
]
