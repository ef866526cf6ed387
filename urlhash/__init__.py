"""
urlhash

Fetches a set of URLs with bounded concurrency and reports a content hash
(or an error) for each of them.
"""

__version__ = "1.0.0"
__description__ = "Bounded-concurrency URL fetcher that fingerprints response bodies"
