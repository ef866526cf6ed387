"""
Content fingerprinting for fetched response bodies.
"""

import hashlib

DEFAULT_ALGORITHM = "md5"


def hash_content(data: bytes) -> str:
    """Return the MD5 hex digest of ``data``."""
    return hashlib.md5(data).hexdigest()


class ContentHasher:
    """Computes a lowercase hex digest of a byte string."""

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm: {algorithm}")
        # shake_* digests need an explicit length
        if hashlib.new(algorithm).digest_size == 0:
            raise ValueError(f"Variable-length hash algorithm not supported: {algorithm}")
        self.algorithm = algorithm

    def hexdigest(self, data: bytes) -> str:
        """Digest ``data`` with the configured algorithm."""
        if self.algorithm == DEFAULT_ALGORITHM:
            return hash_content(data)
        return hashlib.new(self.algorithm, data).hexdigest()
