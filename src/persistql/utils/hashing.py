"""Hashing utilities for persisted query ids."""

import hashlib

from persistql.core.entities.persist_config import HashingAlgorithm


def hash_query(query: str, algorithm: HashingAlgorithm = HashingAlgorithm.SHA512) -> str:
    """Create the persisted id of an operation text.

    Args:
        query: The canonical operation text.
        algorithm: The digest to use.

    Returns:
        The lowercase hexadecimal digest of the UTF-8 encoded text
        (64 chars for SHA-256, 128 for SHA-512).
    """
    return hashlib.new(algorithm.value, query.encode("utf-8")).hexdigest()
