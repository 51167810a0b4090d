from __future__ import annotations

import re
from typing import Iterable, Optional

# Buckets with these names are created for every user and can't be renamed or deleted.
DEFAULT_BUCKET_NAMES: tuple[str, ...] = ("Events",)
FALLBACK_BUCKET_NAME = "Others"

_WHITESPACE = re.compile(r"\s+")


def normalize_bucket_name(name: str) -> str:
    """Dedup key: lower-cased with every whitespace character removed."""
    return _WHITESPACE.sub("", name.lower())


def find_matching_bucket(name: str, buckets: Iterable):
    """First bucket (in the given order) whose normalized name equals `name`'s."""
    key = normalize_bucket_name(name)
    for bucket in buckets:
        if normalize_bucket_name(bucket.name) == key:
            return bucket
    return None


def is_reserved_bucket_name(name: Optional[str]) -> bool:
    # Case-insensitive exact match only; whitespace is significant here.
    if not name:
        return False
    lowered = name.lower()
    return any(default.lower() == lowered for default in DEFAULT_BUCKET_NAMES)
