# src/plugopts/core/canonical.py
"""
Canonical JSON serialization for deterministic schema fingerprints.

Serializes per RFC 8785/JCS (rfc8785 package) so the same schema
description always hashes to the same digest, regardless of dict
ordering or whitespace.

IMPORTANT: NaN and Infinity are strictly REJECTED, not silently converted.
"""

import hashlib
import math
from collections.abc import Mapping
from typing import Any

import rfc8785


def _normalize_value(obj: Any) -> Any:
    """Convert a value to a JSON-safe primitive.

    Tuples become lists; mappings and sequences are normalized recursively.

    Raises:
        ValueError: If value contains NaN or Infinity
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(
                f"Cannot canonicalize non-finite float: {obj}. "
                "Use None for missing values, not NaN."
            )
        return obj

    if obj is None or isinstance(obj, (str, int, bool)):
        return obj

    if isinstance(obj, Mapping):
        return {str(k): _normalize_value(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [_normalize_value(v) for v in obj]

    raise TypeError(f"Cannot canonicalize value of type {type(obj).__name__}")


def canonical_json(obj: Any) -> str:
    """Serialize to canonical JSON (RFC 8785)."""
    return rfc8785.dumps(_normalize_value(obj)).decode("utf-8")


def stable_hash(obj: Any) -> str:
    """SHA-256 hex digest of the canonical JSON form of ``obj``."""
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()
