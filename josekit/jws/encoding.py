"""Base64url segment helpers for the compact serialization."""

import json
import re
from typing import Any

from jwt.utils import base64url_decode, base64url_encode

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def encode_segment(data: bytes) -> str:
    """Base64url-encode bytes without padding."""
    return base64url_encode(data).decode("ascii")


def decode_segment(segment: str) -> bytes:
    """Strictly decode an unpadded base64url segment.

    Raises ValueError for characters outside the base64url alphabet or an
    impossible length, which the lenient stdlib decoder would accept.
    """
    if not _SEGMENT_RE.match(segment) or len(segment) % 4 == 1:
        raise ValueError(f"Invalid base64url segment of length {len(segment)}")
    return base64url_decode(segment)


def dump_json(value: Any, *, sort_keys: bool = False) -> bytes:
    """Serialize JSON compactly as UTF-8."""
    return json.dumps(
        value, separators=(",", ":"), sort_keys=sort_keys, ensure_ascii=False
    ).encode("utf-8")
