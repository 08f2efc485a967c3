"""
Opaque pagination cursors.

A cursor is the URL-safe base64 of the JSON-encoded DynamoDB
``LastEvaluatedKey``. Callers only round-trip it.
"""

import base64
import binascii
import json
from typing import Any, Dict, Optional

from .dynamodb import from_dynamo


def encode_cursor(last_evaluated_key: Optional[Dict[str, Any]]) -> Optional[str]:
    """
    Encode a LastEvaluatedKey as a cursor string.

    Returns None when there is no key (no further pages).
    """
    if not last_evaluated_key:
        return None
    raw = json.dumps(from_dynamo(last_evaluated_key), sort_keys=True, separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(cursor: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Decode a cursor back into an ExclusiveStartKey.

    Absent or malformed cursors decode to None, meaning "start from the
    beginning"; they are never an error.
    """
    if not cursor:
        return None
    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError):
        return None
    if not isinstance(decoded, dict) or not decoded:
        return None
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in decoded.items()):
        return None
    return decoded
