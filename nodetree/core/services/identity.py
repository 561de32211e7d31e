"""
Identifier generation for default node names.
"""

from __future__ import annotations

import secrets
import string

_ALPHABET = string.ascii_letters + string.digits


def short_id(length: int = 6) -> str:
    """Random alphanumeric identifier of *length* characters."""
    if length < 1:
        raise ValueError("length must be at least 1")
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))
