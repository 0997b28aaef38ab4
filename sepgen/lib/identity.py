"""Device identity (MAC address) normalization.

The identity field is the only hard precondition of a save: the phone
looks up its configuration as ``SEP<MAC>.cnf.xml``, so the MAC has to be
exactly twelve upper-case hex digits.
"""

from __future__ import annotations

import string

from sepgen.lib.errors import ShapeError

IDENTITY_LENGTH = 12
DESTINATION_PREFIX = "SEP"
DESTINATION_SUFFIX = ".cnf.xml"

_HEX_DIGITS = frozenset(string.hexdigits)


def normalize_identity(raw: str) -> str:
    """Strip everything but hex digits, upper-case, and truncate to 12.

    Short input is not padded, so ``"12"`` stays ``"12"`` and fails
    :func:`require_identity` later.

    >>> normalize_identity("AA:BB-cc 11 22 33 extra")
    'AABBCC112233'
    """
    clean = "".join(ch for ch in raw if ch in _HEX_DIGITS).upper()
    return clean[:IDENTITY_LENGTH]


def is_valid_identity(value: str) -> bool:
    """Check that a value is already a normalized identity."""
    return len(value) == IDENTITY_LENGTH and all(ch in _HEX_DIGITS for ch in value)


def require_identity(raw: str) -> str:
    """Normalize ``raw`` and raise ShapeError unless it has the right shape."""
    normalized = normalize_identity(raw)
    if not is_valid_identity(normalized):
        raise ShapeError(
            f"MAC address must be {IDENTITY_LENGTH} hex characters "
            f"(got {len(normalized)})",
            raw=raw,
            normalized=normalized,
        )
    return normalized


def destination_name(identity: str) -> str:
    """File name the phone requests from the TFTP server."""
    return f"{DESTINATION_PREFIX}{identity}{DESTINATION_SUFFIX}"
