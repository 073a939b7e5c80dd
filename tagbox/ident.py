"""
tagbox.ident — short opaque identifiers for box sequences.

Ids are drawn from uuid4 and re-encoded in a URL-safe alphabet, so they
are shorter than a hex uuid while keeping enough randomness to be unique
across processes with overwhelming probability.  No ordering is implied.
"""

import string
import uuid

from .constants import ID_LENGTH

ALPHABET = string.digits + string.ascii_letters + "-_"


def _encode(number: int, length: int) -> str:
    chars = []
    base = len(ALPHABET)
    for _ in range(length):
        number, rem = divmod(number, base)
        chars.append(ALPHABET[rem])
    return "".join(chars)


class ShortIdGenerator:
    """Produces short random ids.  Safe to share between threads."""

    def __init__(self, length: int = ID_LENGTH):
        if length < 8:
            raise ValueError(f"id length must be at least 8, got {length}")
        self.length = length

    def next(self) -> str:
        return _encode(uuid.uuid4().int, self.length)

    def __repr__(self) -> str:
        return f"ShortIdGenerator(length={self.length})"
