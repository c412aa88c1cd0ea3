"""Fixed-width composite keys for (user, achievement) pairs.

A key is ``"{user_id}:{achievement_id}"`` encoded as UTF-8 and copied
left-aligned into a zero-filled buffer of ``capacity`` bytes. Keys compare
byte-lexicographically, the same ordering SQLite uses for BLOB columns, so
every key of a user sorts inside the range opened by ``encode_prefix``.
"""
from __future__ import annotations

from typing import Tuple

from tubeledger.core.config import settings
from tubeledger.core.errors import IdentifierTooLong, InvalidIdentifier

PAD = b"\x00"


class KeyCodec:
    """Encode identifiers into fixed-width binary keys.

    In strict mode (the default) an encoding longer than ``capacity`` raises
    ``IdentifierTooLong``, and user IDs containing the separator or any
    identifier containing NUL raise ``InvalidIdentifier``. With
    ``strict=False`` over-long encodings are silently truncated, which is
    lossy: two distinct pairs may then share a key.
    """

    def __init__(self, capacity: int = settings.KEY_CAPACITY, strict: bool = settings.KEY_STRICT,
                 separator: str = settings.KEY_SEPARATOR):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.strict = strict
        self.separator = separator

    def encode(self, user_id: str, achievement_id: str) -> bytes:
        self._check_user(user_id)
        self._check_nul(achievement_id)
        return self._pack(f"{user_id}{self.separator}{achievement_id}")

    def encode_prefix(self, user_id: str) -> bytes:
        self._check_user(user_id)
        return self._pack(f"{user_id}{self.separator}")

    def prefix_range(self, user_id: str) -> Tuple[bytes, bytes]:
        """Inclusive (low, high) bounds covering every key of ``user_id``."""
        prefix = self.encode_prefix(user_id)
        head = self.significant(prefix)
        high = head + b"\xff" * (self.capacity - len(head))
        return prefix, high

    @staticmethod
    def significant(buffer: bytes) -> bytes:
        """Strip the zero padding, leaving the bytes a prefix scan matches on."""
        return buffer.rstrip(PAD)

    def _pack(self, text: str) -> bytes:
        raw = text.encode("utf-8")
        if len(raw) > self.capacity:
            if self.strict:
                raise IdentifierTooLong(len(raw), self.capacity)
            raw = raw[:self.capacity]
        return raw.ljust(self.capacity, PAD)

    def _check_user(self, user_id: str) -> None:
        self._check_nul(user_id)
        if self.strict and self.separator in user_id:
            raise InvalidIdentifier(f"user_id must not contain {self.separator!r}")

    def _check_nul(self, value: str) -> None:
        if self.strict and "\x00" in value:
            raise InvalidIdentifier("identifiers must not contain NUL characters")
