"""
Feed-location hash codec.

A feed-location hash packs a 20-byte sender address and the trailing
12 bytes of a recipient's 32-byte name-hash into a single 32-byte token:

    0x <40 hex: sender address> <24 hex: namehash[42:66]>

Offsets are derived from the byte widths below, never hard-coded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import FeedLocationHashError

ADDRESS_BYTES = 20
HASH_BYTES = 32
TOPIC_BYTES = HASH_BYTES - ADDRESS_BYTES

# "0x" + two hex characters per byte
ADDRESS_HEX_LENGTH = 2 + 2 * ADDRESS_BYTES
NAMEHASH_HEX_LENGTH = 2 + 2 * HASH_BYTES
TOPIC_HEX_LENGTH = 2 * TOPIC_BYTES
FEED_LOCATION_HASH_HEX_LENGTH = ADDRESS_HEX_LENGTH + TOPIC_HEX_LENGTH

_HEX_RE = re.compile(r"0x[0-9a-fA-F]*")


def _check_hex(value: str, length: int, what: str) -> str:
    if not isinstance(value, str):
        raise FeedLocationHashError(f"{what} must be a string, got {type(value).__name__}")
    if len(value) != length or not _HEX_RE.fullmatch(value):
        raise FeedLocationHashError(
            f"{what} must be 0x-prefixed hex of {length} characters",
            {"value": value, "length": len(value)},
        )
    return value


@dataclass(frozen=True)
class FeedLocationHash:
    """Sender address plus name-hash tail. Build with compose() or parse()."""

    address: str
    topic: str

    @classmethod
    def compose(cls, sender_address: str, recipient_namehash: str) -> "FeedLocationHash":
        _check_hex(sender_address, ADDRESS_HEX_LENGTH, "Sender address")
        _check_hex(recipient_namehash, NAMEHASH_HEX_LENGTH, "Recipient namehash")
        return cls(sender_address, recipient_namehash[ADDRESS_HEX_LENGTH:])

    @classmethod
    def parse(cls, feed_location_hash: str) -> "FeedLocationHash":
        _check_hex(feed_location_hash, FEED_LOCATION_HASH_HEX_LENGTH, "Feed location hash")
        return cls(
            feed_location_hash[:ADDRESS_HEX_LENGTH],
            feed_location_hash[ADDRESS_HEX_LENGTH:],
        )

    @property
    def hex(self) -> str:
        return self.address + self.topic

    def to_bytes(self) -> bytes:
        """32-byte value, usable directly as a bytes32 ABI argument."""
        return bytes.fromhex(self.hex[2:])

    def __str__(self) -> str:
        return self.hex


def encode_feed_location_hash(sender_address: str, recipient_namehash: str) -> str:
    """
    Encode a feed location hash.

    Args:
        sender_address: 0x-prefixed sender address (42 chars)
        recipient_namehash: 0x-prefixed recipient name-hash (66 chars)

    Returns:
        Sender address followed by the name-hash tail (66 chars)

    Raises:
        FeedLocationHashError: If either input has the wrong shape
    """
    return FeedLocationHash.compose(sender_address, recipient_namehash).hex


def subdomain_namehash_to_feed_location_hash(recipient_namehash: str) -> str:
    """Return the part of a name-hash that goes into a feed location hash."""
    _check_hex(recipient_namehash, NAMEHASH_HEX_LENGTH, "Recipient namehash")
    return recipient_namehash[ADDRESS_HEX_LENGTH:]


def decode_feed_location_hash(feed_location_hash: str) -> FeedLocationHash:
    """Split a feed location hash into its address and topic."""
    return FeedLocationHash.parse(feed_location_hash)


def _check_bytes32(value: bytes, what: str) -> bytes:
    if len(value) != HASH_BYTES:
        raise FeedLocationHashError(
            f"{what} must be {HASH_BYTES} bytes", {"length": len(value)}
        )
    return bytes(value)


def namehash_to_bytes(namehash: str | bytes) -> bytes:
    """Validated 32-byte form of a name-hash, for use as a bytes32 argument."""
    if isinstance(namehash, (bytes, bytearray)):
        return _check_bytes32(namehash, "Namehash")
    _check_hex(namehash, NAMEHASH_HEX_LENGTH, "Namehash")
    return bytes.fromhex(namehash[2:])


def feed_location_hash_to_bytes(feed_location_hash: str | bytes | FeedLocationHash) -> bytes:
    """Validated 32-byte form of a feed location hash."""
    if isinstance(feed_location_hash, FeedLocationHash):
        return feed_location_hash.to_bytes()
    if isinstance(feed_location_hash, (bytes, bytearray)):
        return _check_bytes32(feed_location_hash, "Feed location hash")
    return FeedLocationHash.parse(feed_location_hash).to_bytes()
