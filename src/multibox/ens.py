"""
ENS name hashing.

Default NameHasher used to turn "<label>.<root domain>" into the 32-byte
key the Multibox contract stores requests under.
"""

from __future__ import annotations

from typing import Protocol

from eth_utils import keccak, to_bytes


class NameHasher(Protocol):
    def __call__(self, name: str) -> str: ...


def normalize_name(name: str) -> str:
    return name.lower()


def namehash_bytes(name: str) -> bytes:
    """
    ENS namehash for e.g. 'alice.datafund.eth'.

    Names are lowercased before hashing, so 'Alice' and 'alice' share a key.
    That covers ASCII labels only; non-ASCII names must already be UTS-46
    normalised by the caller.
    """
    node = b"\x00" * 32
    if not name:
        return node
    for label in reversed(normalize_name(name).split(".")):
        label_hash = keccak(to_bytes(text=label))
        node = keccak(node + label_hash)
    return node


def namehash(name: str) -> str:
    """ENS namehash as 0x-prefixed hex (66 chars)."""
    return "0x" + namehash_bytes(name).hex()


def subdomain_name(label: str, domain: str) -> str:
    return f"{label}.{domain}"
