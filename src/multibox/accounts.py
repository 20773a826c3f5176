"""
Accounts - sender identities for Multibox transactions.

An Account is supplied by the caller on every mutating call; the client
never stores it. Keys may be read from the environment or a .env file
(PRIVATE_KEY), the same place the CLI looks.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account as EthAccount

from .errors import ConfigurationError, SigningError


@dataclass(frozen=True)
class Account:
    """Address, signing key and ENS subdomain label of a participant."""

    address: str
    private_key: str = field(repr=False)
    subdomain: str = ""

    @classmethod
    def from_key(cls, private_key: str, subdomain: str = "") -> "Account":
        """
        Build an Account from a private key.

        Raises:
            SigningError: If the key is not a valid secp256k1 private key
        """
        private_key = normalize_private_key(private_key)
        try:
            address = EthAccount.from_key(private_key).address
        except (ValueError, TypeError) as exc:
            raise SigningError(f"Invalid private key: {exc}") from exc
        return cls(address=address, private_key=private_key, subdomain=subdomain)


def normalize_private_key(private_key: str) -> str:
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return private_key


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Args:
        env_path: Optional .env file to load first

    Returns:
        0x-prefixed hex private key

    Raises:
        ConfigurationError: If PRIVATE_KEY is not set
    """
    if env_path is not None and env_path.exists():
        load_dotenv(env_path, override=True)
    else:
        load_dotenv()

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ConfigurationError("PRIVATE_KEY not found. Set it in the environment or a .env file.")

    return normalize_private_key(private_key)
