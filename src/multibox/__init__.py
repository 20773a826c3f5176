__all__ = [
    # Client
    "MultiboxClient",
    "ClientConfig",
    "Account",
    "load_private_key",
    # Feed location hash
    "FeedLocationHash",
    "encode_feed_location_hash",
    "decode_feed_location_hash",
    "subdomain_namehash_to_feed_location_hash",
    # Name hashing
    "NameHasher",
    "namehash",
    # Chain
    "ContractArtifact",
    "load_artifact",
    "RpcClient",
    # Errors
    "MultiboxError",
    "ConfigurationError",
    "ArtifactError",
    "RpcError",
    "RpcTransportError",
    "SigningError",
    "ConfirmationTimeout",
    "FeedLocationHashError",
    "InvalidAddressError",
    # Logging
    "configure_logging",
]

from .accounts import Account, load_private_key
from .chain.abi import ContractArtifact, load_artifact
from .chain.rpc import RpcClient
from .client import MultiboxClient
from .config import ClientConfig
from .ens import NameHasher, namehash
from .errors import (
    ArtifactError,
    ConfigurationError,
    ConfirmationTimeout,
    FeedLocationHashError,
    InvalidAddressError,
    MultiboxError,
    RpcError,
    RpcTransportError,
    SigningError,
)
from .feed import (
    FeedLocationHash,
    decode_feed_location_hash,
    encode_feed_location_hash,
    subdomain_namehash_to_feed_location_hash,
)
from .log import configure_logging
