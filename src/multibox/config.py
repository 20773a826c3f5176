"""
Client configuration.

ClientConfig is immutable; the wei gas price is derived once from the gwei
value at construction.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from eth_utils import to_wei

from .chain.rpc import DEFAULT_TIMEOUT
from .errors import ConfigurationError

ENV_ETH_GATEWAY = "MULTIBOX_ETH_GATEWAY"
ENV_GAS_PRICE = "MULTIBOX_GAS_PRICE"
ENV_ENS_DOMAIN = "MULTIBOX_ENS_DOMAIN"
ENV_CHAIN_ID = "MULTIBOX_CHAIN_ID"
ENV_TIMEOUT = "MULTIBOX_TIMEOUT"


def _to_decimal(value: Any, name: str) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a decimal number", {name: value}) from exc
    if not result.is_finite() or result < 0:
        raise ConfigurationError(f"{name} must be a non-negative number", {name: value})
    return result


@dataclass(frozen=True)
class ClientConfig:
    """
    Connection and naming settings for a MultiboxClient.

    Attributes:
        eth_gateway: JSON-RPC endpoint URL
        gas_price: gas price in gwei
        ens_domain: root domain subdomains are registered under
        chain_id: chain id for signing; read from the node when None
        timeout: HTTP timeout in seconds
    """

    eth_gateway: str
    gas_price: Decimal
    ens_domain: str
    chain_id: Optional[int] = None
    timeout: float = DEFAULT_TIMEOUT
    gas_price_wei: int = field(init=False)

    def __post_init__(self) -> None:
        if not self.eth_gateway:
            raise ConfigurationError("eth_gateway is required")
        if not self.ens_domain:
            raise ConfigurationError("ens_domain is required")
        gas_price = _to_decimal(self.gas_price, "gas_price")
        object.__setattr__(self, "gas_price", gas_price)
        object.__setattr__(self, "gas_price_wei", int(to_wei(gas_price, "gwei")))
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive", {"timeout": self.timeout})

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "ClientConfig":
        """
        Build from the camelCase object shape:
        ``{"ethGateway": ..., "gasPrice": ..., "ensConfig": {"domain": ...}}``.
        """
        try:
            eth_gateway = config["ethGateway"]
            gas_price = config["gasPrice"]
            ens_domain = config["ensConfig"]["domain"]
        except (KeyError, TypeError) as exc:
            raise ConfigurationError(f"Missing configuration key: {exc}") from exc

        chain_id = config.get("chainId")
        return cls(
            eth_gateway=eth_gateway,
            gas_price=gas_price,
            ens_domain=ens_domain,
            chain_id=int(chain_id) if chain_id is not None else None,
            timeout=float(config.get("timeout", DEFAULT_TIMEOUT)),
        )

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "ClientConfig":
        """
        Build from MULTIBOX_* environment variables, after loading a .env file.

        Raises:
            ConfigurationError: If a required variable is missing or invalid
        """
        if env_path is not None:
            load_dotenv(env_path, override=True)
        else:
            load_dotenv()

        missing = [
            name
            for name in (ENV_ETH_GATEWAY, ENV_GAS_PRICE, ENV_ENS_DOMAIN)
            if not os.environ.get(name)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing environment variables: {', '.join(missing)}"
            )

        chain_id = os.environ.get(ENV_CHAIN_ID)
        timeout = os.environ.get(ENV_TIMEOUT)
        try:
            return cls(
                eth_gateway=os.environ[ENV_ETH_GATEWAY],
                gas_price=os.environ[ENV_GAS_PRICE],
                ens_domain=os.environ[ENV_ENS_DOMAIN],
                chain_id=int(chain_id) if chain_id else None,
                timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
            )
        except ValueError as exc:
            raise ConfigurationError(f"Invalid configuration value: {exc}") from exc
