"""
Network configuration and environment settings.

Bundled network presets live in data/networks.json. Runtime knobs are read
from COSMWASM_* environment variables at call time so tests and deployments
can override them without code changes.
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_RPC_TIMEOUT = 30.0
DEFAULT_BROADCAST_TIMEOUT = 60.0
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_MAX_POLL_INTERVAL = 3.0
DEFAULT_POLL_BACKOFF = 1.5


def env_float(name: str, default: float) -> float:
    """
    Read a positive float from the environment.

    Raises:
        ValueError: If the variable is set but not a positive number
    """
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def env_flag(name: str) -> bool:
    return os.environ.get(name) == "1"


def rpc_timeout() -> float:
    return env_float("COSMWASM_RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT)


def broadcast_timeout() -> float:
    return env_float("COSMWASM_BROADCAST_TIMEOUT", DEFAULT_BROADCAST_TIMEOUT)


def poll_interval() -> float:
    return env_float("COSMWASM_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)


def max_poll_interval() -> float:
    return env_float("COSMWASM_MAX_POLL_INTERVAL", DEFAULT_MAX_POLL_INTERVAL)


class NetworkConfig:
    """Access to the bundled network presets"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network presets from the package data (cached after first call).
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("cosmwasm_sdk").joinpath("data/networks.json")
        with resource.open("r", encoding="utf-8") as f:
            cls._networks_cache = json.load(f)
        logger.debug(f"Loaded {len(cls._networks_cache)} network presets")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks.keys()))
            raise ValueError(f"Network '{network}' not found. Available networks: {available}")
        return networks[network]

    @staticmethod
    def _env_name(network: str, suffix: str) -> str:
        return f"{network.upper().replace('-', '_')}_{suffix}"

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        RPC URL for a network.

        Precedence: override argument, <NETWORK>_RPC_URL environment variable,
        bundled preset.
        """
        if override:
            return override
        env_url = os.environ.get(cls._env_name(network, "RPC_URL"))
        if env_url:
            return env_url
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_grpc_url(cls, network: str, override: Optional[str] = None) -> str:
        if override:
            return override
        env_url = os.environ.get(cls._env_name(network, "GRPC_URL"))
        if env_url:
            return env_url
        return cls.get_network(network)["grpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> str:
        return cls.get_network(network)["chainId"]

    @classmethod
    def get_address_prefix(cls, network: str) -> str:
        return cls.get_network(network)["addressPrefix"]

    @classmethod
    def get_fee_denom(cls, network: str) -> str:
        return cls.get_network(network)["feeDenom"]

    @classmethod
    def get_gas_price(cls, network: str) -> str:
        return cls.get_network(network)["gasPrice"]
