"""
Chain transports.

The Tendermint JSON-RPC transport is always available; the gRPC transport
needs the optional [grpc] extra and is imported on demand.
"""
import logging
from typing import Optional

from ._deps import ensure_grpc_installed
from .base import CheckTxResult, Transport, TxResult
from .tendermint import TendermintTransport, validate_rpc_url

logger = logging.getLogger(__name__)


def get_transport(endpoint: str, timeout: Optional[float] = None) -> Transport:
    """
    Create a transport for an endpoint URL.

    grpc:// and grpcs:// URLs get a GrpcTransport, anything else is treated as
    a Tendermint RPC URL.

    Raises:
        ImportError: If a gRPC URL is given but grpcio is not installed
        ValueError: If the URL is invalid or insecure
    """
    if endpoint.startswith(("grpc://", "grpcs://")):
        ensure_grpc_installed()
        from .grpc_transport import GrpcTransport
        logger.info(f"Using gRPC transport for {endpoint}")
        return GrpcTransport(endpoint, timeout=timeout)

    logger.info(f"Using Tendermint RPC transport for {endpoint}")
    return TendermintTransport(endpoint, timeout=timeout)


__all__ = [
    "CheckTxResult",
    "TendermintTransport",
    "Transport",
    "TxResult",
    "get_transport",
    "validate_rpc_url",
]
