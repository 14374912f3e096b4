"""
Dependency checks for the optional gRPC transport.

Kept standalone so transport selection can import it without pulling grpc in.
"""
import logging

logger = logging.getLogger(__name__)


def ensure_grpc_installed():
    """
    Check if grpc and related packages are installed.
    Raises ImportError with installation instructions if not found.
    """
    try:
        import grpc  # noqa: F401
        import grpc.aio  # noqa: F401
        return True
    except ImportError:
        raise ImportError(
            "The gRPC transport requires additional dependencies: grpcio, certifi. "
            "Please install with: pip install cosmwasm-sdk[grpc]"
        )
