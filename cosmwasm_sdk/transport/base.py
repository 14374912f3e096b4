"""
Transport layer for talking to a chain node.

This module defines the abstract interface the query layer and the broadcast
logic depend on. Concrete implementations speak Tendermint JSON-RPC over HTTP
(tendermint.py) or Cosmos gRPC (grpc_transport.py).
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ..logs import Event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckTxResult:
    """
    Result of submitting a transaction in sync mode (mempool admission).

    A nonzero code means the transaction was rejected before inclusion.
    """
    tx_hash: str
    code: int = 0
    codespace: str = ""
    log: str = ""


@dataclass(frozen=True)
class TxResult:
    """
    Execution result of a transaction that was included in a block.

    data holds the serialized TxMsgData of the DeliverTx result.
    """
    tx_hash: str
    height: int
    code: int = 0
    codespace: str = ""
    raw_log: str = ""
    data: bytes = b""
    events: List[Event] = field(default_factory=list)
    gas_wanted: int = 0
    gas_used: int = 0


class Transport(ABC):
    """
    Abstract base class for chain transports.

    All methods are coroutines. Network failures raise TransportError and are
    never retried by the transport itself.
    """

    endpoint: str = ""

    @abstractmethod
    async def abci_query(self, path: str, data: bytes) -> bytes:
        """
        Perform an unverified ABCI query.

        Args:
            path: Query path, e.g. "/cosmwasm.wasm.v1beta1.Query/Codes"
            data: Serialized request message

        Returns:
            Serialized response message

        Raises:
            QueryError: If the chain rejects the query (NotFoundError for absent entities)
            TransportError: On network failures
        """

    @abstractmethod
    async def broadcast_tx_sync(self, tx_bytes: bytes) -> CheckTxResult:
        """Submit a transaction and wait for the CheckTx result only."""

    @abstractmethod
    async def get_tx(self, tx_hash: str) -> Optional[TxResult]:
        """
        Look up an included transaction.

        Returns:
            The execution result, or None if the transaction is not (yet) known
        """

    @abstractmethod
    async def chain_id(self) -> str:
        """Chain identifier reported by the node."""

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
