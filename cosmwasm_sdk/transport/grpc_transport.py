"""
gRPC transport implementation.

Queries are sent as raw unary calls on the query path, so the transport
needs no generated service stubs: the query layer already serializes the
request and parses the response.
"""
import logging
import os
import urllib.parse
from typing import Optional

import grpc
import grpc.aio
from google.protobuf.message import DecodeError

from .. import proto
from .._rate_limited_log import rate_limited_log
from ..config import env_flag, rpc_timeout
from ..exceptions import (
    NotFoundError, QueryError, ResponseDecodeError, TransportError, TransportTimeoutError,
)
from ..logs import Attribute, Event
from ._deps import ensure_grpc_installed
from .base import CheckTxResult, Transport, TxResult
from .tendermint import LOOPBACK_HOSTS

logger = logging.getLogger(__name__)

BROADCAST_TX_PATH = "/cosmos.tx.v1beta1.Service/BroadcastTx"
GET_TX_PATH = "/cosmos.tx.v1beta1.Service/GetTx"
GET_NODE_INFO_PATH = "/cosmos.base.tendermint.v1beta1.Service/GetNodeInfo"

DEFAULT_GRPC_PORT = 9090

CHANNEL_OPTIONS = [
    ("grpc.keepalive_time_ms", 30000),
    ("grpc.keepalive_timeout_ms", 10000),
    ("grpc.http2.max_pings_without_data", 0),
    ("grpc.http2.min_time_between_pings_ms", 10000),
    # Wasm byte code uploads can be several hundred KB
    ("grpc.max_send_message_length", 10 * 1024 * 1024),
    ("grpc.max_receive_message_length", 10 * 1024 * 1024),
]


def _load_credentials() -> grpc.ChannelCredentials:
    """
    TLS credentials for the channel.

    COSMWASM_GRPC_CA replaces the system roots unless COSMWASM_GRPC_APPEND_CA=1.
    With COSMWASM_GRPC_STRICT_CA=1 an unreadable CA file is an error instead of
    a fallback to the system roots.
    """
    ca_path = os.environ.get("COSMWASM_GRPC_CA")
    if not ca_path:
        return grpc.ssl_channel_credentials()

    try:
        with open(ca_path, "rb") as f:
            ca_data = f.read()
    except OSError as e:
        logger.warning(f"Failed to load custom CA certificate from {ca_path}: {e}")
        if env_flag("COSMWASM_GRPC_STRICT_CA"):
            raise ValueError(f"Failed to load custom CA certificate from {ca_path}: {e}")
        return grpc.ssl_channel_credentials()

    if env_flag("COSMWASM_GRPC_APPEND_CA"):
        import certifi
        with open(certifi.where(), "rb") as f:
            system_ca_data = f.read()
        logger.info(f"Using custom CA certificate from {ca_path} appended to system roots")
        return grpc.ssl_channel_credentials(root_certificates=system_ca_data + b"\n" + ca_data)

    logger.info(f"Using custom CA certificate from {ca_path} (replacing system roots)")
    return grpc.ssl_channel_credentials(root_certificates=ca_data)


def parse_grpc_endpoint(url: str):
    """
    Split a grpc:// or grpcs:// URL into (target, secure).

    Raises:
        ValueError: If the URL is malformed or plaintext to a remote host
    """
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ("grpc", "grpcs") or not parsed.hostname:
        raise ValueError(f"Invalid gRPC URL '{url}': expected grpc(s)://host[:port]")

    secure = parsed.scheme == "grpcs"
    if not secure and parsed.hostname not in LOOPBACK_HOSTS and not env_flag("COSMWASM_INSECURE_RPC"):
        raise ValueError(
            "gRPC URL must use grpcs:// for security (got: grpc://). "
            "Set COSMWASM_INSECURE_RPC=1 to allow plaintext for development."
        )

    host = parsed.hostname
    if ":" in host:
        host = f"[{host}]"
    return f"{host}:{parsed.port or DEFAULT_GRPC_PORT}", secure


class GrpcTransport(Transport):
    """
    Transport over the Cosmos gRPC endpoint (usually port 9090).

    Args:
        url: grpcs://host[:port] (TLS) or grpc://host[:port] (plaintext)
        timeout: Per call deadline in seconds (defaults to COSMWASM_RPC_TIMEOUT)
        channel: Optional preconfigured grpc.aio channel; the caller keeps
            ownership of it
    """

    def __init__(self, url: str, timeout: Optional[float] = None, channel: Optional[grpc.aio.Channel] = None):
        ensure_grpc_installed()
        target, secure = parse_grpc_endpoint(url)
        self.endpoint = url
        self.timeout = timeout if timeout is not None else rpc_timeout()
        self._owns_channel = channel is None

        if channel is not None:
            self._channel = channel
        elif secure:
            self._channel = grpc.aio.secure_channel(target, _load_credentials(), options=CHANNEL_OPTIONS)
        else:
            rate_limited_log(
                f"Creating insecure gRPC channel to {target} (not recommended for production)",
                level="warning",
                logger_instance=logger,
            )
            self._channel = grpc.aio.insecure_channel(target, options=CHANNEL_OPTIONS)
        logger.debug(f"Initialized gRPC transport for {target}")

    async def _unary(self, path: str, request: bytes) -> bytes:
        method = self._channel.unary_unary(path, request_serializer=None, response_deserializer=None)
        try:
            return await method(request, timeout=self.timeout)
        except grpc.aio.AioRpcError as e:
            code = e.code()
            details = e.details() or ""
            if code == grpc.StatusCode.DEADLINE_EXCEEDED:
                raise TransportTimeoutError(f"gRPC call {path} timed out after {self.timeout}s") from e
            if code in (grpc.StatusCode.UNAVAILABLE, grpc.StatusCode.CANCELLED):
                raise TransportError(f"gRPC service unavailable: {details}") from e
            if code == grpc.StatusCode.NOT_FOUND:
                raise NotFoundError(details) from e
            raise QueryError.from_response(details) from e

    async def abci_query(self, path: str, data: bytes) -> bytes:
        return await self._unary(path, data)

    @staticmethod
    def _parse(response_cls, data: bytes, path: str):
        try:
            return response_cls.FromString(data)
        except DecodeError as e:
            raise ResponseDecodeError(f"Failed to decode response of {path}: {e}") from e

    async def broadcast_tx_sync(self, tx_bytes: bytes) -> CheckTxResult:
        request = proto.BroadcastTxRequest(tx_bytes=tx_bytes, mode=proto.BROADCAST_MODE_SYNC)
        try:
            raw = await self._unary(BROADCAST_TX_PATH, request.SerializeToString())
        except QueryError as e:
            raise TransportError(f"Broadcast rejected by node: {e}") from e
        tx_response = self._parse(proto.BroadcastTxResponse, raw, BROADCAST_TX_PATH).tx_response
        return CheckTxResult(
            tx_hash=tx_response.txhash.upper(),
            code=tx_response.code,
            codespace=tx_response.codespace,
            log=tx_response.raw_log,
        )

    async def get_tx(self, tx_hash: str) -> Optional[TxResult]:
        request = proto.GetTxRequest(hash=tx_hash)
        try:
            raw = await self._unary(GET_TX_PATH, request.SerializeToString())
        except NotFoundError:
            return None
        tx_response = self._parse(proto.GetTxResponse, raw, GET_TX_PATH).tx_response

        try:
            data = bytes.fromhex(tx_response.data)
        except ValueError as e:
            raise ResponseDecodeError(f"Transaction data is not hex encoded: {e}") from e

        events = [
            Event(
                type=event.type,
                attributes=[
                    Attribute(
                        key=attribute.key.decode("utf-8", errors="replace"),
                        value=attribute.value.decode("utf-8", errors="replace"),
                    )
                    for attribute in event.attributes
                ],
            )
            for event in tx_response.events
        ]
        return TxResult(
            tx_hash=(tx_response.txhash or tx_hash).upper(),
            height=tx_response.height,
            code=tx_response.code,
            codespace=tx_response.codespace,
            raw_log=tx_response.raw_log,
            data=data,
            events=events,
            gas_wanted=tx_response.gas_wanted,
            gas_used=tx_response.gas_used,
        )

    async def chain_id(self) -> str:
        raw = await self._unary(GET_NODE_INFO_PATH, proto.GetNodeInfoRequest().SerializeToString())
        response = self._parse(proto.GetNodeInfoResponse, raw, GET_NODE_INFO_PATH)
        if not response.default_node_info.network:
            raise ResponseDecodeError("Node info does not report a network")
        return response.default_node_info.network

    async def close(self) -> None:
        if self._owns_channel:
            await self._channel.close()
