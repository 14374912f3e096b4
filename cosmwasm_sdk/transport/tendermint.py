"""
Tendermint JSON-RPC transport.

Speaks JSON-RPC 2.0 over HTTP to a Tendermint 0.34 node using httpx. Only the
methods the SDK needs are implemented: abci_query, broadcast_tx_sync, tx and
status.
"""
import base64
import itertools
import logging
import urllib.parse
from typing import Any, Dict, List, Optional

import httpx

from .._rate_limited_log import rate_limited_log
from ..config import env_flag, rpc_timeout
from ..exceptions import QueryError, ResponseDecodeError, TransportError, TransportTimeoutError
from ..logs import Attribute, Event
from .base import CheckTxResult, Transport, TxResult

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = ("localhost", "127.0.0.1", "::1")


def validate_rpc_url(url: str) -> None:
    """
    Validate the RPC URL is secure.

    Raises:
        ValueError: If URL is invalid or uses plain HTTP to a remote host
    """
    try:
        parsed = urllib.parse.urlparse(url)
    except Exception as e:
        raise ValueError(f"Invalid RPC URL '{url}': {e}")

    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValueError(f"Invalid RPC URL '{url}': expected http(s)://host[:port]")

    if parsed.scheme != "https" and parsed.hostname not in LOOPBACK_HOSTS:
        if not env_flag("COSMWASM_INSECURE_RPC"):
            raise ValueError(
                f"RPC URL must use HTTPS for security (got: {parsed.scheme}://). "
                "Set COSMWASM_INSECURE_RPC=1 to allow HTTP for development."
            )
        rate_limited_log(f"Using insecure HTTP connection to {parsed.hostname}", level="warning", logger_instance=logger)


def _decode_b64(value: Optional[str]) -> bytes:
    if not value:
        return b""
    try:
        return base64.b64decode(value, validate=True)
    except ValueError as e:
        raise ResponseDecodeError(f"Invalid base64 in RPC response: {e}") from e


def _to_int(value: Any) -> int:
    # Tendermint encodes int64 fields as JSON strings
    if value is None or value == "":
        return 0
    return int(value)


class TendermintTransport(Transport):
    """
    Transport over the Tendermint JSON-RPC interface.

    Args:
        url: Node RPC URL, e.g. https://rpc.example.com:443
        timeout: Per request timeout in seconds (defaults to COSMWASM_RPC_TIMEOUT)
        base64_events: Whether event attribute keys and values are base64
            encoded, as they are on Tendermint 0.34
        client: Optional preconfigured httpx.AsyncClient; the caller keeps
            ownership of it
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        base64_events: bool = True,
        client: Optional[httpx.AsyncClient] = None
    ):
        validate_rpc_url(url)
        self.endpoint = url.rstrip("/")
        self.timeout = timeout if timeout is not None else rpc_timeout()
        self.base64_events = base64_events
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout)
        self._ids = itertools.count(1)

    async def _call(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Perform one JSON-RPC call and return its result, or the error object
        under the "error" key.
        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = await self._client.post(self.endpoint, json=payload, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(f"RPC call {method} timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"RPC call {method} failed: {e}") from e

        # Tendermint reports RPC errors with HTTP 500 and a JSON-RPC error body
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict) or ("result" not in body and "error" not in body):
            raise TransportError(f"RPC call {method} failed with HTTP {response.status_code}")

        if "error" in body and body["error"]:
            return {"error": body["error"]}
        return body.get("result") or {}

    @staticmethod
    def _error_text(error: Dict[str, Any]) -> str:
        return f"{error.get('message', '')} {error.get('data', '')}".strip()

    def _decode_events(self, events: Optional[List[Dict[str, Any]]]) -> List[Event]:
        decoded = []
        for event in events or []:
            attributes = []
            for attribute in event.get("attributes") or []:
                key = attribute.get("key") or ""
                value = attribute.get("value") or ""
                if self.base64_events:
                    key = _decode_b64(key).decode("utf-8", errors="replace")
                    value = _decode_b64(value).decode("utf-8", errors="replace")
                attributes.append(Attribute(key=key, value=value))
            decoded.append(Event(type=event.get("type", ""), attributes=attributes))
        return decoded

    async def abci_query(self, path: str, data: bytes) -> bytes:
        result = await self._call("abci_query", {"path": path, "data": data.hex(), "prove": False})
        if "error" in result:
            raise TransportError(f"abci_query {path} failed: {self._error_text(result['error'])}")

        response = result.get("response") or {}
        code = _to_int(response.get("code"))
        if code != 0:
            raise QueryError.from_response(response.get("log", ""), code, response.get("codespace", ""))
        return _decode_b64(response.get("value"))

    async def broadcast_tx_sync(self, tx_bytes: bytes) -> CheckTxResult:
        result = await self._call("broadcast_tx_sync", {"tx": base64.b64encode(tx_bytes).decode("ascii")})
        if "error" in result:
            raise TransportError(f"broadcast_tx_sync failed: {self._error_text(result['error'])}")
        return CheckTxResult(
            tx_hash=(result.get("hash") or "").upper(),
            code=_to_int(result.get("code")),
            codespace=result.get("codespace", ""),
            log=result.get("log", ""),
        )

    async def get_tx(self, tx_hash: str) -> Optional[TxResult]:
        try:
            hash_bytes = bytes.fromhex(tx_hash)
        except ValueError:
            raise ValueError(f"Transaction hash must be hex encoded: {tx_hash}")

        result = await self._call(
            "tx", {"hash": base64.b64encode(hash_bytes).decode("ascii"), "prove": False}
        )
        if "error" in result:
            text = self._error_text(result["error"])
            if "not found" in text.lower():
                return None
            raise TransportError(f"tx lookup for {tx_hash} failed: {text}")

        tx_result = result.get("tx_result") or {}
        return TxResult(
            tx_hash=(result.get("hash") or tx_hash).upper(),
            height=_to_int(result.get("height")),
            code=_to_int(tx_result.get("code")),
            codespace=tx_result.get("codespace", ""),
            raw_log=tx_result.get("log", ""),
            data=_decode_b64(tx_result.get("data")),
            events=self._decode_events(tx_result.get("events")),
            gas_wanted=_to_int(tx_result.get("gas_wanted")),
            gas_used=_to_int(tx_result.get("gas_used")),
        )

    async def chain_id(self) -> str:
        result = await self._call("status", {})
        if "error" in result:
            raise TransportError(f"status failed: {self._error_text(result['error'])}")
        try:
            return result["node_info"]["network"]
        except (KeyError, TypeError) as e:
            raise ResponseDecodeError(f"Status response is missing node_info.network: {e}") from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
