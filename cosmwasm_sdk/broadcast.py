"""
Broadcast & confirmation.

Submits a signed transaction in sync mode, then polls the node by hash until
the transaction shows up in a block or the deadline passes.
"""
import asyncio
import hashlib
import logging
from typing import List, Optional

from google.protobuf.message import DecodeError

from . import proto
from ._rate_limited_log import rate_limited_log
from .config import DEFAULT_POLL_BACKOFF, broadcast_timeout, max_poll_interval, poll_interval
from .exceptions import BroadcastTxError, InclusionTimeoutError, ResponseDecodeError
from .models import BroadcastResult, MsgData
from .transport.base import Transport, TxResult

logger = logging.getLogger(__name__)


def tx_hash_of(tx_bytes: bytes) -> str:
    """Upper-case hex SHA-256 of the serialized TxRaw, as used by Tendermint."""
    return hashlib.sha256(tx_bytes).hexdigest().upper()


def decode_msg_data(data: bytes) -> List[MsgData]:
    """
    Decode the TxMsgData of a DeliverTx result.

    Raises:
        ResponseDecodeError: If data is not a valid TxMsgData encoding
    """
    if not data:
        return []
    try:
        tx_msg_data = proto.TxMsgData.FromString(data)
    except DecodeError as e:
        raise ResponseDecodeError(f"Failed to decode transaction message data: {e}") from e
    return [MsgData(msg_type=item.msg_type, data=item.data) for item in tx_msg_data.data]


def _result_from_tx(tx: TxResult) -> BroadcastResult:
    return BroadcastResult(
        transaction_hash=tx.tx_hash,
        height=tx.height,
        code=tx.code,
        codespace=tx.codespace,
        raw_log=tx.raw_log,
        data=decode_msg_data(tx.data) if tx.code == 0 else [],
        events=tx.events,
        gas_wanted=tx.gas_wanted,
        gas_used=tx.gas_used,
    )


async def broadcast_tx(
    transport: Transport,
    tx_bytes: bytes,
    timeout: Optional[float] = None,
    poll_interval_s: Optional[float] = None,
    max_poll_interval_s: Optional[float] = None,
    backoff: float = DEFAULT_POLL_BACKOFF,
    logger_instance: Optional[logging.Logger] = None
) -> BroadcastResult:
    """
    Broadcast a signed transaction and wait until it is included in a block.

    A CheckTx rejection is returned as a result with height 0 and the
    rejection log; it is not raised. Cancelling the awaiting task stops
    polling immediately.

    Args:
        transport: Transport to the chain node
        tx_bytes: Serialized TxRaw
        timeout: Seconds to wait for inclusion (defaults to COSMWASM_BROADCAST_TIMEOUT)
        poll_interval_s: Initial delay between lookups (defaults to COSMWASM_POLL_INTERVAL)
        max_poll_interval_s: Upper bound for the delay (defaults to COSMWASM_MAX_POLL_INTERVAL)
        backoff: Factor the delay grows by after each miss

    Returns:
        The broadcast result

    Raises:
        InclusionTimeoutError: If the transaction was not found before the deadline
        TransportError: On network failures (not retried)
    """
    log = logger_instance or logger
    timeout = timeout if timeout is not None else broadcast_timeout()
    interval = poll_interval_s if poll_interval_s is not None else poll_interval()
    max_interval = max_poll_interval_s if max_poll_interval_s is not None else max_poll_interval()
    if timeout <= 0 or interval <= 0 or max_interval <= 0:
        raise ValueError("timeout and poll intervals must be positive")
    if backoff < 1:
        raise ValueError(f"backoff must be >= 1, got {backoff}")

    local_hash = tx_hash_of(tx_bytes)
    check = await transport.broadcast_tx_sync(tx_bytes)
    tx_hash = check.tx_hash or local_hash
    if check.tx_hash and check.tx_hash != local_hash:
        log.warning(f"Node reported hash {check.tx_hash} for locally computed {local_hash}")

    if check.code != 0:
        log.info(f"Transaction {tx_hash} rejected by CheckTx with code {check.code} ({check.codespace})")
        return BroadcastResult(
            transaction_hash=tx_hash,
            height=0,
            code=check.code,
            codespace=check.codespace,
            raw_log=check.log,
        )

    log.debug(f"Transaction {tx_hash} accepted into mempool, waiting for inclusion")
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        tx = await transport.get_tx(tx_hash)
        if tx is not None:
            log.info(f"Transaction {tx_hash} included at height {tx.height} with code {tx.code}")
            return _result_from_tx(tx)

        remaining = deadline - loop.time()
        if remaining <= 0:
            raise InclusionTimeoutError(tx_hash, timeout)

        rate_limited_log(
            f"Waiting for transaction {tx_hash} to be included",
            level="debug",
            interval=10,
            logger_instance=log,
        )
        await asyncio.sleep(min(interval, remaining))
        interval = min(interval * backoff, max_interval)


def is_broadcast_success(result: BroadcastResult) -> bool:
    return result.code == 0


def assert_is_broadcast_success(result: BroadcastResult) -> BroadcastResult:
    """
    Return the result unchanged if it succeeded.

    Raises:
        BroadcastTxError: If the transaction failed in CheckTx or DeliverTx
    """
    if not is_broadcast_success(result):
        raise BroadcastTxError(
            code=result.code,
            codespace=result.codespace,
            raw_log=result.raw_log,
            tx_hash=result.transaction_hash,
            height=result.height,
        )
    return result
