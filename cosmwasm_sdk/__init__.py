"""
CosmWasm SDK - build, sign and broadcast CosmWasm transactions and query
contract code and state.
"""
from .broadcast import assert_is_broadcast_success, broadcast_tx, is_broadcast_success
from .client import CosmWasmClient, SigningCosmWasmClient
from .config import NetworkConfig
from .exceptions import (
    AttributeNotFoundError,
    BroadcastTxError,
    ContractQueryError,
    CosmWasmClientError,
    DuplicateExtensionError,
    EncodingError,
    InclusionTimeoutError,
    MalformedLogError,
    NoAccountsAvailableError,
    NotFoundError,
    QueryError,
    RegistryConflictError,
    ResponseDecodeError,
    SigningRejectedError,
    TransportError,
    TransportTimeoutError,
    UnregisteredTypeError,
)
from .logs import Attribute, Event, Log, find_attribute, find_event, parse_raw_log
from .models import (
    BroadcastResult,
    CodeDetails,
    CodeInfo,
    Coin,
    ContractCodeHistoryEntry,
    ContractCodeHistoryOperation,
    ContractInfo,
    ContractInfoWithAddress,
    Fee,
    GasPrice,
    Model,
    MsgData,
    RawContractState,
    calculate_fee,
    coin,
    coins,
)
from .queries import QueryClient, QueryExtension, setup_auth_extension, setup_bank_extension, setup_wasm_extension
from .registry import Registry, TypedMessage
from .signer import AccountData, LocalSigner, OfflineDirectSigner
from .transport import TendermintTransport, Transport, get_transport
from .tx import SignedTransaction, TransactionBuilder
from .version import __version__

__all__ = [
    "AccountData",
    "Attribute",
    "AttributeNotFoundError",
    "BroadcastResult",
    "BroadcastTxError",
    "CodeDetails",
    "CodeInfo",
    "Coin",
    "ContractCodeHistoryEntry",
    "ContractCodeHistoryOperation",
    "ContractInfo",
    "ContractInfoWithAddress",
    "ContractQueryError",
    "CosmWasmClient",
    "CosmWasmClientError",
    "DuplicateExtensionError",
    "EncodingError",
    "Event",
    "Fee",
    "GasPrice",
    "InclusionTimeoutError",
    "LocalSigner",
    "Log",
    "MalformedLogError",
    "Model",
    "MsgData",
    "NetworkConfig",
    "NoAccountsAvailableError",
    "NotFoundError",
    "OfflineDirectSigner",
    "QueryClient",
    "QueryError",
    "QueryExtension",
    "RawContractState",
    "Registry",
    "RegistryConflictError",
    "ResponseDecodeError",
    "SignedTransaction",
    "SigningCosmWasmClient",
    "SigningRejectedError",
    "TendermintTransport",
    "TransactionBuilder",
    "Transport",
    "TransportError",
    "TransportTimeoutError",
    "TypedMessage",
    "UnregisteredTypeError",
    "assert_is_broadcast_success",
    "broadcast_tx",
    "calculate_fee",
    "coin",
    "coins",
    "find_attribute",
    "find_event",
    "get_transport",
    "is_broadcast_success",
    "parse_raw_log",
    "setup_auth_extension",
    "setup_bank_extension",
    "setup_wasm_extension",
    "__version__",
]
