"""
Protocol buffer definitions for Cosmos SDK and x/wasm messages.

The schemas are declared in Python and registered in a private descriptor
pool at import time; the classes behave like protoc-generated ones.
"""
from ._descriptors import Any, message_class
from .cosmos import (
    AuthInfo,
    BaseAccount,
    BroadcastTxRequest,
    BroadcastTxResponse,
    Coin,
    Event,
    EventAttribute,
    Fee,
    GetNodeInfoRequest,
    GetNodeInfoResponse,
    GetTxRequest,
    GetTxResponse,
    ModeInfo,
    MsgData,
    MsgSend,
    PageRequest,
    PageResponse,
    PubKey,
    QueryAccountRequest,
    QueryAccountResponse,
    QueryAllBalancesRequest,
    QueryAllBalancesResponse,
    QueryBalanceRequest,
    QueryBalanceResponse,
    SignDoc,
    SignerInfo,
    TxBody,
    TxMsgData,
    TxRaw,
    TxResponse,
    BROADCAST_MODE_SYNC,
    SIGN_MODE_DIRECT,
)
from .wasm import (
    AccessConfig,
    CodeInfoResponse,
    ContractCodeHistoryEntry,
    ContractInfo,
    ContractInfoWithAddress,
    Model,
    MsgClearAdmin,
    MsgExecuteContract,
    MsgExecuteContractResponse,
    MsgInstantiateContract,
    MsgInstantiateContractResponse,
    MsgMigrateContract,
    MsgMigrateContractResponse,
    MsgStoreCode,
    MsgStoreCodeResponse,
    MsgUpdateAdmin,
    QueryAllContractStateRequest,
    QueryAllContractStateResponse,
    QueryCodeRequest,
    QueryCodeResponse,
    QueryCodesRequest,
    QueryCodesResponse,
    QueryContractHistoryRequest,
    QueryContractHistoryResponse,
    QueryContractInfoRequest,
    QueryContractInfoResponse,
    QueryContractsByCodeRequest,
    QueryContractsByCodeResponse,
    QueryRawContractStateRequest,
    QueryRawContractStateResponse,
    QuerySmartContractStateRequest,
    QuerySmartContractStateResponse,
    HISTORY_OPERATIONS,
)

__all__ = [
    'Any', 'message_class',
    'AuthInfo', 'BaseAccount', 'BroadcastTxRequest', 'BroadcastTxResponse', 'Coin',
    'Event', 'EventAttribute', 'Fee', 'GetNodeInfoRequest', 'GetNodeInfoResponse',
    'GetTxRequest', 'GetTxResponse', 'ModeInfo', 'MsgData', 'MsgSend', 'PageRequest',
    'PageResponse', 'PubKey', 'QueryAccountRequest', 'QueryAccountResponse',
    'QueryAllBalancesRequest', 'QueryAllBalancesResponse', 'QueryBalanceRequest',
    'QueryBalanceResponse', 'SignDoc', 'SignerInfo', 'TxBody', 'TxMsgData', 'TxRaw',
    'TxResponse', 'BROADCAST_MODE_SYNC', 'SIGN_MODE_DIRECT',
    'AccessConfig', 'CodeInfoResponse', 'ContractCodeHistoryEntry', 'ContractInfo',
    'ContractInfoWithAddress', 'Model', 'MsgClearAdmin', 'MsgExecuteContract',
    'MsgExecuteContractResponse', 'MsgInstantiateContract', 'MsgInstantiateContractResponse',
    'MsgMigrateContract', 'MsgMigrateContractResponse', 'MsgStoreCode', 'MsgStoreCodeResponse',
    'MsgUpdateAdmin', 'QueryAllContractStateRequest', 'QueryAllContractStateResponse',
    'QueryCodeRequest', 'QueryCodeResponse', 'QueryCodesRequest', 'QueryCodesResponse',
    'QueryContractHistoryRequest', 'QueryContractHistoryResponse', 'QueryContractInfoRequest',
    'QueryContractInfoResponse', 'QueryContractsByCodeRequest', 'QueryContractsByCodeResponse',
    'QueryRawContractStateRequest', 'QueryRawContractStateResponse',
    'QuerySmartContractStateRequest', 'QuerySmartContractStateResponse', 'HISTORY_OPERATIONS',
]
