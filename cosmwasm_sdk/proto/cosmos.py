"""
Cosmos SDK schemas used by the transaction builder, broadcast and the
bank/auth query extensions (cosmos-sdk v0.40 - v0.42, Tendermint 0.34).
"""
from ._descriptors import (
    ANY_PROTO, BOOL, BYTES, ENUM, INT64, MESSAGE, STRING, UINT32, UINT64,
    Field, ProtoFile, repeated,
)

_ANY = ".google.protobuf.Any"

coin_file = ProtoFile("cosmos/base/v1beta1/coin.proto", "cosmos.base.v1beta1")
coin_file.message(
    "Coin",
    Field("denom", 1, STRING),
    Field("amount", 2, STRING),
).build()
_COIN = coin_file.type_name("Coin")

pagination_file = ProtoFile("cosmos/base/query/v1beta1/pagination.proto", "cosmos.base.query.v1beta1")
pagination_file.message(
    "PageRequest",
    Field("key", 1, BYTES),
    Field("offset", 2, UINT64),
    Field("limit", 3, UINT64),
    Field("count_total", 4, BOOL),
    Field("reverse", 5, BOOL),
).message(
    "PageResponse",
    Field("next_key", 1, BYTES),
    Field("total", 2, UINT64),
).build()
_PAGE_REQUEST = pagination_file.type_name("PageRequest")
_PAGE_RESPONSE = pagination_file.type_name("PageResponse")

secp256k1_file = ProtoFile("cosmos/crypto/secp256k1/keys.proto", "cosmos.crypto.secp256k1")
secp256k1_file.message("PubKey", Field("key", 1, BYTES)).build()

signing_file = ProtoFile("cosmos/tx/signing/v1beta1/signing.proto", "cosmos.tx.signing.v1beta1")
signing_file.enum("SignMode", [
    ("SIGN_MODE_UNSPECIFIED", 0),
    ("SIGN_MODE_DIRECT", 1),
    ("SIGN_MODE_TEXTUAL", 2),
    ("SIGN_MODE_LEGACY_AMINO_JSON", 127),
]).build()

tx_file = ProtoFile(
    "cosmos/tx/v1beta1/tx.proto",
    "cosmos.tx.v1beta1",
    deps=[ANY_PROTO, coin_file.name, signing_file.name],
)
tx_file.message(
    "TxBody",
    repeated("messages", 1, MESSAGE, _ANY),
    Field("memo", 2, STRING),
    Field("timeout_height", 3, UINT64),
).message(
    "ModeInfo",
    Field("single", 1, MESSAGE, tx_file.type_name("ModeInfo.Single")),
    nested=[("Single", [Field("mode", 1, ENUM, signing_file.type_name("SignMode"))])],
).message(
    "SignerInfo",
    Field("public_key", 1, MESSAGE, _ANY),
    Field("mode_info", 2, MESSAGE, tx_file.type_name("ModeInfo")),
    Field("sequence", 3, UINT64),
).message(
    "Fee",
    repeated("amount", 1, MESSAGE, _COIN),
    Field("gas_limit", 2, UINT64),
    Field("payer", 3, STRING),
    Field("granter", 4, STRING),
).message(
    "AuthInfo",
    repeated("signer_infos", 1, MESSAGE, tx_file.type_name("SignerInfo")),
    Field("fee", 2, MESSAGE, tx_file.type_name("Fee")),
).message(
    "SignDoc",
    Field("body_bytes", 1, BYTES),
    Field("auth_info_bytes", 2, BYTES),
    Field("chain_id", 3, STRING),
    Field("account_number", 4, UINT64),
).message(
    "TxRaw",
    Field("body_bytes", 1, BYTES),
    Field("auth_info_bytes", 2, BYTES),
    repeated("signatures", 3, BYTES),
).build()

abci_types_file = ProtoFile("tendermint/abci/types.proto", "tendermint.abci")
abci_types_file.message(
    "EventAttribute",
    Field("key", 1, BYTES),
    Field("value", 2, BYTES),
    Field("index", 3, BOOL),
).message(
    "Event",
    Field("type", 1, STRING),
    repeated("attributes", 2, MESSAGE, abci_types_file.type_name("EventAttribute")),
).build()

abci_file = ProtoFile(
    "cosmos/base/abci/v1beta1/abci.proto",
    "cosmos.base.abci.v1beta1",
    deps=[ANY_PROTO, abci_types_file.name],
)
abci_file.message(
    "TxResponse",
    Field("height", 1, INT64),
    Field("txhash", 2, STRING),
    Field("codespace", 3, STRING),
    Field("code", 4, UINT32),
    Field("data", 5, STRING),
    Field("raw_log", 6, STRING),
    Field("info", 8, STRING),
    Field("gas_wanted", 9, INT64),
    Field("gas_used", 10, INT64),
    Field("tx", 11, MESSAGE, _ANY),
    Field("timestamp", 12, STRING),
    repeated("events", 13, MESSAGE, abci_types_file.type_name("Event")),
).message(
    "MsgData",
    Field("msg_type", 1, STRING),
    Field("data", 2, BYTES),
).message(
    "TxMsgData",
    repeated("data", 1, MESSAGE, abci_file.type_name("MsgData")),
).build()

service_file = ProtoFile(
    "cosmos/tx/v1beta1/service.proto",
    "cosmos.tx.v1beta1",
    deps=[abci_file.name],
)
service_file.enum("BroadcastMode", [
    ("BROADCAST_MODE_UNSPECIFIED", 0),
    ("BROADCAST_MODE_BLOCK", 1),
    ("BROADCAST_MODE_SYNC", 2),
    ("BROADCAST_MODE_ASYNC", 3),
]).message(
    "BroadcastTxRequest",
    Field("tx_bytes", 1, BYTES),
    Field("mode", 2, ENUM, service_file.type_name("BroadcastMode")),
).message(
    "BroadcastTxResponse",
    Field("tx_response", 1, MESSAGE, abci_file.type_name("TxResponse")),
).message(
    "GetTxRequest",
    Field("hash", 1, STRING),
).message(
    # field 1 (the decoded Tx) is left out; only the execution result is read
    "GetTxResponse",
    Field("tx_response", 2, MESSAGE, abci_file.type_name("TxResponse")),
).build()

node_file = ProtoFile("cosmos/base/tendermint/v1beta1/query.proto", "cosmos.base.tendermint.v1beta1")
node_file.message(
    "DefaultNodeInfo",
    Field("network", 4, STRING),
    Field("version", 5, STRING),
    Field("moniker", 7, STRING),
).message(
    "GetNodeInfoRequest",
).message(
    "GetNodeInfoResponse",
    Field("default_node_info", 1, MESSAGE, node_file.type_name("DefaultNodeInfo")),
).build()

bank_tx_file = ProtoFile("cosmos/bank/v1beta1/tx.proto", "cosmos.bank.v1beta1", deps=[coin_file.name])
bank_tx_file.message(
    "MsgSend",
    Field("from_address", 1, STRING),
    Field("to_address", 2, STRING),
    repeated("amount", 3, MESSAGE, _COIN),
).build()

bank_query_file = ProtoFile(
    "cosmos/bank/v1beta1/query.proto",
    "cosmos.bank.v1beta1",
    deps=[coin_file.name, pagination_file.name],
)
bank_query_file.message(
    "QueryBalanceRequest",
    Field("address", 1, STRING),
    Field("denom", 2, STRING),
).message(
    "QueryBalanceResponse",
    Field("balance", 1, MESSAGE, _COIN),
).message(
    "QueryAllBalancesRequest",
    Field("address", 1, STRING),
    Field("pagination", 2, MESSAGE, _PAGE_REQUEST),
).message(
    "QueryAllBalancesResponse",
    repeated("balances", 1, MESSAGE, _COIN),
    Field("pagination", 2, MESSAGE, _PAGE_RESPONSE),
).build()

auth_file = ProtoFile("cosmos/auth/v1beta1/auth.proto", "cosmos.auth.v1beta1", deps=[ANY_PROTO])
auth_file.message(
    "BaseAccount",
    Field("address", 1, STRING),
    Field("pub_key", 2, MESSAGE, _ANY),
    Field("account_number", 3, UINT64),
    Field("sequence", 4, UINT64),
).build()

auth_query_file = ProtoFile("cosmos/auth/v1beta1/query.proto", "cosmos.auth.v1beta1", deps=[ANY_PROTO])
auth_query_file.message(
    "QueryAccountRequest",
    Field("address", 1, STRING),
).message(
    "QueryAccountResponse",
    Field("account", 1, MESSAGE, _ANY),
).build()

Coin = coin_file["Coin"]
PageRequest = pagination_file["PageRequest"]
PageResponse = pagination_file["PageResponse"]
PubKey = secp256k1_file["PubKey"]
SIGN_MODE_DIRECT = signing_file.enum_values("SignMode")["SIGN_MODE_DIRECT"]
TxBody = tx_file["TxBody"]
ModeInfo = tx_file["ModeInfo"]
SignerInfo = tx_file["SignerInfo"]
Fee = tx_file["Fee"]
AuthInfo = tx_file["AuthInfo"]
SignDoc = tx_file["SignDoc"]
TxRaw = tx_file["TxRaw"]
Event = abci_types_file["Event"]
EventAttribute = abci_types_file["EventAttribute"]
TxResponse = abci_file["TxResponse"]
MsgData = abci_file["MsgData"]
TxMsgData = abci_file["TxMsgData"]
BROADCAST_MODE_SYNC = service_file.enum_values("BroadcastMode")["BROADCAST_MODE_SYNC"]
BroadcastTxRequest = service_file["BroadcastTxRequest"]
BroadcastTxResponse = service_file["BroadcastTxResponse"]
GetTxRequest = service_file["GetTxRequest"]
GetTxResponse = service_file["GetTxResponse"]
GetNodeInfoRequest = node_file["GetNodeInfoRequest"]
GetNodeInfoResponse = node_file["GetNodeInfoResponse"]
MsgSend = bank_tx_file["MsgSend"]
QueryBalanceRequest = bank_query_file["QueryBalanceRequest"]
QueryBalanceResponse = bank_query_file["QueryBalanceResponse"]
QueryAllBalancesRequest = bank_query_file["QueryAllBalancesRequest"]
QueryAllBalancesResponse = bank_query_file["QueryAllBalancesResponse"]
BaseAccount = auth_file["BaseAccount"]
QueryAccountRequest = auth_query_file["QueryAccountRequest"]
QueryAccountResponse = auth_query_file["QueryAccountResponse"]
