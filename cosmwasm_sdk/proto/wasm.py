"""
Schemas of the x/wasm module, protocol generation cosmwasm.wasm.v1beta1.
"""
from ._descriptors import BYTES, ENUM, MESSAGE, STRING, UINT64, Field, ProtoFile, repeated
from .cosmos import coin_file, pagination_file

_COIN = coin_file.type_name("Coin")
_PAGE_REQUEST = pagination_file.type_name("PageRequest")
_PAGE_RESPONSE = pagination_file.type_name("PageResponse")

PACKAGE = "cosmwasm.wasm.v1beta1"

types_file = ProtoFile("cosmwasm/wasm/v1beta1/types.proto", PACKAGE)
types_file.enum("AccessType", [
    ("ACCESS_TYPE_UNSPECIFIED", 0),
    ("ACCESS_TYPE_NOBODY", 1),
    ("ACCESS_TYPE_ONLY_ADDRESS", 2),
    ("ACCESS_TYPE_EVERYBODY", 3),
]).enum("ContractCodeHistoryOperationType", [
    ("CONTRACT_CODE_HISTORY_OPERATION_TYPE_UNSPECIFIED", 0),
    ("CONTRACT_CODE_HISTORY_OPERATION_TYPE_INIT", 1),
    ("CONTRACT_CODE_HISTORY_OPERATION_TYPE_MIGRATE", 2),
    ("CONTRACT_CODE_HISTORY_OPERATION_TYPE_GENESIS", 3),
]).message(
    "AccessConfig",
    Field("permission", 1, ENUM, types_file.type_name("AccessType")),
    Field("address", 2, STRING),
).message(
    "AbsoluteTxPosition",
    Field("block_height", 1, UINT64),
    Field("tx_index", 2, UINT64),
).message(
    "ContractInfo",
    Field("code_id", 1, UINT64),
    Field("creator", 2, STRING),
    Field("admin", 3, STRING),
    Field("label", 4, STRING),
    Field("created", 5, MESSAGE, types_file.type_name("AbsoluteTxPosition")),
    Field("ibc_port_id", 6, STRING),
).message(
    "ContractCodeHistoryEntry",
    Field("operation", 1, ENUM, types_file.type_name("ContractCodeHistoryOperationType")),
    Field("code_id", 2, UINT64),
    Field("updated", 3, MESSAGE, types_file.type_name("AbsoluteTxPosition")),
    Field("msg", 4, BYTES),
).message(
    "Model",
    Field("key", 1, BYTES),
    Field("value", 2, BYTES),
).build()

tx_file = ProtoFile("cosmwasm/wasm/v1beta1/tx.proto", PACKAGE, deps=[coin_file.name, types_file.name])
tx_file.message(
    "MsgStoreCode",
    Field("sender", 1, STRING),
    Field("wasm_byte_code", 2, BYTES),
    Field("source", 3, STRING),
    Field("builder", 4, STRING),
    Field("instantiate_permission", 5, MESSAGE, types_file.type_name("AccessConfig")),
).message(
    "MsgStoreCodeResponse",
    Field("code_id", 1, UINT64),
).message(
    "MsgInstantiateContract",
    Field("sender", 1, STRING),
    Field("admin", 2, STRING),
    Field("code_id", 3, UINT64),
    Field("label", 4, STRING),
    Field("init_msg", 5, BYTES),
    repeated("init_funds", 6, MESSAGE, _COIN),
).message(
    "MsgInstantiateContractResponse",
    Field("address", 1, STRING),
).message(
    "MsgExecuteContract",
    Field("sender", 1, STRING),
    Field("contract", 2, STRING),
    Field("msg", 3, BYTES),
    repeated("sent_funds", 5, MESSAGE, _COIN),
).message(
    "MsgExecuteContractResponse",
    Field("data", 1, BYTES),
).message(
    "MsgMigrateContract",
    Field("sender", 1, STRING),
    Field("contract", 2, STRING),
    Field("code_id", 3, UINT64),
    Field("migrate_msg", 4, BYTES),
).message(
    "MsgMigrateContractResponse",
    Field("data", 1, BYTES),
).message(
    "MsgUpdateAdmin",
    Field("sender", 1, STRING),
    Field("new_admin", 2, STRING),
    Field("contract", 3, STRING),
).message(
    "MsgClearAdmin",
    Field("sender", 1, STRING),
    Field("contract", 3, STRING),
).build()

query_file = ProtoFile(
    "cosmwasm/wasm/v1beta1/query.proto",
    PACKAGE,
    deps=[types_file.name, pagination_file.name],
)
query_file.message(
    "QueryContractInfoRequest",
    Field("address", 1, STRING),
).message(
    "QueryContractInfoResponse",
    Field("address", 1, STRING),
    Field("contract_info", 2, MESSAGE, types_file.type_name("ContractInfo")),
).message(
    "QueryContractHistoryRequest",
    Field("address", 1, STRING),
    Field("pagination", 2, MESSAGE, _PAGE_REQUEST),
).message(
    "QueryContractHistoryResponse",
    repeated("entries", 1, MESSAGE, types_file.type_name("ContractCodeHistoryEntry")),
    Field("pagination", 2, MESSAGE, _PAGE_RESPONSE),
).message(
    "QueryContractsByCodeRequest",
    Field("code_id", 1, UINT64),
    Field("pagination", 2, MESSAGE, _PAGE_REQUEST),
).message(
    "ContractInfoWithAddress",
    Field("address", 1, STRING),
    Field("contract_info", 2, MESSAGE, types_file.type_name("ContractInfo")),
).message(
    "QueryContractsByCodeResponse",
    repeated("contract_infos", 1, MESSAGE, query_file.type_name("ContractInfoWithAddress")),
    Field("pagination", 2, MESSAGE, _PAGE_RESPONSE),
).message(
    "QueryAllContractStateRequest",
    Field("address", 1, STRING),
    Field("pagination", 2, MESSAGE, _PAGE_REQUEST),
).message(
    "QueryAllContractStateResponse",
    repeated("models", 1, MESSAGE, types_file.type_name("Model")),
    Field("pagination", 2, MESSAGE, _PAGE_RESPONSE),
).message(
    "QueryRawContractStateRequest",
    Field("address", 1, STRING),
    Field("query_data", 2, BYTES),
).message(
    "QueryRawContractStateResponse",
    Field("data", 1, BYTES),
).message(
    "QuerySmartContractStateRequest",
    Field("address", 1, STRING),
    Field("query_data", 2, BYTES),
).message(
    "QuerySmartContractStateResponse",
    Field("data", 1, BYTES),
).message(
    "QueryCodeRequest",
    Field("code_id", 1, UINT64),
).message(
    "CodeInfoResponse",
    Field("code_id", 1, UINT64),
    Field("creator", 2, STRING),
    Field("data_hash", 3, BYTES),
    Field("source", 4, STRING),
    Field("builder", 5, STRING),
).message(
    "QueryCodeResponse",
    Field("code_info", 1, MESSAGE, query_file.type_name("CodeInfoResponse")),
    Field("data", 2, BYTES),
).message(
    "QueryCodesRequest",
    Field("pagination", 1, MESSAGE, _PAGE_REQUEST),
).message(
    "QueryCodesResponse",
    repeated("code_infos", 1, MESSAGE, query_file.type_name("CodeInfoResponse")),
    Field("pagination", 2, MESSAGE, _PAGE_RESPONSE),
).build()

HISTORY_OPERATIONS = types_file.enum_values("ContractCodeHistoryOperationType")

AccessConfig = types_file["AccessConfig"]
ContractInfo = types_file["ContractInfo"]
ContractCodeHistoryEntry = types_file["ContractCodeHistoryEntry"]
Model = types_file["Model"]

MsgStoreCode = tx_file["MsgStoreCode"]
MsgStoreCodeResponse = tx_file["MsgStoreCodeResponse"]
MsgInstantiateContract = tx_file["MsgInstantiateContract"]
MsgInstantiateContractResponse = tx_file["MsgInstantiateContractResponse"]
MsgExecuteContract = tx_file["MsgExecuteContract"]
MsgExecuteContractResponse = tx_file["MsgExecuteContractResponse"]
MsgMigrateContract = tx_file["MsgMigrateContract"]
MsgMigrateContractResponse = tx_file["MsgMigrateContractResponse"]
MsgUpdateAdmin = tx_file["MsgUpdateAdmin"]
MsgClearAdmin = tx_file["MsgClearAdmin"]

QueryContractInfoRequest = query_file["QueryContractInfoRequest"]
QueryContractInfoResponse = query_file["QueryContractInfoResponse"]
QueryContractHistoryRequest = query_file["QueryContractHistoryRequest"]
QueryContractHistoryResponse = query_file["QueryContractHistoryResponse"]
QueryContractsByCodeRequest = query_file["QueryContractsByCodeRequest"]
QueryContractsByCodeResponse = query_file["QueryContractsByCodeResponse"]
ContractInfoWithAddress = query_file["ContractInfoWithAddress"]
QueryAllContractStateRequest = query_file["QueryAllContractStateRequest"]
QueryAllContractStateResponse = query_file["QueryAllContractStateResponse"]
QueryRawContractStateRequest = query_file["QueryRawContractStateRequest"]
QueryRawContractStateResponse = query_file["QueryRawContractStateResponse"]
QuerySmartContractStateRequest = query_file["QuerySmartContractStateRequest"]
QuerySmartContractStateResponse = query_file["QuerySmartContractStateResponse"]
QueryCodeRequest = query_file["QueryCodeRequest"]
QueryCodeResponse = query_file["QueryCodeResponse"]
CodeInfoResponse = query_file["CodeInfoResponse"]
QueryCodesRequest = query_file["QueryCodesRequest"]
QueryCodesResponse = query_file["QueryCodesResponse"]
