"""
Wasm query extension: contract code and contract state queries.

Absent entities and empty results are kept apart:

* an unknown contract fails with NotFoundError for info, state, raw and
  smart queries,
* a missing key inside an existing contract gives RawContractState(data=None),
* code history of an unknown contract is an empty list.
"""
import json
import logging
from typing import Any, List

from .. import proto
from ..exceptions import ContractQueryError, NotFoundError, QueryError, ResponseDecodeError
from ..models import (
    CodeDetails,
    CodeInfo,
    ContractCodeHistoryEntry,
    ContractCodeHistoryOperation,
    ContractInfo,
    ContractInfoWithAddress,
    Model,
    RawContractState,
    check_uint64,
)
from .extension import QueryClient, QueryExtension

logger = logging.getLogger(__name__)

QUERY_SERVICE = "/cosmwasm.wasm.v1beta1.Query"

# wasmd wraps every error a contract returns from a smart query in
# ErrQueryFailed (codespace wasm, code 9)
WASM_CODESPACE = "wasm"
ERR_QUERY_FAILED_CODE = 9
QUERY_FAILED_TEXT = "query wasm contract failed"

_OPERATIONS = {
    proto.HISTORY_OPERATIONS["CONTRACT_CODE_HISTORY_OPERATION_TYPE_INIT"]: ContractCodeHistoryOperation.INIT,
    proto.HISTORY_OPERATIONS["CONTRACT_CODE_HISTORY_OPERATION_TYPE_MIGRATE"]: ContractCodeHistoryOperation.MIGRATE,
    proto.HISTORY_OPERATIONS["CONTRACT_CODE_HISTORY_OPERATION_TYPE_GENESIS"]: ContractCodeHistoryOperation.GENESIS,
}


def query_path(verb: str) -> str:
    return f"{QUERY_SERVICE}/{verb}"


def is_contract_query_failure(error: QueryError) -> bool:
    """Whether the chain reports error as raised by the contract itself."""
    if error.codespace == WASM_CODESPACE and error.code == ERR_QUERY_FAILED_CODE:
        return True
    return QUERY_FAILED_TEXT in str(error)


def _code_info(info) -> CodeInfo:
    return CodeInfo(
        code_id=info.code_id,
        creator=info.creator,
        data_hash=info.data_hash,
        source=info.source,
        builder=info.builder,
    )


def _contract_info(info) -> ContractInfo:
    return ContractInfo(
        code_id=info.code_id,
        creator=info.creator,
        admin=info.admin or None,
        label=info.label,
    )


async def list_code_info(client: QueryClient) -> List[CodeInfo]:
    """All uploaded codes, in ascending code id order as returned by the chain."""
    infos = await client.query_all_pages(
        query_path("Codes"),
        lambda page: proto.QueryCodesRequest(pagination=page),
        proto.QueryCodesResponse,
        "code_infos",
    )
    return [_code_info(info) for info in infos]


async def get_code(client: QueryClient, code_id: int) -> CodeDetails:
    """
    Metadata and byte code of one code.

    Raises:
        NotFoundError: If no code with that id exists
    """
    request = proto.QueryCodeRequest(code_id=check_uint64(code_id, "code_id"))
    response = await client.query_proto(query_path("Code"), request, proto.QueryCodeResponse)
    if not response.HasField("code_info"):
        raise NotFoundError(f"code {code_id}: not found")
    return CodeDetails(code_info=_code_info(response.code_info), data=response.data)


async def get_contract_info(client: QueryClient, address: str) -> ContractInfoWithAddress:
    """
    Raises:
        NotFoundError: If the contract does not exist
    """
    request = proto.QueryContractInfoRequest(address=address)
    response = await client.query_proto(query_path("ContractInfo"), request, proto.QueryContractInfoResponse)
    if not response.HasField("contract_info"):
        raise NotFoundError(f"contract {address}: not found")
    return ContractInfoWithAddress(
        address=response.address or address,
        contract_info=_contract_info(response.contract_info),
    )


async def list_contracts_by_code_id(client: QueryClient, code_id: int) -> List[ContractInfoWithAddress]:
    """All contracts instantiated from a code; empty if there are none."""
    check_uint64(code_id, "code_id")
    infos = await client.query_all_pages(
        query_path("ContractsByCode"),
        lambda page: proto.QueryContractsByCodeRequest(code_id=code_id, pagination=page),
        proto.QueryContractsByCodeResponse,
        "contract_infos",
    )
    return [
        ContractInfoWithAddress(address=info.address, contract_info=_contract_info(info.contract_info))
        for info in infos
    ]


async def get_contract_code_history(client: QueryClient, address: str) -> List[ContractCodeHistoryEntry]:
    """
    Code history of a contract, oldest first.

    Unknown addresses yield an empty list rather than an error.
    """
    try:
        entries = await client.query_all_pages(
            query_path("ContractHistory"),
            lambda page: proto.QueryContractHistoryRequest(address=address, pagination=page),
            proto.QueryContractHistoryResponse,
            "entries",
        )
    except NotFoundError:
        logger.debug(f"No code history for {address}")
        return []

    history = []
    for entry in entries:
        operation = _OPERATIONS.get(entry.operation)
        if operation is None:
            raise ResponseDecodeError(f"Unknown code history operation {entry.operation} for {address}")
        history.append(ContractCodeHistoryEntry(operation=operation, code_id=entry.code_id, msg=entry.msg))
    return history


async def get_all_contract_state(client: QueryClient, address: str) -> List[Model]:
    """
    Raises:
        NotFoundError: If the contract does not exist
    """
    models = await client.query_all_pages(
        query_path("AllContractState"),
        lambda page: proto.QueryAllContractStateRequest(address=address, pagination=page),
        proto.QueryAllContractStateResponse,
        "models",
    )
    return [Model(key=model.key, value=model.value) for model in models]


async def query_contract_raw(client: QueryClient, address: str, key: bytes) -> RawContractState:
    """
    Read one storage key of a contract.

    Returns:
        RawContractState with data=None when the key is not set

    Raises:
        NotFoundError: If the contract itself does not exist
    """
    request = proto.QueryRawContractStateRequest(address=address, query_data=key)
    response = await client.query_proto(
        query_path("RawContractState"), request, proto.QueryRawContractStateResponse
    )
    return RawContractState(data=response.data or None)


async def query_contract_smart(client: QueryClient, address: str, query_msg: Any) -> Any:
    """
    Run a smart query against a contract.

    Args:
        address: Contract address
        query_msg: JSON serializable query, e.g. {"verifier": {}}

    Returns:
        The decoded JSON response

    Raises:
        NotFoundError: If the contract does not exist
        ContractQueryError: If the contract rejects the query; the message is
            the contract's own error text
    """
    try:
        query_data = json.dumps(query_msg, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ValueError(f"Query message is not JSON serializable: {e}") from e

    request = proto.QuerySmartContractStateRequest(address=address, query_data=query_data)
    try:
        response = await client.query_proto(
            query_path("SmartContractState"), request, proto.QuerySmartContractStateResponse
        )
    except QueryError as e:
        # Contract errors may themselves say "not found"; they are not a missing contract
        if isinstance(e, NotFoundError) and not is_contract_query_failure(e):
            raise
        raise ContractQueryError(str(e), e.code, e.codespace) from e

    try:
        return json.loads(response.data)
    except ValueError as e:
        raise ResponseDecodeError(f"Smart query response of {address} is not valid JSON: {e}") from e


def setup_wasm_extension() -> QueryExtension:
    return QueryExtension("wasm", {
        "list_code_info": list_code_info,
        "get_code": get_code,
        "get_contract_info": get_contract_info,
        "list_contracts_by_code_id": list_contracts_by_code_id,
        "get_contract_code_history": get_contract_code_history,
        "get_all_contract_state": get_all_contract_state,
        "query_contract_raw": query_contract_raw,
        "query_contract_smart": query_contract_smart,
    })
