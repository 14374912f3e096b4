"""
CosmWasmClient - read-only and signing clients for CosmWasm chains.
"""
import gzip
import hashlib
import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from . import proto
from .broadcast import assert_is_broadcast_success, broadcast_tx
from .config import NetworkConfig
from .exceptions import NotFoundError
from .logs import find_attribute, parse_raw_log
from .models import (
    AccountInfo,
    BroadcastResult,
    ChangeAdminResult,
    CodeDetails,
    CodeInfo,
    Coin,
    ContractCodeHistoryEntry,
    ContractInfoWithAddress,
    ExecuteResult,
    Fee,
    GasPrice,
    InstantiateResult,
    MigrateResult,
    RawContractState,
    UploadResult,
    calculate_fee,
    check_uint64,
)
from .queries import QueryClient, setup_auth_extension, setup_bank_extension, setup_wasm_extension
from .registry import (
    MSG_CLEAR_ADMIN,
    MSG_EXECUTE_CONTRACT,
    MSG_INSTANTIATE_CONTRACT,
    MSG_MIGRATE_CONTRACT,
    MSG_SEND,
    MSG_STORE_CODE,
    MSG_UPDATE_ADMIN,
    Registry,
    TypedMessage,
)
from .signer import OfflineDirectSigner
from .transport import Transport, get_transport
from .tx import SignedTransaction, TransactionBuilder

DEFAULT_GAS_LIMITS: Dict[str, int] = {
    "upload": 1_000_000,
    "init": 500_000,
    "exec": 200_000,
    "migrate": 200_000,
    "send": 80_000,
    "change_admin": 80_000,
}

FeeArg = Union[Fee, int, None]


def _json_bytes(msg: Any) -> bytes:
    try:
        return json.dumps(msg, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ValueError(f"Contract message is not JSON serializable: {e}") from e


def _proto_coins(amount: Optional[Sequence[Coin]]) -> List[Any]:
    return [proto.Coin(denom=c.denom, amount=c.amount) for c in (amount or [])]


class CosmWasmClient:
    """
    Read-only client: chain, account and contract queries plus broadcasting
    of already signed transactions.

    Args:
        transport: Transport to the chain node; closed by close()
        logger: Optional logger instance to use for debug/info logging
    """

    def __init__(self, transport: Transport, logger: Optional[logging.Logger] = None):
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self.query_client = QueryClient.with_extensions(
            transport, setup_auth_extension, setup_bank_extension, setup_wasm_extension
        )
        self._chain_id: Optional[str] = None

    @classmethod
    def connect(cls, endpoint: str, **kwargs) -> "CosmWasmClient":
        """Create a client for a Tendermint RPC or grpc(s):// endpoint."""
        return cls(get_transport(endpoint), **kwargs)

    @classmethod
    def from_network(cls, network: str, use_grpc: bool = False, **kwargs) -> "CosmWasmClient":
        """Create a client for one of the bundled network presets."""
        endpoint = NetworkConfig.get_grpc_url(network) if use_grpc else NetworkConfig.get_rpc_url(network)
        return cls.connect(endpoint, **kwargs)

    async def get_chain_id(self) -> str:
        if self._chain_id is None:
            chain_id = await self.transport.chain_id()
            if not chain_id:
                raise ValueError("Chain ID must not be empty")
            self._chain_id = chain_id
        return self._chain_id

    async def get_account(self, address: str) -> Optional[AccountInfo]:
        """Account details, or None if the account does not exist on chain."""
        try:
            return await self.query_client.auth.account(address)
        except NotFoundError:
            return None

    async def get_sequence(self, address: str) -> Tuple[int, int]:
        """
        Returns:
            (account_number, sequence)

        Raises:
            NotFoundError: If the account does not exist on chain
        """
        account = await self.get_account(address)
        if account is None:
            raise NotFoundError(
                f"Account {address} does not exist on chain. "
                "Send some tokens there before trying to query sequence."
            )
        return account.account_number, account.sequence

    async def get_balance(self, address: str, denom: str) -> Coin:
        return await self.query_client.bank.balance(address, denom)

    async def get_codes(self) -> List[CodeInfo]:
        return await self.query_client.wasm.list_code_info()

    async def get_code_details(self, code_id: int) -> CodeDetails:
        return await self.query_client.wasm.get_code(code_id)

    async def get_contracts(self, code_id: int) -> List[str]:
        """Addresses of all contracts instantiated from code_id."""
        contracts = await self.query_client.wasm.list_contracts_by_code_id(code_id)
        return [contract.address for contract in contracts]

    async def get_contract(self, address: str) -> ContractInfoWithAddress:
        return await self.query_client.wasm.get_contract_info(address)

    async def get_contract_code_history(self, address: str) -> List[ContractCodeHistoryEntry]:
        return await self.query_client.wasm.get_contract_code_history(address)

    async def query_contract_raw(self, address: str, key: bytes) -> RawContractState:
        return await self.query_client.wasm.query_contract_raw(address, key)

    async def query_contract_smart(self, address: str, query_msg: Any) -> Any:
        return await self.query_client.wasm.query_contract_smart(address, query_msg)

    async def broadcast_tx(self, tx_bytes: bytes, timeout: Optional[float] = None) -> BroadcastResult:
        return await broadcast_tx(self.transport, tx_bytes, timeout=timeout, logger_instance=self.logger)

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class SigningCosmWasmClient(CosmWasmClient):
    """
    Client that signs with an OfflineDirectSigner and broadcasts.

    sign_and_broadcast returns failed transactions as data. The contract
    helpers (upload, instantiate, execute, ...) assert success and raise
    BroadcastTxError instead.

    Args:
        transport: Transport to the chain node
        signer: Signing collaborator, e.g. LocalSigner
        registry: Message registry (defaults to the wasm and bank messages)
        gas_price: Price used to compute fees when none is given, e.g. "0.025ucosm"
        gas_limits: Overrides of DEFAULT_GAS_LIMITS
        broadcast_timeout: Seconds to wait for inclusion
        logger: Optional logger instance to use for debug/info logging
    """

    def __init__(
        self,
        transport: Transport,
        signer: OfflineDirectSigner,
        registry: Optional[Registry] = None,
        gas_price: Union[GasPrice, str, None] = None,
        gas_limits: Optional[Dict[str, int]] = None,
        broadcast_timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(transport, logger=logger)
        self.signer = signer
        self.registry = registry or Registry()
        self.gas_price = GasPrice.from_string(gas_price) if isinstance(gas_price, str) else gas_price
        self.gas_limits = {**DEFAULT_GAS_LIMITS, **(gas_limits or {})}
        self.broadcast_timeout = broadcast_timeout
        self.builder = TransactionBuilder(self.registry, signer, logger=self.logger)

    @classmethod
    def from_network(cls, network: str, signer: OfflineDirectSigner, use_grpc: bool = False, **kwargs):
        kwargs.setdefault("gas_price", NetworkConfig.get_gas_price(network))
        endpoint = NetworkConfig.get_grpc_url(network) if use_grpc else NetworkConfig.get_rpc_url(network)
        return cls(get_transport(endpoint), signer, **kwargs)

    def _fee(self, fee: FeeArg, kind: str) -> Fee:
        """A Fee as given, or one computed from a gas limit (or the default for kind)."""
        if isinstance(fee, Fee):
            return fee
        gas_limit = self.gas_limits[kind] if fee is None else fee
        if self.gas_price is None:
            raise ValueError("No fee given and no gas_price configured to calculate one")
        return calculate_fee(gas_limit, self.gas_price)

    async def sign(
        self,
        signer_address: str,
        messages: Sequence[TypedMessage],
        fee: Fee,
        memo: str = ""
    ) -> SignedTransaction:
        """Sign messages with the signer's current account number and sequence."""
        account_number, sequence = await self.get_sequence(signer_address)
        chain_id = await self.get_chain_id()
        return await self.builder.sign(
            signer_address, messages, fee, memo, chain_id, account_number, sequence
        )

    async def sign_and_broadcast(
        self,
        signer_address: str,
        messages: Sequence[TypedMessage],
        fee: Fee,
        memo: str = ""
    ) -> BroadcastResult:
        signed = await self.sign(signer_address, messages, fee, memo)
        self.logger.debug(f"Broadcasting transaction {signed.tx_hash}")
        return await broadcast_tx(
            self.transport, signed.tx_bytes, timeout=self.broadcast_timeout, logger_instance=self.logger
        )

    async def _run(self, sender: str, message: TypedMessage, fee: FeeArg, kind: str, memo: str):
        result = await self.sign_and_broadcast(sender, [message], self._fee(fee, kind), memo)
        assert_is_broadcast_success(result)
        return result, parse_raw_log(result.raw_log)

    async def upload(
        self,
        sender: str,
        wasm_code: bytes,
        fee: FeeArg = None,
        memo: str = "",
        source: str = "",
        builder: str = ""
    ) -> UploadResult:
        """
        Upload contract byte code (gzip compressed on the wire).

        Raises:
            BroadcastTxError: If the transaction fails
        """
        if not wasm_code:
            raise ValueError("Wasm byte code must not be empty")
        compressed = gzip.compress(wasm_code, compresslevel=9, mtime=0)
        message = TypedMessage(MSG_STORE_CODE, proto.MsgStoreCode(
            sender=sender,
            wasm_byte_code=compressed,
            source=source,
            builder=builder,
        ))
        result, logs = await self._run(sender, message, fee, "upload", memo)
        code_id = int(find_attribute(logs, "message", "code_id"))
        self.logger.info(f"Uploaded code {code_id} in transaction {result.transaction_hash}")
        return UploadResult(
            code_id=code_id,
            original_size=len(wasm_code),
            original_checksum=hashlib.sha256(wasm_code).hexdigest(),
            compressed_size=len(compressed),
            compressed_checksum=hashlib.sha256(compressed).hexdigest(),
            transaction_hash=result.transaction_hash,
            logs=logs,
        )

    async def instantiate(
        self,
        sender: str,
        code_id: int,
        init_msg: Any,
        label: str,
        fee: FeeArg = None,
        memo: str = "",
        funds: Optional[Sequence[Coin]] = None,
        admin: Optional[str] = None
    ) -> InstantiateResult:
        if not label:
            raise ValueError("Label is required")
        check_uint64(code_id, "code_id")
        message = TypedMessage(MSG_INSTANTIATE_CONTRACT, proto.MsgInstantiateContract(
            sender=sender,
            admin=admin or "",
            code_id=code_id,
            label=label,
            init_msg=_json_bytes(init_msg),
            init_funds=_proto_coins(funds),
        ))
        result, logs = await self._run(sender, message, fee, "init", memo)
        contract_address = find_attribute(logs, "message", "contract_address")
        self.logger.info(f"Instantiated {contract_address} from code {code_id}")
        return InstantiateResult(
            contract_address=contract_address,
            transaction_hash=result.transaction_hash,
            logs=logs,
        )

    async def execute(
        self,
        sender: str,
        contract: str,
        msg: Any,
        fee: FeeArg = None,
        memo: str = "",
        funds: Optional[Sequence[Coin]] = None
    ) -> ExecuteResult:
        message = TypedMessage(MSG_EXECUTE_CONTRACT, proto.MsgExecuteContract(
            sender=sender,
            contract=contract,
            msg=_json_bytes(msg),
            sent_funds=_proto_coins(funds),
        ))
        result, logs = await self._run(sender, message, fee, "exec", memo)
        return ExecuteResult(transaction_hash=result.transaction_hash, logs=logs)

    async def migrate(
        self,
        sender: str,
        contract: str,
        code_id: int,
        migrate_msg: Any,
        fee: FeeArg = None,
        memo: str = ""
    ) -> MigrateResult:
        check_uint64(code_id, "code_id")
        message = TypedMessage(MSG_MIGRATE_CONTRACT, proto.MsgMigrateContract(
            sender=sender,
            contract=contract,
            code_id=code_id,
            migrate_msg=_json_bytes(migrate_msg),
        ))
        result, logs = await self._run(sender, message, fee, "migrate", memo)
        return MigrateResult(transaction_hash=result.transaction_hash, logs=logs)

    async def update_admin(
        self,
        sender: str,
        contract: str,
        new_admin: str,
        fee: FeeArg = None,
        memo: str = ""
    ) -> ChangeAdminResult:
        message = TypedMessage(MSG_UPDATE_ADMIN, proto.MsgUpdateAdmin(
            sender=sender, new_admin=new_admin, contract=contract,
        ))
        result, logs = await self._run(sender, message, fee, "change_admin", memo)
        return ChangeAdminResult(transaction_hash=result.transaction_hash, logs=logs)

    async def clear_admin(self, sender: str, contract: str, fee: FeeArg = None, memo: str = "") -> ChangeAdminResult:
        message = TypedMessage(MSG_CLEAR_ADMIN, proto.MsgClearAdmin(sender=sender, contract=contract))
        result, logs = await self._run(sender, message, fee, "change_admin", memo)
        return ChangeAdminResult(transaction_hash=result.transaction_hash, logs=logs)

    async def send_tokens(
        self,
        sender: str,
        recipient: str,
        amount: Sequence[Coin],
        fee: FeeArg = None,
        memo: str = ""
    ) -> BroadcastResult:
        """Bank transfer; a failed transfer is returned as data."""
        message = TypedMessage(MSG_SEND, proto.MsgSend(
            from_address=sender, to_address=recipient, amount=_proto_coins(amount),
        ))
        return await self.sign_and_broadcast(sender, [message], self._fee(fee, "send"), memo)
