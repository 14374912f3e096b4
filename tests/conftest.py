"""
Pytest fixtures for the CosmWasm SDK tests.

FakeChain is an in-memory stand-in for a wasmd node speaking the
cosmwasm.wasm.v1beta1 protocol. It verifies signatures and sequences,
executes store/instantiate/execute/migrate/admin/send messages, answers the
wasm, bank and auth queries (paginating lists two items at a time) and
reports failures the way the chain does.
"""
import copy
import gzip
import hashlib
import json
from typing import Dict, List, Optional

import bech32
import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature
from google.protobuf.message import DecodeError

from cosmwasm_sdk import proto
from cosmwasm_sdk._rate_limited_log import reset_rate_limits
from cosmwasm_sdk.config import NetworkConfig
from cosmwasm_sdk.exceptions import CosmWasmClientError, QueryError
from cosmwasm_sdk.logs import Attribute, Event
from cosmwasm_sdk.registry import Registry
from cosmwasm_sdk.transport.base import CheckTxResult, Transport, TxResult

RIPEMD160_AVAILABLE = "ripemd160" in hashlib.algorithms_available
requires_ripemd160 = pytest.mark.skipif(
    not RIPEMD160_AVAILABLE, reason="ripemd160 is not available in this Python build"
)

ALICE_KEY = "b8c462d2bb0c1a92edf44f735021f16c270f28ee2c3d1cb49943a5e70a3c763e"
BOB_KEY = "0x5e1f9e3b1c2d4a6f8e7d9c0b1a2f3e4d5c6b7a8f9e0d1c2b3a4f5e6d7c8b9a01"

# Stand-in for the hackatom example contract byte code
HACKATOM_WASM = b"\x00asm\x01\x00\x00\x00" + b"hackatom" * 512

INIT = 1
MIGRATE = 2

WASM_QUERY = "/cosmwasm.wasm.v1beta1.Query"


class _DeliverFailure(Exception):
    def __init__(self, codespace: str, code: int, log: str):
        self.codespace = codespace
        self.code = code
        self.log = log
        super().__init__(log)


def _not_found(text: str, codespace: str = "wasm") -> QueryError:
    return QueryError.from_response(f"{text}: not found", code=22, codespace=codespace)


def _message_event(action: str, sender: str, *extra) -> Event:
    attributes = [
        Attribute(key="action", value=action),
        Attribute(key="module", value="wasm" if action != "send" else "bank"),
        Attribute(key="signer", value=sender),
    ]
    attributes.extend(Attribute(key=k, value=v) for k, v in extra)
    return Event(type="message", attributes=attributes)


class FakeChain(Transport):
    """In-memory wasmd node"""

    PAGE_SIZE = 2

    def __init__(self, chain_id: str = "testing", prefix: str = "wasm", inclusion_delay: int = 0):
        self.endpoint = "fake://wasmd"
        self._chain_id = chain_id
        self.prefix = prefix
        # Number of get_tx lookups that miss before a delivered tx shows up
        self.inclusion_delay = inclusion_delay
        # Answer ContractHistory for unknown contracts with "not found"
        self.strict_history = False
        self.height = 1
        self.accounts: Dict[str, dict] = {}
        self.balances: Dict[str, Dict[str, int]] = {}
        self.codes: List[dict] = []
        self.contracts: Dict[str, dict] = {}
        self.txs: Dict[str, TxResult] = {}
        self._misses: Dict[str, int] = {}
        self.queries: List[str] = []
        self.closed = False
        self.registry = Registry()

    def fund(self, address: str, amount: int, denom: str = "ucosm") -> None:
        if address not in self.accounts:
            self.accounts[address] = {"account_number": len(self.accounts), "sequence": 0, "pubkey": None}
        balances = self.balances.setdefault(address, {})
        balances[denom] = balances.get(denom, 0) + amount

    # Transport

    async def chain_id(self) -> str:
        return self._chain_id

    async def close(self) -> None:
        self.closed = True

    async def get_tx(self, tx_hash: str) -> Optional[TxResult]:
        if tx_hash not in self.txs:
            return None
        if self._misses.get(tx_hash, 0) > 0:
            self._misses[tx_hash] -= 1
            return None
        return self.txs[tx_hash]

    async def broadcast_tx_sync(self, tx_bytes: bytes) -> CheckTxResult:
        tx_hash = hashlib.sha256(tx_bytes).hexdigest().upper()
        try:
            tx_raw = proto.TxRaw.FromString(tx_bytes)
            body = proto.TxBody.FromString(tx_raw.body_bytes)
            auth_info = proto.AuthInfo.FromString(tx_raw.auth_info_bytes)
            messages = [self.registry.decode_any(any_msg) for any_msg in body.messages]
        except (DecodeError, CosmWasmClientError) as e:
            return CheckTxResult(tx_hash=tx_hash, code=2, codespace="sdk", log=f"tx parse error: {e}")

        first = messages[0].value
        sender = getattr(first, "sender", "") or getattr(first, "from_address", "")
        account = self.accounts.get(sender)
        if account is None:
            return CheckTxResult(tx_hash=tx_hash, code=9, codespace="sdk",
                                 log=f"account {sender} not found: unknown address")

        signer_info = auth_info.signer_infos[0]
        if signer_info.sequence != account["sequence"]:
            return CheckTxResult(
                tx_hash=tx_hash, code=32, codespace="sdk",
                log=f"account sequence mismatch, expected {account['sequence']}, "
                    f"got {signer_info.sequence}: incorrect account sequence",
            )

        pubkey = proto.PubKey.FromString(signer_info.public_key.value).key
        sign_doc = proto.SignDoc(
            body_bytes=tx_raw.body_bytes,
            auth_info_bytes=tx_raw.auth_info_bytes,
            chain_id=self._chain_id,
            account_number=account["account_number"],
        ).SerializeToString(deterministic=True)
        if not self._verify(pubkey, sign_doc, tx_raw.signatures[0] if tx_raw.signatures else b""):
            return CheckTxResult(
                tx_hash=tx_hash, code=4, codespace="sdk",
                log=f"signature verification failed; please verify account number "
                    f"({account['account_number']}) and chain-id ({self._chain_id}): unauthorized",
            )

        try:
            self._transfer(sender, None, auth_info.fee.amount)
        except _DeliverFailure as e:
            return CheckTxResult(tx_hash=tx_hash, code=e.code, codespace=e.codespace,
                                 log=f"{e.log}: insufficient fees")

        account["sequence"] += 1
        account["pubkey"] = pubkey
        self.height += 1
        self.txs[tx_hash] = self._deliver(tx_hash, messages, sender, auth_info.fee.gas_limit)
        self._misses[tx_hash] = self.inclusion_delay
        return CheckTxResult(tx_hash=tx_hash)

    async def abci_query(self, path: str, data: bytes) -> bytes:
        self.queries.append(path)
        handler = {
            f"{WASM_QUERY}/Codes": self._query_codes,
            f"{WASM_QUERY}/Code": self._query_code,
            f"{WASM_QUERY}/ContractInfo": self._query_contract_info,
            f"{WASM_QUERY}/ContractsByCode": self._query_contracts_by_code,
            f"{WASM_QUERY}/ContractHistory": self._query_contract_history,
            f"{WASM_QUERY}/AllContractState": self._query_all_contract_state,
            f"{WASM_QUERY}/RawContractState": self._query_raw_contract_state,
            f"{WASM_QUERY}/SmartContractState": self._query_smart_contract_state,
            "/cosmos.bank.v1beta1.Query/Balance": self._query_balance,
            "/cosmos.bank.v1beta1.Query/AllBalances": self._query_all_balances,
            "/cosmos.auth.v1beta1.Query/Account": self._query_account,
        }.get(path)
        if handler is None:
            raise QueryError.from_response(f"unknown query path {path}: unknown request", 6, "sdk")
        return handler(data).SerializeToString()

    # Execution

    @staticmethod
    def _verify(pubkey: bytes, sign_doc: bytes, signature: bytes) -> bool:
        if len(signature) != 64:
            return False
        try:
            key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), pubkey)
            der = encode_dss_signature(int.from_bytes(signature[:32], "big"), int.from_bytes(signature[32:], "big"))
            key.verify(der, sign_doc, ec.ECDSA(hashes.SHA256()))
            return True
        except (InvalidSignature, ValueError):
            return False

    def _transfer(self, sender: str, recipient: Optional[str], coins) -> None:
        balances = self.balances.setdefault(sender, {})
        for c in coins:
            amount = int(c.amount)
            have = balances.get(c.denom, 0)
            if have < amount:
                raise _DeliverFailure("sdk", 5, f"{have}{c.denom} is smaller than {amount}{c.denom}: insufficient funds")
            balances[c.denom] = have - amount
            if recipient is not None:
                target = self.balances.setdefault(recipient, {})
                target[c.denom] = target.get(c.denom, 0) + amount

    def _contract(self, address: str) -> dict:
        contract = self.contracts.get(address)
        if contract is None:
            raise _DeliverFailure("wasm", 22, f"contract {address}: not found")
        return contract

    def _deliver(self, tx_hash: str, messages, sender: str, gas_limit: int) -> TxResult:
        snapshot = copy.deepcopy((self.balances, self.codes, self.contracts))
        logs, events, msg_data = [], [], []
        try:
            for index, message in enumerate(messages):
                handler = getattr(self, "_exec_" + message.type_url.rsplit(".", 1)[-1])
                msg_type, data, msg_events = handler(message.value, sender)
                entry = {"events": [e.model_dump() for e in msg_events]}
                if index:
                    entry["msg_index"] = index
                logs.append(entry)
                events.extend(msg_events)
                msg_data.append(proto.MsgData(msg_type=msg_type, data=data))
        except _DeliverFailure as e:
            self.balances, self.codes, self.contracts = snapshot
            return TxResult(
                tx_hash=tx_hash, height=self.height, code=e.code, codespace=e.codespace,
                raw_log=f"failed to execute message; message index: {len(logs)}: {e.log}",
                gas_wanted=gas_limit, gas_used=gas_limit // 2,
            )
        return TxResult(
            tx_hash=tx_hash,
            height=self.height,
            raw_log=json.dumps(logs),
            data=proto.TxMsgData(data=msg_data).SerializeToString(),
            events=events,
            gas_wanted=gas_limit,
            gas_used=gas_limit // 2,
        )

    def _exec_MsgStoreCode(self, msg, sender):
        code = msg.wasm_byte_code
        if code[:2] == b"\x1f\x8b":
            code = gzip.decompress(code)
        code_id = len(self.codes) + 1
        self.codes.append({
            "code_id": code_id,
            "creator": sender,
            "data": code,
            "data_hash": hashlib.sha256(code).digest(),
            "source": msg.source,
            "builder": msg.builder,
        })
        data = proto.MsgStoreCodeResponse(code_id=code_id).SerializeToString()
        return "store-code", data, [_message_event("store-code", sender, ("code_id", str(code_id)))]

    def _exec_MsgInstantiateContract(self, msg, sender):
        if not 0 < msg.code_id <= len(self.codes):
            raise _DeliverFailure("wasm", 22, f"code id {msg.code_id}: not found")
        seed = hashlib.sha256(f"{msg.code_id}/{len(self.contracts)}".encode()).digest()[:20]
        address = bech32.bech32_encode(self.prefix, bech32.convertbits(seed, 8, 5))
        self._transfer(sender, address, msg.init_funds)
        self.contracts[address] = {
            "code_id": msg.code_id,
            "creator": sender,
            "admin": msg.admin,
            "label": msg.label,
            "init_msg": json.loads(msg.init_msg),
            "state": {b"config": msg.init_msg},
            "history": [(INIT, msg.code_id, msg.init_msg)],
        }
        data = proto.MsgInstantiateContractResponse(address=address).SerializeToString()
        return "instantiate", data, [_message_event(
            "instantiate", sender, ("code_id", str(msg.code_id)), ("contract_address", address),
        )]

    def _exec_MsgExecuteContract(self, msg, sender):
        contract = self._contract(msg.contract)
        self._transfer(sender, msg.contract, msg.sent_funds)
        payload = json.loads(msg.msg)
        if "release" in payload:
            beneficiary = contract["init_msg"].get("beneficiary")
            funds = [proto.Coin(denom=d, amount=str(a)) for d, a in self.balances.get(msg.contract, {}).items() if a]
            self._transfer(msg.contract, beneficiary, funds)
        contract["state"][b"last_exec"] = msg.msg
        action = next(iter(payload), "")
        return "execute", b"", [
            _message_event("execute", sender, ("contract_address", msg.contract)),
            Event(type="wasm", attributes=[
                Attribute(key="contract_address", value=msg.contract),
                Attribute(key="action", value=action),
            ]),
        ]

    def _exec_MsgMigrateContract(self, msg, sender):
        contract = self._contract(msg.contract)
        if contract["admin"] != sender:
            raise _DeliverFailure("wasm", 20, "migrate: unauthorized")
        if not 0 < msg.code_id <= len(self.codes):
            raise _DeliverFailure("wasm", 22, f"code id {msg.code_id}: not found")
        contract["code_id"] = msg.code_id
        contract["history"].append((MIGRATE, msg.code_id, msg.migrate_msg))
        return "migrate", b"", [_message_event("migrate", sender, ("contract_address", msg.contract))]

    def _exec_MsgUpdateAdmin(self, msg, sender):
        contract = self._contract(msg.contract)
        if contract["admin"] != sender:
            raise _DeliverFailure("wasm", 20, "update admin: unauthorized")
        contract["admin"] = msg.new_admin
        return "update-contract-admin", b"", [_message_event("update-contract-admin", sender)]

    def _exec_MsgClearAdmin(self, msg, sender):
        contract = self._contract(msg.contract)
        if contract["admin"] != sender:
            raise _DeliverFailure("wasm", 20, "clear admin: unauthorized")
        contract["admin"] = ""
        return "clear-contract-admin", b"", [_message_event("clear-contract-admin", sender)]

    def _exec_MsgSend(self, msg, sender):
        self._transfer(sender, msg.to_address, msg.amount)
        if msg.to_address not in self.accounts:
            self.accounts[msg.to_address] = {"account_number": len(self.accounts), "sequence": 0, "pubkey": None}
        return "send", b"", [_message_event("send", sender)]

    # Queries

    def _page(self, items: list, pagination):
        start = int.from_bytes(pagination.key, "big") if pagination.key else 0
        end = start + self.PAGE_SIZE
        next_key = end.to_bytes(8, "big") if end < len(items) else b""
        return items[start:end], proto.PageResponse(next_key=next_key, total=len(items))

    @staticmethod
    def _code_info(code: dict):
        return proto.CodeInfoResponse(
            code_id=code["code_id"], creator=code["creator"], data_hash=code["data_hash"],
            source=code["source"], builder=code["builder"],
        )

    @staticmethod
    def _contract_info(contract: dict):
        return proto.ContractInfo(
            code_id=contract["code_id"], creator=contract["creator"],
            admin=contract["admin"], label=contract["label"],
        )

    def _query_codes(self, data: bytes):
        request = proto.QueryCodesRequest.FromString(data)
        page, pagination = self._page(self.codes, request.pagination)
        return proto.QueryCodesResponse(code_infos=[self._code_info(c) for c in page], pagination=pagination)

    def _query_code(self, data: bytes):
        request = proto.QueryCodeRequest.FromString(data)
        if not 0 < request.code_id <= len(self.codes):
            raise _not_found(f"code id {request.code_id}")
        code = self.codes[request.code_id - 1]
        return proto.QueryCodeResponse(code_info=self._code_info(code), data=code["data"])

    def _query_contract_info(self, data: bytes):
        request = proto.QueryContractInfoRequest.FromString(data)
        contract = self.contracts.get(request.address)
        if contract is None:
            raise _not_found(f"address {request.address}")
        return proto.QueryContractInfoResponse(
            address=request.address, contract_info=self._contract_info(contract)
        )

    def _query_contracts_by_code(self, data: bytes):
        request = proto.QueryContractsByCodeRequest.FromString(data)
        matching = [(a, c) for a, c in self.contracts.items() if c["code_id"] == request.code_id]
        page, pagination = self._page(matching, request.pagination)
        return proto.QueryContractsByCodeResponse(
            contract_infos=[
                proto.ContractInfoWithAddress(address=a, contract_info=self._contract_info(c)) for a, c in page
            ],
            pagination=pagination,
        )

    def _query_contract_history(self, data: bytes):
        request = proto.QueryContractHistoryRequest.FromString(data)
        contract = self.contracts.get(request.address)
        if contract is None:
            if self.strict_history:
                raise _not_found(f"address {request.address}")
            return proto.QueryContractHistoryResponse()
        page, pagination = self._page(contract["history"], request.pagination)
        return proto.QueryContractHistoryResponse(
            entries=[proto.ContractCodeHistoryEntry(operation=op, code_id=cid, msg=msg) for op, cid, msg in page],
            pagination=pagination,
        )

    def _query_all_contract_state(self, data: bytes):
        request = proto.QueryAllContractStateRequest.FromString(data)
        contract = self.contracts.get(request.address)
        if contract is None:
            raise _not_found(f"address {request.address}")
        models = sorted(contract["state"].items())
        page, pagination = self._page(models, request.pagination)
        return proto.QueryAllContractStateResponse(
            models=[proto.Model(key=k, value=v) for k, v in page], pagination=pagination
        )

    def _query_raw_contract_state(self, data: bytes):
        request = proto.QueryRawContractStateRequest.FromString(data)
        contract = self.contracts.get(request.address)
        if contract is None:
            raise _not_found(f"address {request.address}")
        return proto.QueryRawContractStateResponse(data=contract["state"].get(request.query_data, b""))

    def _query_smart_contract_state(self, data: bytes):
        request = proto.QuerySmartContractStateRequest.FromString(data)
        contract = self.contracts.get(request.address)
        if contract is None:
            raise _not_found(f"address {request.address}")
        query = json.loads(request.query_data)
        variant = next(iter(query), "")
        if variant == "verifier":
            result = {"verifier": contract["init_msg"].get("verifier")}
        elif variant == "token_info":
            # Contract side storage miss, reported through ErrQueryFailed
            raise QueryError.from_response(
                "cw20_base::state::TokenInfo not found: query wasm contract failed",
                code=9,
                codespace="wasm",
            )
        else:
            raise QueryError.from_response(
                f"Error parsing into type hackatom::contract::QueryMsg: unknown variant `{variant}`, "
                "expected `verifier`: query wasm contract failed: invalid request",
                code=9,
                codespace="wasm",
            )
        return proto.QuerySmartContractStateResponse(data=json.dumps(result).encode())

    def _query_balance(self, data: bytes):
        request = proto.QueryBalanceRequest.FromString(data)
        amount = self.balances.get(request.address, {}).get(request.denom, 0)
        return proto.QueryBalanceResponse(balance=proto.Coin(denom=request.denom, amount=str(amount)))

    def _query_all_balances(self, data: bytes):
        request = proto.QueryAllBalancesRequest.FromString(data)
        coins = [
            proto.Coin(denom=denom, amount=str(amount))
            for denom, amount in sorted(self.balances.get(request.address, {}).items()) if amount
        ]
        page, pagination = self._page(coins, request.pagination)
        return proto.QueryAllBalancesResponse(balances=page, pagination=pagination)

    def _query_account(self, data: bytes):
        request = proto.QueryAccountRequest.FromString(data)
        account = self.accounts.get(request.address)
        if account is None:
            raise QueryError.from_response(f"account {request.address} not found: key not found", 22, "sdk")
        base = proto.BaseAccount(
            address=request.address,
            account_number=account["account_number"],
            sequence=account["sequence"],
        )
        if account["pubkey"]:
            base.pub_key.CopyFrom(proto.Any(
                type_url="/cosmos.crypto.secp256k1.PubKey",
                value=proto.PubKey(key=account["pubkey"]).SerializeToString(),
            ))
        return proto.QueryAccountResponse(account=proto.Any(
            type_url="/cosmos.auth.v1beta1.BaseAccount", value=base.SerializeToString()
        ))


@pytest.fixture(autouse=True)
def _reset_module_state():
    """Rate limit and network caches are module level; isolate tests from each other."""
    reset_rate_limits()
    NetworkConfig._networks_cache = None
    yield
    reset_rate_limits()
    NetworkConfig._networks_cache = None


@pytest.fixture
def fake_chain():
    return FakeChain()


@pytest.fixture
def alice():
    if not RIPEMD160_AVAILABLE:
        pytest.skip("ripemd160 is not available in this Python build")
    from cosmwasm_sdk.signer import LocalSigner
    return LocalSigner(ALICE_KEY)


@pytest.fixture
def bob():
    if not RIPEMD160_AVAILABLE:
        pytest.skip("ripemd160 is not available in this Python build")
    from cosmwasm_sdk.signer import LocalSigner
    return LocalSigner(BOB_KEY)


@pytest.fixture
def funded_chain(fake_chain, alice):
    fake_chain.fund(alice.address, 1_000_000_000)
    return fake_chain


@pytest.fixture
def signing_client(funded_chain, alice):
    from cosmwasm_sdk.client import SigningCosmWasmClient
    return SigningCosmWasmClient(funded_chain, alice, gas_price="0.025ucosm", broadcast_timeout=5)
