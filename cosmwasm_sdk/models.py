"""
Data models for the CosmWasm SDK.
"""
import math
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import EncodingError
from .logs import Event, Log, ParsedLog, parse_raw_log

UINT64_MAX = 2 ** 64 - 1

_AMOUNT_PATTERN = re.compile(r"^\d+$")
_GAS_PRICE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)([a-zA-Z][a-zA-Z0-9/:._-]{2,127})$")


def check_uint64(value: int, name: str) -> int:
    """
    Validate a value destined for a uint64 protobuf field.

    Raises:
        EncodingError: If value is not an integer in [0, 2**64 - 1]
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT64_MAX:
        raise EncodingError(f"{name} out of uint64 range: {value}")
    return value


class Coin(BaseModel):
    """An amount of a single denomination; amount is a decimal integer string"""
    model_config = ConfigDict(frozen=True)

    denom: str
    amount: str

    @field_validator("amount", mode="before")
    @classmethod
    def _validate_amount(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str) or not _AMOUNT_PATTERN.match(value):
            raise ValueError(f"Coin amount must be a non-negative integer string, got {value!r}")
        return value


def coin(amount: Union[int, str], denom: str) -> Coin:
    return Coin(denom=denom, amount=amount)


def coins(amount: Union[int, str], denom: str) -> List[Coin]:
    return [coin(amount, denom)]


class Fee(BaseModel):
    """Fee amount plus the gas limit the sender agrees to pay for"""
    model_config = ConfigDict(frozen=True)

    amount: List[Coin]
    gas_limit: int = Field(..., ge=0, le=UINT64_MAX)


class GasPrice(BaseModel):
    """Price per unit of gas, e.g. 0.025ucosm"""
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    denom: str

    @classmethod
    def from_string(cls, gas_price: str) -> "GasPrice":
        match = _GAS_PRICE_PATTERN.match(gas_price.strip())
        if not match:
            raise ValueError(f"Invalid gas price string: {gas_price!r}")
        try:
            amount = Decimal(match.group(1))
        except InvalidOperation as e:
            raise ValueError(f"Invalid gas price amount: {match.group(1)}") from e
        return cls(amount=amount, denom=match.group(2))


def calculate_fee(gas_limit: int, gas_price: Union[GasPrice, str]) -> Fee:
    """Fee for gas_limit units at gas_price, rounded up to a whole amount."""
    if isinstance(gas_price, str):
        gas_price = GasPrice.from_string(gas_price)
    amount = math.ceil(gas_price.amount * gas_limit)
    return Fee(amount=coins(amount, gas_price.denom), gas_limit=gas_limit)


class MsgData(BaseModel):
    """Execution result data of one message"""
    model_config = ConfigDict(frozen=True)

    msg_type: str
    data: bytes = b""


class BroadcastResult(BaseModel):
    """
    Outcome of a broadcast transaction.

    A nonzero code is a protocol-level failure reported as data; use
    broadcast.assert_is_broadcast_success for fail-fast handling.
    """
    model_config = ConfigDict(frozen=True)

    transaction_hash: str
    height: int = 0
    code: int = 0
    codespace: str = ""
    raw_log: str = ""
    data: List[MsgData] = []
    events: List[Event] = []
    gas_wanted: int = 0
    gas_used: int = 0

    @property
    def is_success(self) -> bool:
        return self.code == 0

    def parsed_logs(self) -> ParsedLog:
        """Parse raw_log; only meaningful for successful transactions."""
        return parse_raw_log(self.raw_log)


class CodeInfo(BaseModel):
    """Metadata of uploaded contract code"""
    model_config = ConfigDict(frozen=True)

    code_id: int
    creator: str
    data_hash: bytes
    source: str = ""
    builder: str = ""


class CodeDetails(BaseModel):
    code_info: CodeInfo
    data: bytes


class ContractInfo(BaseModel):
    """Metadata of an instantiated contract"""
    model_config = ConfigDict(frozen=True)

    code_id: int
    creator: str
    admin: Optional[str] = None
    label: str


class ContractInfoWithAddress(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    contract_info: ContractInfo


class ContractCodeHistoryOperation(str, Enum):
    """Operation that changed a contract's code"""
    INIT = "INIT"
    MIGRATE = "MIGRATE"
    GENESIS = "GENESIS"


class ContractCodeHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation: ContractCodeHistoryOperation
    code_id: int
    msg: bytes


class Model(BaseModel):
    """One key/value pair of contract storage"""
    model_config = ConfigDict(frozen=True)

    key: bytes
    value: bytes


class RawContractState(BaseModel):
    """Raw storage lookup result; data is None when the key is absent"""
    model_config = ConfigDict(frozen=True)

    data: Optional[bytes] = None


class AccountInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    pubkey: Optional[bytes] = None
    account_number: int
    sequence: int


class UploadResult(BaseModel):
    code_id: int
    original_size: int
    original_checksum: str
    compressed_size: int
    compressed_checksum: str
    transaction_hash: str
    logs: List[Log]


class InstantiateResult(BaseModel):
    contract_address: str
    transaction_hash: str
    logs: List[Log]


class ExecuteResult(BaseModel):
    transaction_hash: str
    logs: List[Log]


class MigrateResult(BaseModel):
    transaction_hash: str
    logs: List[Log]


class ChangeAdminResult(BaseModel):
    transaction_hash: str
    logs: List[Log]
