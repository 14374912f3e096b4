"""
Transaction builder: assembles and signs SIGN_MODE_DIRECT transactions.
"""
import hashlib
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from google.protobuf.message import Message

from . import proto
from .exceptions import CosmWasmClientError, NoAccountsAvailableError, SigningRejectedError
from .models import Fee, check_uint64
from .registry import Registry, TypedMessage
from .signer import AccountData, OfflineDirectSigner

logger = logging.getLogger(__name__)

SECP256K1_PUBKEY_TYPE_URL = "/cosmos.crypto.secp256k1.PubKey"


@dataclass(frozen=True)
class SignedTransaction:
    """
    A signed transaction envelope. Immutable once built.

    messages holds the encoded messages as google.protobuf.Any values.
    """
    messages: Tuple[Message, ...]
    fee: Fee
    memo: str
    signatures: Tuple[bytes, ...]
    signer_info: Message
    body_bytes: bytes
    auth_info_bytes: bytes
    chain_id: str
    account_number: int
    sequence: int

    @property
    def tx_bytes(self) -> bytes:
        """Serialized TxRaw, ready for broadcasting"""
        tx_raw = proto.TxRaw(
            body_bytes=self.body_bytes,
            auth_info_bytes=self.auth_info_bytes,
            signatures=list(self.signatures),
        )
        return tx_raw.SerializeToString(deterministic=True)

    @property
    def tx_hash(self) -> str:
        return hashlib.sha256(self.tx_bytes).hexdigest().upper()


def encode_pubkey(pubkey: bytes) -> Message:
    """Wrap a compressed secp256k1 public key in an Any."""
    if len(pubkey) != 33:
        raise ValueError(f"Expected a 33 byte compressed secp256k1 public key, got {len(pubkey)} bytes")
    return proto.Any(
        type_url=SECP256K1_PUBKEY_TYPE_URL,
        value=proto.PubKey(key=pubkey).SerializeToString(deterministic=True),
    )


def make_body_bytes(messages: Sequence[Message], memo: str, timeout_height: int = 0) -> bytes:
    body = proto.TxBody(
        messages=list(messages),
        memo=memo,
        timeout_height=check_uint64(timeout_height, "timeout_height"),
    )
    return body.SerializeToString(deterministic=True)


def make_signer_info(pubkey_any: Message, sequence: int) -> Message:
    return proto.SignerInfo(
        public_key=pubkey_any,
        mode_info=proto.ModeInfo(single=proto.ModeInfo.Single(mode=proto.SIGN_MODE_DIRECT)),
        sequence=check_uint64(sequence, "sequence"),
    )


def make_auth_info_bytes(signer_info: Message, fee: Fee) -> bytes:
    auth_info = proto.AuthInfo(
        signer_infos=[signer_info],
        fee=proto.Fee(
            amount=[proto.Coin(denom=c.denom, amount=c.amount) for c in fee.amount],
            gas_limit=check_uint64(fee.gas_limit, "gas_limit"),
        ),
    )
    return auth_info.SerializeToString(deterministic=True)


def make_sign_doc(body_bytes: bytes, auth_info_bytes: bytes, chain_id: str, account_number: int) -> Message:
    return proto.SignDoc(
        body_bytes=body_bytes,
        auth_info_bytes=auth_info_bytes,
        chain_id=chain_id,
        account_number=check_uint64(account_number, "account_number"),
    )


def make_sign_bytes(sign_doc: Message) -> bytes:
    """Canonical bytes of a SignDoc; fields are written in field number order."""
    return sign_doc.SerializeToString(deterministic=True)


class TransactionBuilder:
    """
    Assembles signable documents and collects one signature from the signer.
    """

    def __init__(self, registry: Registry, signer: OfflineDirectSigner, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.signer = signer
        self.logger = logger or logging.getLogger(__name__)

    async def _find_account(self, signer_address: str) -> AccountData:
        accounts = await self.signer.get_accounts()
        if not accounts:
            raise NoAccountsAvailableError("Signer exposes no accounts")
        for account in accounts:
            if account.address == signer_address:
                return account
        raise NoAccountsAvailableError(f"Signer has no account for address {signer_address}")

    async def sign(
        self,
        signer_address: str,
        messages: Sequence[TypedMessage],
        fee: Fee,
        memo: str,
        chain_id: str,
        account_number: int,
        sequence: int,
        timeout_height: int = 0
    ) -> SignedTransaction:
        """
        Encode, assemble and sign a transaction.

        Args:
            signer_address: Address of the signing account
            messages: Messages in execution order
            fee: Fee and gas limit
            memo: Free text annotation
            chain_id: Target chain identifier
            account_number: On-chain account number of the signer
            sequence: Current sequence (nonce) of the signer

        Returns:
            The signed, immutable transaction

        Raises:
            NoAccountsAvailableError: If the signer has no (matching) account
            UnregisteredTypeError: If a message type is not registered
            SigningRejectedError: If the signer declines or fails to sign
        """
        account = await self._find_account(signer_address)

        encoded = tuple(self.registry.encode_as_any(message) for message in messages)
        body_bytes = make_body_bytes(encoded, memo, timeout_height)
        signer_info = make_signer_info(encode_pubkey(account.pubkey), sequence)
        auth_info_bytes = make_auth_info_bytes(signer_info, fee)
        sign_doc = make_sign_doc(body_bytes, auth_info_bytes, chain_id, account_number)

        try:
            signature = await self.signer.sign_direct(signer_address, make_sign_bytes(sign_doc))
        except CosmWasmClientError:
            raise
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise SigningRejectedError(f"Failed to sign transaction: {str(e)}") from e

        if not signature:
            raise SigningRejectedError("Signer returned an empty signature")

        self.logger.debug(
            f"Signed tx with {len(encoded)} message(s) for {signer_address} "
            f"(account {account_number}, sequence {sequence})"
        )
        return SignedTransaction(
            messages=encoded,
            fee=fee,
            memo=memo,
            signatures=(bytes(signature),),
            signer_info=signer_info,
            body_bytes=body_bytes,
            auth_info_bytes=auth_info_bytes,
            chain_id=chain_id,
            account_number=account_number,
            sequence=sequence,
        )
