"""
Signing collaborators.

Any object implementing OfflineDirectSigner can sign transactions, e.g. a
hardware wallet bridge. LocalSigner keeps a secp256k1 key in process.
"""
import hashlib
import logging
from dataclasses import dataclass
from typing import Protocol, Sequence, Union

import bech32
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

logger = logging.getLogger(__name__)

_CURVE = ec.SECP256K1()
_CURVE_ORDER = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)


@dataclass(frozen=True)
class AccountData:
    """An account exposed by a signer"""
    address: str
    pubkey: bytes
    algo: str = "secp256k1"


class OfflineDirectSigner(Protocol):
    """Protocol for signers that sign protobuf SignDoc bytes (SIGN_MODE_DIRECT)"""

    async def get_accounts(self) -> Sequence[AccountData]:
        """Return the accounts this signer controls"""
        ...

    async def sign_direct(self, signer_address: str, sign_doc: bytes) -> bytes:
        """Sign the serialized SignDoc and return the raw signature"""
        ...


def pubkey_to_address(pubkey: bytes, prefix: str) -> str:
    """Bech32 address of a compressed secp256k1 public key: ripemd160(sha256(pubkey))."""
    try:
        ripemd = hashlib.new("ripemd160")
    except ValueError as e:
        raise RuntimeError(
            "ripemd160 digest is unavailable in this Python build; cannot derive address."
        ) from e
    ripemd.update(hashlib.sha256(pubkey).digest())
    digest = ripemd.digest()
    return bech32.bech32_encode(prefix, bech32.convertbits(digest, 8, 5))


class LocalSigner:
    """
    In-process secp256k1 signer.

    Signatures are 64-byte r || s over SHA-256 of the sign bytes, with s
    normalized to the lower half of the curve order as Cosmos chains require.
    """

    def __init__(self, private_key: Union[bytes, str], prefix: str = "wasm"):
        """
        Args:
            private_key: 32 raw bytes or a hex string (with or without 0x prefix)
            prefix: Bech32 human readable part of the chain's addresses
        """
        if isinstance(private_key, str):
            key_hex = private_key[2:] if private_key.startswith("0x") else private_key
            private_key = bytes.fromhex(key_hex)
        if len(private_key) != 32:
            raise ValueError(f"Private key must be 32 bytes, got {len(private_key)}")
        value = int.from_bytes(private_key, "big")
        if not 0 < value < _CURVE_ORDER:
            raise ValueError("Private key is outside the secp256k1 curve order")

        self._key = ec.derive_private_key(value, _CURVE)
        self.pubkey = self._key.public_key().public_bytes(
            serialization.Encoding.X962,
            serialization.PublicFormat.CompressedPoint,
        )
        self.prefix = prefix
        self.address = pubkey_to_address(self.pubkey, prefix)

    async def get_accounts(self) -> Sequence[AccountData]:
        return [AccountData(address=self.address, pubkey=self.pubkey)]

    async def sign_direct(self, signer_address: str, sign_doc: bytes) -> bytes:
        if signer_address != self.address:
            raise ValueError(f"Address {signer_address} not found in signer")
        der = self._key.sign(sign_doc, ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der)
        if s > _CURVE_ORDER // 2:
            s = _CURVE_ORDER - s
        logger.debug(f"Signed {len(sign_doc)} bytes for {signer_address}")
        return r.to_bytes(32, "big") + s.to_bytes(32, "big")
