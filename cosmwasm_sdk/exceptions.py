"""
Exceptions for the CosmWasm SDK.
"""
from typing import Optional


class CosmWasmClientError(Exception):
    """Base exception for all SDK errors."""
    pass


class UnregisteredTypeError(CosmWasmClientError):
    """Raised when a type URL has no schema in the message registry."""

    def __init__(self, type_url: str):
        self.type_url = type_url
        super().__init__(f"Unregistered type url: {type_url}")


class RegistryConflictError(CosmWasmClientError):
    """Raised when a type URL is registered twice with different schemas."""
    pass


class EncodingError(CosmWasmClientError, ValueError):
    """Raised when a value cannot be encoded or decoded at the protobuf boundary."""
    pass


class NoAccountsAvailableError(CosmWasmClientError):
    """Raised when the signer exposes no usable account."""
    pass


class SigningRejectedError(CosmWasmClientError):
    """Raised when the external signer declines or fails to sign."""
    pass


class InclusionTimeoutError(CosmWasmClientError):
    """
    Raised when a broadcast transaction was not seen in a block in time.

    The transaction may still be included later; query it again by hash.
    """

    def __init__(self, tx_hash: str, timeout: float):
        self.tx_hash = tx_hash
        self.timeout = timeout
        super().__init__(
            f"Transaction {tx_hash} was submitted but not included in a block "
            f"after {timeout}s. It may still be included later."
        )


class BroadcastTxError(CosmWasmClientError):
    """Raised by success assertions for a transaction with a nonzero result code."""

    def __init__(
        self,
        code: int,
        codespace: str,
        raw_log: str,
        tx_hash: Optional[str] = None,
        height: int = 0
    ):
        self.code = code
        self.codespace = codespace
        self.raw_log = raw_log
        self.tx_hash = tx_hash
        self.height = height
        super().__init__(
            f"Error when broadcasting tx {tx_hash} at height {height}. "
            f"Code: {code}; Codespace: {codespace}; Raw log: {raw_log}"
        )


class MalformedLogError(CosmWasmClientError):
    """Raised when a raw execution log cannot be parsed."""
    pass


class AttributeNotFoundError(CosmWasmClientError):
    """Raised when no event attribute matches a lookup."""

    def __init__(self, event_type: str, key: str):
        self.event_type = event_type
        self.key = key
        super().__init__(f"Could not find attribute '{key}' in event of type '{event_type}'")


class DuplicateExtensionError(CosmWasmClientError):
    """Raised when two query extensions are registered under the same name."""
    pass


class ResponseDecodeError(CosmWasmClientError):
    """Raised when a query or transaction response cannot be decoded."""
    pass


class QueryError(CosmWasmClientError):
    """Raised when the chain rejects a query."""

    def __init__(self, message: str, code: int = 0, codespace: str = ""):
        self.code = code
        self.codespace = codespace
        super().__init__(message)

    @classmethod
    def from_response(cls, log: str, code: int = 0, codespace: str = "") -> "QueryError":
        """
        Build the most specific error for a failed query response.

        Chains report absent entities with "not found" in the error text.
        """
        if "not found" in (log or "").lower():
            return NotFoundError(log, code, codespace)
        return cls(log, code, codespace)


class NotFoundError(QueryError):
    """Raised when the queried entity does not exist on chain."""
    pass


class ContractQueryError(QueryError):
    """Raised when a contract rejects a smart query."""
    pass


class TransportError(CosmWasmClientError):
    """Raised on network or connection failures. Retrying is left to the caller."""
    pass


class TransportTimeoutError(TransportError):
    """Raised when a transport request times out."""
    pass
