"""
Message registry: maps type URLs to protobuf message classes.

The type URL is the only dispatch key. Nothing is inferred from the shape of
a payload, and unregistered types fail closed.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Type

from google.protobuf.message import DecodeError, EncodeError, Message

from . import proto
from .exceptions import EncodingError, RegistryConflictError, UnregisteredTypeError

logger = logging.getLogger(__name__)

MSG_STORE_CODE = "/cosmwasm.wasm.v1beta1.MsgStoreCode"
MSG_INSTANTIATE_CONTRACT = "/cosmwasm.wasm.v1beta1.MsgInstantiateContract"
MSG_EXECUTE_CONTRACT = "/cosmwasm.wasm.v1beta1.MsgExecuteContract"
MSG_MIGRATE_CONTRACT = "/cosmwasm.wasm.v1beta1.MsgMigrateContract"
MSG_UPDATE_ADMIN = "/cosmwasm.wasm.v1beta1.MsgUpdateAdmin"
MSG_CLEAR_ADMIN = "/cosmwasm.wasm.v1beta1.MsgClearAdmin"
MSG_SEND = "/cosmos.bank.v1beta1.MsgSend"

DEFAULT_TYPES: Tuple[Tuple[str, Type[Message]], ...] = (
    (MSG_STORE_CODE, proto.MsgStoreCode),
    (MSG_INSTANTIATE_CONTRACT, proto.MsgInstantiateContract),
    (MSG_EXECUTE_CONTRACT, proto.MsgExecuteContract),
    (MSG_MIGRATE_CONTRACT, proto.MsgMigrateContract),
    (MSG_UPDATE_ADMIN, proto.MsgUpdateAdmin),
    (MSG_CLEAR_ADMIN, proto.MsgClearAdmin),
    (MSG_SEND, proto.MsgSend),
)


@dataclass(frozen=True)
class TypedMessage:
    """A message value tagged with the type URL used to encode it."""
    type_url: str
    value: Message


class Registry:
    """
    Registry of message schemas keyed by type URL.

    Registration is guarded by a lock so a registry can be shared across
    concurrent signing clients; lookups only read the table.
    """

    def __init__(self, types: Optional[Iterable[Tuple[str, Type[Message]]]] = None):
        self._types: Dict[str, Type[Message]] = {}
        self._lock = threading.RLock()
        for type_url, message_cls in (DEFAULT_TYPES if types is None else types):
            self.register(type_url, message_cls)

    def register(self, type_url: str, message_cls: Type[Message]) -> None:
        """
        Register a schema for a type URL.

        Re-registering the same class is a no-op.

        Raises:
            RegistryConflictError: If the URL is bound to a different class
            ValueError: If type_url is malformed
        """
        if not type_url.startswith("/"):
            raise ValueError(f"Type url must start with '/': {type_url}")
        with self._lock:
            existing = self._types.get(type_url)
            if existing is not None and existing is not message_cls:
                raise RegistryConflictError(
                    f"Type url {type_url} is already registered with "
                    f"{existing.DESCRIPTOR.full_name}"
                )
            self._types[type_url] = message_cls
        logger.debug(f"Registered {type_url} -> {message_cls.DESCRIPTOR.full_name}")

    def lookup_type(self, type_url: str) -> Optional[Type[Message]]:
        return self._types.get(type_url)

    def _require(self, type_url: str) -> Type[Message]:
        message_cls = self._types.get(type_url)
        if message_cls is None:
            raise UnregisteredTypeError(type_url)
        return message_cls

    def encode(self, type_url: str, message: Message) -> bytes:
        """
        Serialize a message registered under type_url.

        Raises:
            UnregisteredTypeError: If type_url is not registered
            EncodingError: If message is not of the registered type
        """
        message_cls = self._require(type_url)
        if not isinstance(message, message_cls):
            raise EncodingError(
                f"Expected {message_cls.DESCRIPTOR.full_name} for {type_url}, "
                f"got {type(message).__name__}"
            )
        try:
            return message.SerializeToString(deterministic=True)
        except EncodeError as e:
            raise EncodingError(f"Failed to encode {type_url}: {e}") from e

    def decode(self, type_url: str, data: bytes) -> Message:
        """
        Parse bytes produced by encode() back into a message.

        Raises:
            UnregisteredTypeError: If type_url is not registered
            EncodingError: If data is not a valid encoding
        """
        message_cls = self._require(type_url)
        try:
            return message_cls.FromString(data)
        except DecodeError as e:
            raise EncodingError(f"Failed to decode {type_url}: {e}") from e

    def encode_as_any(self, message: TypedMessage) -> Message:
        return proto.Any(type_url=message.type_url, value=self.encode(message.type_url, message.value))

    def decode_any(self, any_message: Message) -> TypedMessage:
        return TypedMessage(any_message.type_url, self.decode(any_message.type_url, any_message.value))
