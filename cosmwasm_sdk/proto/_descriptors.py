"""
Helpers for declaring protobuf schemas without generated code.

Each ProtoFile collects message and enum declarations for one .proto file,
registers them in a private descriptor pool and hands out message classes
from google.protobuf's message factory.
"""
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Type

from google.protobuf import any_pb2, descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import Message

_F = descriptor_pb2.FieldDescriptorProto

STRING = _F.TYPE_STRING
BYTES = _F.TYPE_BYTES
BOOL = _F.TYPE_BOOL
UINT32 = _F.TYPE_UINT32
UINT64 = _F.TYPE_UINT64
INT64 = _F.TYPE_INT64
ENUM = _F.TYPE_ENUM
MESSAGE = _F.TYPE_MESSAGE

# Shared by every schema in the SDK; kept apart from the default pool so that
# other libraries registering Cosmos types cannot collide with ours.
POOL = descriptor_pool.DescriptorPool()

_any_file = descriptor_pb2.FileDescriptorProto()
any_pb2.DESCRIPTOR.CopyToProto(_any_file)
POOL.AddSerializedFile(_any_file.SerializeToString())
ANY_PROTO = _any_file.name


class Field:
    """Declaration of a single message field."""

    def __init__(
        self,
        name: str,
        number: int,
        field_type: int,
        type_name: Optional[str] = None,
        repeated: bool = False
    ):
        if field_type in (MESSAGE, ENUM) and not type_name:
            raise ValueError(f"Field {name} needs a type_name")
        self.name = name
        self.number = number
        self.field_type = field_type
        self.type_name = type_name
        self.repeated = repeated

    def to_proto(self) -> descriptor_pb2.FieldDescriptorProto:
        field = _F(
            name=self.name,
            number=self.number,
            type=self.field_type,
            label=_F.LABEL_REPEATED if self.repeated else _F.LABEL_OPTIONAL,
        )
        if self.type_name:
            field.type_name = self.type_name
        return field


def repeated(name: str, number: int, field_type: int, type_name: Optional[str] = None) -> Field:
    return Field(name, number, field_type, type_name, repeated=True)


class ProtoFile:
    """
    A proto3 file declared in Python.

    Usage:
        tx = ProtoFile("cosmos/tx/v1beta1/tx.proto", "cosmos.tx.v1beta1", deps=[...])
        tx.message("TxRaw", Field("body_bytes", 1, BYTES), ...)
        tx.build()
        TxRaw = tx["TxRaw"]
    """

    def __init__(self, name: str, package: str, deps: Iterable[str] = ()):
        self.name = name
        self.package = package
        self._proto = descriptor_pb2.FileDescriptorProto(
            name=name,
            package=package,
            syntax="proto3",
            dependency=list(deps),
        )
        self._built = False

    def message(
        self,
        name: str,
        *fields: Field,
        nested: Sequence[Tuple[str, Sequence[Field]]] = ()
    ) -> "ProtoFile":
        msg = self._proto.message_type.add(name=name)
        msg.field.extend(f.to_proto() for f in fields)
        for nested_name, nested_fields in nested:
            inner = msg.nested_type.add(name=nested_name)
            inner.field.extend(f.to_proto() for f in nested_fields)
        return self

    def enum(self, name: str, values: Sequence[Tuple[str, int]]) -> "ProtoFile":
        enum = self._proto.enum_type.add(name=name)
        for value_name, number in values:
            enum.value.add(name=value_name, number=number)
        return self

    def build(self) -> "ProtoFile":
        if not self._built:
            POOL.AddSerializedFile(self._proto.SerializeToString())
            self._built = True
        return self

    def type_name(self, name: str) -> str:
        """Fully qualified reference to a type declared in this file."""
        return f".{self.package}.{name}"

    def __getitem__(self, name: str) -> Type[Message]:
        if not self._built:
            raise RuntimeError(f"{self.name} has not been built")
        descriptor = POOL.FindMessageTypeByName(f"{self.package}.{name}")
        return message_factory.GetMessageClass(descriptor)

    def enum_values(self, name: str) -> Dict[str, int]:
        descriptor = POOL.FindEnumTypeByName(f"{self.package}.{name}")
        return {value.name: value.number for value in descriptor.values}


def message_class(full_name: str) -> Type[Message]:
    """Look up a message class declared anywhere in the SDK pool."""
    return message_factory.GetMessageClass(POOL.FindMessageTypeByName(full_name))


Any = message_class("google.protobuf.Any")

__all__: List[str] = [
    "Any", "Field", "ProtoFile", "POOL", "ANY_PROTO", "message_class", "repeated",
    "STRING", "BYTES", "BOOL", "UINT32", "UINT64", "INT64", "ENUM", "MESSAGE",
]
