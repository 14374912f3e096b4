"""
Query extension framework.

A QueryClient issues path-addressed ABCI queries through its transport.
Extensions attach named, read-only groups of query methods to it:

    client = QueryClient.with_extensions(transport, setup_wasm_extension)
    codes = await client.wasm.list_code_info()

Each extension method receives the client as its first argument and must not
change client state.
"""
import functools
import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Type, TypeVar

from google.protobuf.message import DecodeError, Message

from .. import proto
from ..exceptions import DuplicateExtensionError, ResponseDecodeError
from ..transport.base import Transport

logger = logging.getLogger(__name__)

QueryMethod = Callable[..., Awaitable[Any]]
M = TypeVar("M", bound=Message)

# Guard against a node that keeps returning the same page
MAX_PAGES = 10_000


class QueryExtension:
    """
    A named table of query methods.

    Names and callables are checked when the extension is created, so a bad
    table fails at registration time rather than on first use.
    """

    def __init__(self, name: str, methods: Mapping[str, QueryMethod]):
        if not name.isidentifier() or name.startswith("_"):
            raise ValueError(f"Extension name must be a public identifier: {name!r}")
        if not methods:
            raise ValueError(f"Extension {name} has no methods")
        for method_name, method in methods.items():
            if not method_name.isidentifier() or method_name.startswith("_"):
                raise ValueError(f"Method name must be a public identifier: {name}.{method_name}")
            if not callable(method):
                raise TypeError(f"Method {name}.{method_name} is not callable")
        self.name = name
        self.methods = MappingProxyType(dict(methods))

    def __repr__(self) -> str:
        return f"QueryExtension({self.name!r}, methods={sorted(self.methods)})"


class ExtensionNamespace:
    """Read-only view of an extension with its methods bound to a client."""

    __slots__ = ("_name", "_methods")

    def __init__(self, client: "QueryClient", extension: QueryExtension):
        object.__setattr__(self, "_name", extension.name)
        object.__setattr__(self, "_methods", MappingProxyType({
            method_name: functools.partial(method, client)
            for method_name, method in extension.methods.items()
        }))

    def __getattr__(self, item: str) -> Callable[..., Awaitable[Any]]:
        try:
            return self._methods[item]
        except KeyError:
            raise AttributeError(f"Extension '{self._name}' has no method '{item}'") from None

    def __setattr__(self, key, value):
        raise AttributeError(f"Extension '{self._name}' is read-only")

    def __delattr__(self, item):
        raise AttributeError(f"Extension '{self._name}' is read-only")

    def __dir__(self) -> List[str]:
        return sorted(self._methods)

    def __iter__(self) -> Iterator[str]:
        return iter(self._methods)


class QueryClient:
    """
    Base client for path-addressed queries.

    Args:
        transport: Transport used for all queries
    """

    def __init__(self, transport: Transport, logger: Optional[logging.Logger] = None):
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self._extensions: Dict[str, ExtensionNamespace] = {}

    @classmethod
    def with_extensions(cls, transport: Transport, *setups: Callable[[], QueryExtension]) -> "QueryClient":
        """Create a client and register the extension built by each setup function."""
        client = cls(transport)
        for setup in setups:
            client.register_extension(setup())
        return client

    def register_extension(self, extension: QueryExtension) -> None:
        """
        Raises:
            DuplicateExtensionError: If the name is taken by another extension
                or by a client attribute
        """
        if extension.name in self._extensions:
            raise DuplicateExtensionError(f"Extension '{extension.name}' is already registered")
        if hasattr(type(self), extension.name) or extension.name in self.__dict__:
            raise DuplicateExtensionError(
                f"Extension name '{extension.name}' clashes with a client attribute"
            )
        self._extensions[extension.name] = ExtensionNamespace(self, extension)
        self.logger.debug(f"Registered query extension {extension!r}")

    def extension(self, name: str) -> ExtensionNamespace:
        """
        Raises:
            KeyError: If no extension with that name is registered
        """
        try:
            return self._extensions[name]
        except KeyError:
            raise KeyError(f"No query extension named '{name}'") from None

    @property
    def extension_names(self) -> List[str]:
        return list(self._extensions)

    def __getattr__(self, item: str) -> ExtensionNamespace:
        # Only reached when normal lookup fails
        extensions = self.__dict__.get("_extensions", {})
        if item in extensions:
            return extensions[item]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{item}'")

    async def query_unverified(self, path: str, request: bytes) -> bytes:
        """Issue a raw ABCI query without proof verification."""
        self.logger.debug(f"Query {path} ({len(request)} bytes)")
        return await self.transport.abci_query(path, request)

    async def query_proto(self, path: str, request: Message, response_cls: Type[M]) -> M:
        """
        Issue a query with a protobuf request and decode the response.

        Raises:
            ResponseDecodeError: If the response bytes do not match response_cls
        """
        data = await self.query_unverified(path, request.SerializeToString(deterministic=True))
        try:
            return response_cls.FromString(data)
        except DecodeError as e:
            raise ResponseDecodeError(
                f"Failed to decode {response_cls.DESCRIPTOR.full_name} from {path}: {e}"
            ) from e

    async def query_all_pages(
        self,
        path: str,
        make_request: Callable[[Message], Message],
        response_cls: Type[M],
        items: str
    ) -> List[Any]:
        """
        Follow pagination.next_key until exhausted and concatenate the
        repeated field named items from every page, in chain order.
        """
        results: List[Any] = []
        next_key = b""
        seen = set()
        for _ in range(MAX_PAGES):
            response = await self.query_proto(path, make_request(proto.PageRequest(key=next_key)), response_cls)
            results.extend(getattr(response, items))
            next_key = response.pagination.next_key if response.HasField("pagination") else b""
            if not next_key:
                return results
            if next_key in seen:
                raise ResponseDecodeError(f"Pagination of {path} repeats key {next_key.hex()}")
            seen.add(next_key)
        raise ResponseDecodeError(f"Pagination of {path} exceeded {MAX_PAGES} pages")
