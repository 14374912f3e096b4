"""
Query extensions attachable to a QueryClient.
"""
from .auth import setup_auth_extension
from .bank import setup_bank_extension
from .extension import ExtensionNamespace, QueryClient, QueryExtension
from .wasm import setup_wasm_extension

__all__ = [
    "ExtensionNamespace",
    "QueryClient",
    "QueryExtension",
    "setup_auth_extension",
    "setup_bank_extension",
    "setup_wasm_extension",
]
