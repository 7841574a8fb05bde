"""Mini README: Storage subsystem package initialiser.

Re-exports the gateway abstractions to simplify imports for the working set
and web handlers. The package is divided into ``base`` for the abstract
interface, ``registry`` for plugin management, and ``backends`` for the
bundled in-memory and JSON-file implementations.
"""

from .base import TransactionGateway
from .registry import GatewayRegistry, REGISTRY
from . import backends  # noqa: F401  # ensure built-in backends register on import

__all__ = [
    "GatewayRegistry",
    "REGISTRY",
    "TransactionGateway",
]
