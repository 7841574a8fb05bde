"""Mini README: Bundled storage backends.

New backends should export a subclass of ``TransactionGateway`` and call
``REGISTRY.register`` during module import to keep the system discoverable.
"""

from .json_file import JsonFileGateway
from .memory import InMemoryGateway

__all__ = ["InMemoryGateway", "JsonFileGateway"]
