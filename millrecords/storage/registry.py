"""Mini README: Backend registry enabling pluggable transaction storage.

Structure:
    * GatewayRegistry - manages registration and instantiation of
      ``TransactionGateway`` implementations.

The registry supports runtime discovery, enabling other packages to plug in
storage through the ``millrecords.gateways`` entry point group or manual
registration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Type

from ..logging_utils import get_logger
from ..utils.plugin_loader import load_entry_point_plugins
from .base import TransactionGateway

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..configuration import MillRecordsSettings

LOGGER = get_logger(__name__)


class GatewayRegistry:
    """Simple registry for mapping backend identifiers to classes."""

    def __init__(self) -> None:
        self._backends: Dict[str, Type[TransactionGateway]] = {}

    def register(self, backend: Type[TransactionGateway]) -> None:
        """Register a new backend class with the registry."""

        identifier = backend.backend_name.lower()
        LOGGER.debug("Registering storage backend '%s'", identifier)
        self._backends[identifier] = backend

    def available_backends(self) -> Iterable[str]:
        """Return iterable of backend identifiers for display."""

        return sorted(self._backends.keys())

    def load_plugins(self, group: str = "millrecords.gateways") -> int:
        """Register gateway classes advertised through entry points."""

        registered = 0
        for plugin in load_entry_point_plugins(group):
            if isinstance(plugin, type) and issubclass(plugin, TransactionGateway):
                self.register(plugin)
                registered += 1
            else:
                LOGGER.warning("Ignoring entry point %r: not a TransactionGateway", plugin)
        return registered

    def create(self, identifier: str, settings: "MillRecordsSettings") -> TransactionGateway:
        """Instantiate the backend matching the identifier."""

        backend_cls = self._backends.get(identifier.lower())
        if not backend_cls:
            raise KeyError(f"Unknown storage backend '{identifier}'")
        LOGGER.info("Creating storage backend '%s'", identifier)
        return backend_cls.from_settings(settings)


REGISTRY = GatewayRegistry()
