"""Mini README: Tests for the storage registry and bundled backends.

Ensures that backends register correctly, the JSON document store keeps
records across gateway instances, and entry point plugins are picked up by
the registry.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from millrecords.configuration import MillRecordsSettings
from millrecords.records import NotFoundError, StoreError
from millrecords.storage import REGISTRY, GatewayRegistry, TransactionGateway
from millrecords.storage import registry as registry_module
from millrecords.storage.backends import InMemoryGateway, JsonFileGateway
from millrecords.utils import load_entry_point_plugins


def test_registry_contains_bundled_backends() -> None:
    backends = list(REGISTRY.available_backends())
    assert "memory" in backends
    assert "json" in backends


def test_registry_instantiates_backend_from_settings(tmp_path) -> None:
    settings = MillRecordsSettings(store_location=str(tmp_path / "store.json"))

    gateway = REGISTRY.create("JSON", settings)

    assert isinstance(gateway, JsonFileGateway)
    assert gateway.metadata() == {"backend": "json", "location": str(tmp_path / "store.json")}
    with pytest.raises(KeyError):
        REGISTRY.create("postgres", settings)


def test_default_settings_use_durable_store(tmp_path, monkeypatch, sample_data) -> None:
    for name in ("MILLRECORDS_STORE_BACKEND", "MILLRECORDS_SEED_DEMO_DATA"):
        monkeypatch.delenv(name, raising=False)
    settings = MillRecordsSettings(data_directory=tmp_path)

    assert settings.store_backend == "json"
    assert settings.seed_demo_data is False

    created = asyncio.run(REGISTRY.create(settings.store_backend, settings).create(sample_data))
    reopened = asyncio.run(REGISTRY.create(settings.store_backend, settings).list_transactions())

    assert [record.transaction_id for record in reopened] == [created.transaction_id]
    assert (tmp_path / "transactions.json").exists()


def test_memory_backend_seeds_demo_data_when_asked() -> None:
    settings = MillRecordsSettings(seed_demo_data=True)
    gateway = REGISTRY.create("memory", settings)

    records = asyncio.run(gateway.list_transactions())
    assert len(records) == 5
    assert all(record.balance >= 0 for record in records)
    assert asyncio.run(InMemoryGateway().list_transactions()) == []


def test_json_backend_persists_across_instances(tmp_path, sample_data) -> None:
    path = tmp_path / "nested" / "transactions.json"

    async def scenario():
        gateway = JsonFileGateway(str(path))
        first = await gateway.create(sample_data)
        second = await gateway.create(replace(sample_data, customer_name="Doe, Jane"))
        await gateway.update(first.transaction_id, replace(sample_data, amount_paid=1500.0))
        reopened = JsonFileGateway(str(path))
        return first, second, await reopened.list_transactions()

    first, second, listed = asyncio.run(scenario())

    assert [t.transaction_id for t in listed] == [second.transaction_id, first.transaction_id]
    assert listed[0].customer_name == "Doe, Jane"
    assert listed[1].amount_paid == 1500.0
    assert listed[1].balance == 0
    assert listed[1].created_at == first.created_at


def test_json_backend_reports_missing_records(tmp_path, sample_data) -> None:
    gateway = JsonFileGateway(str(tmp_path / "transactions.json"))

    with pytest.raises(NotFoundError):
        asyncio.run(gateway.update("missing", sample_data))
    with pytest.raises(NotFoundError):
        asyncio.run(gateway.delete("missing"))


def test_json_backend_wraps_corrupt_documents(tmp_path) -> None:
    path = tmp_path / "transactions.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError):
        asyncio.run(JsonFileGateway(str(path)).list_transactions())


def test_json_backend_delete_removes_record(tmp_path, sample_data) -> None:
    gateway = JsonFileGateway(str(tmp_path / "transactions.json"))
    created = asyncio.run(gateway.create(sample_data))

    asyncio.run(gateway.delete(created.transaction_id))

    assert asyncio.run(gateway.list_transactions()) == []


def test_load_plugins_registers_gateway_classes(monkeypatch) -> None:
    class PluginGateway(InMemoryGateway):
        backend_name = "plugin"

    monkeypatch.setattr(
        registry_module, "load_entry_point_plugins", lambda group: [PluginGateway, object()]
    )
    registry = GatewayRegistry()

    assert registry.load_plugins() == 1
    assert list(registry.available_backends()) == ["plugin"]
    assert isinstance(registry.create("plugin", MillRecordsSettings()), TransactionGateway)


def test_entry_point_loader_returns_empty_for_unknown_group() -> None:
    assert load_entry_point_plugins("millrecords.tests.no_such_group") == []
