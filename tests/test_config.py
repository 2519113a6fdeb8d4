"""Tests for environment configuration and component wiring."""

from unittest.mock import MagicMock, patch

import pytest

from tiempo_real.config import Settings, cargar_configuracion
from tiempo_real.factory import ConfiguracionInvalida, crear_componentes


def test_defaults(monkeypatch):
    for nombre in ("CONNECTIONS_TABLE", "HEARTBEAT_REFRESHES_TTL", "CONNECTION_TTL_SECONDS", "WS_API_ENDPOINT"):
        monkeypatch.delenv(nombre, raising=False)

    settings = cargar_configuracion()

    assert settings.connection_ttl_seconds == 7200
    assert settings.heartbeat_refreshes_ttl is False
    assert settings.tenant_index == "tenant_id-index"
    assert settings.connections_table is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("CONNECTIONS_TABLE", "conexiones-prod")
    monkeypatch.setenv("HEARTBEAT_REFRESHES_TTL", "true")
    monkeypatch.setenv("CONNECTION_TTL_SECONDS", "600")
    monkeypatch.setenv("BROADCAST_MAX_WORKERS", "4")

    settings = cargar_configuracion()

    assert settings.connections_table == "conexiones-prod"
    assert settings.heartbeat_refreshes_ttl is True
    assert settings.connection_ttl_seconds == 600
    assert settings.broadcast_max_workers == 4


def test_wiring_routes_gone_to_lifecycle_eviction(store):
    componentes = crear_componentes(settings=Settings(), store=store, client=MagicMock())

    assert componentes.channel.on_gone == componentes.lifecycle.evict
    assert componentes.lifecycle.channel is componentes.channel
    assert componentes.broadcaster.channel is componentes.channel


def test_missing_table_configuration():
    with pytest.raises(ConfiguracionInvalida):
        crear_componentes(settings=Settings(), client=MagicMock())


def test_missing_endpoint_configuration(store):
    with pytest.raises(ConfiguracionInvalida):
        crear_componentes(settings=Settings(), store=store)


def test_builds_store_from_table_name():
    settings = Settings(connections_table="conexiones", ws_api_endpoint="https://ws/dev")
    with patch("tiempo_real.factory.get_table") as get_table, \
            patch("tiempo_real.factory.obtener_cliente_ws") as obtener_cliente:
        componentes = crear_componentes(settings=settings)

    get_table.assert_called_once_with("conexiones", settings.region)
    obtener_cliente.assert_called_once_with("https://ws/dev", settings.region, settings.delivery_timeout_seconds)
    assert componentes.store.table is get_table.return_value
