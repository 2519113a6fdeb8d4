"""Tests for the HTTP event ingestion Lambda."""

import json
import logging
from decimal import Decimal
from unittest.mock import MagicMock, patch

import jwt
import pytest

from eventos import ingestar_evento
from utils import jwt_utils
from tests.fakes import client_error

SECRET = "test-secret"


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setattr(jwt_utils, "JWT_SECRET", SECRET)
    monkeypatch.setattr(jwt_utils, "JWT_AUDIENCE", None)


def http_event(body, tenant_id="acme", token=None):
    if token is None:
        token = jwt.encode({"tenantId": tenant_id, "userId": "u1"}, SECRET, algorithm="HS256")
    return {
        "httpMethod": "POST",
        "path": "/analytics/events",
        "headers": {"Authorization": f"Bearer {token}"},
        "body": json.dumps(body),
    }


@pytest.fixture
def table():
    table = MagicMock()
    with patch.object(ingestar_evento, "get_table", return_value=table):
        yield table


class TestAuth:
    def test_missing_token(self, table):
        response = ingestar_evento.handler({"headers": {}, "body": "{}"}, None)

        assert response["statusCode"] == 401
        table.put_item.assert_not_called()

    def test_invalid_token(self, table):
        response = ingestar_evento.handler(http_event({"eventType": "click"}, token="no-es-un-jwt"), None)

        assert response["statusCode"] == 401

    def test_token_without_tenant(self, table):
        token = jwt.encode({"userId": "u1"}, SECRET, algorithm="HS256")

        response = ingestar_evento.handler(http_event({"eventType": "click"}, token=token), None)

        assert response["statusCode"] == 401


class TestIngesta:
    def test_missing_event_type(self, table):
        response = ingestar_evento.handler(http_event({"eventData": {}}), None)

        assert response["statusCode"] == 400
        table.put_item.assert_not_called()

    def test_stores_then_broadcasts(self, table):
        orden = MagicMock()
        orden.attach_mock(table.put_item, "put_item")
        with patch.object(ingestar_evento, "publicar_evento_nuevo", return_value=2) as publicar:
            orden.attach_mock(publicar, "publicar")
            response = ingestar_evento.handler(
                http_event({"eventType": "click", "eventData": {"value": 1.5}, "userId": "u1"}), None
            )

        assert response["statusCode"] == 201
        body = json.loads(response["body"])
        assert body["data"]["connectionsNotified"] == 2
        assert [c[0] for c in orden.mock_calls] == ["put_item", "publicar"]

        registro = table.put_item.call_args.kwargs["Item"]
        assert registro["tenantId"] == "acme"
        assert registro["eventType"] == "click"
        assert registro["eventData"] == {"value": Decimal("1.5")}
        assert registro["id"].startswith("acme-")
        assert body["data"]["eventId"] == registro["id"]
        assert publicar.call_args.args == ("acme", registro)

    def test_storage_failure_skips_broadcast(self, table):
        table.put_item.side_effect = client_error("InternalServerError", 500, "PutItem")
        with patch.object(ingestar_evento, "publicar_evento_nuevo") as publicar:
            response = ingestar_evento.handler(http_event({"eventType": "click"}), None)

        assert response["statusCode"] == 500
        publicar.assert_not_called()

    def test_broadcast_failure_does_not_fail_ingestion(self, table):
        with patch("tiempo_real.ingestion_bridge.crear_componentes", side_effect=RuntimeError("sin endpoint")):
            response = ingestar_evento.handler(http_event({"eventType": "click"}), None)

        assert response["statusCode"] == 201
        assert json.loads(response["body"])["data"]["connectionsNotified"] == 0
        table.put_item.assert_called_once()


class TestSecretoJwt:
    def test_missing_secret_logs_warning(self, monkeypatch, caplog):
        monkeypatch.delenv("JWT_SECRET", raising=False)

        with caplog.at_level(logging.WARNING):
            secreto = jwt_utils.cargar_secreto_jwt()

        assert secreto == jwt_utils.DEFAULT_JWT_SECRET
        assert "JWT_SECRET no configurado" in caplog.text

    def test_configured_secret_is_silent(self, monkeypatch, caplog):
        monkeypatch.setenv("JWT_SECRET", "s3cret")

        with caplog.at_level(logging.WARNING):
            secreto = jwt_utils.cargar_secreto_jwt()

        assert secreto == "s3cret"
        assert "JWT_SECRET" not in caplog.text
