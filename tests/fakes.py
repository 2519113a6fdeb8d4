"""Dobles en memoria de la tabla de conexiones y de la Management API."""

import json
import threading

from botocore.exceptions import ClientError

from constants import STATUS_CONNECTED, STATUS_JOINED, CONNECTION_TTL_SECONDS
from tiempo_real.connection_store import ConnectionStoreError
from utils import obtener_timestamp_ms, ms_a_segundos, calcular_expiracion


def client_error(code, status, operation="PostToConnection"):
    return ClientError(
        {
            "Error": {"Code": code, "Message": code},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class FakeConnectionStore:
    """Misma interfaz y semántica que ConnectionStore, sobre un dict."""

    def __init__(self, ttl_seconds=CONNECTION_TTL_SECONDS):
        self.items = {}
        self.ttl_seconds = ttl_seconds
        self.fallar = False
        self.consultas = 0
        self._lock = threading.Lock()

    def _verificar(self):
        if self.fallar:
            raise ConnectionStoreError("store no disponible")

    def registrar(self, connection_id, ahora_ms=None):
        self._verificar()
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        item = {
            "connection_id": connection_id,
            "status": STATUS_CONNECTED,
            "created_at": ahora_ms,
            "expires_at": calcular_expiracion(ahora_ms, self.ttl_seconds),
        }
        with self._lock:
            self.items[connection_id] = item
        return item

    def unir_a_tenant(self, connection_id, tenant_id, ahora_ms=None):
        self._verificar()
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        with self._lock:
            item = self.items.setdefault(connection_id, {"connection_id": connection_id})
            item.setdefault("created_at", ahora_ms)
            item.setdefault("expires_at", calcular_expiracion(ahora_ms, self.ttl_seconds))
            item.update(tenant_id=tenant_id, joined_at=ahora_ms, status=STATUS_JOINED)

    def refrescar_expiracion(self, connection_id, ahora_ms=None):
        self._verificar()
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        with self._lock:
            if connection_id not in self.items:
                return False
            self.items[connection_id]["expires_at"] = calcular_expiracion(ahora_ms, self.ttl_seconds)
            return True

    def eliminar(self, connection_id):
        self._verificar()
        with self._lock:
            self.items.pop(connection_id, None)

    def eliminar_si_expirada(self, connection_id, ahora_ms=None):
        self._verificar()
        ahora_s = ms_a_segundos(ahora_ms or obtener_timestamp_ms())
        with self._lock:
            item = self.items.get(connection_id)
            if item is None or not item.get("expires_at", 0) < ahora_s:
                return False
            del self.items[connection_id]
            return True

    def obtener(self, connection_id):
        self._verificar()
        with self._lock:
            item = self.items.get(connection_id)
            return dict(item) if item else None

    def listar_unidas(self, tenant_id, ahora_ms=None):
        self._verificar()
        self.consultas += 1
        ahora_s = ms_a_segundos(ahora_ms or obtener_timestamp_ms())
        with self._lock:
            return [
                dict(item)
                for item in self.items.values()
                if item.get("tenant_id") == tenant_id
                and item.get("status") == STATUS_JOINED
                and item.get("expires_at", 0) > ahora_s
            ]

    def listar_expiradas(self, ahora_ms=None):
        self._verificar()
        ahora_s = ms_a_segundos(ahora_ms or obtener_timestamp_ms())
        with self._lock:
            return [dict(item) for item in self.items.values() if item.get("expires_at", 0) < ahora_s]


class FakePushClient:
    """Imita apigatewaymanagementapi.post_to_connection."""

    def __init__(self):
        self.enviados = []
        self.errores = {}
        self.intentos = []
        self._lock = threading.Lock()

    def post_to_connection(self, ConnectionId, Data):
        with self._lock:
            self.intentos.append(ConnectionId)
        error = self.errores.get(ConnectionId)
        if error is not None:
            raise error
        with self._lock:
            self.enviados.append((ConnectionId, json.loads(Data.decode("utf-8"))))
        return {}

    def mensajes_para(self, connection_id):
        return [mensaje for cid, mensaje in self.enviados if cid == connection_id]
