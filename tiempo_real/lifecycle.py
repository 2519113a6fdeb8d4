# tiempo_real/lifecycle.py
import json
import logging

from constants import (
    ACTION_HEARTBEAT,
    ACTION_JOIN_TENANT,
    ACTION_UNKNOWN,
    MSG_HEARTBEAT_RESPONSE,
    MSG_JOINED,
    MSG_ECHO
)
from utils import obtener_timestamp_ms
from .connection_store import ConnectionStoreError

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def parsear_mensaje(raw_body):
    """
    Parsea el body de un mensaje WebSocket

    Un body vacío es {}; un body que no es JSON se trata como acción desconocida.
    """
    if raw_body is None or raw_body == '' or raw_body == b'':
        return {}
    if isinstance(raw_body, bytes):
        raw_body = raw_body.decode('utf-8', errors='replace')
    if not isinstance(raw_body, str):
        return raw_body
    try:
        return json.loads(raw_body)
    except json.JSONDecodeError:
        return {'action': ACTION_UNKNOWN}


class ConnectionLifecycle:
    """
    Transiciones de una conexión:

        (connect)      -> connected
        connected      -(join-tenant)-> joined
        connected|joined -(heartbeat)-> sin cambios, responde heartbeat-response
        connected|joined -(disconnect | entrega "gone")-> eliminada

    Los fallos del store en estas transiciones se registran y no se propagan:
    el evento del transporte siempre se confirma.
    """

    def __init__(self, store, channel=None, heartbeat_refreshes_ttl=False):
        self.store = store
        self.channel = channel
        self.heartbeat_refreshes_ttl = heartbeat_refreshes_ttl

    def on_connect(self, connection_id):
        try:
            self.store.registrar(connection_id)
            return True
        except ConnectionStoreError as e:
            # La conexión queda invisible para broadcasts, pero el $connect se acepta
            logger.error(f"Error guardando conexión WebSocket {connection_id}: {e}")
            return False

    def on_disconnect(self, connection_id):
        return self.evict(connection_id)

    def evict(self, connection_id):
        """
        Elimina la conexión del registro. Idempotente.

        Returns:
            bool: False si el store falló
        """
        try:
            self.store.eliminar(connection_id)
            return True
        except ConnectionStoreError as e:
            logger.error(f"Error eliminando conexión {connection_id}: {e}")
            return False

    def on_message(self, connection_id, raw_body):
        """
        Procesa un mensaje entrante de la ruta $default

        Returns:
            dict: Mensaje enviado de vuelta, o None si no se respondió
        """
        mensaje = parsear_mensaje(raw_body)
        accion = mensaje.get('action') if isinstance(mensaje, dict) else None

        if accion == ACTION_HEARTBEAT:
            return self._heartbeat(connection_id)

        if accion == ACTION_JOIN_TENANT:
            tenant_id = mensaje.get('tenantId')
            if isinstance(tenant_id, str) and tenant_id.strip():
                return self._join_tenant(connection_id, tenant_id)
            logger.warning(f"join-tenant sin tenantId válido en {connection_id}")

        return self._responder(connection_id, {
            'type': MSG_ECHO,
            'originalMessage': mensaje,
            'timestamp': obtener_timestamp_ms()
        })

    def _heartbeat(self, connection_id):
        if self.heartbeat_refreshes_ttl:
            try:
                self.store.refrescar_expiracion(connection_id)
            except ConnectionStoreError as e:
                logger.error(f"Error refrescando TTL en heartbeat de {connection_id}: {e}")

        return self._responder(connection_id, {
            'type': MSG_HEARTBEAT_RESPONSE,
            'timestamp': obtener_timestamp_ms()
        })

    def _join_tenant(self, connection_id, tenant_id):
        try:
            self.store.unir_a_tenant(connection_id, tenant_id)
        except ConnectionStoreError as e:
            logger.error(f"Error uniendo conexión {connection_id} a tenant {tenant_id}: {e}")
            return None

        logger.info(f"✅ Connection {connection_id} joined tenant {tenant_id}")
        return self._responder(connection_id, {
            'type': MSG_JOINED,
            'tenantId': tenant_id,
            'message': f"Successfully joined tenant {tenant_id}"
        })

    def _responder(self, connection_id, mensaje):
        if self.channel is None:
            logger.warning(f"Sin canal de entrega, no se responde a {connection_id}")
            return None
        self.channel.enviar(connection_id, mensaje)
        return mensaje
