# tiempo_real/on_disconnect.py
import logging
from utils import (
    log_request,
    websocket_response,
    obtener_connection_id
)
from .factory import crear_componentes

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def handler(event, context):
    """
    WebSocket $disconnect - Limpiar conexión

    - Se ejecuta cuando el cliente cierra la conexión o esta expira
    - Elimina la conexión para evitar envíos fallidos
    - Borrar una conexión ya eliminada no es error

    Tablas: CONNECTIONS_TABLE (DELETE)
    Servicios: API Gateway WebSocket (route: $disconnect)
    """
    try:
        log_request(event, context)

        connection_id = obtener_connection_id(event)
        if not connection_id:
            logger.error("Connection ID no encontrado en el evento de desconexión")
            return websocket_response(400, 'Connection ID requerido')

        componentes = crear_componentes(event)
        if componentes.lifecycle.on_disconnect(connection_id):
            logger.info(f"🔌 Conexión WebSocket eliminada: {connection_id}")

        return websocket_response(200, 'Disconnected')

    except Exception as e:
        logger.error(f"Error en on_disconnect: {str(e)}")
        # Para WebSocket disconnect, siempre retornar 200 para evitar reintentos
        return websocket_response(200, 'Disconnected')
