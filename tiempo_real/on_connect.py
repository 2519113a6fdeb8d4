# tiempo_real/on_connect.py
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
    WebSocket $connect - Registrar nueva conexión

    - Se ejecuta cuando el cliente abre una conexión WebSocket
    - Registra la conexión en la tabla de conexiones con status=connected
    - La conexión no recibe broadcasts hasta que envíe join-tenant

    Tablas: CONNECTIONS_TABLE (PUT)
    Servicios: API Gateway WebSocket (route: $connect)

    Si el registro falla se acepta igual la conexión: solo quedará invisible
    para los broadcasts.
    """
    try:
        log_request(event, context)

        connection_id = obtener_connection_id(event)
        if not connection_id:
            logger.error("Connection ID no encontrado en el evento WebSocket")
            return websocket_response(400, 'Connection ID requerido')

        componentes = crear_componentes(event)
        if componentes.lifecycle.on_connect(connection_id):
            logger.info(f"🔌 Conexión WebSocket registrada: {connection_id}")

        return websocket_response(200, 'Connected')

    except Exception as e:
        logger.error(f"Error en on_connect: {str(e)}")
        return websocket_response(200, 'Connected')
