# tiempo_real/on_message.py
import logging
from constants import MSG_HEARTBEAT_RESPONSE, MSG_JOINED
from utils import (
    log_request,
    websocket_response,
    obtener_connection_id
)
from .factory import crear_componentes

logger = logging.getLogger()
logger.setLevel(logging.INFO)

RESPUESTAS = {
    MSG_HEARTBEAT_RESPONSE: 'Heartbeat received',
    MSG_JOINED: 'Joined tenant'
}


def handler(event, context):
    """
    WebSocket $default - Mensajes del cliente

    Acciones reconocidas (campo "action" del JSON):
    - heartbeat: responde {type: 'heartbeat-response', timestamp}
    - join-tenant: requiere tenantId; asocia la conexión y responde
      {type: 'joined', tenantId, message}
    - cualquier otra cosa (incluido JSON inválido): responde
      {type: 'echo', originalMessage, timestamp}

    Servicios: API Gateway WebSocket (route: $default), postToConnection
    """
    try:
        log_request(event, context)

        connection_id = obtener_connection_id(event)
        if not connection_id:
            logger.error("Connection ID no encontrado en el mensaje WebSocket")
            return websocket_response(400, 'Connection ID requerido')

        componentes = crear_componentes(event)
        respuesta = componentes.lifecycle.on_message(connection_id, event.get('body'))

        if respuesta is None:
            return websocket_response(200, 'Message not processed')

        return websocket_response(200, RESPUESTAS.get(respuesta.get('type'), 'Message processed'))

    except Exception as e:
        logger.error(f"Error en on_message: {str(e)}")
        return websocket_response(500, 'Failed to process message')
