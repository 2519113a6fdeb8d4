# tiempo_real/ingestion_bridge.py
import logging

from constants import MSG_NEW_EVENT
from utils import obtener_timestamp_ms
from .factory import crear_componentes

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def construir_mensaje_evento(registro, timestamp_ms=None):
    """Envelope new-event que reciben los dashboards"""
    return {
        'type': MSG_NEW_EVENT,
        'data': registro,
        'timestamp': timestamp_ms or obtener_timestamp_ms()
    }


def publicar_evento_nuevo(tenant_id, registro, broadcaster=None):
    """
    Notifica a los clientes del tenant que se guardó un nuevo evento

    Llamar SOLO después de que el registro esté persistido. El broadcast es
    best-effort: cualquier error se registra y no se propaga, para no afectar
    la respuesta de ingesta.

    Args:
        tenant_id (str): Tenant dueño del evento
        registro (dict): Registro ya guardado
        broadcaster (BroadcastEngine, optional): Motor a usar; por defecto
            se construye desde la configuración del entorno

    Returns:
        int: Conexiones notificadas (0 si el broadcast falló)
    """
    try:
        if broadcaster is None:
            broadcaster = crear_componentes().broadcaster

        mensaje = construir_mensaje_evento(registro)
        return broadcaster.broadcast(tenant_id, mensaje)

    except Exception as e:
        logger.error(f"Error difundiendo evento de tenant {tenant_id}: {e}")
        return 0
