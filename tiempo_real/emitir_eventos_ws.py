# tiempo_real/emitir_eventos_ws.py
import json
import logging
from utils import (
    log_request,
    obtener_timestamp_ms,
    obtener_fecha_hora_iso
)
from .connection_store import ConnectionStoreError
from .factory import crear_componentes

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def handler(event, context):
    """
    Emitir Eventos WebSocket - Broadcasting en tiempo real

    Lambda interna que otros productores invocan de forma asíncrona
    (InvocationType='Event') cuando no tienen el motor de broadcast a mano:
    - Recibe tenant_id y tipo de mensaje
    - Consulta conexiones joined del tenant
    - Envía {type, data, timestamp} a cada connectionId en paralelo
    - Elimina conexiones inválidas automáticamente

    Input esperado:
    {
        "tenant_id": "T1",
        "type": "new-event",
        "data": { ... datos específicos del evento ... }
    }
    """
    try:
        if isinstance(event, str):
            event_data = json.loads(event)
        else:
            event_data = event

        log_request(event_data, context)

        tenant_id = event_data.get('tenant_id')
        tipo = event_data.get('type')
        data = event_data.get('data', {})

        if not tenant_id or not tipo:
            error_msg = "tenant_id y type son requeridos"
            logger.error(error_msg)
            return {
                'statusCode': 400,
                'body': json.dumps({'error': error_msg})
            }

        componentes = crear_componentes()

        timestamp = obtener_timestamp_ms()
        mensaje = {
            'type': tipo,
            'data': data,
            'timestamp': timestamp
        }

        try:
            connections_sent = componentes.broadcaster.broadcast(tenant_id, mensaje)
        except ConnectionStoreError as query_error:
            logger.error(f"Error consultando conexiones para {tenant_id}: {query_error}")
            return {
                'statusCode': 500,
                'body': json.dumps({'error': 'Error consultando conexiones activas'})
            }

        logger.info(f"📡 Evento {tipo} enviado a {connections_sent} conexiones de {tenant_id}")

        return {
            'statusCode': 200,
            'body': json.dumps({
                'message': 'Evento WebSocket procesado',
                'tenant_id': tenant_id,
                'type': tipo,
                'connections_sent': connections_sent,
                'timestamp': obtener_fecha_hora_iso(timestamp)
            })
        }

    except Exception as e:
        logger.error(f"Error en emitir_eventos_ws: {str(e)}")
        return {
            'statusCode': 500,
            'body': json.dumps({
                'error': 'Error interno emitiendo eventos',
                'details': str(e)
            })
        }
