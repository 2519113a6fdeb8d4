# eventos/ingestar_evento.py
import os
import logging
from botocore.exceptions import ClientError, BotoCoreError
from utils import (
    success_response,
    error_response,
    validation_error_response,
    unauthorized_response,
    parse_request_body,
    get_header,
    log_request,
    get_table,
    a_tipos_dynamodb,
    obtener_timestamp_ms,
    generar_codigo_evento,
    verificar_token_jwt,
    extraer_token_de_header
)
from tiempo_real import publicar_evento_nuevo

logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Tablas DynamoDB
ANALYTICS_TABLE = os.environ.get('ANALYTICS_TABLE')


def construir_registro(tenant_id, body, timestamp_ms=None):
    """
    Arma el registro de analítica a guardar

    Args:
        tenant_id (str): Tenant del token
        body (dict): Body de la request (eventType, eventData, userId)
        timestamp_ms (int, optional): Momento de ingesta

    Returns:
        dict: Registro listo para DynamoDB
    """
    timestamp_ms = timestamp_ms or obtener_timestamp_ms()
    registro = {
        'tenantId': tenant_id,
        'timestamp': timestamp_ms,
        'eventType': body.get('eventType'),
        'eventData': body.get('eventData') or {},
        'id': generar_codigo_evento(tenant_id, timestamp_ms)
    }
    if body.get('userId'):
        registro['userId'] = body.get('userId')
    return a_tipos_dynamodb(registro)


def handler(event, context):
    """
    POST /analytics/events - Registrar evento y notificar en tiempo real

    Request:
    {
        "headers": {"Authorization": "Bearer <jwt con tenantId>"},
        "body": {
            "eventType": "page_view",
            "eventData": {"page": "/pricing"},
            "userId": "u-123"
        }
    }

    Response 201:
    {
        "success": true,
        "message": "Event recorded and broadcasted successfully",
        "data": {"eventId": "...", "connectionsNotified": 2}
    }

    El broadcast ocurre solo después de guardar el evento y nunca hace
    fallar la respuesta: la tabla de analítica es la fuente de verdad.
    """
    try:
        log_request(event, context)

        token = extraer_token_de_header(get_header(event, 'Authorization'))
        if not token:
            return unauthorized_response("No token provided")

        claims = verificar_token_jwt(token)
        if not claims:
            return unauthorized_response("Invalid token")

        tenant_id = claims['tenantId']

        body = parse_request_body(event)
        if body is None:
            return validation_error_response({'body': 'JSON inválido'})
        if not body.get('eventType'):
            return validation_error_response({'eventType': 'eventType es obligatorio'})

        registro = construir_registro(tenant_id, body)

        try:
            get_table(ANALYTICS_TABLE).put_item(Item=registro)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error guardando evento {registro['id']}: {e}")
            return error_response("Error guardando evento", status_code=500)

        connections_notified = publicar_evento_nuevo(tenant_id, registro)

        logger.info(f"Evento ingestado y difundido: {registro['id']} ({connections_notified} conexiones)")

        return success_response(
            data={
                'eventId': registro['id'],
                'connectionsNotified': connections_notified
            },
            mensaje="Event recorded and broadcasted successfully",
            status_code=201
        )

    except Exception as e:
        logger.error(f"Error en ingestar_evento: {str(e)}")
        return error_response("Error interno del servidor", status_code=500)
