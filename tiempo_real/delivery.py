# tiempo_real/delivery.py
import logging
from functools import lru_cache

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError

from constants import (
    ENTREGA_OK,
    ENTREGA_GONE,
    ENTREGA_TRANSITORIA,
    CODIGOS_ERROR_GONE,
    HTTP_STATUS_GONE,
    DELIVERY_TIMEOUT_SECONDS
)
from utils import serializar_json

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def clasificar_error_entrega(error):
    """
    Clasifica un fallo de postToConnection

    Args:
        error (Exception): Excepción lanzada por el cliente boto3

    Returns:
        str: ENTREGA_GONE si el cliente ya no existe, ENTREGA_TRANSITORIA en otro caso
    """
    if isinstance(error, ClientError):
        response = getattr(error, 'response', None) or {}
        codigo = response.get('Error', {}).get('Code')
        http_status = response.get('ResponseMetadata', {}).get('HTTPStatusCode')
        if codigo in CODIGOS_ERROR_GONE or http_status in HTTP_STATUS_GONE:
            return ENTREGA_GONE
    return ENTREGA_TRANSITORIA


def resolver_endpoint_ws(event=None, endpoint=None, api_id=None, region='us-east-1', stage='dev'):
    """
    Endpoint HTTPS de la Management API

    Orden: requestContext del evento WebSocket, endpoint configurado,
    y por último el construido con el id de la API.

    Returns:
        str: URL del endpoint o None si no hay forma de resolverlo
    """
    request_context = (event or {}).get('requestContext') or {}
    domain_name = request_context.get('domainName')
    if domain_name and request_context.get('stage'):
        return f"https://{domain_name}/{request_context['stage']}"

    if endpoint:
        return endpoint

    if api_id:
        return f"https://{api_id}.execute-api.{region}.amazonaws.com/{stage}"

    return None


@lru_cache(maxsize=8)
def obtener_cliente_ws(endpoint_url, region_name, timeout_seconds=DELIVERY_TIMEOUT_SECONDS):
    """
    Cliente apigatewaymanagementapi con timeouts acotados por intento

    Se cachea por endpoint para reutilizarlo entre invocaciones.
    """
    config = Config(
        connect_timeout=timeout_seconds,
        read_timeout=timeout_seconds,
        retries={'max_attempts': 1, 'mode': 'standard'},
        max_pool_connections=50
    )
    return boto3.client(
        'apigatewaymanagementapi',
        endpoint_url=endpoint_url,
        region_name=region_name,
        config=config
    )


class DeliveryChannel:
    """
    Envía un payload a una conexión vía postToConnection

    on_gone se llama con el connection_id cuando el cliente ya no existe
    (410/403), antes de retornar el fallo. Los errores transitorios no
    eliminan la conexión.
    """

    def __init__(self, client, on_gone=None):
        self.client = client
        self.on_gone = on_gone

    def enviar(self, connection_id, payload):
        """
        Args:
            connection_id (str): Conexión destino
            payload (dict): Mensaje a enviar (se serializa a JSON)

        Returns:
            str: ENTREGA_OK, ENTREGA_GONE o ENTREGA_TRANSITORIA
        """
        data = serializar_json(payload).encode('utf-8')

        try:
            self.client.post_to_connection(ConnectionId=connection_id, Data=data)
        except (ClientError, BotoCoreError) as e:
            clase = clasificar_error_entrega(e)
            if clase == ENTREGA_GONE:
                logger.warning(f"Conexión inválida, eliminando: {connection_id}")
                if self.on_gone:
                    self.on_gone(connection_id)
            else:
                logger.error(f"Error transitorio enviando a {connection_id}: {e}")
            return clase

        logger.info(f"Mensaje enviado a conexión {connection_id}")
        return ENTREGA_OK

    def deliver(self, connection_id, payload):
        """True solo si el mensaje fue aceptado por API Gateway"""
        return self.enviar(connection_id, payload) == ENTREGA_OK
