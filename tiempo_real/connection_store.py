# tiempo_real/connection_store.py
import logging
from boto3.dynamodb.conditions import Key, Attr
from botocore.exceptions import ClientError, BotoCoreError

from constants import (
    STATUS_CONNECTED,
    STATUS_JOINED,
    CONNECTION_TTL_SECONDS,
    DEFAULT_TENANT_INDEX
)
from utils import (
    obtener_timestamp_ms,
    ms_a_segundos,
    calcular_expiracion,
    query_all_pages,
    scan_all_pages
)

logger = logging.getLogger()
logger.setLevel(logging.INFO)


class ConnectionStoreError(Exception):
    """La tabla de conexiones no respondió (DynamoDB caído, throttling, permisos)"""


class ConnectionStore:
    """
    Registro de conexiones WebSocket en DynamoDB

    Tabla con clave de partición connection_id. Item:
    {
        "connection_id": "abc=",
        "tenant_id": "T1",            # solo tras join-tenant
        "status": "connected|joined",
        "created_at": 1730000000000,  # ms
        "joined_at": 1730000005000,   # ms, solo tras join-tenant
        "expires_at": 1730007200      # s, atributo TTL de DynamoDB
    }

    El GSI sobre tenant_id es disperso: las conexiones que nunca hicieron
    join no aparecen en él.
    """

    def __init__(self, table, tenant_index=DEFAULT_TENANT_INDEX, ttl_seconds=CONNECTION_TTL_SECONDS):
        self.table = table
        self.tenant_index = tenant_index
        self.ttl_seconds = ttl_seconds

    def registrar(self, connection_id, ahora_ms=None):
        """
        Inserta (o reemplaza) la conexión con status=connected

        Returns:
            dict: Item guardado
        """
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        item = {
            'connection_id': connection_id,
            'status': STATUS_CONNECTED,
            'created_at': ahora_ms,
            'expires_at': calcular_expiracion(ahora_ms, self.ttl_seconds)
        }
        try:
            self.table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            raise ConnectionStoreError(f"Error registrando conexión {connection_id}: {e}") from e

        logger.info(f"Conexión registrada: {connection_id}")
        return item

    def unir_a_tenant(self, connection_id, tenant_id, ahora_ms=None):
        """
        Asocia la conexión a un tenant (status=joined)

        Si la conexión ya tenía tenant, se sobrescribe. Si el registro de
        $connect se perdió, se crea aquí con su propio expires_at.
        """
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        try:
            self.table.update_item(
                Key={'connection_id': connection_id},
                UpdateExpression=(
                    'SET tenant_id = :tenant_id, joined_at = :joined_at, #status = :status, '
                    'created_at = if_not_exists(created_at, :joined_at), '
                    'expires_at = if_not_exists(expires_at, :expires_at)'
                ),
                ExpressionAttributeNames={'#status': 'status'},
                ExpressionAttributeValues={
                    ':tenant_id': tenant_id,
                    ':joined_at': ahora_ms,
                    ':status': STATUS_JOINED,
                    ':expires_at': calcular_expiracion(ahora_ms, self.ttl_seconds)
                }
            )
        except (ClientError, BotoCoreError) as e:
            raise ConnectionStoreError(f"Error uniendo {connection_id} a tenant {tenant_id}: {e}") from e

        logger.info(f"Conexión {connection_id} unida a tenant {tenant_id}")

    def refrescar_expiracion(self, connection_id, ahora_ms=None):
        """
        Extiende expires_at de una conexión existente

        Returns:
            bool: False si la conexión ya no existe
        """
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        try:
            self.table.update_item(
                Key={'connection_id': connection_id},
                UpdateExpression='SET expires_at = :expires_at',
                ConditionExpression='attribute_exists(connection_id)',
                ExpressionAttributeValues={
                    ':expires_at': calcular_expiracion(ahora_ms, self.ttl_seconds)
                }
            )
            return True
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
                return False
            raise ConnectionStoreError(f"Error refrescando TTL de {connection_id}: {e}") from e
        except BotoCoreError as e:
            raise ConnectionStoreError(f"Error refrescando TTL de {connection_id}: {e}") from e

    def eliminar(self, connection_id):
        """Hard delete. Borrar una conexión inexistente no es error en DynamoDB."""
        try:
            self.table.delete_item(Key={'connection_id': connection_id})
        except (ClientError, BotoCoreError) as e:
            raise ConnectionStoreError(f"Error eliminando conexión {connection_id}: {e}") from e

        logger.info(f"Conexión eliminada: {connection_id}")

    def eliminar_si_expirada(self, connection_id, ahora_ms=None):
        """
        Borra la conexión solo si su expires_at sigue vencido al momento del delete

        Un heartbeat que renovó el TTL después del scan deja la conexión intacta.

        Returns:
            bool: False si la conexión ya no estaba vencida (o no existe)
        """
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        try:
            self.table.delete_item(
                Key={'connection_id': connection_id},
                ConditionExpression=Attr('expires_at').lt(ms_a_segundos(ahora_ms))
            )
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
                logger.info(f"Conexión {connection_id} renovada, no se elimina")
                return False
            raise ConnectionStoreError(f"Error eliminando conexión expirada {connection_id}: {e}") from e
        except BotoCoreError as e:
            raise ConnectionStoreError(f"Error eliminando conexión expirada {connection_id}: {e}") from e

        logger.info(f"Conexión expirada eliminada: {connection_id}")
        return True

    def obtener(self, connection_id):
        try:
            response = self.table.get_item(
                Key={'connection_id': connection_id},
                ConsistentRead=True
            )
        except (ClientError, BotoCoreError) as e:
            raise ConnectionStoreError(f"Error obteniendo conexión {connection_id}: {e}") from e
        return response.get('Item')

    def listar_unidas(self, tenant_id, ahora_ms=None):
        """
        Conexiones con status=joined del tenant que aún no expiraron

        Args:
            tenant_id (str): Tenant a consultar
            ahora_ms (int, optional): Momento de referencia para descartar expiradas

        Returns:
            list: Items de conexión (puede ser vacía)

        Raises:
            ConnectionStoreError: si la consulta falla
        """
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        try:
            return query_all_pages(
                self.table,
                IndexName=self.tenant_index,
                KeyConditionExpression=Key('tenant_id').eq(tenant_id),
                FilterExpression=Attr('status').eq(STATUS_JOINED) & Attr('expires_at').gt(ms_a_segundos(ahora_ms))
            )
        except (ClientError, BotoCoreError) as e:
            raise ConnectionStoreError(f"Error consultando conexiones de tenant {tenant_id}: {e}") from e

    def listar_expiradas(self, ahora_ms=None):
        """Conexiones cuyo expires_at ya pasó pero DynamoDB TTL aún no borró"""
        ahora_ms = ahora_ms or obtener_timestamp_ms()
        try:
            return scan_all_pages(
                self.table,
                FilterExpression=Attr('expires_at').lt(ms_a_segundos(ahora_ms))
            )
        except (ClientError, BotoCoreError) as e:
            raise ConnectionStoreError(f"Error buscando conexiones expiradas: {e}") from e
