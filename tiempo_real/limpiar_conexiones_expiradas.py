# tiempo_real/limpiar_conexiones_expiradas.py
import logging
from utils import get_table, obtener_timestamp_ms
from .config import cargar_configuracion
from .connection_store import ConnectionStore, ConnectionStoreError

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def limpiar_expiradas(store):
    """
    Elimina las conexiones con expires_at vencido

    El delete es condicional: una conexión renovada por heartbeat entre el
    scan y el delete se conserva y no cuenta como eliminada.

    Returns:
        dict: {'expired_found': n, 'deleted': m}
    """
    ahora_ms = obtener_timestamp_ms()
    expiradas = store.listar_expiradas(ahora_ms)
    deleted_count = 0

    logger.info(f"Encontradas {len(expiradas)} conexiones expiradas")

    for conexion in expiradas:
        connection_id = conexion.get('connection_id')
        if not connection_id:
            continue
        try:
            if store.eliminar_si_expirada(connection_id, ahora_ms):
                deleted_count += 1
        except ConnectionStoreError as delete_error:
            logger.error(f"Error eliminando {connection_id}: {delete_error}")

    logger.info(f"Limpieza completada: {deleted_count} conexiones eliminadas")
    return {'expired_found': len(expiradas), 'deleted': deleted_count}


def handler(event, context):
    """
    Lambda de mantenimiento - Limpia conexiones expiradas de la tabla

    Se ejecuta vía EventBridge (rate). El TTL de DynamoDB borra los items
    vencidos, pero puede tardar hasta 48h; esta limpieza acota ese retraso.
    """
    try:
        settings = cargar_configuracion()
        store = ConnectionStore(
            get_table(settings.connections_table, settings.region),
            tenant_index=settings.tenant_index,
            ttl_seconds=settings.connection_ttl_seconds
        )

        resultado = limpiar_expiradas(store)

        return {
            'statusCode': 200,
            'body': {
                'message': 'Limpieza exitosa',
                **resultado
            }
        }

    except Exception as e:
        logger.error(f"Error en limpieza de conexiones: {str(e)}")
        return {
            'statusCode': 500,
            'body': {'error': str(e)}
        }
