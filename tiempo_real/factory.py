# tiempo_real/factory.py
from collections import namedtuple

from utils import get_table
from .config import cargar_configuracion
from .connection_store import ConnectionStore
from .delivery import DeliveryChannel, obtener_cliente_ws, resolver_endpoint_ws
from .lifecycle import ConnectionLifecycle
from .broadcast import BroadcastEngine

Componentes = namedtuple('Componentes', ['store', 'channel', 'lifecycle', 'broadcaster'])


class ConfiguracionInvalida(Exception):
    """Falta una variable de entorno obligatoria"""


def crear_componentes(event=None, settings=None, store=None, client=None):
    """
    Construye store, canal, lifecycle y broadcaster para una invocación

    Args:
        event (dict, optional): Evento WebSocket (para resolver el endpoint)
        settings (Settings, optional): Configuración; por defecto desde el entorno
        store (optional): Registro de conexiones ya construido
        client (optional): Cliente apigatewaymanagementapi ya construido

    Returns:
        Componentes
    """
    settings = settings or cargar_configuracion()

    if store is None:
        if not settings.connections_table:
            raise ConfiguracionInvalida("CONNECTIONS_TABLE no configurado")
        store = ConnectionStore(
            get_table(settings.connections_table, settings.region),
            tenant_index=settings.tenant_index,
            ttl_seconds=settings.connection_ttl_seconds
        )

    if client is None:
        endpoint = resolver_endpoint_ws(
            event,
            endpoint=settings.ws_api_endpoint,
            api_id=settings.websocket_api_id,
            region=settings.region,
            stage=settings.stage
        )
        if not endpoint:
            raise ConfiguracionInvalida("WS_API_ENDPOINT no configurado")
        client = obtener_cliente_ws(endpoint, settings.region, settings.delivery_timeout_seconds)

    lifecycle = ConnectionLifecycle(store, heartbeat_refreshes_ttl=settings.heartbeat_refreshes_ttl)
    channel = DeliveryChannel(client, on_gone=lifecycle.evict)
    lifecycle.channel = channel
    broadcaster = BroadcastEngine(
        store,
        channel,
        max_workers=settings.broadcast_max_workers,
        timeout_seconds=settings.broadcast_timeout_seconds
    )

    return Componentes(store, channel, lifecycle, broadcaster)
