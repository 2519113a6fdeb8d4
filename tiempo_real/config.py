# -*- coding: utf-8 -*-
"""
Configuración del módulo de tiempo real

Todo viene de variables de entorno definidas en la plantilla de despliegue;
los valores por defecto están en constants.py.
"""
import os
from dataclasses import dataclass

from constants import (
    CONNECTION_TTL_SECONDS,
    DELIVERY_TIMEOUT_SECONDS,
    BROADCAST_MAX_WORKERS,
    BROADCAST_TIMEOUT_SECONDS,
    DEFAULT_TENANT_INDEX
)


def _env_bool(nombre, default=False):
    valor = os.environ.get(nombre)
    if valor is None:
        return default
    return valor.strip().lower() in ('1', 'true', 'yes', 'si', 'sí')


@dataclass
class Settings:
    connections_table: str = None
    tenant_index: str = DEFAULT_TENANT_INDEX
    connection_ttl_seconds: int = CONNECTION_TTL_SECONDS
    heartbeat_refreshes_ttl: bool = False
    delivery_timeout_seconds: float = DELIVERY_TIMEOUT_SECONDS
    broadcast_max_workers: int = BROADCAST_MAX_WORKERS
    broadcast_timeout_seconds: float = BROADCAST_TIMEOUT_SECONDS
    ws_api_endpoint: str = None
    websocket_api_id: str = None
    region: str = 'us-east-1'
    stage: str = 'dev'


def cargar_configuracion():
    """
    Lee la configuración desde el entorno

    Returns:
        Settings: Configuración para esta invocación
    """
    return Settings(
        connections_table=os.environ.get('CONNECTIONS_TABLE'),
        tenant_index=os.environ.get('CONNECTIONS_TENANT_INDEX', DEFAULT_TENANT_INDEX),
        connection_ttl_seconds=int(os.environ.get('CONNECTION_TTL_SECONDS', CONNECTION_TTL_SECONDS)),
        heartbeat_refreshes_ttl=_env_bool('HEARTBEAT_REFRESHES_TTL'),
        delivery_timeout_seconds=float(os.environ.get('DELIVERY_TIMEOUT_SECONDS', DELIVERY_TIMEOUT_SECONDS)),
        broadcast_max_workers=int(os.environ.get('BROADCAST_MAX_WORKERS', BROADCAST_MAX_WORKERS)),
        broadcast_timeout_seconds=float(os.environ.get('BROADCAST_TIMEOUT_SECONDS', BROADCAST_TIMEOUT_SECONDS)),
        ws_api_endpoint=os.environ.get('WS_API_ENDPOINT'),
        websocket_api_id=os.environ.get('WEBSOCKET_API_ID'),
        region=os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION', 'us-east-1'),
        stage=os.environ.get('STAGE', 'dev')
    )
