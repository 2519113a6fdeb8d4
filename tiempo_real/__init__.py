"""
Módulo WebSocket para Analítica en Tiempo Real

Este módulo maneja las conexiones WebSocket para actualizaciones en tiempo real:
- Registro y limpieza de conexiones (connected -> joined -> eliminada)
- Asociación de cada conexión a un tenant mediante join-tenant
- Broadcast concurrente a todas las conexiones joined de un tenant
- Limpieza automática de conexiones muertas (410/403) y expiradas

Componentes:
1. connection_store.py - Tabla de conexiones en DynamoDB
2. lifecycle.py - Transiciones connect/join/heartbeat/disconnect
3. delivery.py - postToConnection y clasificación gone/transient
4. broadcast.py - Envío paralelo a todas las conexiones de un tenant
5. ingestion_bridge.py - Punto de entrada tras guardar un evento

Lambdas:
- on_connect.py ($connect), on_disconnect.py ($disconnect), on_message.py ($default)
- emitir_eventos_ws.py (invocación interna)
- limpiar_conexiones_expiradas.py (EventBridge)

Tabla: CONNECTIONS_TABLE
- connection_id (PK)
- tenant_id (GSI tenant_id-index, solo tras join-tenant)
- status, created_at, joined_at, expires_at (TTL)

Seguridad:
- El tenant lo declara el cliente en join-tenant y no se verifica
- Aislamiento de broadcasts por tenant_id
"""

from .connection_store import ConnectionStore, ConnectionStoreError
from .delivery import DeliveryChannel, clasificar_error_entrega
from .lifecycle import ConnectionLifecycle
from .broadcast import BroadcastEngine
from .ingestion_bridge import publicar_evento_nuevo
from .factory import crear_componentes
