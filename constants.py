"""
Analítica en Tiempo Real - Constantes del Sistema
==================================================

Constantes centralizadas para evitar hardcodeo y facilitar mantenimiento.
Todos los Lambdas de WebSocket e ingesta deben importar desde aquí.
"""

# ============================================
# ESTADOS DE CONEXIÓN WEBSOCKET
# ============================================

# connected: conexión abierta, aún sin tenant asociado
# joined: conexión asociada a un tenant (recibe broadcasts)
STATUS_CONNECTED = 'connected'
STATUS_JOINED = 'joined'

# ============================================
# ACCIONES ENTRANTES (route $default)
# ============================================

ACTION_HEARTBEAT = 'heartbeat'
ACTION_JOIN_TENANT = 'join-tenant'
ACTION_UNKNOWN = 'unknown'

# ============================================
# MENSAJES SALIENTES (campo "type")
# ============================================

MSG_HEARTBEAT_RESPONSE = 'heartbeat-response'
MSG_JOINED = 'joined'
MSG_NEW_EVENT = 'new-event'
MSG_ECHO = 'echo'

# ============================================
# CLASIFICACIÓN DE ENTREGAS
# ============================================

# gone: el cliente ya no existe, se elimina la conexión
# transient: error recuperable (red, timeout), la conexión se conserva
ENTREGA_OK = 'delivered'
ENTREGA_GONE = 'gone'
ENTREGA_TRANSITORIA = 'transient'

# Códigos de API Gateway Management API que indican conexión muerta
CODIGOS_ERROR_GONE = ['GoneException', 'ForbiddenException']
HTTP_STATUS_GONE = [410, 403]

# ============================================
# TTL Y LÍMITES
# ============================================

CONNECTION_TTL_SECONDS = 2 * 60 * 60    # 7200s, horizonte fijo desde la conexión
DELIVERY_TIMEOUT_SECONDS = 5            # connect/read timeout por postToConnection
BROADCAST_MAX_WORKERS = 16
BROADCAST_TIMEOUT_SECONDS = 25          # por debajo del timeout típico de Lambda (30s)

DEFAULT_TENANT_INDEX = 'tenant_id-index'
