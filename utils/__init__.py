"""
Utilidades Comunes - Analítica en Tiempo Real

Este módulo contiene utilidades compartidas por todas las funciones Lambda:
- Timestamps en milisegundos y cálculo de TTL
- Formateo de respuestas HTTP y WebSocket
- Serialización JSON compatible con Decimal de DynamoDB
- Acceso a DynamoDB con paginación completa
- Verificación de tokens JWT
- Ejecución concurrente "esperar a todos" para broadcasts

Importaciones rápidas:
from utils import success_response, error_response, websocket_response
from utils import obtener_timestamp_ms, calcular_expiracion
from utils import get_table, query_all_pages, scan_all_pages
from utils import verificar_token_jwt, extraer_token_de_header
from utils import ejecutar_todos
"""

from .datetime_utils import (
    obtener_timestamp_ms,
    ms_a_segundos,
    calcular_expiracion,
    obtener_fecha_hora_iso
)

from .response_utils import (
    decimal_default,
    serializar_json,
    a_tipos_dynamodb,
    success_response,
    error_response,
    validation_error_response,
    unauthorized_response,
    websocket_response,
    parse_request_body,
    get_header,
    obtener_connection_id,
    log_request
)

from .dynamodb_utils import (
    get_dynamodb_resource,
    get_table,
    query_all_pages,
    scan_all_pages
)

from .jwt_utils import (
    verificar_token_jwt,
    extraer_token_de_header
)

from .code_generator import (
    generar_sufijo_aleatorio,
    generar_codigo_evento
)

from .concurrency_utils import (
    ResultadoTarea,
    ejecutar_todos
)

__version__ = "1.0.0"
