import time
from datetime import datetime, timezone


def obtener_timestamp_ms():
    """
    Obtiene el timestamp unix actual en milisegundos

    Returns:
        int: Milisegundos desde epoch (mismo formato que Date.now() del frontend)
    """
    return int(time.time() * 1000)


def ms_a_segundos(timestamp_ms):
    """Convierte milisegundos a segundos enteros (formato TTL de DynamoDB)"""
    return int(timestamp_ms) // 1000


def calcular_expiracion(ahora_ms, ttl_segundos):
    """
    Calcula el atributo TTL absoluto de un registro

    Args:
        ahora_ms (int): Momento de referencia en milisegundos
        ttl_segundos (int): Horizonte de vida en segundos

    Returns:
        int: Epoch en segundos en que expira el registro
    """
    return ms_a_segundos(ahora_ms) + int(ttl_segundos)


def obtener_fecha_hora_iso(timestamp_ms=None):
    """
    Fecha y hora en formato ISO 8601 (UTC), para respuestas y logs

    Args:
        timestamp_ms (int, optional): Timestamp a formatear. Por defecto, ahora.

    Returns:
        str: Fecha ISO 8601
    """
    if timestamp_ms is None:
        return datetime.now(timezone.utc).isoformat()
    return datetime.fromtimestamp(int(timestamp_ms) / 1000, tz=timezone.utc).isoformat()
