# utils/response_utils.py
import json
import logging
from decimal import Decimal

# Configurar logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS"
}


def decimal_default(obj):
    """
    Serializador JSON para valores Decimal que retorna DynamoDB

    Enteros se mantienen como int, el resto como float.
    """
    if isinstance(obj, Decimal):
        if obj == obj.to_integral_value():
            return int(obj)
        return float(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def serializar_json(data):
    """
    Serializa un payload a JSON compacto apto para el socket

    Args:
        data: Diccionario o lista a serializar (puede contener Decimal)

    Returns:
        str: JSON
    """
    return json.dumps(data, default=decimal_default, ensure_ascii=False, separators=(',', ':'))


def a_tipos_dynamodb(data):
    """
    Convierte floats a Decimal para poder guardar el dict en DynamoDB
    (boto3 rechaza float en put_item)
    """
    return json.loads(json.dumps(data, default=decimal_default), parse_float=Decimal)


def success_response(data=None, mensaje="Operación exitosa", status_code=200):
    """
    Genera una respuesta HTTP exitosa

    Args:
        data (dict, optional): Datos a retornar
        mensaje (str): Mensaje de éxito
        status_code (int): Código HTTP de respuesta

    Returns:
        dict: Respuesta HTTP formateada
    """
    response_body = {
        "success": True,
        "message": mensaje
    }

    if data is not None:
        response_body["data"] = data

    logger.info(f"Respuesta exitosa: {status_code} - {mensaje}")

    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": json.dumps(response_body, ensure_ascii=False, default=decimal_default)
    }


def error_response(mensaje="Error interno del servidor", detalles=None, status_code=500):
    """
    Genera una respuesta HTTP de error

    Args:
        mensaje (str): Mensaje de error principal
        detalles (dict, optional): Detalles adicionales del error
        status_code (int): Código HTTP de error

    Returns:
        dict: Respuesta HTTP de error formateada
    """
    response_body = {
        "success": False,
        "message": mensaje
    }

    if detalles is not None:
        response_body["data"] = detalles

    logger.error(f"Respuesta de error: {status_code} - {mensaje}")
    if detalles:
        logger.error(f"Detalles: {detalles}")

    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": json.dumps(response_body, ensure_ascii=False, default=decimal_default)
    }


def validation_error_response(errores_validacion):
    """Respuesta 400 para errores de validación"""
    return error_response(
        mensaje="Errores de validación encontrados",
        detalles=errores_validacion,
        status_code=400
    )


def unauthorized_response(mensaje="Token inválido o expirado"):
    """Respuesta 401"""
    return error_response(mensaje=mensaje, status_code=401)


def websocket_response(status_code=200, mensaje="OK"):
    """
    Respuesta para rutas WebSocket ($connect, $disconnect, $default)

    API Gateway solo mira el statusCode; el body es texto plano.
    """
    return {
        "statusCode": status_code,
        "body": mensaje
    }


def parse_request_body(event):
    """
    Parsea el body de una request HTTP

    Args:
        event (dict): Evento de Lambda

    Returns:
        dict: Body parseado, diccionario vacío si no hay body, None si es inválido
    """
    body = event.get('body')
    if not body:
        return {}
    if isinstance(body, dict):
        return body
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Error parsing request body: {e}")
        return None
    return parsed if isinstance(parsed, dict) else None


def get_header(event, header_name):
    """
    Extrae un header de la request (sin distinguir mayúsculas)

    Args:
        event (dict): Evento de Lambda
        header_name (str): Nombre del header

    Returns:
        str: Valor del header o None
    """
    headers = event.get('headers') or {}
    for key, value in headers.items():
        if key.lower() == header_name.lower():
            return value
    return None


def obtener_connection_id(event):
    """Extrae el connectionId asignado por API Gateway WebSocket"""
    return (event.get('requestContext') or {}).get('connectionId')


def log_request(event, context=None):
    """
    Registra información de la request para debugging

    Args:
        event (dict): Evento de Lambda
        context (optional): Contexto de Lambda
    """
    if context:
        logger.info(f"Request ID: {getattr(context, 'aws_request_id', 'UNKNOWN')}")

    request_context = event.get('requestContext') or {}
    if request_context.get('routeKey'):
        logger.info(f"Route: {request_context.get('routeKey')} - Connection: {request_context.get('connectionId')}")
    else:
        logger.info(f"Method: {event.get('httpMethod', 'UNKNOWN')}")
        logger.info(f"Path: {event.get('path', 'UNKNOWN')}")

    # No logear el body completo (puede contener datos del cliente)
    if event.get('body'):
        logger.info("Body present in request")
