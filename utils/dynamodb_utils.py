# utils/dynamodb_utils.py
import os
import boto3
import logging
from functools import lru_cache

# Configurar logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)


@lru_cache(maxsize=None)
def get_dynamodb_resource(region_name=None):
    """
    Recurso DynamoDB reutilizado entre invocaciones del mismo contenedor Lambda

    Args:
        region_name (str, optional): Región AWS. Por defecto AWS_REGION / AWS_DEFAULT_REGION.

    Returns:
        ServiceResource: Recurso boto3 de DynamoDB
    """
    region = region_name or os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION', 'us-east-1')
    return boto3.resource('dynamodb', region_name=region)


def get_table(table_name, region_name=None):
    """
    Obtiene una tabla DynamoDB

    Args:
        table_name (str): Nombre de la tabla
        region_name (str, optional): Región AWS

    Returns:
        Table: Instancia de la tabla DynamoDB
    """
    return get_dynamodb_resource(region_name).Table(table_name)


def query_all_pages(table, **query_params):
    """
    Ejecuta un Query siguiendo LastEvaluatedKey hasta agotar los resultados

    Args:
        table: Tabla DynamoDB (boto3 Table)
        **query_params: Parámetros de table.query

    Returns:
        list: Todos los items encontrados
    """
    items = []
    params = dict(query_params)
    while True:
        response = table.query(**params)
        items.extend(response.get('Items', []))
        last_key = response.get('LastEvaluatedKey')
        if not last_key:
            return items
        params['ExclusiveStartKey'] = last_key


def scan_all_pages(table, **scan_params):
    """
    Ejecuta un Scan completo siguiendo LastEvaluatedKey

    Args:
        table: Tabla DynamoDB (boto3 Table)
        **scan_params: Parámetros de table.scan

    Returns:
        list: Todos los items encontrados
    """
    items = []
    params = dict(scan_params)
    while True:
        response = table.scan(**params)
        items.extend(response.get('Items', []))
        last_key = response.get('LastEvaluatedKey')
        if not last_key:
            return items
        params['ExclusiveStartKey'] = last_key
