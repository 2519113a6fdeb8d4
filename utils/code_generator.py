# utils/code_generator.py
import random
import string


def generar_sufijo_aleatorio(longitud=9):
    """
    Sufijo alfanumérico en minúsculas (base 36)

    Args:
        longitud (int): Cantidad de caracteres

    Returns:
        str: Sufijo generado
    """
    caracteres = string.ascii_lowercase + string.digits
    return ''.join(random.choice(caracteres) for _ in range(longitud))


def generar_codigo_evento(tenant_id, timestamp_ms):
    """
    Genera el id de un evento de analítica en formato {tenant}-{ms}-{sufijo}

    Args:
        tenant_id (str): Tenant dueño del evento
        timestamp_ms (int): Momento de ingesta

    Returns:
        str: Id del evento (ej: acme-1730000000000-k3j9x0a2b)
    """
    return f"{tenant_id}-{timestamp_ms}-{generar_sufijo_aleatorio()}"
