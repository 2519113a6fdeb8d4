# utils/jwt_utils.py
import jwt
import os
import logging

# Configurar logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Configuración JWT (los tokens los emite el servicio de auth, aquí solo se verifican)
DEFAULT_JWT_SECRET = 'your-secret-key'


def cargar_secreto_jwt():
    """Lee JWT_SECRET; sin la variable se usa el secreto por defecto y se avisa"""
    secreto = os.environ.get('JWT_SECRET')
    if not secreto:
        logger.warning("JWT_SECRET no configurado, usando secreto por defecto (inseguro fuera de desarrollo)")
        return DEFAULT_JWT_SECRET
    return secreto


JWT_SECRET = cargar_secreto_jwt()
JWT_ALGORITHM = 'HS256'
JWT_AUDIENCE = os.environ.get('JWT_AUDIENCE')


def extraer_token_de_header(auth_header):
    """
    Extrae el token del header Authorization

    Args:
        auth_header (str): Valor del header ("Bearer <token>" o el token solo)

    Returns:
        str: Token o None
    """
    if not auth_header:
        return None
    auth_header = auth_header.strip()
    if auth_header.startswith('Bearer '):
        auth_header = auth_header[7:].strip()
    return auth_header or None


def verificar_token_jwt(token, secret=None):
    """
    Verifica y decodifica un token JWT

    Args:
        token (str): Token JWT a verificar
        secret (str, optional): Secreto a usar en lugar de JWT_SECRET

    Returns:
        dict: Payload decodificado o None si es inválido
    """
    try:
        opciones = {}
        if JWT_AUDIENCE:
            opciones['audience'] = JWT_AUDIENCE
        else:
            opciones['options'] = {'verify_aud': False}

        payload = jwt.decode(
            token,
            secret or JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            **opciones
        )

        if not payload.get('tenantId'):
            logger.error("Token JWT sin tenantId")
            return None

        return payload

    except jwt.ExpiredSignatureError:
        logger.error("Token JWT expirado")
        return None
    except jwt.InvalidTokenError as e:
        logger.error(f"Token JWT inválido: {e}")
        return None
