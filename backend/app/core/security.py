"""
Módulo de segurança: emissão e verificação de tokens JWT.

O login fica a cargo do provedor de identidade; a API apenas valida
o token de acesso e extrai o usuário e o papel.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.core.config import settings


def create_access_token(
    subject: str | Any,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """
    Cria um token JWT de acesso.

    Args:
        subject: Identificador do usuário (user_id)
        expires_delta: Tempo de expiração customizado
        additional_claims: Claims adicionais (ex: role)

    Returns:
        Token JWT codificado
    """
    agora = datetime.now(timezone.utc)
    expire = agora + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode: dict[str, Any] = {
        "sub": str(subject),
        "exp": expire,
        "iat": agora,
    }
    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> dict[str, Any] | None:
    """
    Verifica e decodifica um token JWT.

    Returns:
        Payload do token ou None se inválido/expirado
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
