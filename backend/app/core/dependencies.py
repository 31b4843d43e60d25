"""
Dependências injetáveis do FastAPI.

Sessão de banco, usuário autenticado (JWT) e controle por role.
"""

from typing import Annotated, AsyncGenerator
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InsufficientPermissionsError
from app.core.security import verify_token
from app.db.session import async_session_maker
from app.models.usuario import UserRole, Usuario
from app.repositories.usuario_repository import UsuarioRepository

security = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency que fornece uma sessão de banco de dados.

    O commit é responsabilidade da unidade de trabalho dos services.

    Uso:
        @router.get("/items")
        async def get_items(db: DBSession):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


def _nao_autenticado(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Usuario:
    """
    Dependency que retorna o usuário autenticado pelo JWT.

    Raises:
        HTTPException 401: token ausente/inválido ou usuário não encontrado
        HTTPException 403: usuário inativo
    """
    if credentials is None:
        raise _nao_autenticado("Token de autenticação não fornecido")

    payload = verify_token(credentials.credentials)
    if payload is None or not payload.get("sub"):
        raise _nao_autenticado("Credenciais inválidas")

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise _nao_autenticado("Credenciais inválidas") from None

    user = await UsuarioRepository(db).get_by_id(user_id)
    if user is None:
        raise _nao_autenticado("Usuário não encontrado no sistema")
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuário inativo",
        )
    return user


def require_roles(*roles: UserRole):
    """
    Factory para criar dependency que exige roles específicos.

    Uso:
        @router.delete("/{id}")
        async def excluir(user: Annotated[Usuario, Depends(require_roles(UserRole.ADMIN))]):
            ...
    """
    async def role_checker(
        current_user: Annotated[Usuario, Depends(get_current_user)],
    ) -> Usuario:
        if current_user.role not in roles:
            raise InsufficientPermissionsError(
                f"Requer role: {', '.join(r.value for r in roles)}"
            )
        return current_user

    return role_checker


# Type aliases para facilitar uso nas rotas
DBSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[Usuario, Depends(get_current_user)]

# Role-based dependencies
AdminUser = Annotated[Usuario, Depends(require_roles(UserRole.ADMIN))]
EditorUser = Annotated[
    Usuario,
    Depends(require_roles(UserRole.ADMIN, UserRole.FUNCIONARIO)),
]
