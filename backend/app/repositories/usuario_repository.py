"""
Repository do Usuário.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.usuario import Usuario
from app.repositories.base import BaseRepository


class UsuarioRepository(BaseRepository[Usuario]):
    """Repository para operações com Usuário."""

    def __init__(self, db: AsyncSession):
        super().__init__(Usuario, db)
