"""
Repository de Pauta e SessaoJulgamento.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.julgamento import Pauta, SessaoJulgamento
from app.repositories.base import BaseRepository


class PautaRepository(BaseRepository[Pauta]):
    def __init__(self, db: AsyncSession):
        super().__init__(Pauta, db)


class SessaoJulgamentoRepository(BaseRepository[SessaoJulgamento]):
    def __init__(self, db: AsyncSession):
        super().__init__(SessaoJulgamento, db)
