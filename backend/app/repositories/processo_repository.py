"""
Repository de Processo e HistoricoProcesso.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.acordo import Acordo, StatusAcordo
from app.models.processo import HistoricoProcesso, Processo, StatusProcesso, TipoProcesso
from app.repositories.base import BaseRepository


class ProcessoRepository(BaseRepository[Processo]):
    """Repository para operações com Processo."""

    def __init__(self, db: AsyncSession):
        super().__init__(Processo, db)

    async def get_by_numero(self, numero: str) -> Processo | None:
        """Busca processo pelo número."""
        result = await self.db.execute(
            select(Processo).where(Processo.numero == numero)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, id: UUID) -> Processo | None:
        """Busca processo travando a linha até o fim da transação."""
        result = await self.db.execute(
            select(Processo)
            .where(Processo.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    def _filtros(
        self,
        query,
        tipo: TipoProcesso | None = None,
        status: StatusProcesso | None = None,
        busca: str | None = None,
    ):
        if tipo:
            query = query.where(Processo.tipo == tipo)
        if status:
            query = query.where(Processo.status == status)
        if busca:
            termo = f"%{busca}%"
            query = query.where(
                or_(
                    Processo.numero.ilike(termo),
                    Processo.contribuinte_nome.ilike(termo),
                    Processo.contribuinte_documento.ilike(termo),
                )
            )
        return query

    async def list_with_filters(
        self,
        tipo: TipoProcesso | None = None,
        status: StatusProcesso | None = None,
        busca: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Processo], int]:
        """Lista processos com filtros e retorna total."""
        query = self._filtros(select(Processo), tipo, status, busca)
        count_query = self._filtros(
            select(func.count()).select_from(Processo), tipo, status, busca
        )

        total = (await self.db.execute(count_query)).scalar_one()
        result = await self.db.execute(
            query.order_by(Processo.data_abertura.desc(), Processo.numero)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def get_julgados_sem_acordo_ativo(self) -> list[Processo]:
        """Processos julgados sem acordo ativo (candidatos a acordo)."""
        com_acordo_ativo = select(Acordo.processo_id).where(
            Acordo.status == StatusAcordo.ATIVO
        )
        result = await self.db.execute(
            select(Processo)
            .where(
                Processo.status == StatusProcesso.JULGADO,
                Processo.id.not_in(com_acordo_ativo),
            )
            .order_by(Processo.numero)
        )
        return list(result.scalars().all())

    async def count_por_tipo_created_between(
        self,
        inicio: datetime | None,
        fim: datetime | None,
    ) -> dict[TipoProcesso, int]:
        """Conta processos por tipo na janela de criação."""
        query = select(Processo.tipo, func.count()).group_by(Processo.tipo)
        if inicio:
            query = query.where(Processo.created_at >= inicio)
        if fim:
            query = query.where(Processo.created_at <= fim)
        result = await self.db.execute(query)
        return {tipo: total for tipo, total in result.all()}


class HistoricoProcessoRepository(BaseRepository[HistoricoProcesso]):
    """Repository para o histórico do processo."""

    def __init__(self, db: AsyncSession):
        super().__init__(HistoricoProcesso, db)

    async def get_by_processo(self, processo_id: UUID) -> list[HistoricoProcesso]:
        """Histórico do processo, mais recente primeiro."""
        result = await self.db.execute(
            select(HistoricoProcesso)
            .where(HistoricoProcesso.processo_id == processo_id)
            .order_by(HistoricoProcesso.created_at.desc())
        )
        return list(result.scalars().all())
