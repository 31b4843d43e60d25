"""
Repository de Acordo e Parcela.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.acordo import Acordo, StatusAcordo
from app.models.parcela import Parcela, StatusParcela
from app.models.processo import TipoProcesso
from app.repositories.base import BaseRepository


class AcordoRepository(BaseRepository[Acordo]):
    """Repository para operações com Acordo."""

    def __init__(self, db: AsyncSession):
        super().__init__(Acordo, db)

    async def get_by_id_with_processo(self, id: UUID) -> Acordo | None:
        """Busca acordo com o processo (e suas decisões) carregado."""
        result = await self.db.execute(
            select(Acordo)
            .where(Acordo.id == id)
            .options(selectinload(Acordo.processo))
        )
        return result.scalar_one_or_none()

    async def get_ativo_by_processo(self, processo_id: UUID) -> Acordo | None:
        """Acordo ativo do processo, se houver."""
        result = await self.db.execute(
            select(Acordo).where(
                Acordo.processo_id == processo_id,
                Acordo.status == StatusAcordo.ATIVO,
            )
        )
        return result.scalars().first()

    async def list_with_filters(
        self,
        status: StatusAcordo | None = None,
        tipo_processo: TipoProcesso | None = None,
        processo_id: UUID | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Acordo], int]:
        """Lista acordos com filtros e retorna total."""
        filtros = []
        if status:
            filtros.append(Acordo.status == status)
        if tipo_processo:
            filtros.append(Acordo.tipo_processo == tipo_processo)
        if processo_id:
            filtros.append(Acordo.processo_id == processo_id)

        total = (
            await self.db.execute(
                select(func.count()).select_from(Acordo).where(*filtros)
            )
        ).scalar_one()
        result = await self.db.execute(
            select(Acordo)
            .where(*filtros)
            .options(selectinload(Acordo.processo))
            .order_by(Acordo.data_assinatura.desc(), Acordo.numero_termo.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def list_para_relatorio(self) -> list[Acordo]:
        """Todos os acordos com processo e decisões, para agregação em memória."""
        result = await self.db.execute(
            select(Acordo).options(selectinload(Acordo.processo))
        )
        return list(result.scalars().all())

    async def get_termos_do_ano(self, ano: int) -> list[str]:
        """Números de termo já emitidos no ano (sufixo /AAAA)."""
        result = await self.db.execute(
            select(Acordo.numero_termo).where(Acordo.numero_termo.like(f"%/{ano}"))
        )
        return list(result.scalars().all())

    async def get_ativos_com_parcelas_vencidas(self, hoje: date) -> list[Acordo]:
        """Acordos ativos com parcela pendente vencida antes de `hoje`."""
        vencidas = select(Parcela.acordo_id).where(
            Parcela.status == StatusParcela.PENDENTE,
            Parcela.data_vencimento < hoje,
        )
        result = await self.db.execute(
            select(Acordo).where(
                Acordo.status == StatusAcordo.ATIVO,
                Acordo.id.in_(vencidas),
            )
        )
        return list(result.scalars().all())


class ParcelaRepository(BaseRepository[Parcela]):
    """Repository para Parcela."""

    def __init__(self, db: AsyncSession):
        super().__init__(Parcela, db)

    async def get_by_id_with_acordo(self, id: UUID) -> Parcela | None:
        """Busca parcela com o acordo carregado."""
        result = await self.db.execute(
            select(Parcela)
            .where(Parcela.id == id)
            .options(selectinload(Parcela.acordo).selectinload(Acordo.processo))
        )
        return result.scalar_one_or_none()

    async def get_vencidas(self, data_limite: date) -> list[Parcela]:
        """Parcelas em aberto vencidas até a data limite, com acordo e processo."""
        result = await self.db.execute(
            select(Parcela)
            .join(Acordo, Parcela.acordo_id == Acordo.id)
            .where(
                Parcela.status.in_([StatusParcela.PENDENTE, StatusParcela.ATRASADO]),
                Parcela.data_vencimento <= data_limite,
                Acordo.status.in_([StatusAcordo.ATIVO, StatusAcordo.VENCIDO]),
            )
            .options(selectinload(Parcela.acordo).selectinload(Acordo.processo))
            .order_by(Parcela.data_vencimento)
        )
        return list(result.scalars().all())
