"""
Service de Relatórios.

Busca contagens e acordos no banco e entrega ao motor de agregação.
"""

from datetime import date, datetime, time, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.calculos.agregacao import (
    ContagemEntidades,
    DashboardRelatorio,
    PeriodoRelatorio,
    montar_dashboard,
)
from app.core.config import settings
from app.repositories.acordo_repository import AcordoRepository
from app.repositories.julgamento_repository import (
    PautaRepository,
    SessaoJulgamentoRepository,
)
from app.repositories.processo_repository import ProcessoRepository

logger = structlog.get_logger()


def _janela(periodo: PeriodoRelatorio) -> tuple[datetime | None, datetime | None]:
    """Converte o período em limites de created_at (dias inteiros, UTC)."""
    inicio = datetime.combine(periodo.inicio, time.min, timezone.utc) if periodo.inicio else None
    fim = datetime.combine(periodo.fim, time.max, timezone.utc) if periodo.fim else None
    return inicio, fim


class RelatorioService:
    """Service somente leitura para o dashboard."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self._processo_repo = ProcessoRepository(db)
        self._pauta_repo = PautaRepository(db)
        self._sessao_repo = SessaoJulgamentoRepository(db)
        self._acordo_repo = AcordoRepository(db)

    async def gerar_dashboard(
        self,
        periodo: PeriodoRelatorio,
        hoje: date | None = None,
    ) -> DashboardRelatorio:
        """
        Monta o dashboard do período.

        As consultas rodam em sequência na mesma sessão; a agregação é
        feita em memória por `montar_dashboard`.

        Raises:
            InvalidDateRangeError: início posterior ao fim
        """
        periodo.validar()
        inicio, fim = _janela(periodo)

        totais = ContagemEntidades(
            processos=await self._processo_repo.count_created_between(inicio, fim),
            pautas=await self._pauta_repo.count_created_between(inicio, fim),
            sessoes=await self._sessao_repo.count_created_between(inicio, fim),
            acordos=await self._acordo_repo.count_created_between(inicio, fim),
        )
        processos_por_tipo = await self._processo_repo.count_por_tipo_created_between(inicio, fim)
        acordos = await self._acordo_repo.list_para_relatorio()

        dashboard = montar_dashboard(
            periodo,
            acordos,
            totais,
            processos_por_tipo=processos_por_tipo,
            hoje=hoje,
            meses_padrao=settings.RELATORIO_MESES_PADRAO,
        )

        logger.info(
            "Dashboard gerado",
            inicio=periodo.inicio.isoformat() if periodo.inicio else None,
            fim=periodo.fim.isoformat() if periodo.fim else None,
            acordos=len(acordos),
            valor_arrecadado=dashboard.valor_arrecadado,
        )
        return dashboard
