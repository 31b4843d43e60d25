"""
Endpoints de Relatórios.
"""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Query

from app.calculos.agregacao import PeriodoRelatorio
from app.core.dependencies import CurrentUser, DBSession
from app.schemas.base import APIResponse
from app.schemas.relatorio import DashboardResponse
from app.services.relatorio_service import RelatorioService

router = APIRouter(prefix="/relatorios", tags=["Relatórios"])


@router.get("/dashboard", response_model=APIResponse[DashboardResponse])
async def dashboard(
    db: DBSession,
    current_user: CurrentUser,
    inicio: date | None = Query(None, description="Início do período (inclusive)"),
    fim: date | None = Query(None, description="Fim do período (inclusive)"),
):
    """
    Dashboard financeiro do período.

    Sem datas, considera todos os acordos e mostra os últimos meses na
    série mensal.
    """
    service = RelatorioService(db)
    relatorio = await service.gerar_dashboard(PeriodoRelatorio(inicio=inicio, fim=fim))

    return APIResponse(
        success=True,
        data=DashboardResponse.model_validate(asdict(relatorio)),
    )
