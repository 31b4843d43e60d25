"""
Endpoints de Parcelas.

Consulta de parcelas, parcelas vencidas e registro de pagamentos.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query

from app.core.dependencies import CurrentUser, DBSession, EditorUser
from app.schemas.base import APIResponse
from app.schemas.parcela import PagamentoCreate, ParcelaResponse, ParcelaVencidaResponse
from app.services.pagamento_service import PagamentoService

router = APIRouter(prefix="/parcelas", tags=["Parcelas"])


@router.get("/vencidas", response_model=APIResponse[list[ParcelaVencidaResponse]])
async def listar_vencidas(
    db: DBSession,
    current_user: CurrentUser,
    dias: int = Query(0, ge=0, description="Vencidas há mais de N dias"),
):
    """Parcelas em aberto vencidas, com multa e juros calculados."""
    hoje = date.today()
    service = PagamentoService(db)
    parcelas = await service.listar_vencidas(dias=dias, hoje=hoje)

    return APIResponse(
        success=True,
        data=[ParcelaVencidaResponse.montar(p, hoje) for p in parcelas],
    )


@router.get("/{parcela_id}", response_model=APIResponse[ParcelaResponse])
async def buscar_parcela(
    parcela_id: UUID,
    db: DBSession,
    current_user: CurrentUser,
):
    """Busca parcela com os pagamentos registrados."""
    service = PagamentoService(db)
    parcela = await service.buscar_parcela(parcela_id)

    return APIResponse(success=True, data=ParcelaResponse.montar(parcela))


@router.post("/{parcela_id}/pagamentos", response_model=APIResponse[ParcelaResponse])
async def registrar_pagamento(
    parcela_id: UUID,
    dados: PagamentoCreate,
    db: DBSession,
    current_user: EditorUser,
):
    """
    Registra pagamento da parcela.

    Quitando a última parcela (e as custas), o acordo é cumprido.
    """
    service = PagamentoService(db)
    parcela = await service.registrar_pagamento(parcela_id, dados, usuario_id=current_user.id)

    return APIResponse(
        success=True,
        data=ParcelaResponse.montar(parcela),
        message="Pagamento registrado com sucesso",
    )
