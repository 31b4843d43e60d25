"""
Endpoints de Acordos.

Criação do acordo com cronograma e ciclo de vida do termo.
"""

from uuid import UUID

from fastapi import APIRouter, Query

from app.core.dependencies import AdminUser, CurrentUser, DBSession, EditorUser
from app.core.rotulos import rotulo_status_acordo
from app.models.acordo import Acordo, StatusAcordo
from app.models.processo import TipoProcesso
from app.schemas.acordo import (
    AcordoCancelar,
    AcordoConcluir,
    AcordoCreate,
    AcordoListResponse,
    AcordoResponse,
    CustasUpdate,
)
from app.schemas.base import APIResponse, PaginatedResponse
from app.services.acordo_service import AcordoService, montar_resumo

router = APIRouter(prefix="/acordos", tags=["Acordos"])


def _resposta(acordo: Acordo) -> AcordoResponse:
    return AcordoResponse.montar(acordo, montar_resumo(acordo))


@router.post("", response_model=APIResponse[AcordoResponse])
async def criar_acordo(
    dados: AcordoCreate,
    db: DBSession,
    current_user: EditorUser,
):
    """
    Cria acordo para processo julgado com decisão favorável.

    O cronograma de parcelas é gerado e gravado junto com o acordo.
    """
    service = AcordoService(db)
    acordo = await service.criar_acordo(dados, usuario_id=current_user.id)

    return APIResponse(
        success=True,
        data=_resposta(acordo),
        message=f"Acordo {acordo.numero_termo} criado com sucesso",
    )


@router.get("", response_model=PaginatedResponse[AcordoListResponse])
async def listar_acordos(
    db: DBSession,
    current_user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    status: StatusAcordo | None = None,
    tipo_processo: TipoProcesso | None = None,
    processo_id: UUID | None = None,
):
    """Lista acordos com filtros."""
    service = AcordoService(db)
    itens, total = await service.listar_acordos(
        status=status,
        tipo_processo=tipo_processo,
        processo_id=processo_id,
        skip=skip,
        limit=limit,
    )

    return PaginatedResponse(
        success=True,
        data=[
            AcordoListResponse(
                id=acordo.id,
                numero_termo=acordo.numero_termo,
                processo_id=acordo.processo_id,
                processo_numero=acordo.processo.numero,
                contribuinte_nome=acordo.processo.contribuinte_nome,
                tipo_processo=acordo.tipo_processo,
                status=acordo.status,
                status_label=rotulo_status_acordo(acordo.status).label,
                data_assinatura=acordo.data_assinatura,
                data_vencimento=acordo.data_vencimento,
                valor_final=valor_final,
            )
            for acordo, valor_final in itens
        ],
        total=total,
        page=skip // limit + 1,
        page_size=limit,
    )


@router.get("/{acordo_id}", response_model=APIResponse[AcordoResponse])
async def buscar_acordo(
    acordo_id: UUID,
    db: DBSession,
    current_user: CurrentUser,
):
    """Busca acordo com valores calculados e situação das parcelas."""
    service = AcordoService(db)
    acordo = await service.buscar_acordo(acordo_id)

    return APIResponse(success=True, data=_resposta(acordo))


@router.post("/{acordo_id}/concluir", response_model=APIResponse[AcordoResponse])
async def concluir_acordo(
    acordo_id: UUID,
    dados: AcordoConcluir,
    db: DBSession,
    current_user: EditorUser,
):
    """Conclui acordo de compensação ou dação."""
    service = AcordoService(db)
    acordo = await service.concluir_acordo(acordo_id, dados, usuario_id=current_user.id)

    return APIResponse(
        success=True,
        data=_resposta(acordo),
        message="Acordo concluído com sucesso",
    )


@router.post("/{acordo_id}/cancelar", response_model=APIResponse[AcordoResponse])
async def cancelar_acordo(
    acordo_id: UUID,
    dados: AcordoCancelar,
    db: DBSession,
    current_user: EditorUser,
):
    """Cancela o acordo e as parcelas em aberto."""
    service = AcordoService(db)
    acordo = await service.cancelar_acordo(acordo_id, dados, usuario_id=current_user.id)

    return APIResponse(
        success=True,
        data=_resposta(acordo),
        message="Acordo cancelado",
    )


@router.patch("/{acordo_id}/custas", response_model=APIResponse[AcordoResponse])
async def atualizar_custas(
    acordo_id: UUID,
    dados: CustasUpdate,
    db: DBSession,
    current_user: EditorUser,
):
    """Registra vencimento e pagamento das custas advocatícias."""
    service = AcordoService(db)
    acordo = await service.atualizar_custas(acordo_id, dados, usuario_id=current_user.id)

    return APIResponse(success=True, data=_resposta(acordo))


@router.delete("/{acordo_id}", response_model=APIResponse[None])
async def excluir_acordo(
    acordo_id: UUID,
    db: DBSession,
    current_user: AdminUser,
):
    """Exclui acordo sem pagamentos (apenas administradores)."""
    service = AcordoService(db)
    await service.excluir_acordo(acordo_id)

    return APIResponse(success=True, message="Acordo excluído com sucesso")
