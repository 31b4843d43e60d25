"""
Endpoints de Processos.

Rotas para cadastro, fluxo de status, decisões e histórico.
"""

from uuid import UUID

from fastapi import APIRouter, Query

from app.core.dependencies import AdminUser, CurrentUser, DBSession, EditorUser
from app.core.rotulos import opcoes_status_processo, rotulo_status_processo
from app.models.processo import Processo, StatusProcesso, TipoProcesso
from app.schemas.base import APIResponse, PaginatedResponse
from app.schemas.processo import (
    DecisaoCreate,
    DecisaoResponse,
    HistoricoCreate,
    HistoricoResponse,
    ProcessoAptoAcordo,
    ProcessoCreate,
    ProcessoListResponse,
    ProcessoResponse,
    ProcessoStatusUpdate,
    ProcessoUpdate,
)
from app.services.processo_service import ProcessoService

router = APIRouter(prefix="/processos", tags=["Processos"])


def _resposta(processo: Processo) -> ProcessoResponse:
    resposta = ProcessoResponse.model_validate(processo)
    resposta.status_label = rotulo_status_processo(processo.status).label
    return resposta


# === PROCESSOS ===


@router.post("", response_model=APIResponse[ProcessoResponse])
async def criar_processo(
    dados: ProcessoCreate,
    db: DBSession,
    current_user: EditorUser,
):
    """Cria novo processo."""
    service = ProcessoService(db)
    processo = await service.criar_processo(dados)

    return APIResponse(
        success=True,
        data=_resposta(processo),
        message="Processo criado com sucesso",
    )


@router.get("", response_model=PaginatedResponse[ProcessoListResponse])
async def listar_processos(
    db: DBSession,
    current_user: CurrentUser,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    tipo: TipoProcesso | None = None,
    status: StatusProcesso | None = None,
    busca: str | None = Query(None, min_length=2, description="Número, contribuinte ou documento"),
):
    """Lista processos com filtros."""
    service = ProcessoService(db)
    processos, total = await service.listar_processos(
        tipo=tipo,
        status=status,
        busca=busca,
        skip=skip,
        limit=limit,
    )

    return PaginatedResponse(
        success=True,
        data=[ProcessoListResponse.model_validate(p) for p in processos],
        total=total,
        page=skip // limit + 1,
        page_size=limit,
    )


@router.get("/status-opcoes", response_model=APIResponse[list[dict[str, str]]])
async def listar_opcoes_status(current_user: CurrentUser):
    """Status do processo com label e cor, para filtros e selects."""
    return APIResponse(success=True, data=opcoes_status_processo())


@router.get("/aptos-acordo", response_model=APIResponse[list[ProcessoAptoAcordo]])
async def listar_aptos_acordo(
    db: DBSession,
    current_user: CurrentUser,
):
    """Processos julgados com decisão favorável e sem acordo ativo."""
    service = ProcessoService(db)
    aptos = await service.listar_aptos_acordo()

    return APIResponse(
        success=True,
        data=[
            ProcessoAptoAcordo(
                id=processo.id,
                numero=processo.numero,
                tipo=processo.tipo,
                status=processo.status,
                contribuinte_nome=processo.contribuinte_nome,
                valor_original=processo.valor_original,
                data_abertura=processo.data_abertura,
                tipo_decisao=decisao.tipo_decisao,
                data_decisao=decisao.data_decisao,
            )
            for processo, decisao in aptos
        ],
    )


@router.get("/{processo_id}", response_model=APIResponse[ProcessoResponse])
async def buscar_processo(
    processo_id: UUID,
    db: DBSession,
    current_user: CurrentUser,
):
    """Busca processo por ID."""
    service = ProcessoService(db)
    processo = await service.buscar_processo(processo_id)

    return APIResponse(success=True, data=_resposta(processo))


@router.patch("/{processo_id}", response_model=APIResponse[ProcessoResponse])
async def atualizar_processo(
    processo_id: UUID,
    dados: ProcessoUpdate,
    db: DBSession,
    current_user: EditorUser,
):
    """Atualiza dados cadastrais do processo."""
    service = ProcessoService(db)
    processo = await service.atualizar_processo(processo_id, dados)

    return APIResponse(
        success=True,
        data=_resposta(processo),
        message="Processo atualizado com sucesso",
    )


@router.patch("/{processo_id}/status", response_model=APIResponse[ProcessoResponse])
async def alterar_status(
    processo_id: UUID,
    dados: ProcessoStatusUpdate,
    db: DBSession,
    current_user: EditorUser,
):
    """Muda o status respeitando o fluxo do processo."""
    service = ProcessoService(db)
    processo = await service.alterar_status(
        processo_id,
        dados.status,
        usuario_id=current_user.id,
        observacoes=dados.observacoes,
    )

    return APIResponse(success=True, data=_resposta(processo))


@router.delete("/{processo_id}", response_model=APIResponse[None])
async def excluir_processo(
    processo_id: UUID,
    db: DBSession,
    current_user: AdminUser,
):
    """Exclui processo sem vínculos."""
    service = ProcessoService(db)
    await service.excluir_processo(processo_id)

    return APIResponse(success=True, message="Processo excluído com sucesso")


# === DECISÕES ===


@router.post("/{processo_id}/decisoes", response_model=APIResponse[DecisaoResponse])
async def registrar_decisao(
    processo_id: UUID,
    dados: DecisaoCreate,
    db: DBSession,
    current_user: EditorUser,
):
    """Registra o resultado do processo na sessão de julgamento."""
    service = ProcessoService(db)
    decisao = await service.registrar_decisao(processo_id, dados, usuario_id=current_user.id)

    return APIResponse(
        success=True,
        data=DecisaoResponse.model_validate(decisao),
        message="Decisão registrada com sucesso",
    )


# === HISTÓRICO ===


@router.get("/{processo_id}/historico", response_model=APIResponse[list[HistoricoResponse]])
async def listar_historico(
    processo_id: UUID,
    db: DBSession,
    current_user: CurrentUser,
):
    """Linha do tempo do processo."""
    service = ProcessoService(db)
    historico = await service.listar_historico(processo_id)

    return APIResponse(
        success=True,
        data=[HistoricoResponse.model_validate(h) for h in historico],
    )


@router.post("/{processo_id}/historico", response_model=APIResponse[HistoricoResponse])
async def adicionar_historico(
    processo_id: UUID,
    dados: HistoricoCreate,
    db: DBSession,
    current_user: EditorUser,
):
    """Adiciona entrada manual ao histórico."""
    service = ProcessoService(db)
    historico = await service.adicionar_historico(processo_id, dados, usuario_id=current_user.id)

    return APIResponse(success=True, data=HistoricoResponse.model_validate(historico))
