"""
Service de Processos.

Gerencia cadastro, fluxo de status, decisões e histórico do processo.
"""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.calculos.moeda import para_decimal
from app.core.exceptions import (
    BusinessRuleError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    TransicaoStatusInvalidaError,
)
from app.core.rotulos import rotulo_resultado, rotulo_status_processo
from app.db.session import unidade_de_trabalho
from app.models.julgamento import Decisao
from app.models.processo import (
    HistoricoProcesso,
    Processo,
    StatusProcesso,
    TipoProcesso,
    pode_transicionar,
)
from app.repositories.processo_repository import (
    HistoricoProcessoRepository,
    ProcessoRepository,
)
from app.schemas.processo import (
    DecisaoCreate,
    HistoricoCreate,
    ProcessoCreate,
    ProcessoUpdate,
)

logger = structlog.get_logger()

CAMPOS_MONETARIOS = ("valor_original", "valor_negociado")


def registrar_historico(
    processo: Processo,
    titulo: str,
    descricao: str,
    tipo: str = "EVENTO",
    usuario_id: UUID | None = None,
) -> HistoricoProcesso:
    """Acrescenta uma entrada ao histórico do processo (gravada no flush)."""
    historico = HistoricoProcesso(
        titulo=titulo,
        descricao=descricao,
        tipo=tipo,
        usuario_id=usuario_id,
    )
    processo.historicos.append(historico)
    return historico


def mudar_status(processo: Processo, novo: StatusProcesso) -> StatusProcesso:
    """Aplica a transição validando o fluxo; devolve o status anterior."""
    anterior = processo.status
    if not pode_transicionar(anterior, novo):
        raise TransicaoStatusInvalidaError(anterior.value, novo.value)
    processo.status = novo
    return anterior


class ProcessoService:
    """
    Service para operações com Processo.

    Gerencia o ciclo de vida do processo até o julgamento; o acordo
    fica com o AcordoService.
    """

    def __init__(self, db: AsyncSession):
        self._db = db
        self._processo_repo = ProcessoRepository(db)
        self._historico_repo = HistoricoProcessoRepository(db)

    # === PROCESSOS ===

    async def criar_processo(self, dados: ProcessoCreate) -> Processo:
        """
        Cria novo processo.

        Valida número único; o processo nasce RECEPCIONADO.
        """
        async with unidade_de_trabalho(self._db):
            if await self._processo_repo.get_by_numero(dados.numero):
                raise ResourceAlreadyExistsError("Processo", "numero", dados.numero)

            valores = dados.model_dump(exclude_none=True)
            for campo in CAMPOS_MONETARIOS:
                if campo in valores:
                    valores[campo] = para_decimal(valores[campo])

            processo = await self._processo_repo.create(
                **valores,
                status=StatusProcesso.RECEPCIONADO,
            )

        logger.info(
            "Processo criado",
            processo_id=str(processo.id),
            numero=processo.numero,
            tipo=processo.tipo.value,
        )
        return processo

    async def buscar_processo(self, processo_id: UUID) -> Processo:
        """Busca processo por ID."""
        processo = await self._processo_repo.get_by_id(processo_id)
        if not processo:
            raise ResourceNotFoundError("Processo", processo_id)
        return processo

    async def listar_processos(
        self,
        tipo: TipoProcesso | None = None,
        status: StatusProcesso | None = None,
        busca: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Processo], int]:
        """Lista processos com filtros."""
        return await self._processo_repo.list_with_filters(
            tipo=tipo,
            status=status,
            busca=busca,
            skip=skip,
            limit=limit,
        )

    async def atualizar_processo(
        self,
        processo_id: UUID,
        dados: ProcessoUpdate,
    ) -> Processo:
        """Atualiza dados cadastrais. Tipo e status não passam por aqui."""
        async with unidade_de_trabalho(self._db):
            processo = await self.buscar_processo(processo_id)
            valores = dados.model_dump(exclude_unset=True)
            for campo in CAMPOS_MONETARIOS:
                if valores.get(campo) is not None:
                    valores[campo] = para_decimal(valores[campo])
            await self._processo_repo.update(processo, **valores)

        logger.info("Processo atualizado", processo_id=str(processo_id))
        return processo

    async def alterar_status(
        self,
        processo_id: UUID,
        novo_status: StatusProcesso,
        usuario_id: UUID | None = None,
        observacoes: str | None = None,
    ) -> Processo:
        """
        Muda o status manualmente.

        Raises:
            TransicaoStatusInvalidaError: transição fora do fluxo
        """
        async with unidade_de_trabalho(self._db):
            processo = await self.buscar_processo(processo_id)
            anterior = mudar_status(processo, novo_status)
            descricao = (
                f"{rotulo_status_processo(anterior).label} → "
                f"{rotulo_status_processo(novo_status).label}"
            )
            if observacoes:
                descricao = f"{descricao}. {observacoes}"
            registrar_historico(
                processo,
                "Status Alterado",
                descricao,
                tipo="STATUS",
                usuario_id=usuario_id,
            )
            await self._db.flush()

        logger.info(
            "Status do processo alterado",
            processo_id=str(processo_id),
            de=anterior.value,
            para=novo_status.value,
        )
        return processo

    async def excluir_processo(self, processo_id: UUID) -> None:
        """Exclui processo sem decisões, pautas, acordos ou histórico."""
        async with unidade_de_trabalho(self._db):
            processo = await self.buscar_processo(processo_id)
            if processo.possui_vinculos:
                raise BusinessRuleError(
                    "Processo possui decisões, pautas, acordos ou histórico e não pode ser excluído",
                    rule="PROCESSO_COM_VINCULOS",
                )
            await self._processo_repo.delete(processo)

        logger.info("Processo excluído", processo_id=str(processo_id))

    # === DECISÕES ===

    async def registrar_decisao(
        self,
        processo_id: UUID,
        dados: DecisaoCreate,
        usuario_id: UUID | None = None,
    ) -> Decisao:
        """
        Registra o resultado do processo numa sessão.

        O processo precisa estar EM_PAUTA; o resultado define o novo
        status (JULGADO ou um dos estados que voltam para a pauta).
        """
        async with unidade_de_trabalho(self._db):
            processo = await self.buscar_processo(processo_id)
            if processo.status != StatusProcesso.EM_PAUTA:
                raise BusinessRuleError(
                    "Decisões só podem ser registradas para processos em pauta",
                    rule="PROCESSO_FORA_DE_PAUTA",
                )

            decisao = Decisao(**dados.model_dump())
            processo.decisoes.append(decisao)

            novo_status = StatusProcesso(dados.tipo_resultado.value)
            mudar_status(processo, novo_status)

            rotulo = rotulo_resultado(dados.tipo_resultado, dados.tipo_decisao)
            registrar_historico(
                processo,
                "Decisão Registrada",
                f"Resultado: {rotulo.label}",
                tipo="DECISAO",
                usuario_id=usuario_id,
            )
            await self._db.flush()

        logger.info(
            "Decisão registrada",
            processo_id=str(processo_id),
            resultado=dados.tipo_resultado.value,
            decisao=dados.tipo_decisao.value if dados.tipo_decisao else None,
        )
        return decisao

    async def listar_aptos_acordo(self) -> list[tuple[Processo, Decisao]]:
        """Processos julgados, sem acordo ativo e com última decisão favorável."""
        aptos = []
        for processo in await self._processo_repo.get_julgados_sem_acordo_ativo():
            decisao = processo.decisao_mais_recente
            if decisao is not None and decisao.favoravel:
                aptos.append((processo, decisao))
        return aptos

    # === HISTÓRICO ===

    async def listar_historico(self, processo_id: UUID) -> list[HistoricoProcesso]:
        """Histórico do processo, mais recente primeiro."""
        await self.buscar_processo(processo_id)
        return await self._historico_repo.get_by_processo(processo_id)

    async def adicionar_historico(
        self,
        processo_id: UUID,
        dados: HistoricoCreate,
        usuario_id: UUID | None = None,
    ) -> HistoricoProcesso:
        """Entrada manual no histórico."""
        async with unidade_de_trabalho(self._db):
            processo = await self.buscar_processo(processo_id)
            historico = registrar_historico(
                processo,
                dados.titulo,
                dados.descricao,
                tipo=dados.tipo,
                usuario_id=usuario_id,
            )
            await self._db.flush()
        return historico


