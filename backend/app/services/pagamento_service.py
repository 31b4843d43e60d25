"""
Service de Pagamentos.

Registro de pagamentos de parcelas, consulta de parcelas vencidas e a
rotina diária que marca atrasos.
"""

from datetime import date, timedelta
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.calculos.moeda import formatar_real, para_decimal
from app.calculos.situacao import TOLERANCIA, conta_para_vencimento, parcela_quitada, valor_restante
from app.core.exceptions import (
    BusinessRuleError,
    InvalidAmountError,
    ResourceNotFoundError,
)
from app.db.session import unidade_de_trabalho
from app.models.acordo import StatusAcordo
from app.models.parcela import PagamentoParcela, Parcela, StatusParcela
from app.repositories.acordo_repository import AcordoRepository, ParcelaRepository
from app.schemas.parcela import PagamentoCreate
from app.services.acordo_service import concluir_se_quitado

logger = structlog.get_logger()


def _tem_parcela_atrasada(acordo) -> bool:
    return any(
        p.status == StatusParcela.ATRASADO and conta_para_vencimento(p) for p in acordo.parcelas
    )


class PagamentoService:
    """Service para pagamentos de parcelas."""

    def __init__(self, db: AsyncSession):
        self._db = db
        self._parcela_repo = ParcelaRepository(db)
        self._acordo_repo = AcordoRepository(db)

    async def buscar_parcela(self, parcela_id: UUID) -> Parcela:
        """Busca parcela com acordo e processo."""
        parcela = await self._parcela_repo.get_by_id_with_acordo(parcela_id)
        if not parcela:
            raise ResourceNotFoundError("Parcela", parcela_id)
        return parcela

    async def registrar_pagamento(
        self,
        parcela_id: UUID,
        dados: PagamentoCreate,
        usuario_id: UUID | None = None,
    ) -> Parcela:
        """
        Registra pagamento total ou parcial da parcela.

        Quitada a parcela, ela passa a PAGO. Quitado o acordo inteiro
        (parcelas e custas), o acordo é cumprido e o processo concluído,
        tudo na mesma transação.

        Raises:
            BusinessRuleError: acordo encerrado ou parcela já paga/cancelada
            InvalidAmountError: valor acima do restante da parcela
        """
        async with unidade_de_trabalho(self._db):
            parcela = await self.buscar_parcela(parcela_id)
            acordo = parcela.acordo

            if acordo.status in (StatusAcordo.CANCELADO, StatusAcordo.CUMPRIDO):
                raise BusinessRuleError(
                    f"Acordo {acordo.numero_termo} está {acordo.status.value} e não aceita pagamentos",
                    rule="ACORDO_ENCERRADO",
                )
            if parcela.status in (StatusParcela.PAGO, StatusParcela.CANCELADO):
                raise BusinessRuleError(
                    f"Parcela já está {parcela.status.value}",
                    rule="PARCELA_ENCERRADA",
                )

            restante = valor_restante(parcela)
            if dados.valor_pago - restante > TOLERANCIA:
                raise InvalidAmountError(
                    f"Valor excede o restante da parcela. Valor restante: {formatar_real(restante)}",
                    field="valor_pago",
                )

            parcela.pagamentos.append(
                PagamentoParcela(
                    valor_pago=para_decimal(dados.valor_pago),
                    data_pagamento=dados.data_pagamento,
                    forma_pagamento=dados.forma_pagamento,
                    numero_comprovante=dados.numero_comprovante,
                    observacoes=dados.observacoes,
                    registrado_por_id=usuario_id,
                )
            )

            if parcela_quitada(parcela):
                parcela.status = StatusParcela.PAGO
                parcela.data_pagamento = dados.data_pagamento

            # Acordo vencido volta a ativo quando não sobra parcela atrasada
            if acordo.status == StatusAcordo.VENCIDO and not _tem_parcela_atrasada(acordo):
                acordo.status = StatusAcordo.ATIVO

            cumprido = concluir_se_quitado(acordo, usuario_id)
            await self._db.flush()

        logger.info(
            "Pagamento registrado",
            parcela_id=str(parcela_id),
            acordo_id=str(acordo.id),
            valor=dados.valor_pago,
            parcela_paga=parcela.status == StatusParcela.PAGO,
            acordo_cumprido=cumprido,
        )
        return parcela

    async def listar_vencidas(
        self,
        dias: int = 0,
        hoje: date | None = None,
    ) -> list[Parcela]:
        """Parcelas em aberto vencidas há mais de `dias` dias."""
        hoje = hoje or date.today()
        return await self._parcela_repo.get_vencidas(hoje - timedelta(days=dias + 1))

    async def atualizar_status_vencidas(self, hoje: date | None = None) -> dict[str, int]:
        """
        Marca como ATRASADO as parcelas pendentes vencidas de acordos
        ativos. O acordo passa a VENCIDO só quando alguma parcela atrasada
        não é de honorários.
        """
        hoje = hoje or date.today()
        parcelas_marcadas = 0
        acordos_vencidos = 0

        async with unidade_de_trabalho(self._db):
            acordos = await self._acordo_repo.get_ativos_com_parcelas_vencidas(hoje)
            for acordo in acordos:
                for parcela in acordo.parcelas:
                    if parcela.status == StatusParcela.PENDENTE and parcela.data_vencimento < hoje:
                        parcela.status = StatusParcela.ATRASADO
                        parcelas_marcadas += 1
                if _tem_parcela_atrasada(acordo):
                    acordo.status = StatusAcordo.VENCIDO
                    acordos_vencidos += 1
            await self._db.flush()

        logger.info(
            "Status de vencimento atualizado",
            acordos_vencidos=acordos_vencidos,
            parcelas_atrasadas=parcelas_marcadas,
            referencia=hoje.isoformat(),
        )
        return {"acordos": acordos_vencidos, "parcelas": parcelas_marcadas}
