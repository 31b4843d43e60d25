"""
Schemas de Parcela e Pagamento.
"""

from datetime import date
from uuid import UUID

from pydantic import Field

from app.calculos.situacao import calcular_multa_juros, dias_atraso, valor_pago, valor_restante
from app.models.parcela import FormaPagamento, StatusParcela, TipoParcela
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


# ==================== PAGAMENTO ====================

class PagamentoCreate(BaseSchema):
    """Schema para registrar pagamento de parcela."""

    valor_pago: float = Field(..., gt=0)
    data_pagamento: date
    forma_pagamento: FormaPagamento
    numero_comprovante: str | None = Field(None, max_length=100)
    observacoes: str | None = None


class PagamentoResponse(IDMixin, TimestampMixin, BaseSchema):
    parcela_id: UUID
    valor_pago: float
    data_pagamento: date
    forma_pagamento: FormaPagamento
    numero_comprovante: str | None
    observacoes: str | None


# ==================== PARCELA ====================

class ParcelaResponse(IDMixin, BaseSchema):
    """Schema de resposta da parcela."""

    acordo_id: UUID
    tipo_parcela: TipoParcela
    numero: int
    valor: float
    data_vencimento: date
    data_pagamento: date | None
    status: StatusParcela

    valor_pago: float
    valor_restante: float
    pagamentos: list[PagamentoResponse] = []

    @classmethod
    def montar(cls, parcela) -> "ParcelaResponse":
        return cls(
            id=parcela.id,
            acordo_id=parcela.acordo_id,
            tipo_parcela=parcela.tipo_parcela,
            numero=parcela.numero,
            valor=parcela.valor,
            data_vencimento=parcela.data_vencimento,
            data_pagamento=parcela.data_pagamento,
            status=parcela.status,
            valor_pago=valor_pago(parcela),
            valor_restante=valor_restante(parcela),
            pagamentos=[PagamentoResponse.model_validate(p) for p in parcela.pagamentos],
        )


class ParcelaVencidaResponse(BaseSchema):
    """Parcela em atraso com encargos calculados."""

    parcela_id: UUID
    acordo_id: UUID
    numero_termo: str
    processo_numero: str
    contribuinte_nome: str
    tipo_parcela: TipoParcela
    numero: int
    valor: float
    valor_pago: float
    valor_restante: float
    data_vencimento: date
    dias_atraso: int
    valor_multa: float
    valor_juros: float
    valor_atualizado: float

    @classmethod
    def montar(cls, parcela, hoje: date) -> "ParcelaVencidaResponse":
        acordo = parcela.acordo
        restante = valor_restante(parcela)
        encargos = calcular_multa_juros(restante, dias_atraso(parcela.data_vencimento, hoje))
        return cls(
            parcela_id=parcela.id,
            acordo_id=acordo.id,
            numero_termo=acordo.numero_termo,
            processo_numero=acordo.processo.numero,
            contribuinte_nome=acordo.processo.contribuinte_nome,
            tipo_parcela=parcela.tipo_parcela,
            numero=parcela.numero,
            valor=parcela.valor,
            valor_pago=valor_pago(parcela),
            valor_restante=restante,
            data_vencimento=parcela.data_vencimento,
            dias_atraso=encargos.dias_atraso,
            valor_multa=encargos.valor_multa,
            valor_juros=encargos.valor_juros,
            valor_atualizado=encargos.valor_total,
        )
