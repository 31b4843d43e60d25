"""
Schemas de Acordo.

O corpo de criação traz um `detalhe` discriminado pelo tipo do processo.
"""

from datetime import date
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import Field

from app.models.acordo import (
    FinalidadeInscricao,
    MetodoPagamento,
    StatusAcordo,
    TipoInscricao,
)
from app.models.processo import TipoProcesso
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin
from app.schemas.parcela import ParcelaResponse


# ==================== INSCRIÇÕES E CRÉDITOS ====================

class DebitoIn(BaseSchema):
    descricao: str = Field(..., min_length=1, max_length=255)
    valor_lancado: float = Field(..., gt=0)
    data_vencimento: date | None = None


class InscricaoIn(BaseSchema):
    """
    Inscrição com seus débitos.

    O valor total das inscrições de débito é a soma dos débitos lançados;
    `valor_total` só é lido para imóveis oferecidos em dação.
    """

    numero_inscricao: str = Field(..., min_length=1, max_length=50)
    tipo_inscricao: TipoInscricao
    valor_total: float | None = Field(None, gt=0)
    descricao: str | None = None
    data_vencimento: date | None = None
    debitos: list[DebitoIn] = Field(default_factory=list)


class CreditoIn(BaseSchema):
    tipo_credito: str = Field(..., min_length=1, max_length=50)
    numero_credito: str = Field(..., min_length=1, max_length=50)
    valor: float = Field(..., gt=0)
    descricao: str | None = None
    data_vencimento: date | None = None


# ==================== DETALHES (ENTRADA) ====================

class TransacaoIn(BaseSchema):
    """Proposta de transação excepcional."""

    tipo: Literal["transacao_excepcional"] = "transacao_excepcional"
    valor_total_proposto: float = Field(..., gt=0)
    metodo_pagamento: MetodoPagamento
    quantidade_parcelas: int | None = None
    valor_entrada: float | None = None
    custas_advocaticias: float | None = Field(None, ge=0)
    custas_data_vencimento: date | None = None
    honorarios_valor: float | None = None
    inscricoes: list[InscricaoIn] = Field(..., min_length=1)


class CompensacaoIn(BaseSchema):
    """Compensação de créditos contra as inscrições incluídas."""

    tipo: Literal["compensacao"] = "compensacao"
    creditos: list[CreditoIn] = Field(..., min_length=1)
    inscricoes: list[InscricaoIn] = Field(..., min_length=1)
    custas_advocaticias: float | None = Field(None, ge=0)
    honorarios_valor: float | None = None


class DacaoIn(BaseSchema):
    """Dação em pagamento: imóveis oferecidos contra inscrições a compensar."""

    tipo: Literal["dacao_pagamento"] = "dacao_pagamento"
    inscricoes_oferecidas: list[InscricaoIn] = Field(..., min_length=1)
    inscricoes_compensar: list[InscricaoIn] = Field(..., min_length=1)
    custas_advocaticias: float | None = Field(None, ge=0)
    honorarios_valor: float | None = None


DetalheIn = Annotated[
    Union[TransacaoIn, CompensacaoIn, DacaoIn],
    Field(discriminator="tipo"),
]


class AcordoCreate(BaseSchema):
    """Schema para criação de acordo."""

    processo_id: UUID
    data_assinatura: date
    data_vencimento: date
    observacoes: str | None = None
    detalhe: DetalheIn


class AcordoConcluir(BaseSchema):
    """Conclusão manual de compensação/dação."""

    observacoes: str | None = None
    concluir_processo: bool = True


class AcordoCancelar(BaseSchema):
    motivo: str = Field(..., min_length=3)


class CustasUpdate(BaseSchema):
    """Vencimento e pagamento das custas advocatícias."""

    custas_data_vencimento: date
    custas_data_pagamento: date | None = None


# ==================== RESPOSTAS ====================

class DebitoResponse(IDMixin, BaseSchema):
    descricao: str
    valor_lancado: float
    data_vencimento: date | None


class InscricaoResponse(IDMixin, BaseSchema):
    numero_inscricao: str
    tipo_inscricao: TipoInscricao
    finalidade: FinalidadeInscricao
    valor_total: float
    descricao: str | None
    data_vencimento: date | None
    debitos: list[DebitoResponse] = []


class CreditoResponse(IDMixin, BaseSchema):
    tipo_credito: str
    numero_credito: str
    valor: float
    descricao: str | None
    data_vencimento: date | None


class CompensacaoResponse(BaseSchema):
    valor_total_creditos: float
    valor_total_debitos: float
    valor_liquido: float
    custas_advocaticias: float | None
    honorarios_valor: float | None


class DacaoResponse(BaseSchema):
    valor_total_oferecido: float
    valor_total_compensar: float
    valor_liquido: float
    custas_advocaticias: float | None
    honorarios_valor: float | None


class TransacaoResponse(BaseSchema):
    valor_total_proposto: float
    metodo_pagamento: MetodoPagamento
    valor_entrada: float | None
    quantidade_parcelas: int
    valor_parcela: float | None
    custas_advocaticias: float | None
    custas_data_vencimento: date | None
    custas_data_pagamento: date | None
    honorarios_valor: float | None


class ResumoAcordo(BaseSchema):
    """Valores calculados e situação de pagamento do acordo."""

    valor_original: float
    valor_final: float
    valor_desconto: float
    percentual_desconto: float
    valor_total_parcelas: float
    valor_pago: float
    valor_restante: float
    percentual_pago: float
    parcelas_total: int
    parcelas_pagas: int
    parcelas_pendentes: int
    parcelas_atrasadas: int


class AcordoResponse(IDMixin, TimestampMixin, BaseSchema):
    """Schema de resposta do acordo."""

    numero_termo: str
    processo_id: UUID
    tipo_processo: TipoProcesso
    data_assinatura: date
    data_vencimento: date
    status: StatusAcordo
    observacoes: str | None

    compensacao: CompensacaoResponse | None = None
    dacao: DacaoResponse | None = None
    transacao: TransacaoResponse | None = None
    inscricoes: list[InscricaoResponse] = []
    creditos: list[CreditoResponse] = []
    parcelas: list[ParcelaResponse] = []

    resumo: ResumoAcordo | None = None

    @classmethod
    def montar(cls, acordo, resumo: ResumoAcordo | None = None) -> "AcordoResponse":
        """Monta a resposta a partir do ORM; parcelas levam valores pagos."""
        return cls(
            id=acordo.id,
            created_at=acordo.created_at,
            updated_at=acordo.updated_at,
            numero_termo=acordo.numero_termo,
            processo_id=acordo.processo_id,
            tipo_processo=acordo.tipo_processo,
            data_assinatura=acordo.data_assinatura,
            data_vencimento=acordo.data_vencimento,
            status=acordo.status,
            observacoes=acordo.observacoes,
            compensacao=acordo.compensacao and CompensacaoResponse.model_validate(acordo.compensacao),
            dacao=acordo.dacao and DacaoResponse.model_validate(acordo.dacao),
            transacao=acordo.transacao and TransacaoResponse.model_validate(acordo.transacao),
            inscricoes=[InscricaoResponse.model_validate(i) for i in acordo.inscricoes],
            creditos=[CreditoResponse.model_validate(c) for c in acordo.creditos],
            parcelas=[ParcelaResponse.montar(p) for p in acordo.parcelas],
            resumo=resumo,
        )


class AcordoListResponse(BaseSchema):
    """Schema simplificado para listagem."""

    id: UUID
    numero_termo: str
    processo_id: UUID
    processo_numero: str
    contribuinte_nome: str
    tipo_processo: TipoProcesso
    status: StatusAcordo
    status_label: str | None = None
    data_assinatura: date
    data_vencimento: date
    valor_final: float | None = None
