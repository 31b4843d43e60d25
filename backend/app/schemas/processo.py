"""
Schemas de Processo, Decisão e Histórico.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field, model_validator

from app.models.julgamento import TipoDecisao, TipoResultado
from app.models.processo import StatusProcesso, TipoProcesso
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


# ==================== DECISÃO ====================

class DecisaoCreate(BaseSchema):
    """Schema para registrar decisão."""

    tipo_resultado: TipoResultado
    tipo_decisao: TipoDecisao | None = None
    data_decisao: date
    sessao_id: UUID | None = None
    observacoes: str | None = None

    @model_validator(mode="after")
    def validar_merito(self) -> "DecisaoCreate":
        """JULGADO exige mérito; demais resultados não têm mérito."""
        if self.tipo_resultado == TipoResultado.JULGADO and self.tipo_decisao is None:
            raise ValueError("tipo_decisao é obrigatório quando o resultado é JULGADO")
        if self.tipo_resultado != TipoResultado.JULGADO and self.tipo_decisao is not None:
            raise ValueError("tipo_decisao só se aplica ao resultado JULGADO")
        return self


class DecisaoResponse(IDMixin, TimestampMixin, BaseSchema):
    """Schema de resposta da decisão."""

    processo_id: UUID
    sessao_id: UUID | None
    tipo_resultado: TipoResultado
    tipo_decisao: TipoDecisao | None
    data_decisao: date
    observacoes: str | None


# ==================== HISTÓRICO ====================

class HistoricoCreate(BaseSchema):
    """Entrada manual no histórico."""

    titulo: str = Field(..., min_length=1, max_length=255)
    descricao: str = Field(..., min_length=1)
    tipo: str = "EVENTO"


class HistoricoResponse(IDMixin, BaseSchema):
    titulo: str
    descricao: str
    tipo: str
    usuario_id: UUID | None
    created_at: datetime


# ==================== PROCESSO ====================

class ProcessoBase(BaseSchema):
    """Campos base do processo."""

    numero: str = Field(..., min_length=1, max_length=50)
    tipo: TipoProcesso
    valor_original: float = Field(0, ge=0)
    valor_negociado: float | None = Field(None, ge=0)
    data_abertura: date | None = None
    contribuinte_nome: str = Field(..., min_length=2, max_length=255)
    contribuinte_documento: str | None = Field(None, max_length=18)
    observacoes: str | None = None


class ProcessoCreate(ProcessoBase):
    """Schema para criação de processo."""
    pass


class ProcessoUpdate(BaseSchema):
    """Schema para atualização de processo (o tipo não muda)."""

    valor_original: float | None = Field(None, ge=0)
    valor_negociado: float | None = Field(None, ge=0)
    contribuinte_nome: str | None = Field(None, min_length=2, max_length=255)
    contribuinte_documento: str | None = Field(None, max_length=18)
    observacoes: str | None = None


class ProcessoStatusUpdate(BaseSchema):
    """Mudança manual de status."""

    status: StatusProcesso
    observacoes: str | None = None


class ProcessoResponse(ProcessoBase, IDMixin, TimestampMixin):
    """Schema de resposta do processo."""

    status: StatusProcesso
    data_abertura: date
    status_label: str | None = None
    decisoes: list[DecisaoResponse] = []


class ProcessoListResponse(BaseSchema):
    """Schema simplificado para listagem."""

    id: UUID
    numero: str
    tipo: TipoProcesso
    status: StatusProcesso
    contribuinte_nome: str
    valor_original: float
    data_abertura: date


class ProcessoAptoAcordo(ProcessoListResponse):
    """Processo julgado com decisão favorável e sem acordo ativo."""

    tipo_decisao: TipoDecisao
    data_decisao: date
