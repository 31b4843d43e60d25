"""Schemas Pydantic para validação de request/response."""

from app.schemas.acordo import (
    AcordoCancelar,
    AcordoConcluir,
    AcordoCreate,
    AcordoListResponse,
    AcordoResponse,
    CompensacaoIn,
    CustasUpdate,
    DacaoIn,
    ResumoAcordo,
    TransacaoIn,
)
from app.schemas.base import (
    APIResponse,
    BaseSchema,
    ErrorDetail,
    ErrorResponse,
    IDMixin,
    PaginatedResponse,
    TimestampMixin,
)
from app.schemas.parcela import (
    PagamentoCreate,
    PagamentoResponse,
    ParcelaResponse,
    ParcelaVencidaResponse,
)
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
from app.schemas.relatorio import DashboardResponse

__all__ = [
    # Base
    "APIResponse",
    "BaseSchema",
    "ErrorDetail",
    "ErrorResponse",
    "IDMixin",
    "PaginatedResponse",
    "TimestampMixin",
    # Processo
    "ProcessoCreate",
    "ProcessoUpdate",
    "ProcessoStatusUpdate",
    "ProcessoResponse",
    "ProcessoListResponse",
    "ProcessoAptoAcordo",
    "DecisaoCreate",
    "DecisaoResponse",
    "HistoricoCreate",
    "HistoricoResponse",
    # Acordo
    "AcordoCreate",
    "AcordoConcluir",
    "AcordoCancelar",
    "AcordoResponse",
    "AcordoListResponse",
    "ResumoAcordo",
    "TransacaoIn",
    "CompensacaoIn",
    "DacaoIn",
    "CustasUpdate",
    # Parcela
    "ParcelaResponse",
    "ParcelaVencidaResponse",
    "PagamentoCreate",
    "PagamentoResponse",
    # Relatório
    "DashboardResponse",
]
