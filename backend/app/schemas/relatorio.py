"""
Schemas do dashboard de relatórios.

Espelham os dataclasses de `app.calculos.agregacao`; todo valor
monetário sai como float.
"""

from datetime import date

from app.models.julgamento import TipoDecisao
from app.models.processo import TipoProcesso
from app.schemas.base import BaseSchema


class PeriodoResponse(BaseSchema):
    inicio: date | None
    fim: date | None


class ContagemEntidadesResponse(BaseSchema):
    processos: int
    pautas: int
    sessoes: int
    acordos: int


class ContagemParcelasResponse(BaseSchema):
    total: int
    pendentes: int
    pagas: int
    atrasadas: int
    canceladas: int
    vencidas: int


class TotalPorTipoResponse(BaseSchema):
    tipo: TipoProcesso
    quantidade_processos: int
    quantidade_acordos: int
    valor_original: float
    valor_final: float
    valor_desconto: float
    valor_custas_honorarios: float
    valor_arrecadado: float


class TotalPorDecisaoResponse(BaseSchema):
    tipo_decisao: TipoDecisao
    quantidade_acordos: int
    valor_final: float


class PontoMensalResponse(BaseSchema):
    ano: int
    mes: int
    valor_transacao: float
    valor_compensacao: float
    valor_dacao: float
    valor_total: float
    quantidade_parcelas: int
    quantidade_acordos: int


class DashboardResponse(BaseSchema):
    """Dashboard consolidado."""

    periodo: PeriodoResponse
    totais: ContagemEntidadesResponse
    parcelas: ContagemParcelasResponse
    acordos_em_atraso: int
    valor_total_acordos: float
    valor_arrecadado: float
    por_tipo: list[TotalPorTipoResponse]
    por_decisao: list[TotalPorDecisaoResponse]
    evolucao_mensal: list[PontoMensalResponse]
