"""
Situação de parcelas e acordos: valores pagos, atraso, multa e juros.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable

from app.calculos.moeda import arredondar_centavos, para_float
from app.core.config import settings
from app.models.acordo import StatusAcordo
from app.models.parcela import StatusParcela, TipoParcela

TOLERANCIA = 0.005  # meio centavo


@dataclass(frozen=True)
class EncargosAtraso:
    dias_atraso: int
    valor_multa: float
    valor_juros: float
    valor_total: float


@dataclass(frozen=True)
class ResumoParcelas:
    """Totais do cronograma de um acordo."""

    valor_total: float
    valor_pago: float
    valor_restante: float
    percentual_pago: float
    parcelas_total: int
    parcelas_pagas: int
    parcelas_pendentes: int
    parcelas_atrasadas: int


def valor_pago(parcela: Any) -> float:
    """Soma dos pagamentos registrados na parcela."""
    return arredondar_centavos(sum(para_float(p.valor_pago) for p in parcela.pagamentos))


def valor_restante(parcela: Any) -> float:
    return max(arredondar_centavos(para_float(parcela.valor) - valor_pago(parcela)), 0.0)


def parcela_quitada(parcela: Any) -> bool:
    if parcela.status == StatusParcela.PAGO:
        return True
    return para_float(parcela.valor) - valor_pago(parcela) <= TOLERANCIA


def situacao_parcela(parcela: Any, hoje: date | None = None) -> StatusParcela:
    """Status efetivo da parcela na data de referência."""
    hoje = hoje or date.today()
    if parcela.status == StatusParcela.CANCELADO:
        return StatusParcela.CANCELADO
    if parcela_quitada(parcela):
        return StatusParcela.PAGO
    if parcela.data_vencimento < hoje:
        return StatusParcela.ATRASADO
    return StatusParcela.PENDENTE


def dias_atraso(data_vencimento: date, hoje: date | None = None) -> int:
    hoje = hoje or date.today()
    return max((hoje - data_vencimento).days, 0)


def calcular_multa_juros(
    valor: Any,
    dias: int,
    multa_percentual: float | None = None,
    juros_dia_percentual: float | None = None,
) -> EncargosAtraso:
    """
    Encargos por atraso: multa fixa sobre a parcela mais juros diários.

    Percentuais padrão vêm de MULTA_ATRASO_PERCENTUAL e JUROS_DIA_PERCENTUAL.
    """
    base = para_float(valor)
    if dias <= 0:
        return EncargosAtraso(0, 0.0, 0.0, arredondar_centavos(base))

    if multa_percentual is None:
        multa_percentual = settings.MULTA_ATRASO_PERCENTUAL
    if juros_dia_percentual is None:
        juros_dia_percentual = settings.JUROS_DIA_PERCENTUAL

    multa = arredondar_centavos(base * multa_percentual / 100)
    juros = arredondar_centavos(base * juros_dia_percentual / 100 * dias)
    return EncargosAtraso(
        dias_atraso=dias,
        valor_multa=multa,
        valor_juros=juros,
        valor_total=arredondar_centavos(base + multa + juros),
    )


def conta_para_vencimento(parcela: Any) -> bool:
    """Honorários em atraso não deixam o acordo vencido nem inadimplente."""
    return parcela.tipo_parcela != TipoParcela.PARCELA_HONORARIOS


def parcela_inadimplente(parcela: Any, hoje: date) -> bool:
    """
    Parcela do acordo vencida e sem nenhum pagamento.

    Um pagamento parcial já tira a parcela da inadimplência.
    """
    if not conta_para_vencimento(parcela):
        return False
    if parcela.status in (StatusParcela.PAGO, StatusParcela.CANCELADO):
        return False
    return parcela.data_vencimento < hoje and not parcela.pagamentos


def acordo_em_atraso(acordo: Any, hoje: date) -> bool:
    """Acordo em vigor (ATIVO ou já marcado VENCIDO) com alguma parcela inadimplente."""
    if acordo.status not in (StatusAcordo.ATIVO, StatusAcordo.VENCIDO):
        return False
    return any(parcela_inadimplente(p, hoje) for p in acordo.parcelas)


def resumir_parcelas(parcelas: Iterable[Any], hoje: date | None = None) -> ResumoParcelas:
    """Consolida valores e contagens das parcelas não canceladas."""
    hoje = hoje or date.today()
    ativas = [p for p in parcelas if p.status != StatusParcela.CANCELADO]

    total = arredondar_centavos(sum(para_float(p.valor) for p in ativas))
    pago = arredondar_centavos(sum(valor_pago(p) for p in ativas))
    situacoes = [situacao_parcela(p, hoje) for p in ativas]

    return ResumoParcelas(
        valor_total=total,
        valor_pago=pago,
        valor_restante=max(arredondar_centavos(total - pago), 0.0),
        percentual_pago=round(pago / total * 100, 2) if total > 0 else 0.0,
        parcelas_total=len(ativas),
        parcelas_pagas=situacoes.count(StatusParcela.PAGO),
        parcelas_pendentes=situacoes.count(StatusParcela.PENDENTE),
        parcelas_atrasadas=situacoes.count(StatusParcela.ATRASADO),
    )


def todas_quitadas(parcelas: Iterable[Any]) -> bool:
    """Todas as parcelas não canceladas estão pagas."""
    return all(
        parcela_quitada(p) for p in parcelas if p.status != StatusParcela.CANCELADO
    )
