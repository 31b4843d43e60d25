"""
Motor de agregação do dashboard de relatórios.

Recebe acordos já carregados (com detalhe, parcelas, pagamentos e
decisões do processo) e agrupa em memória: os valores dependem do
tipo do processo e não dá para expressar isso numa única consulta.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping

import structlog
from dateutil.relativedelta import relativedelta

from app.calculos.moeda import arredondar_centavos, para_float
from app.calculos.situacao import acordo_em_atraso
from app.calculos.valores_acordo import custas_e_honorarios, valores_do_acordo
from app.core.exceptions import AgreementDetailNotConfiguredError, InvalidDateRangeError
from app.models.acordo import StatusAcordo
from app.models.julgamento import TipoDecisao
from app.models.parcela import StatusParcela, TipoParcela
from app.models.processo import TipoProcesso

logger = structlog.get_logger()

PARCELAS_ARRECADACAO = frozenset({TipoParcela.ENTRADA, TipoParcela.PARCELA_ACORDO})


@dataclass(frozen=True)
class PeriodoRelatorio:
    """Janela de datas do relatório; os dois limites são opcionais e inclusivos."""

    inicio: date | None = None
    fim: date | None = None

    def validar(self) -> None:
        if self.inicio and self.fim and self.inicio > self.fim:
            raise InvalidDateRangeError(self.inicio, self.fim)

    def contem(self, dia: date | None) -> bool:
        if dia is None:
            return False
        if self.inicio and dia < self.inicio:
            return False
        if self.fim and dia > self.fim:
            return False
        return True


@dataclass(frozen=True)
class ContagemEntidades:
    processos: int = 0
    pautas: int = 0
    sessoes: int = 0
    acordos: int = 0


@dataclass
class ContagemParcelas:
    total: int = 0
    pendentes: int = 0
    pagas: int = 0
    atrasadas: int = 0
    canceladas: int = 0
    vencidas: int = 0  # Vencimento passado e ainda não paga


@dataclass
class TotalPorTipo:
    tipo: TipoProcesso
    quantidade_processos: int = 0
    quantidade_acordos: int = 0
    valor_original: float = 0.0
    valor_final: float = 0.0
    valor_desconto: float = 0.0
    valor_custas_honorarios: float = 0.0
    valor_arrecadado: float = 0.0


@dataclass
class TotalPorDecisao:
    tipo_decisao: TipoDecisao
    quantidade_acordos: int = 0
    valor_final: float = 0.0


@dataclass
class PontoMensal:
    ano: int
    mes: int
    valor_transacao: float = 0.0
    valor_compensacao: float = 0.0
    valor_dacao: float = 0.0
    valor_total: float = 0.0
    quantidade_parcelas: int = 0
    quantidade_acordos: int = 0


@dataclass
class DashboardRelatorio:
    """View model do dashboard; todo valor monetário em float."""

    periodo: PeriodoRelatorio
    totais: ContagemEntidades
    parcelas: ContagemParcelas
    acordos_em_atraso: int
    valor_total_acordos: float
    valor_arrecadado: float
    por_tipo: list[TotalPorTipo] = field(default_factory=list)
    por_decisao: list[TotalPorDecisao] = field(default_factory=list)
    evolucao_mensal: list[PontoMensal] = field(default_factory=list)


def meses_da_serie(
    periodo: PeriodoRelatorio,
    hoje: date,
    meses_padrao: int = 12,
) -> list[tuple[int, int]]:
    """
    Meses (ano, mês) da série de arrecadação.

    Sem início: os `meses_padrao` meses que terminam no fim do período
    (limitado a hoje). Com início: do mês do início ao mês do fim.
    """
    fim = periodo.fim or hoje
    if periodo.inicio is None:
        fim = min(fim, hoje)
        ultimo = fim.replace(day=1)
        primeiro = ultimo - relativedelta(months=meses_padrao - 1)
    else:
        ultimo = fim.replace(day=1)
        primeiro = periodo.inicio.replace(day=1)

    meses = []
    atual = primeiro
    while atual <= ultimo:
        meses.append((atual.year, atual.month))
        atual += relativedelta(months=1)
    return meses


def contar_parcelas(parcelas: Iterable[Any], hoje: date) -> ContagemParcelas:
    contagem = ContagemParcelas()
    for parcela in parcelas:
        contagem.total += 1
        match parcela.status:
            case StatusParcela.PENDENTE:
                contagem.pendentes += 1
            case StatusParcela.PAGO:
                contagem.pagas += 1
            case StatusParcela.ATRASADO:
                contagem.atrasadas += 1
            case StatusParcela.CANCELADO:
                contagem.canceladas += 1
        if parcela.status in (StatusParcela.PENDENTE, StatusParcela.ATRASADO):
            if parcela.data_vencimento < hoje:
                contagem.vencidas += 1
    return contagem


def _decisao_mais_recente(acordo: Any) -> TipoDecisao | None:
    processo = acordo.processo
    decisao = processo.decisao_mais_recente if processo is not None else None
    return decisao.tipo_decisao if decisao is not None else None


def montar_dashboard(
    periodo: PeriodoRelatorio,
    acordos: Iterable[Any],
    totais: ContagemEntidades,
    processos_por_tipo: Mapping[TipoProcesso, int] | None = None,
    hoje: date | None = None,
    meses_padrao: int = 12,
) -> DashboardRelatorio:
    """
    Agrega os acordos no view model do dashboard.

    - Transação: arrecadado = parcelas ENTRADA/PARCELA_ACORDO pagas,
      pela data de pagamento; honorários ficam de fora.
    - Compensação/dação: arrecadado = valor final dos acordos cumpridos,
      pela data de assinatura.

    Raises:
        InvalidDateRangeError: início posterior ao fim
    """
    periodo.validar()
    hoje = hoje or date.today()
    processos_por_tipo = processos_por_tipo or {}

    por_tipo = {
        tipo: TotalPorTipo(tipo=tipo, quantidade_processos=processos_por_tipo.get(tipo, 0))
        for tipo in TipoProcesso
    }
    por_decisao: dict[TipoDecisao, TotalPorDecisao] = {}
    serie = {
        chave: PontoMensal(ano=chave[0], mes=chave[1])
        for chave in meses_da_serie(periodo, hoje, meses_padrao)
    }
    arrecadado: dict[TipoProcesso, float] = defaultdict(float)
    parcelas_no_periodo = []
    em_atraso = 0

    for acordo in acordos:
        if acordo_em_atraso(acordo, hoje):
            em_atraso += 1

        try:
            valores = valores_do_acordo(acordo)
        except AgreementDetailNotConfiguredError:
            logger.warning(
                "Acordo sem detalhe ignorado no relatório",
                acordo_id=str(acordo.id),
                tipo=acordo.tipo_processo.value,
            )
            continue

        tipo = acordo.tipo_processo
        assinado_no_periodo = periodo.contem(acordo.data_assinatura)

        if assinado_no_periodo:
            parcelas_no_periodo.extend(acordo.parcelas)

        if assinado_no_periodo and acordo.status != StatusAcordo.CANCELADO:
            total = por_tipo[tipo]
            custas, honorarios = custas_e_honorarios(acordo)
            total.quantidade_acordos += 1
            total.valor_original += valores.valor_original
            total.valor_final += valores.valor_final
            total.valor_desconto += valores.valor_desconto
            total.valor_custas_honorarios += custas + honorarios

            tipo_decisao = _decisao_mais_recente(acordo)
            if tipo_decisao is not None:
                grupo = por_decisao.setdefault(
                    tipo_decisao, TotalPorDecisao(tipo_decisao=tipo_decisao)
                )
                grupo.quantidade_acordos += 1
                grupo.valor_final += valores.valor_final

        if tipo == TipoProcesso.TRANSACAO_EXCEPCIONAL:
            for parcela in acordo.parcelas:
                if parcela.tipo_parcela not in PARCELAS_ARRECADACAO:
                    continue
                if parcela.status != StatusParcela.PAGO or parcela.data_pagamento is None:
                    continue
                valor = para_float(parcela.valor)
                if periodo.contem(parcela.data_pagamento):
                    arrecadado[tipo] += valor
                ponto = serie.get((parcela.data_pagamento.year, parcela.data_pagamento.month))
                if ponto is not None:
                    ponto.valor_transacao += valor
                    ponto.quantidade_parcelas += 1
        elif acordo.status == StatusAcordo.CUMPRIDO:
            if assinado_no_periodo:
                arrecadado[tipo] += valores.valor_final
            assinatura = acordo.data_assinatura
            ponto = serie.get((assinatura.year, assinatura.month))
            if ponto is not None:
                if tipo == TipoProcesso.COMPENSACAO:
                    ponto.valor_compensacao += valores.valor_final
                else:
                    ponto.valor_dacao += valores.valor_final
                ponto.quantidade_acordos += 1

    for tipo, total in por_tipo.items():
        total.valor_original = arredondar_centavos(total.valor_original)
        total.valor_final = arredondar_centavos(total.valor_final)
        total.valor_desconto = arredondar_centavos(total.valor_desconto)
        total.valor_custas_honorarios = arredondar_centavos(total.valor_custas_honorarios)
        total.valor_arrecadado = arredondar_centavos(arrecadado[tipo])

    for grupo in por_decisao.values():
        grupo.valor_final = arredondar_centavos(grupo.valor_final)

    for ponto in serie.values():
        ponto.valor_transacao = arredondar_centavos(ponto.valor_transacao)
        ponto.valor_compensacao = arredondar_centavos(ponto.valor_compensacao)
        ponto.valor_dacao = arredondar_centavos(ponto.valor_dacao)
        ponto.valor_total = arredondar_centavos(
            ponto.valor_transacao + ponto.valor_compensacao + ponto.valor_dacao
        )

    return DashboardRelatorio(
        periodo=periodo,
        totais=totais,
        parcelas=contar_parcelas(parcelas_no_periodo, hoje),
        acordos_em_atraso=em_atraso,
        valor_total_acordos=arredondar_centavos(sum(t.valor_final for t in por_tipo.values())),
        valor_arrecadado=arredondar_centavos(sum(arrecadado.values())),
        por_tipo=list(por_tipo.values()),
        por_decisao=sorted(por_decisao.values(), key=lambda g: g.tipo_decisao.value),
        evolucao_mensal=[serie[chave] for chave in sorted(serie)],
    )
