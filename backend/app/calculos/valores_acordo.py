"""
Cálculo dos valores de um acordo.

Cada modalidade de processo tem seu próprio detalhe e sua própria regra
para valor original e valor final; o desconto segue a mesma fórmula
para todas.
"""

from dataclasses import dataclass
from typing import Any, Iterable

from app.calculos.moeda import arredondar_centavos, para_float
from app.core.exceptions import (
    AgreementDetailNotConfiguredError,
    UnsupportedCaseTypeError,
)
from app.models.processo import TipoProcesso


@dataclass(frozen=True)
class DetalheCompensacao:
    total_creditos: float
    total_debitos: float


@dataclass(frozen=True)
class DetalheDacao:
    total_oferecido: float
    total_debitos: float


@dataclass(frozen=True)
class DetalheTransacao:
    valor_total_proposto: float
    valores_debitos: tuple[float, ...] = ()


DetalheAcordo = DetalheCompensacao | DetalheDacao | DetalheTransacao

DETALHE_POR_TIPO: dict[TipoProcesso, type] = {
    TipoProcesso.COMPENSACAO: DetalheCompensacao,
    TipoProcesso.DACAO_PAGAMENTO: DetalheDacao,
    TipoProcesso.TRANSACAO_EXCEPCIONAL: DetalheTransacao,
}


@dataclass(frozen=True)
class ValoresAcordo:
    """Valores resolvidos de um acordo."""

    valor_original: float
    valor_final: float
    valor_desconto: float
    percentual_desconto: float


def resolver_tipo(tipo: Any) -> TipoProcesso:
    """Converte para TipoProcesso ou falha com UnsupportedCaseTypeError."""
    if isinstance(tipo, TipoProcesso):
        return tipo
    try:
        return TipoProcesso(tipo)
    except ValueError:
        raise UnsupportedCaseTypeError(tipo) from None


def _com_desconto(original: float, final: float) -> ValoresAcordo:
    original = arredondar_centavos(original)
    final = arredondar_centavos(final)
    desconto = arredondar_centavos(original - final)
    percentual = desconto / original * 100 if original > 0 else 0.0
    return ValoresAcordo(
        valor_original=original,
        valor_final=final,
        valor_desconto=desconto,
        percentual_desconto=percentual,
    )


def calcular_valores(tipo: Any, detalhe: DetalheAcordo | None) -> ValoresAcordo:
    """
    Resolve valor original, final e desconto do acordo.

    Raises:
        UnsupportedCaseTypeError: tipo fora de TipoProcesso
        AgreementDetailNotConfiguredError: detalhe ausente ou de outro tipo
    """
    tipo = resolver_tipo(tipo)
    if detalhe is None or not isinstance(detalhe, DETALHE_POR_TIPO[tipo]):
        raise AgreementDetailNotConfiguredError(tipo.value)

    match detalhe:
        case DetalheTransacao(valor_total_proposto=proposto, valores_debitos=debitos):
            original = sum(para_float(v) for v in debitos)
            return _com_desconto(original, para_float(proposto))
        case DetalheCompensacao(total_creditos=creditos, total_debitos=debitos):
            creditos, debitos = para_float(creditos), para_float(debitos)
            return _com_desconto(max(creditos, debitos), min(creditos, debitos))
        case DetalheDacao(total_oferecido=oferecido, total_debitos=debitos):
            oferecido, debitos = para_float(oferecido), para_float(debitos)
            return _com_desconto(debitos, min(oferecido, debitos))
        case _:
            raise UnsupportedCaseTypeError(type(detalhe).__name__)


def _valores_lancados(inscricoes: Iterable[Any]) -> tuple[float, ...]:
    return tuple(
        para_float(debito.valor_lancado)
        for inscricao in inscricoes
        for debito in inscricao.debitos
    )


def extrair_detalhe(acordo: Any) -> DetalheAcordo | None:
    """Monta o detalhe de cálculo a partir de um Acordo persistido."""
    tipo = resolver_tipo(acordo.tipo_processo)

    match tipo:
        case TipoProcesso.TRANSACAO_EXCEPCIONAL:
            if acordo.transacao is None:
                return None
            return DetalheTransacao(
                valor_total_proposto=para_float(acordo.transacao.valor_total_proposto),
                valores_debitos=_valores_lancados(acordo.inscricoes),
            )
        case TipoProcesso.COMPENSACAO:
            if acordo.compensacao is None:
                return None
            return DetalheCompensacao(
                total_creditos=para_float(acordo.compensacao.valor_total_creditos),
                total_debitos=para_float(acordo.compensacao.valor_total_debitos),
            )
        case TipoProcesso.DACAO_PAGAMENTO:
            if acordo.dacao is None:
                return None
            return DetalheDacao(
                total_oferecido=para_float(acordo.dacao.valor_total_oferecido),
                total_debitos=para_float(acordo.dacao.valor_total_compensar),
            )


def valores_do_acordo(acordo: Any) -> ValoresAcordo:
    """Atalho: extrai o detalhe e calcula os valores do acordo."""
    detalhe = extrair_detalhe(acordo)
    if detalhe is None:
        raise AgreementDetailNotConfiguredError(acordo.tipo_processo.value, acordo.id)
    return calcular_valores(acordo.tipo_processo, detalhe)


def custas_e_honorarios(acordo: Any) -> tuple[float, float]:
    """Custas advocatícias e honorários do detalhe do acordo (0 quando ausentes)."""
    detalhe = acordo.transacao or acordo.compensacao or acordo.dacao
    if detalhe is None:
        return 0.0, 0.0
    return para_float(detalhe.custas_advocaticias), para_float(detalhe.honorarios_valor)
