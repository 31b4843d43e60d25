"""
Rótulos e cores de exibição dos códigos internos.

Mapas somente leitura; use as funções `rotulo_*` para consultar com
fallback para códigos desconhecidos.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple

from app.models.acordo import StatusAcordo
from app.models.julgamento import TipoDecisao, TipoResultado
from app.models.parcela import StatusParcela, TipoParcela
from app.models.processo import StatusProcesso, TipoProcesso


class Rotulo(NamedTuple):
    label: str
    cor: str
    descricao: str = ""


DESCONHECIDO_COR = "gray"

STATUS_PROCESSO: Mapping[StatusProcesso, Rotulo] = MappingProxyType({
    StatusProcesso.RECEPCIONADO: Rotulo("Recepcionado", "gray", "Processo recebido, aguardando análise inicial"),
    StatusProcesso.EM_ANALISE: Rotulo("Em Análise", "sky", "Processo sendo analisado pela equipe técnica"),
    StatusProcesso.EM_PAUTA: Rotulo("Em Pauta", "red", "Processo incluído em pauta para julgamento"),
    StatusProcesso.SUSPENSO: Rotulo("Suspenso", "yellow", "Processo suspenso temporariamente"),
    StatusProcesso.PEDIDO_VISTA: Rotulo("Pedido de Vista", "blue", "Conselheiro solicitou vista do processo"),
    StatusProcesso.PEDIDO_DILIGENCIA: Rotulo("Pedido de Diligência", "purple", "Solicitada diligência para complementação"),
    StatusProcesso.EM_NEGOCIACAO: Rotulo("Em Negociação", "orange", "Processo em fase de negociação de acordo"),
    StatusProcesso.JULGADO: Rotulo("Julgado", "green", "Processo julgado pela Câmara"),
    StatusProcesso.EM_CUMPRIMENTO: Rotulo("Em Cumprimento", "sky", "Acordo em fase de cumprimento"),
    StatusProcesso.CONCLUIDO: Rotulo("Concluído", "green", "Processo totalmente concluído"),
    StatusProcesso.ARQUIVADO: Rotulo("Arquivado", "gray", "Processo arquivado"),
})

TIPO_PROCESSO: Mapping[TipoProcesso, Rotulo] = MappingProxyType({
    TipoProcesso.COMPENSACAO: Rotulo("Compensação", "blue"),
    TipoProcesso.DACAO_PAGAMENTO: Rotulo("Dação em Pagamento", "purple"),
    TipoProcesso.TRANSACAO_EXCEPCIONAL: Rotulo("Transação Excepcional", "orange"),
})

TIPO_RESULTADO: Mapping[TipoResultado, Rotulo] = MappingProxyType({
    TipoResultado.SUSPENSO: Rotulo("Suspenso", "yellow", "Processo suspenso durante a sessão"),
    TipoResultado.PEDIDO_VISTA: Rotulo("Pedido de Vista", "blue", "Conselheiro solicitou vista do processo"),
    TipoResultado.PEDIDO_DILIGENCIA: Rotulo("Pedido de Diligência", "purple", "Solicitada diligência para complementação"),
    TipoResultado.EM_NEGOCIACAO: Rotulo("Em Negociação", "orange", "Processo em fase de negociação de acordo"),
    TipoResultado.JULGADO: Rotulo("Julgado", "green", "Processo julgado com decisão final"),
})

TIPO_DECISAO: Mapping[TipoDecisao, Rotulo] = MappingProxyType({
    TipoDecisao.DEFERIDO: Rotulo("Deferido", "green", "Pedido totalmente aprovado"),
    TipoDecisao.PARCIAL: Rotulo("Parcialmente Deferido", "yellow", "Pedido parcialmente aprovado"),
    TipoDecisao.INDEFERIDO: Rotulo("Indeferido", "red", "Pedido totalmente negado"),
})

STATUS_ACORDO: Mapping[StatusAcordo, Rotulo] = MappingProxyType({
    StatusAcordo.ATIVO: Rotulo("Ativo", "blue"),
    StatusAcordo.CUMPRIDO: Rotulo("Cumprido", "green"),
    StatusAcordo.VENCIDO: Rotulo("Vencido", "red"),
    StatusAcordo.CANCELADO: Rotulo("Cancelado", "gray"),
    StatusAcordo.RENEGOCIADO: Rotulo("Renegociado", "orange"),
})

STATUS_PARCELA: Mapping[StatusParcela, Rotulo] = MappingProxyType({
    StatusParcela.PENDENTE: Rotulo("Pendente", "yellow"),
    StatusParcela.PAGO: Rotulo("Pago", "green"),
    StatusParcela.ATRASADO: Rotulo("Atrasado", "red"),
    StatusParcela.CANCELADO: Rotulo("Cancelado", "gray"),
})

TIPO_PARCELA: Mapping[TipoParcela, Rotulo] = MappingProxyType({
    TipoParcela.ENTRADA: Rotulo("Entrada", "blue"),
    TipoParcela.PARCELA_ACORDO: Rotulo("Parcela do Acordo", "sky"),
    TipoParcela.PARCELA_HONORARIOS: Rotulo("Honorários", "purple"),
})

# Agrupamentos usados em filtros
STATUS_PENDENTES = frozenset({
    StatusProcesso.RECEPCIONADO,
    StatusProcesso.EM_ANALISE,
    StatusProcesso.EM_PAUTA,
    StatusProcesso.SUSPENSO,
    StatusProcesso.PEDIDO_VISTA,
    StatusProcesso.PEDIDO_DILIGENCIA,
    StatusProcesso.EM_NEGOCIACAO,
})
STATUS_COM_ACORDO = frozenset({StatusProcesso.EM_CUMPRIMENTO, StatusProcesso.CONCLUIDO})


def _consultar(mapa: Mapping, enum_class: type[Enum], codigo: Enum | str) -> Rotulo:
    try:
        chave = codigo if isinstance(codigo, enum_class) else enum_class(str(codigo).lower())
    except ValueError:
        return Rotulo(str(codigo), DESCONHECIDO_COR, "Código desconhecido")
    return mapa[chave]


def rotulo_status_processo(codigo: StatusProcesso | str) -> Rotulo:
    return _consultar(STATUS_PROCESSO, StatusProcesso, codigo)


def rotulo_tipo_processo(codigo: TipoProcesso | str) -> Rotulo:
    return _consultar(TIPO_PROCESSO, TipoProcesso, codigo)


def rotulo_tipo_resultado(codigo: TipoResultado | str) -> Rotulo:
    return _consultar(TIPO_RESULTADO, TipoResultado, codigo)


def rotulo_tipo_decisao(codigo: TipoDecisao | str) -> Rotulo:
    return _consultar(TIPO_DECISAO, TipoDecisao, codigo)


def rotulo_status_acordo(codigo: StatusAcordo | str) -> Rotulo:
    return _consultar(STATUS_ACORDO, StatusAcordo, codigo)


def rotulo_status_parcela(codigo: StatusParcela | str) -> Rotulo:
    return _consultar(STATUS_PARCELA, StatusParcela, codigo)


def rotulo_tipo_parcela(codigo: TipoParcela | str) -> Rotulo:
    return _consultar(TIPO_PARCELA, TipoParcela, codigo)


def rotulo_resultado(
    tipo_resultado: TipoResultado | str,
    tipo_decisao: TipoDecisao | str | None = None,
) -> Rotulo:
    """Rótulo de uma decisão: o mérito quando julgado, senão o resultado."""
    resultado = getattr(tipo_resultado, "value", tipo_resultado)
    if tipo_decisao and str(resultado).lower() == TipoResultado.JULGADO.value:
        return rotulo_tipo_decisao(tipo_decisao)
    return rotulo_tipo_resultado(tipo_resultado)


def opcoes_status_processo() -> list[dict[str, str]]:
    """Lista (valor, label, cor) para selects."""
    return [
        {"value": status.value, "label": rotulo.label, "cor": rotulo.cor}
        for status, rotulo in STATUS_PROCESSO.items()
    ]
