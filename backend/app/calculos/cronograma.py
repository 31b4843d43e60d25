"""
Gerador do cronograma de parcelas de um acordo.

Regras:
    - À vista (ou uma parcela): uma PARCELA_ACORDO n.º 1 no vencimento.
    - Parcelado: ENTRADA n.º 0 no vencimento (se houver) e parcelas
      1..n no vencimento + i meses; a última absorve a diferença de
      arredondamento.
    - Honorários: uma PARCELA_HONORARIOS n.º 1 no vencimento, à parte.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from dateutil.relativedelta import relativedelta

from app.calculos.moeda import arredondar_centavos, para_float
from app.core.exceptions import InvalidAmountError, InvalidInstallmentCountError
from app.models.acordo import MetodoPagamento
from app.models.parcela import StatusParcela, TipoParcela


@dataclass(frozen=True)
class ParcelaGerada:
    """Parcela calculada, ainda não persistida."""

    tipo_parcela: TipoParcela
    numero: int
    valor: float
    data_vencimento: date
    status: StatusParcela = StatusParcela.PENDENTE


def _validar(
    valor_final: float,
    quantidade_parcelas: int,
    valor_entrada: float,
    valor_honorarios: float,
) -> None:
    if quantidade_parcelas < 1:
        raise InvalidInstallmentCountError(quantidade_parcelas)
    if valor_final < 0:
        raise InvalidAmountError("Valor final não pode ser negativo", field="valor_final")
    if valor_entrada < 0:
        raise InvalidAmountError("Valor de entrada não pode ser negativo", field="valor_entrada")
    if valor_entrada > valor_final:
        raise InvalidAmountError(
            "Valor de entrada não pode ser maior que o valor final",
            field="valor_entrada",
        )
    if valor_honorarios < 0:
        raise InvalidAmountError("Honorários não podem ser negativos", field="honorarios_valor")


def gerar_cronograma(
    valor_final: Any,
    metodo_pagamento: MetodoPagamento | str,
    quantidade_parcelas: int | None,
    valor_entrada: Any,
    valor_honorarios: Any,
    data_vencimento: date,
) -> list[ParcelaGerada]:
    """
    Gera as parcelas do acordo em ordem: entrada, parcelas, honorários.

    Raises:
        InvalidInstallmentCountError: quantidade_parcelas < 1
        InvalidAmountError: valores negativos, entrada maior que o total
            ou saldo que deixaria a última parcela negativa
    """
    metodo = MetodoPagamento(metodo_pagamento)
    quantidade = 1 if quantidade_parcelas is None else quantidade_parcelas
    final = para_float(valor_final)
    entrada = para_float(valor_entrada)
    honorarios = para_float(valor_honorarios)

    _validar(final, quantidade, entrada, honorarios)

    parcelas: list[ParcelaGerada] = []

    if metodo == MetodoPagamento.A_VISTA or quantidade <= 1:
        parcelas.append(
            ParcelaGerada(
                tipo_parcela=TipoParcela.PARCELA_ACORDO,
                numero=1,
                valor=arredondar_centavos(final),
                data_vencimento=data_vencimento,
            )
        )
    else:
        principal = arredondar_centavos(final - entrada)

        if entrada > 0:
            parcelas.append(
                ParcelaGerada(
                    tipo_parcela=TipoParcela.ENTRADA,
                    numero=0,
                    valor=arredondar_centavos(entrada),
                    data_vencimento=data_vencimento,
                )
            )

        valor_parcela = arredondar_centavos(principal / quantidade)
        ultima = arredondar_centavos(principal - valor_parcela * (quantidade - 1))
        if ultima < 0:
            raise InvalidAmountError(
                f"Valor a parcelar insuficiente para {quantidade} parcelas",
                field="quantidade_parcelas",
            )

        for numero in range(1, quantidade + 1):
            parcelas.append(
                ParcelaGerada(
                    tipo_parcela=TipoParcela.PARCELA_ACORDO,
                    numero=numero,
                    valor=ultima if numero == quantidade else valor_parcela,
                    data_vencimento=data_vencimento + relativedelta(months=numero),
                )
            )

    parcelas.extend(gerar_parcela_honorarios(honorarios, data_vencimento))
    return parcelas


def gerar_parcela_honorarios(valor_honorarios: Any, data_vencimento: date) -> list[ParcelaGerada]:
    """
    Honorários em parcela única, fora do valor do acordo.

    Usado sozinho em compensação e dação, que não têm cronograma próprio.
    """
    honorarios = para_float(valor_honorarios)
    if honorarios < 0:
        raise InvalidAmountError("Honorários não podem ser negativos", field="honorarios_valor")
    if honorarios == 0:
        return []
    return [
        ParcelaGerada(
            tipo_parcela=TipoParcela.PARCELA_HONORARIOS,
            numero=1,
            valor=arredondar_centavos(honorarios),
            data_vencimento=data_vencimento,
        )
    ]


def valor_parcela_padrao(parcelas: list[ParcelaGerada]) -> float | None:
    """Valor das parcelas regulares (a primeira PARCELA_ACORDO)."""
    for parcela in parcelas:
        if parcela.tipo_parcela == TipoParcela.PARCELA_ACORDO:
            return parcela.valor
    return None
