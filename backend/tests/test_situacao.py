"""
Testes da situação de parcelas e acordos.
"""
from datetime import date
from types import SimpleNamespace

import pytest

from app.calculos.situacao import (
    acordo_em_atraso,
    calcular_multa_juros,
    conta_para_vencimento,
    dias_atraso,
    parcela_inadimplente,
    resumir_parcelas,
    situacao_parcela,
    todas_quitadas,
    valor_restante,
)
from app.models.acordo import StatusAcordo
from app.models.parcela import StatusParcela, TipoParcela

HOJE = date(2024, 3, 1)


def _parcela(valor=1000, vencimento=date(2024, 2, 1), status=StatusParcela.PENDENTE,
             tipo=TipoParcela.PARCELA_ACORDO, pagamentos=()):
    return SimpleNamespace(
        valor=valor,
        data_vencimento=vencimento,
        status=status,
        tipo_parcela=tipo,
        pagamentos=[SimpleNamespace(valor_pago=v) for v in pagamentos],
    )


def test_situacao_parcela():
    assert situacao_parcela(_parcela(), HOJE) == StatusParcela.ATRASADO
    assert situacao_parcela(_parcela(vencimento=date(2024, 3, 1)), HOJE) == StatusParcela.PENDENTE
    assert situacao_parcela(_parcela(pagamentos=[600, 400]), HOJE) == StatusParcela.PAGO
    assert situacao_parcela(_parcela(status=StatusParcela.CANCELADO), HOJE) == StatusParcela.CANCELADO


def test_valor_restante_nunca_negativo():
    assert valor_restante(_parcela(pagamentos=[250])) == 750.0
    assert valor_restante(_parcela(pagamentos=[1000])) == 0.0


def test_multa_e_juros():
    encargos = calcular_multa_juros(1000, 30, multa_percentual=2, juros_dia_percentual=0.033)

    assert encargos.dias_atraso == 30
    assert encargos.valor_multa == 20.0
    assert encargos.valor_juros == 9.9
    assert encargos.valor_total == 1029.9


def test_sem_atraso_sem_encargos():
    encargos = calcular_multa_juros(1000, 0)
    assert encargos.valor_multa == 0.0
    assert encargos.valor_total == 1000.0
    assert dias_atraso(date(2024, 3, 10), HOJE) == 0
    assert dias_atraso(date(2024, 2, 20), HOJE) == 10


def test_pagamento_parcial_cura_inadimplencia():
    assert parcela_inadimplente(_parcela(), HOJE) is True
    assert parcela_inadimplente(_parcela(pagamentos=[1]), HOJE) is False


def test_honorarios_nao_contam_para_atraso():
    honorarios = _parcela(tipo=TipoParcela.PARCELA_HONORARIOS)
    assert parcela_inadimplente(honorarios, HOJE) is False
    assert conta_para_vencimento(honorarios) is False
    assert conta_para_vencimento(_parcela(tipo=TipoParcela.ENTRADA)) is True


@pytest.mark.parametrize(
    "status, esperado",
    [
        (StatusAcordo.ATIVO, True),
        (StatusAcordo.VENCIDO, True),
        (StatusAcordo.CANCELADO, False),
        (StatusAcordo.CUMPRIDO, False),
    ],
)
def test_acordo_em_atraso(status, esperado):
    acordo = SimpleNamespace(status=status, parcelas=[_parcela()])
    assert acordo_em_atraso(acordo, HOJE) is esperado


def test_resumo_ignora_canceladas():
    parcelas = [
        _parcela(valor=500, pagamentos=[500], status=StatusParcela.PAGO),
        _parcela(valor=500, pagamentos=[100]),
        _parcela(valor=500, vencimento=date(2024, 4, 1)),
        _parcela(valor=999, status=StatusParcela.CANCELADO),
    ]

    resumo = resumir_parcelas(parcelas, HOJE)

    assert resumo.valor_total == 1500.0
    assert resumo.valor_pago == 600.0
    assert resumo.valor_restante == 900.0
    assert resumo.percentual_pago == 40.0
    assert resumo.parcelas_total == 3
    assert resumo.parcelas_pagas == 1
    assert resumo.parcelas_atrasadas == 1
    assert resumo.parcelas_pendentes == 1


def test_todas_quitadas():
    assert todas_quitadas([_parcela(pagamentos=[1000]), _parcela(status=StatusParcela.CANCELADO)])
    assert not todas_quitadas([_parcela(pagamentos=[999.99])])
