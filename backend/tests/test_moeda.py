"""
Testes da normalização monetária.
"""
from decimal import Decimal

import pytest

from app.calculos.moeda import arredondar_centavos, formatar_real, para_decimal, para_float


@pytest.mark.parametrize(
    "valor, esperado",
    [
        (None, 0.0),
        (Decimal("1234.56"), 1234.56),
        (10, 10.0),
        ("1.234,56", 1234.56),
        ("R$ 99,90", 99.9),
        ("1500.75", 1500.75),
        ("", 0.0),
        ("abc", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
    ],
)
def test_para_float(valor, esperado):
    assert para_float(valor) == esperado


def test_para_float_idempotente():
    for valor in (0.0, 2666.67, 1e-2, 123456.78):
        assert para_float(para_float(valor)) == para_float(valor)


def test_arredondar_meio_para_cima():
    assert arredondar_centavos(0.125) == 0.13
    assert arredondar_centavos(2666.665) == 2666.67
    assert arredondar_centavos("10,005") == 10.01


def test_para_decimal_duas_casas():
    assert para_decimal(8000 / 3) == Decimal("2666.67")


def test_formatar_real():
    assert formatar_real(1234.5) == "R$ 1.234,50"
    assert formatar_real(Decimal("0.3")) == "R$ 0,30"
