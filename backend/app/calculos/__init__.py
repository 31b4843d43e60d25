"""
Núcleo de cálculo da Conciliação Fiscal.

Funções puras, sem acesso a banco: normalização monetária, valores
do acordo, cronograma de parcelas, situação e agregação de relatórios.
"""

from app.calculos.agregacao import DashboardRelatorio, PeriodoRelatorio, montar_dashboard
from app.calculos.cronograma import ParcelaGerada, gerar_cronograma
from app.calculos.moeda import arredondar_centavos, para_float
from app.calculos.valores_acordo import (
    DetalheCompensacao,
    DetalheDacao,
    DetalheTransacao,
    ValoresAcordo,
    calcular_valores,
)

__all__ = [
    "para_float",
    "arredondar_centavos",
    "DetalheCompensacao",
    "DetalheDacao",
    "DetalheTransacao",
    "ValoresAcordo",
    "calcular_valores",
    "ParcelaGerada",
    "gerar_cronograma",
    "PeriodoRelatorio",
    "DashboardRelatorio",
    "montar_dashboard",
]
