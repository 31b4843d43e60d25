"""
Normalização de valores monetários.

Todo valor que vem do banco (Numeric/Decimal), de formulários ou de
importações legadas passa por `para_float` antes de qualquer cálculo
ou serialização.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENTAVO = Decimal("0.01")


def para_float(valor: Any) -> float:
    """
    Converte um valor monetário para float.

    - None, string vazia ou texto não numérico viram 0.0
    - Strings com vírgula decimal ("1.234,56") são aceitas
    - NaN e infinito viram 0.0
    """
    if valor is None:
        return 0.0

    if isinstance(valor, str):
        texto = valor.strip().replace("R$", "").strip()
        if not texto:
            return 0.0
        if "," in texto:
            texto = texto.replace(".", "").replace(",", ".")
        try:
            numero = float(texto)
        except ValueError:
            return 0.0
    else:
        try:
            numero = float(valor)
        except (TypeError, ValueError, InvalidOperation):
            return 0.0

    if math.isnan(numero) or math.isinf(numero):
        return 0.0
    return numero


def arredondar_centavos(valor: Any) -> float:
    """Arredonda para centavos (meio para cima)."""
    decimal = Decimal(str(para_float(valor)))
    return float(decimal.quantize(CENTAVO, rounding=ROUND_HALF_UP))


def para_decimal(valor: Any) -> Decimal:
    """Converte para Decimal com duas casas, para persistência."""
    return Decimal(str(arredondar_centavos(valor)))


def formatar_real(valor: Any) -> str:
    """Formata no padrão brasileiro: R$ 1.234,56."""
    texto = f"{arredondar_centavos(valor):,.2f}"
    return "R$ " + texto.replace(",", "_").replace(".", ",").replace("_", ".")
