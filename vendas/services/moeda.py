# vendas/services/moeda.py

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from vendas.services.exceptions import ValorInvalidoError

CENTAVO = Decimal("0.01")
ZERO = Decimal("0.00")

# Maior valor que cabe em DecimalField(max_digits=10, decimal_places=2).
VALOR_MAXIMO = Decimal("99999999.99")


def quantizar(valor) -> Decimal:
    """
    Normaliza um valor monetário para Decimal com 2 casas.

    float é convertido via str() para não herdar o erro binário
    (0.1 + 0.2 != 0.3). Valores acima de VALOR_MAXIMO (em módulo) são
    recusados com ValorInvalidoError.
    """
    if valor is None or isinstance(valor, bool):
        raise ValorInvalidoError("Valor monetário não informado.")
    if isinstance(valor, float):
        valor = str(valor)
    try:
        valor_decimal = Decimal(valor)
    except (InvalidOperation, TypeError, ValueError):
        raise ValorInvalidoError(f"Valor monetário inválido: {valor!r}.")
    if not valor_decimal.is_finite():
        raise ValorInvalidoError(f"Valor monetário inválido: {valor!r}.")
    if abs(valor_decimal) > VALOR_MAXIMO:
        raise ValorInvalidoError(
            f"Valor monetário acima do limite permitido (R$ {VALOR_MAXIMO}): {valor!r}."
        )
    return valor_decimal.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def formatar(valor: Decimal) -> str:
    """`Decimal("1234.5")` -> `"R$ 1234.50"`."""
    return f"R$ {quantizar(valor)}"
