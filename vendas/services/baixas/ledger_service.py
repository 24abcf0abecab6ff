# vendas/services/baixas/ledger_service.py

from __future__ import annotations

import logging
from decimal import Decimal

from django.db.models import DecimalField, QuerySet, Sum, Value
from django.db.models.functions import Coalesce

from vendas.models.baixa_models import Baixa
from vendas.services.moeda import ZERO, quantizar

logger = logging.getLogger(__name__)

# Campos de uma baixa que podem ser substituídos após o lançamento.
CAMPOS_EDITAVEIS = ("tipo_da_baixa", "valor_baixa", "data_baixa", "observacao")


def total_baixado(venda_id) -> Decimal:
    """
    Soma de todas as baixas da venda (0.00 se não houver nenhuma).
    """
    total = Baixa.objects.filter(venda_id=venda_id).aggregate(
        total=Coalesce(
            Sum("valor_baixa"),
            Value(ZERO),
            output_field=DecimalField(max_digits=12, decimal_places=2),
        )
    )["total"]
    return quantizar(total)


def listar_baixas(venda_id) -> QuerySet[Baixa]:
    return Baixa.objects.filter(venda_id=venda_id).order_by("data_baixa", "created_at")


def anexar_baixa(
    *,
    venda_id,
    tipo_da_baixa: str,
    valor_baixa: Decimal,
    data_baixa,
    observacao: str | None = None,
) -> Baixa:
    """
    Grava uma nova baixa sem nenhuma validação de saldo.
    Quem chama (lancar_baixa_service) é responsável pela regra da venda.
    """
    baixa = Baixa.objects.create(
        venda_id=venda_id,
        tipo_da_baixa=tipo_da_baixa,
        valor_baixa=valor_baixa,
        data_baixa=data_baixa,
        observacao=observacao,
    )
    logger.debug(
        "Baixa anexada ao livro. baixa_id=%s venda_id=%s valor=%s",
        baixa.id,
        venda_id,
        valor_baixa,
    )
    return baixa


def substituir_baixa(baixa: Baixa, **novos_valores) -> Baixa:
    alterados = []
    for campo, valor in novos_valores.items():
        if campo not in CAMPOS_EDITAVEIS:
            raise ValueError(f"Campo de baixa não editável: {campo}")
        setattr(baixa, campo, valor)
        alterados.append(campo)

    if alterados:
        baixa.save(update_fields=[*alterados, "updated_at"])
    return baixa


def excluir_baixa(baixa: Baixa) -> None:
    logger.debug("Baixa excluída do livro. baixa_id=%s venda_id=%s", baixa.id, baixa.venda_id)
    baixa.delete()
