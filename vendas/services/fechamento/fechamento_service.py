# vendas/services/fechamento/fechamento_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from vendas.models.venda_models import Venda, VendaStatus
from vendas.services.baixas.ledger_service import total_baixado
from vendas.services.exceptions import (
    VendaNaoElegivelCancelamentoError,
    VendaNaoElegivelFechamentoError,
)
from vendas.services.moeda import quantizar
from vendas.services.venda_state_machine import VendaStateMachine
from vendas.services.vendas.venda_service import bloquear_venda

logger = logging.getLogger(__name__)


@dataclass
class Elegibilidade:
    elegivel: bool
    motivo: str | None = None


def avaliar_fechamento(venda: Venda, total: Decimal) -> Elegibilidade:
    """
    Uma venda só pode ser fechada se estiver PAGO e o total baixado for
    exatamente o valor do cliente (em centavos). O status sozinho não basta:
    o fechamento em massa pode estar olhando um status desatualizado.
    """
    if venda.status != VendaStatus.PAGO:
        return Elegibilidade(
            False,
            f"Venda está com status {venda.status}. Apenas vendas PAGO podem ser fechadas.",
        )

    total = quantizar(total)
    valor_cliente = quantizar(venda.valor_cliente)
    if total != valor_cliente:
        return Elegibilidade(
            False,
            f"Venda possui valor baixado ({total}) diferente do valor do cliente "
            f"({valor_cliente}).",
        )
    return Elegibilidade(True)


def avaliar_cancelamento_fechamento(venda: Venda) -> Elegibilidade:
    if venda.status != VendaStatus.FECHADO:
        return Elegibilidade(
            False,
            "Venda precisa estar com status FECHADO para cancelar o fechamento.",
        )
    return Elegibilidade(True)


@transaction.atomic
def fechar_venda(*, venda_id, data_fechamento: date | None = None) -> Venda:
    """
    Fecha a venda (PAGO -> FECHADO) e registra a data de fechamento.

    A data vem do chamador ou é a data local de hoje. Se a venda não for
    elegível nada é gravado.
    """
    venda = bloquear_venda(venda_id)
    total = total_baixado(venda.id)

    avaliacao = avaliar_fechamento(venda, total)
    if not avaliacao.elegivel:
        logger.info(
            "Fechamento recusado. venda_id=%s protocolo=%s status=%s total_baixado=%s valor_cliente=%s",
            venda.id,
            venda.protocolo,
            venda.status,
            total,
            venda.valor_cliente,
        )
        raise VendaNaoElegivelFechamentoError(avaliacao.motivo)

    venda.data_fechamento = data_fechamento or timezone.localdate()
    VendaStateMachine.para_fechado(
        venda,
        motivo="fechamento",
        update_fields=["data_fechamento"],
        extra_context={"data_fechamento": venda.data_fechamento.isoformat()},
    )
    return venda


@transaction.atomic
def cancelar_fechamento(*, venda_id) -> Venda:
    """
    Desfaz o fechamento (FECHADO -> PAGO) e limpa a data de fechamento.
    As baixas voltam a poder ser alteradas.
    """
    venda = bloquear_venda(venda_id)

    avaliacao = avaliar_cancelamento_fechamento(venda)
    if not avaliacao.elegivel:
        logger.info(
            "Cancelamento de fechamento recusado. venda_id=%s protocolo=%s status=%s",
            venda.id,
            venda.protocolo,
            venda.status,
        )
        raise VendaNaoElegivelCancelamentoError(avaliacao.motivo)

    venda.data_fechamento = None
    VendaStateMachine.para_pago(
        venda,
        motivo="cancelamento_fechamento",
        update_fields=["data_fechamento"],
    )
    return venda
