# vendas/services/venda_state_machine.py

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from django.db import transaction

from vendas.models.venda_models import Venda, VendaStatus
from vendas.services.exceptions import BaixaExcedeSaldoError, TransicaoInvalidaError
from vendas.services.moeda import ZERO, quantizar

logger = logging.getLogger(__name__)


# Matriz de transições permitidas.
# REGISTRADO / PAGO_PARCIAL / PAGO se movem entre si conforme o total baixado
# (inclusive para trás, quando uma baixa é reduzida ou removida).
# FECHADO só entra a partir de PAGO e só sai de volta para PAGO.
# CANCELADO é terminal.
TRANSICOES_VALIDAS: dict[str, set[str]] = {
    VendaStatus.REGISTRADO: {
        VendaStatus.PAGO_PARCIAL,
        VendaStatus.PAGO,
        VendaStatus.CANCELADO,
    },
    VendaStatus.PAGO_PARCIAL: {
        VendaStatus.REGISTRADO,
        VendaStatus.PAGO,
        VendaStatus.CANCELADO,
    },
    VendaStatus.PAGO: {
        VendaStatus.REGISTRADO,
        VendaStatus.PAGO_PARCIAL,
        VendaStatus.FECHADO,
        VendaStatus.CANCELADO,
    },
    VendaStatus.FECHADO: {
        VendaStatus.PAGO,
    },
    VendaStatus.CANCELADO: set(),
}


def derivar_status(
    *,
    valor_cliente: Decimal,
    total_baixado: Decimal,
    status_atual: str,
) -> str:
    """
    Calcula o status que a venda deve ter para o total baixado.

    Regras:
        - FECHADO / CANCELADO não são derivados de valores: o status atual
          é mantido.
        - total == 0            -> REGISTRADO
        - 0 < total < valor     -> PAGO_PARCIAL
        - total == valor        -> PAGO
        - total > valor         -> BaixaExcedeSaldoError (nunca é um estado válido)

    A comparação é feita em centavos (Decimal com 2 casas).
    """
    if status_atual in (VendaStatus.FECHADO, VendaStatus.CANCELADO):
        return status_atual

    valor = quantizar(valor_cliente)
    total = quantizar(total_baixado)

    if total < ZERO:
        raise BaixaExcedeSaldoError(f"Total baixado negativo ({total}).")
    if total > valor:
        raise BaixaExcedeSaldoError(
            f"Total baixado ({total}) ultrapassa o valor do cliente ({valor}).",
            excedente=total - valor,
            saldo_disponivel=ZERO,
        )
    if total == ZERO:
        return VendaStatus.REGISTRADO
    if total < valor:
        return VendaStatus.PAGO_PARCIAL
    return VendaStatus.PAGO


class VendaStateMachine:
    """
    ÚNICO ponto autorizado a trocar o status da Venda.
    """

    @classmethod
    @transaction.atomic
    def mudar_status(
        cls,
        venda: Venda,
        novo_status: str,
        *,
        motivo: str | None = None,
        extra_context: dict | None = None,
        update_fields: Iterable[str] = (),
        save: bool = True,
    ) -> bool:
        """
        - Valida se a transição é permitida (baseado no status atual).
        - É idempotente (se já estiver no status solicitado, não faz nada).
        - `update_fields` permite salvar junto outros campos alterados pelo
          chamador (ex.: data_fechamento).

        Retorna True se o status mudou.
        """
        status_atual = venda.status

        if status_atual == novo_status:
            logger.debug(
                "Transição de status idempotente ignorada.",
                extra={
                    "event": "venda_status_idempotente",
                    "venda_id": str(venda.id),
                    "status_atual": status_atual,
                    "status_novo": novo_status,
                },
            )
            if save and update_fields:
                venda.save(update_fields=[*update_fields, "updated_at"])
            return False

        permitidos: Iterable[str] = TRANSICOES_VALIDAS.get(status_atual, set())
        if novo_status not in permitidos:
            raise TransicaoInvalidaError(
                f"Transição de {status_atual} para {novo_status} não é permitida "
                f"para venda {venda.protocolo}."
            )

        venda.status = novo_status
        if save:
            venda.save(update_fields=["status", *update_fields, "updated_at"])

        context = {
            "event": "venda_status_transicao",
            "venda_id": str(venda.id),
            "protocolo": venda.protocolo,
            "status_anterior": status_atual,
            "status_novo": novo_status,
            "motivo": motivo,
        }
        if extra_context:
            context.update(extra_context)

        logger.info("venda_status_transicao", extra=context)
        return True

    @classmethod
    def sincronizar_com_baixas(
        cls,
        venda: Venda,
        total_baixado: Decimal,
        *,
        motivo: str | None = None,
    ) -> bool:
        """
        Aplica o status derivado do total baixado.
        """
        novo_status = derivar_status(
            valor_cliente=venda.valor_cliente,
            total_baixado=total_baixado,
            status_atual=venda.status,
        )
        return cls.mudar_status(
            venda,
            novo_status,
            motivo=motivo,
            extra_context={"total_baixado": str(quantizar(total_baixado))},
        )

    # Atalhos para leitura nos services:

    @classmethod
    def para_fechado(cls, venda: Venda, **kwargs) -> bool:
        return cls.mudar_status(venda, VendaStatus.FECHADO, **kwargs)

    @classmethod
    def para_pago(cls, venda: Venda, **kwargs) -> bool:
        return cls.mudar_status(venda, VendaStatus.PAGO, **kwargs)

    @classmethod
    def para_cancelado(cls, venda: Venda, **kwargs) -> bool:
        return cls.mudar_status(venda, VendaStatus.CANCELADO, **kwargs)
