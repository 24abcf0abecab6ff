# vendas/services/baixas/lancar_baixa_service.py

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from vendas.models.baixa_models import Baixa, TipoDaBaixa
from vendas.models.venda_models import Venda, VendaStatus
from vendas.services.baixas.ledger_service import (
    anexar_baixa,
    excluir_baixa,
    substituir_baixa,
    total_baixado,
)
from vendas.services.exceptions import (
    BaixaExcedeSaldoError,
    DadosVendaInvalidosError,
    RegistroNaoEncontradoError,
    ValorInvalidoError,
    VendaCanceladaError,
    VendaFechadaError,
    VendaJaQuitadaError,
)
from vendas.services.moeda import ZERO, formatar, quantizar
from vendas.services.venda_state_machine import VendaStateMachine
from vendas.services.vendas.venda_service import bloquear_venda

logger = logging.getLogger(__name__)

_NAO_INFORMADO = object()


def _validar_valor(valor_baixa) -> Decimal:
    valor = quantizar(valor_baixa)
    if valor <= ZERO:
        raise ValorInvalidoError("O valor da baixa deve ser maior que zero.")
    return valor


def _validar_tipo(tipo_da_baixa: str) -> str:
    if tipo_da_baixa not in TipoDaBaixa.values:
        raise DadosVendaInvalidosError(f"Tipo da baixa inválido: {tipo_da_baixa!r}.")
    return tipo_da_baixa


def _garantir_livro_aberto(venda: Venda, acao: str) -> None:
    if not venda.livro_congelado:
        return
    if venda.eh_fechada:
        logger.warning(
            "Tentativa de %s em venda FECHADA. venda_id=%s protocolo=%s",
            acao,
            venda.id,
            venda.protocolo,
        )
        raise VendaFechadaError(
            f"Não é possível {acao} de uma venda com status \"{VendaStatus.FECHADO}\". "
            "A venda está fechada."
        )
    raise VendaCanceladaError(
        f"Não é possível {acao} de uma venda com status \"{VendaStatus.CANCELADO}\"."
    )


def _garantir_saldo(venda: Venda, total_sem_baixa: Decimal, valor: Decimal) -> None:
    """
    Garante que `total_sem_baixa + valor <= valor_cliente` (em centavos).
    """
    valor_cliente = quantizar(venda.valor_cliente)
    novo_total = total_sem_baixa + valor
    if novo_total > valor_cliente:
        excedente = novo_total - valor_cliente
        saldo = valor_cliente - total_sem_baixa
        logger.warning(
            "Baixa recusada por exceder o saldo. venda_id=%s valor=%s total_atual=%s valor_cliente=%s",
            venda.id,
            valor,
            total_sem_baixa,
            valor_cliente,
        )
        raise BaixaExcedeSaldoError(
            f"O valor da baixa ultrapassa o valor total em {formatar(excedente)}. "
            f"Valor restante: {formatar(saldo)}",
            excedente=excedente,
            saldo_disponivel=saldo,
        )


def _obter_baixa(baixa_id, *, para_atualizacao: bool = False) -> Baixa:
    qs = Baixa.objects.all()
    if para_atualizacao:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=baixa_id)
    except (Baixa.DoesNotExist, DjangoValidationError, ValueError):
        raise RegistroNaoEncontradoError(f"Baixa com ID {baixa_id} não encontrada")


@transaction.atomic
def registrar_baixa(
    *,
    venda_id,
    tipo_da_baixa: str,
    valor_baixa,
    data_baixa: date | None = None,
    observacao: str | None = None,
) -> Baixa:
    """
    Lança uma baixa contra a venda.

    Regras:
    - valor <= 0 -> ValorInvalidoError.
    - venda FECHADA -> VendaFechadaError (CANCELADA -> VendaCanceladaError).
    - total baixado + valor > valor_cliente -> BaixaExcedeSaldoError.
    - Após gravar, o status é recalculado (PAGO_PARCIAL / PAGO).

    A venda é lida com select_for_update, então duas baixas simultâneas na
    mesma venda são serializadas.
    """
    valor = _validar_valor(valor_baixa)
    _validar_tipo(tipo_da_baixa)

    venda = bloquear_venda(venda_id)
    _garantir_livro_aberto(venda, "lançar baixas")

    total_atual = total_baixado(venda.id)
    _garantir_saldo(venda, total_atual, valor)

    baixa = anexar_baixa(
        venda_id=venda.id,
        tipo_da_baixa=tipo_da_baixa,
        valor_baixa=valor,
        data_baixa=data_baixa or timezone.localdate(),
        observacao=observacao,
    )

    VendaStateMachine.sincronizar_com_baixas(
        venda, total_atual + valor, motivo="baixa_registrada"
    )

    logger.info(
        "Baixa registrada. baixa_id=%s venda_id=%s valor=%s total_baixado=%s status=%s",
        baixa.id,
        venda.id,
        valor,
        total_atual + valor,
        venda.status,
    )
    return baixa


@transaction.atomic
def atualizar_baixa(
    *,
    baixa_id,
    valor_baixa=_NAO_INFORMADO,
    tipo_da_baixa=_NAO_INFORMADO,
    data_baixa=_NAO_INFORMADO,
    observacao=_NAO_INFORMADO,
) -> Baixa:
    """
    Altera uma baixa existente.

    O saldo é validado descontando o valor ANTIGO da baixa do total antes de
    somar o novo valor. O status pode voltar (ex.: PAGO -> PAGO_PARCIAL) se
    a baixa for reduzida.
    """
    venda_id = _obter_baixa(baixa_id).venda_id
    venda = bloquear_venda(venda_id)
    baixa = _obter_baixa(baixa_id, para_atualizacao=True)

    _garantir_livro_aberto(venda, "alterar baixas")

    novos_valores = {}
    if tipo_da_baixa is not _NAO_INFORMADO:
        novos_valores["tipo_da_baixa"] = _validar_tipo(tipo_da_baixa)
    if data_baixa is not _NAO_INFORMADO:
        if data_baixa is None:
            raise DadosVendaInvalidosError("A data da baixa é obrigatória.")
        novos_valores["data_baixa"] = data_baixa
    if observacao is not _NAO_INFORMADO:
        novos_valores["observacao"] = observacao

    total_sem_baixa = total_baixado(venda.id) - baixa.valor_baixa
    if valor_baixa is not _NAO_INFORMADO:
        novo_valor = _validar_valor(valor_baixa)
        _garantir_saldo(venda, total_sem_baixa, novo_valor)
        novos_valores["valor_baixa"] = novo_valor

    valor_antigo = baixa.valor_baixa
    substituir_baixa(baixa, **novos_valores)

    novo_total = total_sem_baixa + quantizar(baixa.valor_baixa)
    VendaStateMachine.sincronizar_com_baixas(venda, novo_total, motivo="baixa_atualizada")

    logger.info(
        "Baixa atualizada. baixa_id=%s venda_id=%s valor_antigo=%s valor_novo=%s total_baixado=%s status=%s",
        baixa.id,
        venda.id,
        valor_antigo,
        baixa.valor_baixa,
        novo_total,
        venda.status,
    )
    return baixa


@transaction.atomic
def remover_baixa(*, baixa_id) -> None:
    """
    Remove uma baixa. Recusado se a venda estiver FECHADA/CANCELADA.
    O status pode voltar até REGISTRADO.
    """
    venda_id = _obter_baixa(baixa_id).venda_id
    venda = bloquear_venda(venda_id)
    baixa = _obter_baixa(baixa_id, para_atualizacao=True)

    _garantir_livro_aberto(venda, "remover baixas")

    valor_removido = baixa.valor_baixa
    excluir_baixa(baixa)

    novo_total = total_baixado(venda.id)
    VendaStateMachine.sincronizar_com_baixas(venda, novo_total, motivo="baixa_removida")

    logger.info(
        "Baixa removida. baixa_id=%s venda_id=%s valor=%s total_baixado=%s status=%s",
        baixa_id,
        venda.id,
        valor_removido,
        novo_total,
        venda.status,
    )


@transaction.atomic
def quitar_saldo_venda(
    *,
    venda_id,
    tipo_da_baixa: str,
    data_baixa: date | None = None,
    observacao: str | None = None,
) -> Baixa:
    """
    Lança uma baixa com todo o saldo restante da venda, deixando-a PAGO.
    Usado pela baixa em massa.
    """
    _validar_tipo(tipo_da_baixa)
    venda = bloquear_venda(venda_id)
    _garantir_livro_aberto(venda, "lançar baixas")

    saldo = venda.saldo_a_receber(total_baixado(venda.id))
    if saldo <= ZERO:
        raise VendaJaQuitadaError(
            f"Venda {venda.protocolo} não possui saldo a receber."
        )

    return registrar_baixa(
        venda_id=venda.id,
        tipo_da_baixa=tipo_da_baixa,
        valor_baixa=saldo,
        data_baixa=data_baixa,
        observacao=observacao,
    )
