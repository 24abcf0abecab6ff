# vendas/services/vendas/venda_service.py

from __future__ import annotations

import logging
from datetime import date

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from vendas.models.venda_models import Venda, VendaOrigem, VendaStatus
from vendas.services.baixas.ledger_service import total_baixado
from vendas.services.exceptions import (
    DadosVendaInvalidosError,
    RegistroNaoEncontradoError,
    TransicaoInvalidaError,
    VendaCanceladaError,
    VendaFechadaError,
)
from vendas.services.moeda import formatar, quantizar
from vendas.services.venda_state_machine import VendaStateMachine

logger = logging.getLogger(__name__)

# Campos que podem ser editados diretamente. status / data_fechamento só
# mudam pelos services de baixa e de fechamento.
CAMPOS_EDITAVEIS = (
    "protocolo",
    "data_venda",
    "data_envio",
    "cliente",
    "vendedor",
    "prescritor",
    "origem",
    "unidade",
    "valor_cliente",
    "valor_compra",
    "valor_pago",
    "observacao",
)

_CAMPOS_MONETARIOS = ("valor_cliente", "valor_compra", "valor_pago")


def obter_venda(venda_id) -> Venda:
    try:
        return Venda.objects.get(pk=venda_id)
    except (Venda.DoesNotExist, DjangoValidationError, ValueError):
        raise RegistroNaoEncontradoError(f"Venda com ID {venda_id} não encontrada")


def bloquear_venda(venda_id) -> Venda:
    """
    Relê a venda com select_for_update. Deve ser chamada dentro de
    transaction.atomic; o lock vale até o fim da transação.
    """
    try:
        return Venda.objects.select_for_update().get(pk=venda_id)
    except (Venda.DoesNotExist, DjangoValidationError, ValueError):
        raise RegistroNaoEncontradoError(f"Venda com ID {venda_id} não encontrada")


def _normalizar_monetarios(dados: dict) -> dict:
    for campo in _CAMPOS_MONETARIOS:
        if dados.get(campo) is not None:
            dados[campo] = quantizar(dados[campo])
    return dados


def _validar_model(venda: Venda) -> None:
    try:
        venda.clean()
    except DjangoValidationError as exc:
        mensagens = "; ".join(
            f"{campo}: {' '.join(erros)}" for campo, erros in exc.message_dict.items()
        )
        raise DadosVendaInvalidosError(mensagens)


def _protocolo_em_uso(protocolo: str, unidade: str | None, ignorar_id=None) -> bool:
    qs = Venda.objects.filter(protocolo=protocolo, unidade=unidade)
    if ignorar_id is not None:
        qs = qs.exclude(pk=ignorar_id)
    return qs.exists()


@transaction.atomic
def criar_venda(
    *,
    protocolo: str,
    data_venda: date,
    valor_cliente,
    origem: str = VendaOrigem.OUTRO,
    unidade: str | None = None,
    valor_compra=None,
    valor_pago=None,
    cliente=None,
    vendedor=None,
    prescritor=None,
    data_envio: date | None = None,
    observacao: str | None = None,
) -> Venda:
    """
    Cria uma venda sempre em REGISTRADO, sem baixas.
    """
    dados = _normalizar_monetarios(
        {
            "valor_cliente": valor_cliente,
            "valor_compra": valor_compra,
            "valor_pago": valor_pago,
        }
    )
    venda = Venda(
        protocolo=(protocolo or "").strip(),
        data_venda=data_venda,
        origem=origem,
        unidade=unidade,
        cliente=cliente,
        vendedor=vendedor,
        prescritor=prescritor,
        data_envio=data_envio,
        observacao=observacao,
        status=VendaStatus.REGISTRADO,
        **dados,
    )

    if not venda.protocolo:
        raise DadosVendaInvalidosError("O protocolo da venda é obrigatório.")
    _validar_model(venda)

    if _protocolo_em_uso(venda.protocolo, venda.unidade):
        raise DadosVendaInvalidosError(
            f"Já existe uma venda com o protocolo {venda.protocolo} nesta unidade."
        )

    try:
        venda.save()
    except IntegrityError:
        raise DadosVendaInvalidosError(
            f"Já existe uma venda com o protocolo {venda.protocolo} nesta unidade."
        )

    logger.info(
        "venda_criada",
        extra={
            "event": "venda_criada",
            "venda_id": str(venda.id),
            "protocolo": venda.protocolo,
            "valor_cliente": str(venda.valor_cliente),
            "unidade": venda.unidade,
        },
    )
    return venda


@transaction.atomic
def atualizar_venda(*, venda_id, **alteracoes) -> Venda:
    """
    Edita campos não financeiros e valores da venda.

    Regras:
    - Venda FECHADA ou CANCELADA não pode ser editada.
    - `status` e `data_fechamento` não são editáveis por aqui.
    - Novo valor_cliente precisa ser >= total já baixado.
    - O status é recalculado no final (ex.: aumento do valor_cliente de uma
      venda PAGO a leva para PAGO_PARCIAL).
    """
    desconhecidos = set(alteracoes) - set(CAMPOS_EDITAVEIS)
    if desconhecidos:
        raise DadosVendaInvalidosError(
            f"Campos não editáveis: {', '.join(sorted(desconhecidos))}."
        )

    venda = bloquear_venda(venda_id)

    if venda.status == VendaStatus.FECHADO:
        raise VendaFechadaError(
            "Não é possível editar uma venda com status \"Fechado\". A venda está fechada."
        )
    if venda.status == VendaStatus.CANCELADO:
        raise VendaCanceladaError("Não é possível editar uma venda cancelada.")

    alteracoes = _normalizar_monetarios(dict(alteracoes))
    if "protocolo" in alteracoes:
        alteracoes["protocolo"] = (alteracoes["protocolo"] or "").strip()
        if not alteracoes["protocolo"]:
            raise DadosVendaInvalidosError("O protocolo da venda é obrigatório.")

    for campo, valor in alteracoes.items():
        setattr(venda, campo, valor)
    _validar_model(venda)

    if ("protocolo" in alteracoes or "unidade" in alteracoes) and _protocolo_em_uso(
        venda.protocolo, venda.unidade, ignorar_id=venda.id
    ):
        raise DadosVendaInvalidosError(
            f"Já existe uma venda com o protocolo {venda.protocolo} nesta unidade."
        )

    total = total_baixado(venda.id)
    if "valor_cliente" in alteracoes and venda.valor_cliente < total:
        diferenca = total - venda.valor_cliente
        raise DadosVendaInvalidosError(
            f"O novo valor do cliente ({formatar(venda.valor_cliente)}) é menor que o total "
            f"de baixas já lançadas ({formatar(total)}). Diferença: {formatar(diferenca)}"
        )

    if alteracoes:
        venda.save(update_fields=[*alteracoes.keys(), "updated_at"])

    VendaStateMachine.sincronizar_com_baixas(venda, total, motivo="venda_editada")

    logger.info(
        "Venda atualizada. venda_id=%s campos=%s status=%s",
        venda.id,
        sorted(alteracoes),
        venda.status,
    )
    return venda


@transaction.atomic
def remover_venda(*, venda_id) -> None:
    """
    Remove a venda e, em cascata, todas as suas baixas.
    Venda FECHADA precisa ter o fechamento cancelado antes.
    """
    venda = bloquear_venda(venda_id)
    if venda.status == VendaStatus.FECHADO:
        raise VendaFechadaError(
            "Não é possível remover uma venda FECHADA. Cancele o fechamento antes."
        )

    quantidade_baixas = venda.baixas.count()
    protocolo = venda.protocolo
    venda.delete()

    logger.info(
        "Venda removida. venda_id=%s protocolo=%s baixas_removidas=%s",
        venda_id,
        protocolo,
        quantidade_baixas,
    )


@transaction.atomic
def cancelar_venda(*, venda_id, motivo: str | None = None) -> Venda:
    """
    Leva a venda para CANCELADO. Permitido a partir de qualquer status,
    exceto FECHADO.
    """
    venda = bloquear_venda(venda_id)
    if venda.status == VendaStatus.FECHADO:
        raise VendaFechadaError(
            "Não é possível cancelar uma venda FECHADA. Cancele o fechamento antes."
        )
    if venda.status == VendaStatus.CANCELADO:
        raise TransicaoInvalidaError(f"Venda {venda.protocolo} já está cancelada.")

    VendaStateMachine.para_cancelado(venda, motivo=motivo or "venda_cancelada")
    return venda


@transaction.atomic
def registrar_envio(*, venda_id, data_envio: date) -> Venda:
    """
    Registra a data de envio da fórmula. Vale para qualquer status, inclusive
    vendas fechadas: o envio não mexe em valores nem no livro de baixas.
    """
    if data_envio is None:
        raise DadosVendaInvalidosError("A data de envio é obrigatória.")

    venda = bloquear_venda(venda_id)
    venda.data_envio = data_envio
    venda.save(update_fields=["data_envio", "updated_at"])

    logger.info(
        "Envio registrado. venda_id=%s protocolo=%s data_envio=%s",
        venda.id,
        venda.protocolo,
        data_envio,
    )
    return venda
