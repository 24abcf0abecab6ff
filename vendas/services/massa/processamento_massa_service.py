# vendas/services/massa/processamento_massa_service.py

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Callable, Iterable

from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from commons.exceptions import BusinessError
from vendas.models.venda_models import Venda
from vendas.services.baixas.lancar_baixa_service import quitar_saldo_venda
from vendas.services.dto import (
    BaixaProcessada,
    FalhaProcessamento,
    ResultadoProcessamentoMassa,
)
from vendas.services.fechamento.fechamento_service import (
    avaliar_cancelamento_fechamento,
    avaliar_fechamento,
    cancelar_fechamento,
    fechar_venda,
)
from vendas.services.moeda import ZERO, quantizar
from vendas.services.vendas.venda_service import registrar_envio

logger = logging.getLogger(__name__)

MOTIVO_NAO_ENCONTRADA = "Venda não encontrada"
MOTIVO_ERRO_INESPERADO = "Erro inesperado ao processar a venda."

CODE_NAO_ENCONTRADO = "NAO_ENCONTRADO"
CODE_ERRO_INESPERADO = "ERRO_INESPERADO"

# (venda, total_baixado) -> (motivo, code) quando a venda deve ser recusada.
PreValidacao = Callable[[Venda, object], "tuple[str, str] | None"]


def normalizar_ids(venda_ids: Iterable) -> list[str]:
    """
    Remove ids repetidos mantendo a ordem da primeira ocorrência.
    """
    vistos = set()
    ids = []
    for venda_id in venda_ids or []:
        chave = str(venda_id).strip()
        if chave in vistos:
            continue
        vistos.add(chave)
        ids.append(chave)
    return ids


def _uuid_ou_none(venda_id: str):
    try:
        return str(uuid.UUID(venda_id))
    except (TypeError, ValueError, AttributeError):
        return None


def _carregar_vendas(chaves: list[str]) -> dict[str, Venda] | None:
    """
    Uma consulta só para o lote inteiro, com o total baixado anotado.

    Retorna None se a leitura falhar: nesse caso o lote segue sem
    pré-validação e cada item é validado pela operação unitária.
    """
    if not chaves:
        return {}
    try:
        vendas = Venda.objects.filter(pk__in=chaves).annotate(
            total_baixado_lote=Coalesce(
                Sum("baixas__valor_baixa"),
                Value(ZERO),
                output_field=DecimalField(max_digits=12, decimal_places=2),
            )
        )
        return {str(venda.id): venda for venda in vendas}
    except Exception:
        logger.exception("Falha ao pré-carregar as vendas do lote. quantidade=%s", len(chaves))
        return None


def _falha(resultado, venda_id, motivo, *, protocolo=None, code=None) -> None:
    resultado.falhas.append(
        FalhaProcessamento(id=venda_id, motivo=motivo, protocolo=protocolo, code=code)
    )


def _processar_lote(
    *,
    operacao: str,
    venda_ids: Iterable,
    executar: Callable[[str], object],
    pre_validar: PreValidacao | None = None,
) -> ResultadoProcessamentoMassa:
    """
    Aplica `executar` a cada venda do lote, isolando as falhas.

    - ids repetidos são processados uma única vez;
    - cada item roda na sua própria transação (a da operação unitária), então
      uma falha nunca desfaz o que já foi gravado para os outros itens;
    - BusinessError vira uma falha com a mensagem e o code do erro; qualquer
      outro erro é logado e vira uma falha genérica.
    """
    resultado = ResultadoProcessamentoMassa()
    ids = normalizar_ids(venda_ids)

    chaves = {venda_id: _uuid_ou_none(venda_id) for venda_id in ids}
    vendas = _carregar_vendas([chave for chave in chaves.values() if chave])

    for venda_id in ids:
        chave = chaves[venda_id]
        if chave is None or (vendas is not None and chave not in vendas):
            _falha(resultado, venda_id, MOTIVO_NAO_ENCONTRADA, code=CODE_NAO_ENCONTRADO)
            continue

        venda = vendas.get(chave) if vendas is not None else None
        protocolo = venda.protocolo if venda is not None else None

        if venda is not None and pre_validar is not None:
            recusa = pre_validar(venda, venda.total_baixado_lote)
            if recusa is not None:
                motivo, code = recusa
                _falha(resultado, venda_id, motivo, protocolo=protocolo, code=code)
                continue

        try:
            item = executar(chave)
        except BusinessError as exc:
            _falha(resultado, venda_id, exc.message, protocolo=protocolo, code=exc.code)
            continue
        except Exception:
            logger.exception(
                "Erro inesperado no processamento em massa. operacao=%s venda_id=%s",
                operacao,
                venda_id,
            )
            _falha(
                resultado,
                venda_id,
                MOTIVO_ERRO_INESPERADO,
                protocolo=protocolo,
                code=CODE_ERRO_INESPERADO,
            )
            continue

        resultado.sucesso.append(item)

    logger.info(
        "processamento_massa_concluido",
        extra={
            "event": "processamento_massa_concluido",
            "operacao": operacao,
            "quantidade_solicitada": len(ids),
            "quantidade_sucesso": len(resultado.sucesso),
            "quantidade_falhas": len(resultado.falhas),
        },
    )
    return resultado


# ----------------------------------------------------------------------
# Pré-validações (leitura do lote, sem lock). A operação unitária revalida
# tudo com a venda bloqueada.
# ----------------------------------------------------------------------
def _pre_validar_fechamento(venda: Venda, total):
    avaliacao = avaliar_fechamento(venda, total)
    if not avaliacao.elegivel:
        return avaliacao.motivo, "NAO_ELEGIVEL_FECHAMENTO"
    return None


def _pre_validar_cancelamento(venda: Venda, total):
    avaliacao = avaliar_cancelamento_fechamento(venda)
    if not avaliacao.elegivel:
        return avaliacao.motivo, "NAO_ELEGIVEL_CANCELAMENTO"
    return None


def _pre_validar_quitacao(venda: Venda, total):
    if venda.eh_fechada:
        return "Venda está FECHADA e não pode receber baixas.", "VENDA_FECHADA"
    if venda.eh_cancelada:
        return "Venda está CANCELADA e não pode receber baixas.", "VENDA_CANCELADA"
    if venda.saldo_a_receber(quantizar(total)) <= ZERO:
        return f"Venda {venda.protocolo} não possui saldo a receber.", "VENDA_JA_QUITADA"
    return None


# ----------------------------------------------------------------------
# Operações em massa
# ----------------------------------------------------------------------
def processar_baixas_em_massa(
    *,
    venda_ids: Iterable,
    tipo_da_baixa: str,
    data_baixa: date | None = None,
    observacao: str | None = None,
) -> ResultadoProcessamentoMassa:
    """
    Quita o saldo restante de cada venda com uma baixa do tipo informado.
    Cada sucesso é um BaixaProcessada com o valor lançado.
    """

    def executar(venda_id):
        baixa = quitar_saldo_venda(
            venda_id=venda_id,
            tipo_da_baixa=tipo_da_baixa,
            data_baixa=data_baixa,
            observacao=observacao,
        )
        return BaixaProcessada(
            venda_id=str(baixa.venda_id),
            protocolo=baixa.venda.protocolo,
            valor_processado=baixa.valor_baixa,
            baixa_id=str(baixa.id),
        )

    return _processar_lote(
        operacao="baixa_em_massa",
        venda_ids=venda_ids,
        executar=executar,
        pre_validar=_pre_validar_quitacao,
    )


def fechar_vendas_em_massa(
    *,
    venda_ids: Iterable,
    data_fechamento: date | None = None,
) -> ResultadoProcessamentoMassa:
    return _processar_lote(
        operacao="fechamento_em_massa",
        venda_ids=venda_ids,
        executar=lambda venda_id: fechar_venda(
            venda_id=venda_id, data_fechamento=data_fechamento
        ),
        pre_validar=_pre_validar_fechamento,
    )


def cancelar_fechamentos_em_massa(*, venda_ids: Iterable) -> ResultadoProcessamentoMassa:
    return _processar_lote(
        operacao="cancelamento_fechamento_em_massa",
        venda_ids=venda_ids,
        executar=lambda venda_id: cancelar_fechamento(venda_id=venda_id),
        pre_validar=_pre_validar_cancelamento,
    )


def registrar_envio_em_massa(
    *,
    venda_ids: Iterable,
    data_envio: date,
) -> ResultadoProcessamentoMassa:
    """
    Registra a mesma data de envio para todas as vendas do lote.
    """
    return _processar_lote(
        operacao="registro_envio_em_massa",
        venda_ids=venda_ids,
        executar=lambda venda_id: registrar_envio(venda_id=venda_id, data_envio=data_envio),
    )
