# vendas/services/vendas/__init__.py

from .venda_service import (
    atualizar_venda,
    bloquear_venda,
    cancelar_venda,
    criar_venda,
    obter_venda,
    registrar_envio,
    remover_venda,
)

__all__ = [
    "atualizar_venda",
    "bloquear_venda",
    "cancelar_venda",
    "criar_venda",
    "obter_venda",
    "registrar_envio",
    "remover_venda",
]
