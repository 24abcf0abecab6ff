# vendas/services/dto.py

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional


@dataclass
class FalhaProcessamento:
    id: str
    motivo: str
    protocolo: Optional[str] = None
    code: Optional[str] = None


@dataclass
class BaixaProcessada:
    venda_id: str
    protocolo: str
    valor_processado: Decimal
    baixa_id: str


@dataclass
class ResultadoProcessamentoMassa:
    """
    Resultado de uma operação em massa.

    `sucesso` guarda as vendas (ou BaixaProcessada, na baixa em massa) na
    ordem de entrada; `falhas` guarda uma entrada por id não processado.
    """

    sucesso: List[Any] = field(default_factory=list)
    falhas: List[FalhaProcessamento] = field(default_factory=list)

    @property
    def total_processado(self) -> int:
        return len(self.sucesso) + len(self.falhas)

    def ids_sucesso(self) -> List[str]:
        ids = []
        for item in self.sucesso:
            if isinstance(item, BaixaProcessada):
                ids.append(item.venda_id)
            else:
                ids.append(str(item.id))
        return ids
