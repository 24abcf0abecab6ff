from .venda_models import STATUS_CONGELADOS, Unidade, Venda, VendaOrigem, VendaStatus
from .baixa_models import Baixa, TipoDaBaixa

__all__ = [
    "Baixa",
    "STATUS_CONGELADOS",
    "TipoDaBaixa",
    "Unidade",
    "Venda",
    "VendaOrigem",
    "VendaStatus",
]
