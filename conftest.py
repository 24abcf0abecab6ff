# conftest.py (na raiz do projeto)

import itertools
import logging
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from vendas.models.baixa_models import TipoDaBaixa
from vendas.services.baixas.lancar_baixa_service import registrar_baixa
from vendas.services.vendas.venda_service import criar_venda

logger = logging.getLogger(__name__)

_protocolos = itertools.count(1)


@pytest.fixture(autouse=True)
def _limpar_cache():
    """
    O throttle do DRF guarda o histórico no cache local; limpa entre testes
    para um teste não herdar as requisições do anterior.
    """
    cache.clear()
    yield
    cache.clear()


# =============================================================================
# USUÁRIO / CLIENTE HTTP
# =============================================================================

@pytest.fixture
def usuario(db):
    User = get_user_model()
    return User.objects.create_user(username="operador", password="senha-forte-123")


@pytest.fixture
def api_client(usuario):
    """
    APIClient já autenticado (force_authenticate), sem passar por JWT.
    """
    client = APIClient()
    client.force_authenticate(user=usuario)
    return client


# =============================================================================
# FACTORIES DE DOMÍNIO (sempre via services)
# =============================================================================

@pytest.fixture
def venda_factory(db):
    """
    Cria vendas pelo service, opcionalmente já com baixas lançadas.

    Uso:
        venda = venda_factory(valor_cliente="100.00")
        venda = venda_factory(valor_cliente="100.00", baixas=["40.00", "60.00"])
    """

    def _create(*, baixas=(), **overrides):
        dados = {
            "protocolo": f"P{next(_protocolos):06d}",
            "data_venda": date(2024, 3, 10),
            "valor_cliente": Decimal("100.00"),
        }
        dados.update(overrides)
        venda = criar_venda(**dados)

        for valor in baixas:
            registrar_baixa(
                venda_id=venda.id,
                tipo_da_baixa=TipoDaBaixa.DINHEIRO,
                valor_baixa=valor,
                data_baixa=date(2024, 3, 11),
            )

        venda.refresh_from_db()
        return venda

    return _create


@pytest.fixture
def baixa_factory(db):
    def _create(venda, valor="10.00", **overrides):
        dados = {
            "venda_id": venda.id,
            "tipo_da_baixa": TipoDaBaixa.DINHEIRO,
            "valor_baixa": valor,
            "data_baixa": date(2024, 3, 11),
        }
        dados.update(overrides)
        baixa = registrar_baixa(**dados)
        venda.refresh_from_db()
        return baixa

    return _create
