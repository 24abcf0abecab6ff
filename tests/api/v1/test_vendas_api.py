# tests/api/v1/test_vendas_api.py

import uuid
from datetime import date

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from cadastros.models import Prescritor, Vendedor
from vendas.models.venda_models import VendaStatus
from vendas.services.fechamento.fechamento_service import fechar_venda
from vendas.services.vendas.venda_service import registrar_envio


def _url_venda(venda, acao=None):
    if acao is None:
        return reverse("venda-detail", args=[venda.id])
    return reverse(f"venda-{acao}", args=[venda.id])


@pytest.mark.django_db
def test_endpoints_exigem_autenticacao():
    resp = APIClient().get(reverse("venda-list"))
    assert resp.status_code == 401


@pytest.mark.django_db
def test_criar_venda_via_api(api_client):
    resp = api_client.post(
        reverse("venda-list"),
        data={
            "protocolo": "A-100",
            "data_venda": "2024-03-10",
            "valor_cliente": "150.00",
            "origem": "GOIANIA",
            "unidade": "INHUMAS",
        },
        format="json",
    )

    assert resp.status_code == 201, resp.content
    body = resp.json()
    assert body["status"] == VendaStatus.REGISTRADO
    assert body["valor_cliente"] == "150.00"
    assert body["data_fechamento"] is None


@pytest.mark.django_db
def test_criar_venda_com_valor_zero_retorna_400(api_client):
    resp = api_client.post(
        reverse("venda-list"),
        data={"protocolo": "A-1", "data_venda": "2024-03-10", "valor_cliente": "0.00"},
        format="json",
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "DADOS_VENDA_INVALIDOS"


@pytest.mark.django_db
def test_status_enviado_no_patch_e_ignorado(api_client, venda_factory):
    venda = venda_factory()

    resp = api_client.patch(
        _url_venda(venda),
        data={"status": "PAGO", "observacao": "ok"},
        format="json",
    )

    assert resp.status_code == 200, resp.content
    assert resp.json()["status"] == VendaStatus.REGISTRADO
    assert resp.json()["observacao"] == "ok"


@pytest.mark.django_db
def test_listar_vendas_filtra_por_status(api_client, venda_factory):
    paga = venda_factory(baixas=["100.00"])
    venda_factory()

    resp = api_client.get(reverse("venda-list"), {"status": "PAGO"})

    assert resp.status_code == 200
    ids = [item["id"] for item in resp.json()["results"]]
    assert ids == [str(paga.id)]


@pytest.mark.django_db
def test_listar_vendas_filtra_por_periodo_de_fechamento(api_client, venda_factory):
    marco = venda_factory(baixas=["100.00"])
    fechar_venda(venda_id=marco.id, data_fechamento=date(2024, 3, 31))
    abril = venda_factory(baixas=["100.00"])
    fechar_venda(venda_id=abril.id, data_fechamento=date(2024, 4, 30))
    venda_factory(baixas=["100.00"])

    resp = api_client.get(
        reverse("venda-list"),
        {"dataInicialFechamento": "2024-04-01", "dataFinalFechamento": "2024-04-30"},
    )

    assert resp.status_code == 200
    assert [item["id"] for item in resp.json()["results"]] == [str(abril.id)]


@pytest.mark.django_db
def test_listar_vendas_filtra_por_periodo_de_envio(api_client, venda_factory):
    enviada = venda_factory()
    registrar_envio(venda_id=enviada.id, data_envio=date(2024, 4, 5))
    antiga = venda_factory()
    registrar_envio(venda_id=antiga.id, data_envio=date(2024, 3, 1))
    venda_factory()

    resp = api_client.get(
        reverse("venda-list"),
        {"dataInicialEnvio": "2024-04-01", "dataFinalEnvio": "2024-04-30"},
    )

    assert resp.status_code == 200
    assert [item["id"] for item in resp.json()["results"]] == [str(enviada.id)]


@pytest.mark.django_db
def test_listar_vendas_filtra_por_nome_do_vendedor_e_prescritor(api_client, venda_factory):
    ana = Vendedor.objects.create(nome="Ana Paula")
    bruno = Vendedor.objects.create(nome="Bruno Lima")
    dra = Prescritor.objects.create(nome="Dra. Helena Costa")
    da_ana = venda_factory(vendedor=ana, prescritor=dra)
    do_bruno = venda_factory(vendedor=bruno)

    resp = api_client.get(reverse("venda-list"), {"vendedor": "paula"})
    assert [item["id"] for item in resp.json()["results"]] == [str(da_ana.id)]

    resp = api_client.get(reverse("venda-list"), {"vendedor": "BRUNO"})
    assert [item["id"] for item in resp.json()["results"]] == [str(do_bruno.id)]

    resp = api_client.get(reverse("venda-list"), {"prescritor": "helena"})
    assert [item["id"] for item in resp.json()["results"]] == [str(da_ana.id)]


@pytest.mark.django_db
@pytest.mark.parametrize(
    "parametro",
    ["dataInicial", "dataFinal", "dataInicialFechamento", "dataFinalEnvio"],
)
def test_listar_vendas_com_data_invalida_retorna_400(api_client, venda_factory, parametro):
    venda_factory()

    resp = api_client.get(reverse("venda-list"), {parametro: "31/02/2024"})

    assert resp.status_code == 400
    assert parametro in resp.json()


@pytest.mark.django_db
def test_listar_vendas_ignora_data_vazia(api_client, venda_factory):
    venda = venda_factory()

    resp = api_client.get(reverse("venda-list"), {"dataInicial": ""})

    assert resp.status_code == 200
    assert [item["id"] for item in resp.json()["results"]] == [str(venda.id)]


@pytest.mark.django_db
def test_ciclo_baixa_fechamento_via_api(api_client, venda_factory):
    """
    Cenário:
    - Baixa total pela API, fechamento, tentativa de nova baixa,
      cancelamento do fechamento.
    """
    venda = venda_factory(valor_cliente="100.00")

    resp = api_client.post(
        reverse("baixa-list"),
        data={
            "venda": str(venda.id),
            "tipo_da_baixa": "CARTÃO/PIX",
            "valor_baixa": "100.00",
            "data_baixa": "2024-03-11",
        },
        format="json",
    )
    assert resp.status_code == 201, resp.content
    assert resp.json()["venda_protocolo"] == venda.protocolo

    resp = api_client.post(
        _url_venda(venda, "fechar"), data={"dataFechamento": "2024-04-01"}, format="json"
    )
    assert resp.status_code == 200, resp.content
    assert resp.json()["status"] == VendaStatus.FECHADO
    assert resp.json()["data_fechamento"] == "2024-04-01"

    resp = api_client.post(
        reverse("baixa-list"),
        data={"venda": str(venda.id), "tipo_da_baixa": "DINHEIRO", "valor_baixa": "1.00"},
        format="json",
    )
    assert resp.status_code == 409
    assert resp.json()["code"] == "VENDA_FECHADA"

    resp = api_client.post(_url_venda(venda, "cancelar-fechamento"), format="json")
    assert resp.status_code == 200
    assert resp.json()["status"] == VendaStatus.PAGO
    assert resp.json()["data_fechamento"] is None


@pytest.mark.django_db
def test_baixa_acima_do_saldo_retorna_409(api_client, venda_factory):
    venda = venda_factory(valor_cliente="100.00", baixas=["90.00"])

    resp = api_client.post(
        reverse("baixa-list"),
        data={"venda": str(venda.id), "tipo_da_baixa": "DINHEIRO", "valor_baixa": "10.01"},
        format="json",
    )

    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "BAIXA_EXCEDE_SALDO"
    assert "Valor restante: R$ 10.00" in body["detail"]


@pytest.mark.django_db
def test_baixa_com_valor_zero_retorna_400(api_client, venda_factory):
    venda = venda_factory()

    resp = api_client.post(
        reverse("baixa-list"),
        data={"venda": str(venda.id), "tipo_da_baixa": "DINHEIRO", "valor_baixa": "0.00"},
        format="json",
    )

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALOR_INVALIDO"


@pytest.mark.django_db
def test_fechar_venda_pago_parcial_retorna_409(api_client, venda_factory):
    venda = venda_factory(baixas=["10.00"])

    resp = api_client.post(_url_venda(venda, "fechar"), format="json")

    assert resp.status_code == 409
    assert resp.json()["code"] == "NAO_ELEGIVEL_FECHAMENTO"


@pytest.mark.django_db
def test_fechar_venda_inexistente_retorna_404(api_client):
    resp = api_client.post(reverse("venda-fechar", args=[uuid.uuid4()]), format="json")

    assert resp.status_code == 404
    assert resp.json()["code"] == "NAO_ENCONTRADO"


@pytest.mark.django_db
def test_alterar_venda_da_baixa_retorna_400(api_client, venda_factory, baixa_factory):
    venda = venda_factory()
    outra = venda_factory()
    baixa = baixa_factory(venda, "10.00")

    resp = api_client.patch(
        reverse("baixa-detail", args=[baixa.id]),
        data={"venda": str(outra.id)},
        format="json",
    )

    assert resp.status_code == 400
    baixa.refresh_from_db()
    assert baixa.venda_id == venda.id


@pytest.mark.django_db
def test_patch_e_delete_de_baixa(api_client, venda_factory, baixa_factory):
    venda = venda_factory(valor_cliente="100.00")
    baixa = baixa_factory(venda, "100.00")

    resp = api_client.patch(
        reverse("baixa-detail", args=[baixa.id]),
        data={"valor_baixa": "60.00"},
        format="json",
    )
    assert resp.status_code == 200, resp.content
    venda.refresh_from_db()
    assert venda.status == VendaStatus.PAGO_PARCIAL

    resp = api_client.delete(reverse("baixa-detail", args=[baixa.id]))
    assert resp.status_code == 204
    venda.refresh_from_db()
    assert venda.status == VendaStatus.REGISTRADO


@pytest.mark.django_db
def test_listar_baixas_filtra_e_ordena(api_client, venda_factory, baixa_factory):
    venda = venda_factory(valor_cliente="100.00")
    antiga = baixa_factory(venda, "10.00", data_baixa="2024-03-01")
    recente = baixa_factory(venda, "20.00", data_baixa="2024-03-20", tipo_da_baixa="DEPOSITO")
    baixa_factory(venda_factory(), "5.00")

    resp = api_client.get(reverse("baixa-list"), {"idvenda": str(venda.id)})
    assert resp.status_code == 200
    assert [b["id"] for b in resp.json()["results"]] == [str(recente.id), str(antiga.id)]

    resp = api_client.get(
        reverse("baixa-list"), {"idvenda": str(venda.id), "tipoDaBaixa": "DEPOSITO"}
    )
    assert [b["id"] for b in resp.json()["results"]] == [str(recente.id)]

    resp = api_client.get(
        reverse("baixa-list"),
        {"idvenda": str(venda.id), "dataInicial": "2024-03-10", "dataFinal": "2024-03-31"},
    )
    assert [b["id"] for b in resp.json()["results"]] == [str(recente.id)]

    resp = api_client.get(reverse("baixa-list"), {"idvenda": "nao-e-uuid"})
    assert resp.json()["results"] == []


# -----------------------------------------------------------------------------
# Operações em massa
# -----------------------------------------------------------------------------

@pytest.mark.django_db
def test_fechamento_massa_via_api(api_client, venda_factory):
    v1 = venda_factory(baixas=["100.00"])
    v2 = venda_factory(baixas=["50.00"])
    inexistente = str(uuid.uuid4())

    resp = api_client.post(
        reverse("venda-fechamento-massa"),
        data={
            "vendaIds": [str(v1.id), str(v2.id), inexistente],
            "dataFechamento": "2024-04-01",
        },
        format="json",
    )

    assert resp.status_code == 200, resp.content
    body = resp.json()
    assert [v["id"] for v in body["sucesso"]] == [str(v1.id)]
    assert body["sucesso"][0]["status"] == VendaStatus.FECHADO
    assert [f["id"] for f in body["falhas"]] == [str(v2.id), inexistente]
    assert body["falhas"][1]["motivo"] == "Venda não encontrada"


@pytest.mark.django_db
def test_fechamento_massa_sem_ids_retorna_400(api_client):
    resp = api_client.post(reverse("venda-fechamento-massa"), data={"vendaIds": []}, format="json")
    assert resp.status_code == 400


@pytest.mark.django_db
def test_cancelamento_massa_via_api(api_client, venda_factory):
    v1 = venda_factory(baixas=["100.00"])
    api_client.post(_url_venda(v1, "fechar"), format="json")

    resp = api_client.post(
        reverse("venda-cancelamento-massa"),
        data={"vendaIds": [str(v1.id)]},
        format="json",
    )

    assert resp.status_code == 200
    assert resp.json()["sucesso"][0]["status"] == VendaStatus.PAGO
    assert resp.json()["falhas"] == []


@pytest.mark.django_db
def test_registrar_envio_via_api(api_client, venda_factory):
    v1 = venda_factory()

    resp = api_client.post(
        reverse("venda-registrar-envio"),
        data={"vendaIds": [str(v1.id)], "dataEnvio": "2024-04-05"},
        format="json",
    )

    assert resp.status_code == 200
    assert resp.json()["sucesso"][0]["data_envio"] == "2024-04-05"


@pytest.mark.django_db
def test_processamento_massa_de_baixas_via_api(api_client, venda_factory):
    parcial = venda_factory(valor_cliente="100.00", baixas=["25.00"])
    paga = venda_factory(valor_cliente="100.00", baixas=["100.00"])

    resp = api_client.post(
        reverse("baixa-processamento-massa"),
        data={
            "vendaIds": [str(parcial.id), str(paga.id)],
            "tipoDaBaixa": "DINHEIRO",
            "dataBaixa": "2024-04-02",
            "observacao": "fechamento do caixa",
        },
        format="json",
    )

    assert resp.status_code == 200, resp.content
    body = resp.json()
    assert body["sucesso"][0]["venda_id"] == str(parcial.id)
    assert body["sucesso"][0]["protocolo"] == parcial.protocolo
    assert body["sucesso"][0]["valor_processado"] == "75.00"
    assert body["falhas"][0]["id"] == str(paga.id)
    assert body["falhas"][0]["code"] == "VENDA_JA_QUITADA"

    parcial.refresh_from_db()
    assert parcial.status == VendaStatus.PAGO


@pytest.mark.django_db
def test_processamento_massa_observacao_longa_retorna_400(api_client, venda_factory):
    venda = venda_factory()

    resp = api_client.post(
        reverse("baixa-processamento-massa"),
        data={
            "vendaIds": [str(venda.id)],
            "tipoDaBaixa": "DINHEIRO",
            "observacao": "x" * 501,
        },
        format="json",
    )

    assert resp.status_code == 400


@pytest.mark.django_db
def test_listar_baixas_com_data_invalida_retorna_400(api_client):
    resp = api_client.get(reverse("baixa-list"), {"dataFinal": "ontem"})

    assert resp.status_code == 400
    assert "dataFinal" in resp.json()
