# vendas/api/v1/views.py

import logging
import uuid

from drf_spectacular.utils import extend_schema
from rest_framework import filters, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from commons.exceptions import BusinessError
from vendas.api.v1.serializers import (
    BaixaProcessadaSerializer,
    BaixaSerializer,
    CancelarVendaInputSerializer,
    FechamentoMassaInputSerializer,
    FecharVendaInputSerializer,
    PeriodoFiltroSerializer,
    ProcessamentoMassaBaixaInputSerializer,
    RegistrarEnvioInputSerializer,
    VendaFiltroSerializer,
    VendaIdsSerializer,
    VendaSerializer,
    serializar_resultado,
)
from vendas.models import Baixa, Venda
from vendas.services.baixas.lancar_baixa_service import (
    atualizar_baixa,
    registrar_baixa,
    remover_baixa,
)
from vendas.services.fechamento.fechamento_service import (
    cancelar_fechamento,
    fechar_venda,
)
from vendas.services.massa.processamento_massa_service import (
    cancelar_fechamentos_em_massa,
    fechar_vendas_em_massa,
    processar_baixas_em_massa,
    registrar_envio_em_massa,
)
from vendas.services.vendas.venda_service import (
    atualizar_venda,
    cancelar_venda,
    criar_venda,
    remover_venda,
)

logger = logging.getLogger(__name__)

# Códigos de BusinessError que não são 409 Conflict.
STATUS_POR_CODIGO = {
    "NAO_ENCONTRADO": status.HTTP_404_NOT_FOUND,
    "VALOR_INVALIDO": status.HTTP_400_BAD_REQUEST,
    "DADOS_VENDA_INVALIDOS": status.HTTP_400_BAD_REQUEST,
}


def resposta_erro_negocio(exc: BusinessError, *, evento: str, request) -> Response:
    http_status = STATUS_POR_CODIGO.get(exc.code, status.HTTP_409_CONFLICT)
    logger.warning(
        evento,
        extra={
            "event": evento,
            "user_id": getattr(request.user, "id", None),
            "code": exc.code,
            "detail": exc.message,
            "outcome": "business_error",
        },
    )
    return Response({"code": exc.code, "detail": exc.message}, status=http_status)


def _uuid_valido(valor) -> bool:
    try:
        uuid.UUID(str(valor))
    except ValueError:
        return False
    return True


class VendaViewSet(viewsets.ModelViewSet):
    """
    Vendas de fórmulas manipuladas.

    Toda escrita passa pelos services de vendas; o viewset só valida o
    formato do payload e traduz BusinessError para HTTP.

    Filtros de listagem (query string):
        status, unidade, origem, vendedor, prescritor (nome, parcial),
        dataInicial / dataFinal (data_venda),
        dataInicialFechamento / dataFinalFechamento (data_fechamento),
        dataInicialEnvio / dataFinalEnvio (data_envio).
        Datas em formato inválido retornam 400.
    """

    serializer_class = VendaSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Venda.objects.select_related("cliente", "vendedor", "prescritor")
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["protocolo", "cliente__nome"]
    ordering_fields = ["data_venda", "protocolo", "valor_cliente", "created_at"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        filtro = VendaFiltroSerializer(data=params)
        filtro.is_valid(raise_exception=True)
        datas = filtro.validated_data

        if params.get("status"):
            qs = qs.filter(status=params["status"])
        if params.get("unidade"):
            qs = qs.filter(unidade=params["unidade"])
        if params.get("origem"):
            qs = qs.filter(origem=params["origem"])
        if params.get("vendedor"):
            qs = qs.filter(vendedor__nome__icontains=params["vendedor"])
        if params.get("prescritor"):
            qs = qs.filter(prescritor__nome__icontains=params["prescritor"])

        for parametro, lookup in (
            ("dataInicial", "data_venda__gte"),
            ("dataFinal", "data_venda__lte"),
            ("dataInicialFechamento", "data_fechamento__gte"),
            ("dataFinalFechamento", "data_fechamento__lte"),
            ("dataInicialEnvio", "data_envio__gte"),
            ("dataFinalEnvio", "data_envio__lte"),
        ):
            if datas.get(parametro):
                qs = qs.filter(**{lookup: datas[parametro]})
        return qs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            venda = criar_venda(**serializer.validated_data)
        except BusinessError as exc:
            return resposta_erro_negocio(exc, evento="venda_criar", request=request)
        return Response(self.get_serializer(venda).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            venda = atualizar_venda(venda_id=instance.pk, **serializer.validated_data)
        except BusinessError as exc:
            return resposta_erro_negocio(exc, evento="venda_atualizar", request=request)
        return Response(self.get_serializer(venda).data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            remover_venda(venda_id=instance.pk)
        except BusinessError as exc:
            return resposta_erro_negocio(exc, evento="venda_remover", request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Ações em uma venda
    # ------------------------------------------------------------------
    @extend_schema(request=FecharVendaInputSerializer, responses=VendaSerializer)
    @action(detail=True, methods=["post"])
    def fechar(self, request, pk=None):
        ser_in = FecharVendaInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        try:
            venda = fechar_venda(
                venda_id=pk,
                data_fechamento=ser_in.validated_data.get("dataFechamento"),
            )
        except BusinessError as exc:
            return resposta_erro_negocio(exc, evento="venda_fechar", request=request)
        return Response(self.get_serializer(venda).data)

    @extend_schema(request=None, responses=VendaSerializer)
    @action(detail=True, methods=["post"], url_path="cancelar-fechamento")
    def cancelar_fechamento(self, request, pk=None):
        try:
            venda = cancelar_fechamento(venda_id=pk)
        except BusinessError as exc:
            return resposta_erro_negocio(
                exc, evento="venda_cancelar_fechamento", request=request
            )
        return Response(self.get_serializer(venda).data)

    @extend_schema(request=CancelarVendaInputSerializer, responses=VendaSerializer)
    @action(detail=True, methods=["post"])
    def cancelar(self, request, pk=None):
        ser_in = CancelarVendaInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        try:
            venda = cancelar_venda(venda_id=pk, motivo=ser_in.validated_data.get("motivo"))
        except BusinessError as exc:
            return resposta_erro_negocio(exc, evento="venda_cancelar", request=request)
        return Response(self.get_serializer(venda).data)

    # ------------------------------------------------------------------
    # Ações em massa: sempre 200 com {sucesso, falhas}
    # ------------------------------------------------------------------
    @extend_schema(request=FechamentoMassaInputSerializer)
    @action(detail=False, methods=["post"], url_path="fechamento-massa")
    def fechamento_massa(self, request):
        ser_in = FechamentoMassaInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        resultado = fechar_vendas_em_massa(
            venda_ids=ser_in.validated_data["vendaIds"],
            data_fechamento=ser_in.validated_data.get("dataFechamento"),
        )
        return Response(serializar_resultado(resultado, VendaSerializer))

    @extend_schema(request=VendaIdsSerializer)
    @action(detail=False, methods=["post"], url_path="cancelamento-massa")
    def cancelamento_massa(self, request):
        ser_in = VendaIdsSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        resultado = cancelar_fechamentos_em_massa(
            venda_ids=ser_in.validated_data["vendaIds"],
        )
        return Response(serializar_resultado(resultado, VendaSerializer))

    @extend_schema(request=RegistrarEnvioInputSerializer)
    @action(detail=False, methods=["post"], url_path="registrar-envio")
    def registrar_envio(self, request):
        ser_in = RegistrarEnvioInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        resultado = registrar_envio_em_massa(
            venda_ids=ser_in.validated_data["vendaIds"],
            data_envio=ser_in.validated_data["dataEnvio"],
        )
        return Response(serializar_resultado(resultado, VendaSerializer))


class BaixaViewSet(viewsets.ModelViewSet):
    """
    Livro de baixas.

    Filtros (query string): idvenda, tipoDaBaixa, dataInicial, dataFinal.
    Ordenação: data da baixa mais recente primeiro.
    """

    serializer_class = BaixaSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Baixa.objects.select_related("venda")
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = super().get_queryset().order_by("-data_baixa", "-created_at")
        params = self.request.query_params

        filtro = PeriodoFiltroSerializer(data=params)
        filtro.is_valid(raise_exception=True)
        datas = filtro.validated_data

        idvenda = params.get("idvenda")
        if idvenda:
            if not _uuid_valido(idvenda):
                return qs.none()
            qs = qs.filter(venda_id=idvenda)
        if params.get("tipoDaBaixa"):
            qs = qs.filter(tipo_da_baixa=params["tipoDaBaixa"])
        if datas.get("dataInicial"):
            qs = qs.filter(data_baixa__gte=datas["dataInicial"])
        if datas.get("dataFinal"):
            qs = qs.filter(data_baixa__lte=datas["dataFinal"])
        return qs

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data
        try:
            baixa = registrar_baixa(
                venda_id=dados["venda"].pk,
                tipo_da_baixa=dados["tipo_da_baixa"],
                valor_baixa=dados["valor_baixa"],
                data_baixa=dados.get("data_baixa"),
                observacao=dados.get("observacao"),
            )
        except BusinessError as exc:
            return resposta_erro_negocio(exc, evento="baixa_registrar", request=request)
        return Response(self.get_serializer(baixa).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        alteracoes = dict(serializer.validated_data)
        alteracoes.pop("venda", None)
        try:
            baixa = atualizar_baixa(baixa_id=instance.pk, **alteracoes)
        except BusinessError as exc:
            return resposta_erro_negocio(exc, evento="baixa_atualizar", request=request)
        return Response(self.get_serializer(baixa).data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            remover_baixa(baixa_id=instance.pk)
        except BusinessError as exc:
            return resposta_erro_negocio(exc, evento="baixa_remover", request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ProcessamentoMassaBaixaInputSerializer)
    @action(detail=False, methods=["post"], url_path="processamento-massa")
    def processamento_massa(self, request):
        ser_in = ProcessamentoMassaBaixaInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        dados = ser_in.validated_data
        resultado = processar_baixas_em_massa(
            venda_ids=dados["vendaIds"],
            tipo_da_baixa=dados["tipoDaBaixa"],
            data_baixa=dados.get("dataBaixa"),
            observacao=dados.get("observacao") or None,
        )
        return Response(serializar_resultado(resultado, BaixaProcessadaSerializer))
