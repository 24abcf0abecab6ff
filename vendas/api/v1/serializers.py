# vendas/api/v1/serializers.py

from rest_framework import serializers

from vendas.models import Baixa, TipoDaBaixa, Venda


class VendaSerializer(serializers.ModelSerializer):
    """
    Leitura e escrita de Venda.

    Só valida formato. As regras (valor_cliente > 0, protocolo único,
    venda fechada não editável...) ficam em vendas.services.vendas.
    """

    cliente_nome = serializers.CharField(source="cliente.nome", read_only=True, allow_null=True)
    vendedor_nome = serializers.CharField(source="vendedor.nome", read_only=True, allow_null=True)
    prescritor_nome = serializers.CharField(
        source="prescritor.nome", read_only=True, allow_null=True
    )

    class Meta:
        model = Venda
        fields = [
            "id",
            "protocolo",
            "data_venda",
            "data_fechamento",
            "data_envio",
            "cliente",
            "cliente_nome",
            "vendedor",
            "vendedor_nome",
            "prescritor",
            "prescritor_nome",
            "origem",
            "unidade",
            "valor_cliente",
            "valor_compra",
            "valor_pago",
            "status",
            "observacao",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "status",
            "data_fechamento",
            "created_at",
            "updated_at",
        ]
        # Unicidade (unidade, protocolo) é checada no service.
        validators = []


class BaixaSerializer(serializers.ModelSerializer):
    venda_protocolo = serializers.CharField(source="venda.protocolo", read_only=True)
    data_baixa = serializers.DateField(required=False)

    class Meta:
        model = Baixa
        fields = [
            "id",
            "venda",
            "venda_protocolo",
            "tipo_da_baixa",
            "valor_baixa",
            "data_baixa",
            "observacao",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_venda(self, value):
        if self.instance is not None and value.pk != self.instance.venda_id:
            raise serializers.ValidationError(
                "A venda de uma baixa não pode ser alterada."
            )
        return value


# ----------------------------------------------------------------------
# Payloads das ações
# ----------------------------------------------------------------------
class VendaIdsSerializer(serializers.Serializer):
    vendaIds = serializers.ListField(
        child=serializers.CharField(),
        allow_empty=False,
    )


class FecharVendaInputSerializer(serializers.Serializer):
    dataFechamento = serializers.DateField(required=False, allow_null=True)


class CancelarVendaInputSerializer(serializers.Serializer):
    motivo = serializers.CharField(required=False, allow_blank=True, max_length=500)


class FechamentoMassaInputSerializer(VendaIdsSerializer):
    dataFechamento = serializers.DateField(required=False, allow_null=True)


class RegistrarEnvioInputSerializer(VendaIdsSerializer):
    dataEnvio = serializers.DateField()


class ProcessamentoMassaBaixaInputSerializer(VendaIdsSerializer):
    tipoDaBaixa = serializers.ChoiceField(choices=TipoDaBaixa.choices)
    dataBaixa = serializers.DateField(required=False, allow_null=True)
    observacao = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=500,
    )


# ----------------------------------------------------------------------
# Resultado das operações em massa
# ----------------------------------------------------------------------
class FalhaProcessamentoSerializer(serializers.Serializer):
    id = serializers.CharField()
    protocolo = serializers.CharField(allow_null=True)
    motivo = serializers.CharField()
    code = serializers.CharField(allow_null=True)


class BaixaProcessadaSerializer(serializers.Serializer):
    venda_id = serializers.CharField()
    protocolo = serializers.CharField()
    valor_processado = serializers.DecimalField(max_digits=12, decimal_places=2)
    baixa_id = serializers.CharField()


def serializar_resultado(resultado, serializer_sucesso) -> dict:
    return {
        "sucesso": serializer_sucesso(resultado.sucesso, many=True).data,
        "falhas": FalhaProcessamentoSerializer(resultado.falhas, many=True).data,
    }


# ----------------------------------------------------------------------
# Filtros de listagem (query string)
# ----------------------------------------------------------------------
class PeriodoFiltroSerializer(serializers.Serializer):
    dataInicial = serializers.DateField(required=False)
    dataFinal = serializers.DateField(required=False)


class VendaFiltroSerializer(PeriodoFiltroSerializer):
    dataInicialFechamento = serializers.DateField(required=False)
    dataFinalFechamento = serializers.DateField(required=False)
    dataInicialEnvio = serializers.DateField(required=False)
    dataFinalEnvio = serializers.DateField(required=False)
