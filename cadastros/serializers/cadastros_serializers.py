# cadastros/serializers/cadastros_serializers.py

from rest_framework import serializers

from cadastros.models import Cliente, Prescritor, Vendedor


class ClienteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Cliente
        fields = ["id", "nome", "cpf", "telefone", "email", "ativo", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, attrs):
        """
        Reaproveita as validações de model.clean() (inclui normalização do CPF).
        """
        dados = {**self._dados_instancia(), **attrs}
        instance = Cliente(**dados)
        instance.clean()
        attrs["cpf"] = instance.cpf
        return attrs

    def _dados_instancia(self) -> dict:
        if self.instance is None:
            return {}
        return {
            "nome": self.instance.nome,
            "cpf": self.instance.cpf,
        }


class VendedorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vendedor
        fields = ["id", "nome", "ativo", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class PrescritorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Prescritor
        fields = [
            "id",
            "nome",
            "conselho",
            "numero_registro",
            "uf_registro",
            "ativo",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
