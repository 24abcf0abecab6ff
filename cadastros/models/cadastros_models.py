# cadastros/models/cadastros_models.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from commons.models.base_models import BaseModel


def _somente_digitos(valor: str) -> str:
    return "".join(ch for ch in valor if ch.isdigit())


class Cliente(BaseModel):
    """
    Cliente da farmácia (quem paga o `valor_cliente` da venda).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    nome = models.CharField(max_length=300)
    cpf = models.CharField(
        max_length=14,
        null=True,
        blank=True,
        help_text="CPF somente com dígitos (a máscara é removida no clean).",
    )
    telefone = models.CharField(max_length=20, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)
    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = "cliente"
        verbose_name = "Cliente"
        verbose_name_plural = "Clientes"
        ordering = ["nome"]
        indexes = [
            models.Index(fields=["nome"], name="idx_cliente_nome"),
        ]

    def __str__(self) -> str:
        return self.nome

    def clean(self):
        errors = {}
        if not (self.nome or "").strip():
            errors["nome"] = "O nome do cliente é obrigatório."
        if self.cpf:
            cpf = _somente_digitos(self.cpf)
            if len(cpf) != 11:
                errors["cpf"] = "CPF deve conter 11 dígitos."
            else:
                self.cpf = cpf
        if errors:
            raise ValidationError(errors)


class Vendedor(BaseModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    nome = models.CharField(max_length=300)
    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = "vendedor"
        verbose_name = "Vendedor"
        verbose_name_plural = "Vendedores"
        ordering = ["nome"]

    def __str__(self) -> str:
        return self.nome


class Prescritor(BaseModel):
    """
    Profissional que prescreveu a fórmula manipulada.

    `conselho` + `numero_registro` (ex.: CRM 12345) identificam o prescritor
    quando informados.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    nome = models.CharField(max_length=300)
    conselho = models.CharField(max_length=10, null=True, blank=True)
    numero_registro = models.CharField(max_length=20, null=True, blank=True)
    uf_registro = models.CharField(max_length=2, null=True, blank=True)
    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = "prescritor"
        verbose_name = "Prescritor"
        verbose_name_plural = "Prescritores"
        ordering = ["nome"]
        constraints = [
            models.UniqueConstraint(
                fields=["conselho", "numero_registro", "uf_registro"],
                name="uniq_prescritor_registro",
            ),
        ]

    def __str__(self) -> str:
        if self.conselho and self.numero_registro:
            return f"{self.nome} ({self.conselho} {self.numero_registro})"
        return self.nome
