# vendas/models/baixa_models.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from commons.models.base_models import BaseModel
from vendas.models.venda_models import Venda


class TipoDaBaixa(models.TextChoices):
    DINHEIRO = "DINHEIRO", "Dinheiro"
    CARTAO_PIX = "CARTÃO/PIX", "Cartão/PIX"
    DEPOSITO = "DEPOSITO", "Depósito"
    OUTROS = "OUTROS", "Outros"


class Baixa(BaseModel):
    """
    Lançamento de recebimento (parcial ou total) contra uma venda.

    - A venda é dona das suas baixas: apagar a venda apaga as baixas.
    - A regra "soma das baixas <= valor_cliente" é garantida pelos services
      de baixa, não pelo model.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    venda = models.ForeignKey(
        Venda,
        on_delete=models.CASCADE,
        related_name="baixas",
        help_text="Venda à qual esta baixa pertence.",
    )

    tipo_da_baixa = models.CharField(
        max_length=20,
        choices=TipoDaBaixa.choices,
    )

    valor_baixa = models.DecimalField(max_digits=10, decimal_places=2)

    data_baixa = models.DateField()

    observacao = models.CharField(max_length=500, null=True, blank=True)

    class Meta:
        db_table = "baixa"
        verbose_name = "Baixa"
        verbose_name_plural = "Baixas"
        ordering = ["data_baixa", "created_at"]
        indexes = [
            models.Index(fields=["venda"], name="idx_baixa_venda"),
            models.Index(fields=["data_baixa"], name="idx_baixa_data"),
            models.Index(fields=["tipo_da_baixa"], name="idx_baixa_tipo"),
        ]

    def __str__(self) -> str:
        return f"Baixa {self.id} da Venda {self.venda_id}"

    def clean(self):
        errors = {}

        if self.valor_baixa is None or self.valor_baixa <= 0:
            errors["valor_baixa"] = "O valor da baixa deve ser maior que zero."

        if errors:
            raise ValidationError(errors)
