# vendas/models/venda_models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from commons.models.base_models import BaseModel


class VendaStatus(models.TextChoices):
    REGISTRADO = "REGISTRADO", "Registrado"
    PAGO_PARCIAL = "PAGO_PARCIAL", "Pago parcial"
    PAGO = "PAGO", "Pago"
    FECHADO = "FECHADO", "Fechado"
    CANCELADO = "CANCELADO", "Cancelado"


class VendaOrigem(models.TextChoices):
    GOIANIA = "GOIANIA", "Goiânia"
    INHUMAS = "INHUMAS", "Inhumas"
    UBERABA = "UBERABA", "Uberaba"
    NEROPOLIS = "NEROPOLIS", "Nerópolis"
    RIBEIRAO_PRETO = "RIBEIRAO_PRETO", "Ribeirão Preto"
    OUTRO = "OUTRO", "Outro"


class Unidade(models.TextChoices):
    INHUMAS = "INHUMAS", "Inhumas"
    NEROPOLIS = "NEROPOLIS", "Nerópolis"
    UBERABA = "UBERABA", "Uberaba"


# Status em que o livro de baixas da venda fica congelado.
STATUS_CONGELADOS = frozenset({VendaStatus.FECHADO, VendaStatus.CANCELADO})


class Venda(BaseModel):
    """
    Venda de fórmula manipulada.

    Pilares:
    - `valor_cliente` é o valor devido pelo cliente; as baixas (Baixa)
      registram o que já foi recebido e nunca podem ultrapassá-lo.
    - O status acompanha o total baixado (REGISTRADO -> PAGO_PARCIAL -> PAGO)
      e só vai para FECHADO pelo serviço de fechamento.
    - `valor_compra` / `valor_pago` são do lado do custo (compra da filial
      de origem) e não participam da quitação.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    protocolo = models.CharField(
        max_length=30,
        help_text="Protocolo da venda, único dentro da unidade.",
    )

    data_venda = models.DateField()
    data_fechamento = models.DateField(null=True, blank=True)
    data_envio = models.DateField(null=True, blank=True)

    cliente = models.ForeignKey(
        "cadastros.Cliente",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="vendas",
    )
    vendedor = models.ForeignKey(
        "cadastros.Vendedor",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="vendas",
    )
    prescritor = models.ForeignKey(
        "cadastros.Prescritor",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="vendas",
    )

    origem = models.CharField(
        max_length=20,
        choices=VendaOrigem.choices,
        default=VendaOrigem.OUTRO,
        help_text="Filial de onde a fórmula foi comprada.",
    )
    unidade = models.CharField(
        max_length=20,
        choices=Unidade.choices,
        null=True,
        blank=True,
        help_text="Unidade dona da venda.",
    )

    valor_cliente = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Valor devido pelo cliente.",
    )
    valor_compra = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    valor_pago = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Valor pago à filial de origem (custo), não é quitação do cliente.",
    )

    status = models.CharField(
        max_length=20,
        choices=VendaStatus.choices,
        default=VendaStatus.REGISTRADO,
    )

    observacao = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "venda"
        verbose_name = "Venda"
        verbose_name_plural = "Vendas"
        ordering = ["-data_venda", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["unidade", "protocolo"],
                name="uniq_venda_protocolo_unidade",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="idx_venda_status"),
            models.Index(fields=["data_venda"], name="idx_venda_data_venda"),
            models.Index(fields=["data_fechamento"], name="idx_venda_data_fech"),
        ]

    def __str__(self) -> str:
        return f"Venda {self.protocolo} ({self.status})"

    def clean(self):
        errors = {}

        if self.valor_cliente is None or self.valor_cliente <= 0:
            errors["valor_cliente"] = "O valor do cliente deve ser maior que zero."

        for campo in ["valor_compra", "valor_pago"]:
            valor = getattr(self, campo, None)
            if valor is not None and valor < 0:
                errors[campo] = "O campo não pode ser negativo."

        if (
            self.valor_compra is not None
            and self.valor_cliente is not None
            and self.valor_compra > self.valor_cliente
        ):
            errors["valor_compra"] = (
                "O valor da compra não pode ser maior que o valor do cliente."
            )

        if errors:
            raise ValidationError(errors)

    # ------------------------------------------------------------------
    # Helpers de status
    # ------------------------------------------------------------------
    @property
    def livro_congelado(self) -> bool:
        """
        Indica se as baixas desta venda não podem mais ser alteradas.
        """
        return self.status in STATUS_CONGELADOS

    @property
    def eh_fechada(self) -> bool:
        return self.status == VendaStatus.FECHADO

    @property
    def eh_cancelada(self) -> bool:
        return self.status == VendaStatus.CANCELADO

    def saldo_a_receber(self, total_baixado: Decimal) -> Decimal:
        return (self.valor_cliente or Decimal("0.00")) - total_baixado
