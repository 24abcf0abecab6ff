import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("cadastros", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Venda",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("protocolo", models.CharField(help_text="Protocolo da venda, único dentro da unidade.", max_length=30)),
                ("data_venda", models.DateField()),
                ("data_fechamento", models.DateField(blank=True, null=True)),
                ("data_envio", models.DateField(blank=True, null=True)),
                (
                    "origem",
                    models.CharField(
                        choices=[
                            ("GOIANIA", "Goiânia"),
                            ("INHUMAS", "Inhumas"),
                            ("UBERABA", "Uberaba"),
                            ("NEROPOLIS", "Nerópolis"),
                            ("RIBEIRAO_PRETO", "Ribeirão Preto"),
                            ("OUTRO", "Outro"),
                        ],
                        default="OUTRO",
                        help_text="Filial de onde a fórmula foi comprada.",
                        max_length=20,
                    ),
                ),
                (
                    "unidade",
                    models.CharField(
                        blank=True,
                        choices=[("INHUMAS", "Inhumas"), ("NEROPOLIS", "Nerópolis"), ("UBERABA", "Uberaba")],
                        help_text="Unidade dona da venda.",
                        max_length=20,
                        null=True,
                    ),
                ),
                ("valor_cliente", models.DecimalField(decimal_places=2, help_text="Valor devido pelo cliente.", max_digits=10)),
                ("valor_compra", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                (
                    "valor_pago",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Valor pago à filial de origem (custo), não é quitação do cliente.",
                        max_digits=10,
                        null=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("REGISTRADO", "Registrado"),
                            ("PAGO_PARCIAL", "Pago parcial"),
                            ("PAGO", "Pago"),
                            ("FECHADO", "Fechado"),
                            ("CANCELADO", "Cancelado"),
                        ],
                        default="REGISTRADO",
                        max_length=20,
                    ),
                ),
                ("observacao", models.TextField(blank=True, null=True)),
                (
                    "cliente",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="vendas",
                        to="cadastros.cliente",
                    ),
                ),
                (
                    "vendedor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="vendas",
                        to="cadastros.vendedor",
                    ),
                ),
                (
                    "prescritor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="vendas",
                        to="cadastros.prescritor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Venda",
                "verbose_name_plural": "Vendas",
                "db_table": "venda",
                "ordering": ["-data_venda", "-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="idx_venda_status"),
                    models.Index(fields=["data_venda"], name="idx_venda_data_venda"),
                    models.Index(fields=["data_fechamento"], name="idx_venda_data_fech"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("unidade", "protocolo"),
                        name="uniq_venda_protocolo_unidade",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Baixa",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "tipo_da_baixa",
                    models.CharField(
                        choices=[
                            ("DINHEIRO", "Dinheiro"),
                            ("CARTÃO/PIX", "Cartão/PIX"),
                            ("DEPOSITO", "Depósito"),
                            ("OUTROS", "Outros"),
                        ],
                        max_length=20,
                    ),
                ),
                ("valor_baixa", models.DecimalField(decimal_places=2, max_digits=10)),
                ("data_baixa", models.DateField()),
                ("observacao", models.CharField(blank=True, max_length=500, null=True)),
                (
                    "venda",
                    models.ForeignKey(
                        help_text="Venda à qual esta baixa pertence.",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="baixas",
                        to="vendas.venda",
                    ),
                ),
            ],
            options={
                "verbose_name": "Baixa",
                "verbose_name_plural": "Baixas",
                "db_table": "baixa",
                "ordering": ["data_baixa", "created_at"],
                "indexes": [
                    models.Index(fields=["venda"], name="idx_baixa_venda"),
                    models.Index(fields=["data_baixa"], name="idx_baixa_data"),
                    models.Index(fields=["tipo_da_baixa"], name="idx_baixa_tipo"),
                ],
            },
        ),
    ]
