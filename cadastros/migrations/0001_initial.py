import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Cliente",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("nome", models.CharField(max_length=300)),
                (
                    "cpf",
                    models.CharField(
                        blank=True,
                        help_text="CPF somente com dígitos (a máscara é removida no clean).",
                        max_length=14,
                        null=True,
                    ),
                ),
                ("telefone", models.CharField(blank=True, max_length=20, null=True)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("ativo", models.BooleanField(default=True)),
            ],
            options={
                "verbose_name": "Cliente",
                "verbose_name_plural": "Clientes",
                "db_table": "cliente",
                "ordering": ["nome"],
                "indexes": [models.Index(fields=["nome"], name="idx_cliente_nome")],
            },
        ),
        migrations.CreateModel(
            name="Vendedor",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("nome", models.CharField(max_length=300)),
                ("ativo", models.BooleanField(default=True)),
            ],
            options={
                "verbose_name": "Vendedor",
                "verbose_name_plural": "Vendedores",
                "db_table": "vendedor",
                "ordering": ["nome"],
            },
        ),
        migrations.CreateModel(
            name="Prescritor",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("nome", models.CharField(max_length=300)),
                ("conselho", models.CharField(blank=True, max_length=10, null=True)),
                ("numero_registro", models.CharField(blank=True, max_length=20, null=True)),
                ("uf_registro", models.CharField(blank=True, max_length=2, null=True)),
                ("ativo", models.BooleanField(default=True)),
            ],
            options={
                "verbose_name": "Prescritor",
                "verbose_name_plural": "Prescritores",
                "db_table": "prescritor",
                "ordering": ["nome"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("conselho", "numero_registro", "uf_registro"),
                        name="uniq_prescritor_registro",
                    )
                ],
            },
        ),
    ]
