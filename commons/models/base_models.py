# commons/models/base_models.py

from django.db import models


class BaseModel(models.Model):
    """
    Campos de auditoria comuns a todos os cadastros.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
