# commons/apps.py

from django.apps import AppConfig


class CommonsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "commons"
    verbose_name = "Comuns"
