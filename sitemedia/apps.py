# sitemedia/apps.py
from django.apps import AppConfig


class SitemediaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sitemedia"
    verbose_name = "Site media"
