# sitemedia/admin.py
from django.contrib import admin
from .models import SiteMedia

@admin.register(SiteMedia)
class SiteMediaAdmin(admin.ModelAdmin):
    list_display = ("name", "section", "subsection", "index", "media_type", "created_at")
    list_filter = ("section", "media_type")
    search_fields = ("name",)
