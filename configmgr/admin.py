from django.contrib import admin
from .models import AdminAllowList, SiteSetting


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display = ("key", "value", "updated_at")
    search_fields = ("key",)


@admin.register(AdminAllowList)
class AdminAllowListAdmin(admin.ModelAdmin):
    list_display = ("key", "emails", "updated_at")
