from django.contrib import admin
from .models import AccountProfile


@admin.register(AccountProfile)
class AccountProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "display_name", "provider", "email_verified", "created_at")
    list_filter = ("provider", "email_verified")
    search_fields = ("user__email", "display_name")
