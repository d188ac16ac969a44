from django.contrib import admin
from notifications.models import ContactMessage

@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'sent', 'created_at')
    list_filter = ('sent', 'created_at')
    search_fields = ('name', 'email', 'message')
