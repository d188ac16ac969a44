from django.db import models


class SiteSetting(models.Model):
    """
    Singleton key/value settings documents (last write wins).
    Known keys:
      - address      {"value": "..."}
      - contactInfo  {"email", "phone", "mapUrl", "googleMapsLink"}
      - general      {"businessName", "contactEmail", "phoneNumber"}
    """
    key = models.CharField(max_length=100, unique=True)
    value = models.JSONField(default=dict)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.key}={self.value}"


class AdminAllowList(models.Model):
    """
    The single record listing email addresses with administrator capability.
    Use configmgr.access_control.AccessControl to read or change it.
    """
    key = models.CharField(max_length=50, unique=True, default="adminEmails")
    emails = models.JSONField(default=list)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return ", ".join(self.emails)
