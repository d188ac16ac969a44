# accounts/models.py
#
# Purpose:
# - Identity details Django's User does not carry: whether the email address
#   was verified and which provider the account signs in with.
#
# Notes:
# - Accounts from a federated provider (Google) count as verified.
#
from django.conf import settings
from django.db import models


class AccountProfile(models.Model):
    PROVIDER_PASSWORD = "password"
    PROVIDER_GOOGLE = "google.com"
    PROVIDER_CHOICES = [
        (PROVIDER_PASSWORD, "Email and password"),
        (PROVIDER_GOOGLE, "Google"),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="account_profile",
    )
    display_name = models.CharField(max_length=200, blank=True)
    email_verified = models.BooleanField(default=False)
    provider = models.CharField(max_length=20, choices=PROVIDER_CHOICES, default=PROVIDER_PASSWORD)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.email} ({self.provider})"

    @property
    def is_verified(self):
        return self.email_verified or self.provider == self.PROVIDER_GOOGLE
