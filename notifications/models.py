# notifications/models.py
#
# Purpose:
# - Record every contact-form message relayed to the studio.
#
# Design:
# - 'sent' indicates the delivery attempt result; 'error' keeps the relay's
#   message when it failed.
#
from django.db import models


class ContactMessage(models.Model):
    name = models.CharField(max_length=200)
    email = models.EmailField()
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    sent = models.BooleanField(default=False)
    error = models.TextField(blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Message from {self.name} <{self.email}> at {self.created_at:%Y-%m-%d %H:%M}"
