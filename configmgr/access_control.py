"""
access_control.py
-----------------
Administrator privilege = membership of the admin allow-list.

- The allow-list is read through a small source object so the check itself
  stays a pure function (is_allow_listed) and tests can inject a list.
- When no allow-list record exists yet, the list is just the bootstrap
  address (BOOTSTRAP_ADMIN_EMAIL).
- The bootstrap address is always a member and can never be removed.
- Emails are compared trimmed and case-insensitively.
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from .models import AdminAllowList

logger = logging.getLogger(__name__)

ALLOW_LIST_KEY = "adminEmails"


class AllowListError(ValueError):
    """Raised when an allow-list change is rejected."""


def normalise_email(email):
    return (email or "").strip().lower()


def is_allow_listed(email, emails) -> bool:
    email = normalise_email(email)
    if not email:
        return False
    return email in {normalise_email(e) for e in emails}


class ModelAllowListSource:
    """Reads/writes the AdminAllowList row. load() returns None when absent."""

    def load(self):
        row = AdminAllowList.objects.filter(key=ALLOW_LIST_KEY).first()
        return list(row.emails) if row else None

    def save(self, emails):
        AdminAllowList.objects.update_or_create(key=ALLOW_LIST_KEY, defaults={"emails": list(emails)})


class InMemoryAllowListSource:
    def __init__(self, emails=None):
        self.emails = list(emails) if emails is not None else None

    def load(self):
        return list(self.emails) if self.emails is not None else None

    def save(self, emails):
        self.emails = list(emails)


class AccessControl:
    def __init__(self, source=None, bootstrap_email=None):
        self.source = source or ModelAllowListSource()
        self.bootstrap_email = normalise_email(bootstrap_email or settings.BOOTSTRAP_ADMIN_EMAIL)

    def admin_emails(self):
        """Current allow-list, bootstrap address first."""
        stored = self.source.load()
        emails = [self.bootstrap_email]
        for email in stored or []:
            email = normalise_email(email)
            if email and email not in emails:
                emails.append(email)
        return emails

    def is_admin(self, email) -> bool:
        return is_allow_listed(email, self.admin_emails())

    def add_admin(self, email):
        email = normalise_email(email)
        try:
            validate_email(email)
        except ValidationError as e:
            raise AllowListError("Please enter a valid and unique email address.") from e

        emails = self.admin_emails()
        if email in emails:
            raise AllowListError("Please enter a valid and unique email address.")

        emails.append(email)
        self.source.save(emails)
        logger.info("Admin added: %s", email)
        return emails

    def remove_admin(self, email):
        email = normalise_email(email)
        if email == self.bootstrap_email:
            raise AllowListError("Cannot remove the default admin email.")

        emails = self.admin_emails()
        if email not in emails:
            raise AllowListError(f"{email} is not an admin.")

        emails.remove(email)
        self.source.save(emails)
        logger.info("Admin removed: %s", email)
        return emails
