"""
MailRelay
---------
Purpose:
- Forward contact-form submissions to the studio inbox (CONTACT_EMAIL_TO).
- In development, Django's console email backend prints the message.
- In production, set EMAIL_BACKEND to SMTP and provide credentials in the environment.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail

from .models import ContactMessage

logger = logging.getLogger(__name__)


class MailRelay:
    """
    Sends contact messages and records each attempt.
    """

    def send_contact_message(self, name, email, message) -> ContactMessage:
        """
        Relay one contact-form submission.

        Returns:
            ContactMessage with sent=True on success, or sent=False and the
            error text when the mail backend failed.
        """
        record = ContactMessage.objects.create(name=name, email=email, message=message)
        body = (
            f"Name: {name}\n"
            f"Email: {email}\n"
            f"Message: {message}\n"
        )
        try:
            send_mail(
                subject=f"New contact form submission from {name}",
                message=body,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[settings.CONTACT_EMAIL_TO],
                fail_silently=False,
            )
        except Exception as e:  # any backend failure is reported, never raised
            logger.exception("Failed to send contact email from %s", email)
            record.error = str(e) or e.__class__.__name__
            record.save(update_fields=["error"])
            return record

        record.sent = True
        record.save(update_fields=["sent"])
        logger.info("Contact email relayed from %s", email)
        return record
