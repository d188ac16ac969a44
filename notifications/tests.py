from smtplib import SMTPException
from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from .mail_relay import MailRelay
from .models import ContactMessage


@override_settings(CONTACT_EMAIL_TO="studio@example.com", DEFAULT_FROM_EMAIL="noreply@example.com")
class ContactFormTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.payload = {"name": "Sara", "email": "sara@example.com", "message": "Do you do bridal henna?"}

    def test_message_relayed_to_studio_inbox(self):
        resp = self.client.post("/api/contact/", self.payload, format="json")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, {"message": "Email sent successfully"})
        self.assertEqual(len(mail.outbox), 1)
        sent = mail.outbox[0]
        self.assertEqual(sent.subject, "New contact form submission from Sara")
        self.assertEqual(sent.to, ["studio@example.com"])
        self.assertIn("Email: sara@example.com", sent.body)
        self.assertIn("bridal henna", sent.body)
        self.assertTrue(ContactMessage.objects.get().sent)

    def test_missing_fields_rejected(self):
        resp = self.client.post("/api/contact/", {"name": "Sara"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(len(mail.outbox), 0)

    def test_relay_failure_reported(self):
        with mock.patch("notifications.mail_relay.send_mail", side_effect=SMTPException("connection refused")):
            resp = self.client.post("/api/contact/", self.payload, format="json")

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.data["message"], "Failed to send email")
        self.assertIn("connection refused", resp.data["error"])
        record = ContactMessage.objects.get()
        self.assertFalse(record.sent)
        self.assertIn("connection refused", record.error)

    def test_relay_returns_record(self):
        record = MailRelay().send_contact_message("Noor", "noor@example.com", "Hello")
        self.assertTrue(record.sent)
        self.assertEqual(record.name, "Noor")
