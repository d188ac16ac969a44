import re
from unittest import mock

import httpx
from django.conf import settings
from django.contrib.auth.models import User
from django.core import mail
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from . import identity
from .identity import IdentityError
from .models import AccountProfile

PASSWORD = "Henna-pass-2025"
LINK_RE = re.compile(r"uid=(?P<uid>[^&\s]+)&token=(?P<token>\S+)")


def link_params(message):
    match = LINK_RE.search(message.body)
    return match.group("uid"), match.group("token")


@override_settings(FRONTEND_URL="https://studio.example.com")
class SignupAndVerificationTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_signup_sends_verification_link(self):
        resp = self.client.post("/api/auth/signup", {
            "email": "Jane@Example.com", "password": PASSWORD, "name": "Jane",
        }, format="json")

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["email"], "jane@example.com")
        self.assertFalse(resp.data["email_verified"])
        self.assertFalse(resp.data["is_admin"])
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["jane@example.com"])
        self.assertIn("https://studio.example.com/verify-email?uid=", mail.outbox[0].body)

        me = self.client.get("/api/auth/me")
        self.assertEqual(me.data["identity"]["email"], "jane@example.com")

    def test_duplicate_and_invalid_signup(self):
        identity.sign_up("jane@example.com", PASSWORD)
        with self.assertRaisesMessage(IdentityError, "Email already used."):
            identity.sign_up("JANE@example.com", PASSWORD)
        with self.assertRaises(IdentityError):
            identity.sign_up("not-an-email", PASSWORD)

        resp = self.client.post("/api/auth/signup", {"email": "sam@example.com", "password": ""}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_verification_link_marks_email_verified_once(self):
        user = identity.sign_up("jane@example.com", PASSWORD)
        uid, token = link_params(mail.outbox[0])

        resp = self.client.post("/api/auth/verify-email", {"uid": uid, "token": token}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data["email_verified"])
        self.assertTrue(identity.is_verified(user))

        # Token is tied to the unverified state.
        resp = self.client.post("/api/auth/verify-email", {"uid": uid, "token": token}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_bad_verification_link(self):
        resp = self.client.post("/api/auth/verify-email", {"uid": "xx", "token": "nope"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_resend_verification(self):
        user = identity.sign_up("jane@example.com", PASSWORD)
        self.client.force_authenticate(user=user)
        resp = self.client.post("/api/auth/verify-email/resend")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(mail.outbox), 2)


class LoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = identity.sign_up("jane@example.com", PASSWORD, "Jane")

    def test_login_with_any_email_case(self):
        resp = self.client.post("/api/auth/login", {"email": "JANE@example.com", "password": PASSWORD}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["id"], self.user.id)
        self.assertEqual(resp.data["name"], "Jane")

    def test_wrong_password(self):
        resp = self.client.post("/api/auth/login", {"email": "jane@example.com", "password": "wrong"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_anonymous_identity_is_null(self):
        self.assertEqual(self.client.get("/api/auth/me").data, {"identity": None})

    def test_admin_flag_follows_allow_list(self):
        owner = User.objects.create_user(username="owner", email=settings.BOOTSTRAP_ADMIN_EMAIL, password=PASSWORD)
        self.assertFalse(identity.describe(owner)["is_admin"])

        AccountProfile.objects.filter(user=owner).update(email_verified=True)
        self.assertTrue(identity.describe(owner)["is_admin"])
        self.assertFalse(identity.describe(self.user)["is_admin"])


class PasswordResetTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = identity.sign_up("jane@example.com", PASSWORD)
        mail.outbox.clear()

    def test_reset_flow(self):
        resp = self.client.post("/api/auth/password-reset", {"email": "jane@example.com"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(mail.outbox), 1)
        uid, token = link_params(mail.outbox[0])

        resp = self.client.post("/api/auth/password-reset/confirm", {
            "uid": uid, "token": token, "new_password": "Mehndi-nights-77",
        }, format="json")
        self.assertEqual(resp.status_code, 200)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Mehndi-nights-77"))

    def test_unknown_address_answers_the_same(self):
        resp = self.client.post("/api/auth/password-reset", {"email": "ghost@example.com"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(mail.outbox), 0)

    def test_invalid_token(self):
        with self.assertRaises(IdentityError):
            identity.reset_password("bad", "bad", "Mehndi-nights-77")


@override_settings(GOOGLE_CLIENT_ID="client-123")
class GoogleSignInTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def tokeninfo(self, status_code=200, **claims):
        payload = {"aud": "client-123", "email": "g@example.com", "email_verified": "true", "name": "Gia"}
        payload.update(claims)
        response = mock.Mock(status_code=status_code)
        response.json.return_value = payload
        return response

    def test_new_google_account_is_verified(self):
        with mock.patch("accounts.identity.httpx.get", return_value=self.tokeninfo()):
            resp = self.client.post("/api/auth/google", {"id_token": "abc"}, format="json")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["provider"], AccountProfile.PROVIDER_GOOGLE)
        user = User.objects.get(email="g@example.com")
        self.assertFalse(user.has_usable_password())
        self.assertTrue(identity.is_verified(user))

    def test_existing_password_account_becomes_verified(self):
        user = identity.sign_up("g@example.com", PASSWORD)
        with mock.patch("accounts.identity.httpx.get", return_value=self.tokeninfo()):
            identity.sign_in_with_google("abc")
        self.assertTrue(identity.is_verified(user))
        self.assertEqual(User.objects.filter(email="g@example.com").count(), 1)

    def test_google_sign_in_drops_unverified_password(self):
        identity.sign_up("g@example.com", "Someone-elses-99")
        with mock.patch("accounts.identity.httpx.get", return_value=self.tokeninfo()):
            user = identity.sign_in_with_google("abc")

        user.refresh_from_db()
        self.assertFalse(user.has_usable_password())
        self.assertEqual(user.account_profile.provider, AccountProfile.PROVIDER_GOOGLE)
        resp = self.client.post("/api/auth/login", {"email": "g@example.com", "password": "Someone-elses-99"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_google_sign_in_keeps_verified_password(self):
        user = identity.sign_up("g@example.com", PASSWORD)
        AccountProfile.objects.filter(user=user).update(email_verified=True)
        with mock.patch("accounts.identity.httpx.get", return_value=self.tokeninfo()):
            identity.sign_in_with_google("abc")

        user.refresh_from_db()
        self.assertTrue(user.check_password(PASSWORD))

    def test_wrong_audience_rejected(self):
        with mock.patch("accounts.identity.httpx.get", return_value=self.tokeninfo(aud="someone-else")):
            resp = self.client.post("/api/auth/google", {"id_token": "abc"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(User.objects.exists())

    def test_unreachable_google(self):
        with mock.patch("accounts.identity.httpx.get", side_effect=httpx.ConnectError("down")):
            with self.assertRaisesMessage(IdentityError, "Could not reach Google"):
                identity.sign_in_with_google("abc")
