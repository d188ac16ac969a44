from django.conf import settings
from django.contrib.auth.models import User
from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from accounts.models import AccountProfile

from .access_control import AccessControl, AllowListError, InMemoryAllowListSource, is_allow_listed
from .models import AdminAllowList
from . import site_settings

BOOTSTRAP = "owner@studio.example.com"


def verified_user(username, email, verified=True):
    user = User.objects.create_user(username=username, email=email, password="x-Pass-123")
    AccountProfile.objects.create(user=user, email_verified=verified)
    return user


class AllowListTests(SimpleTestCase):
    def access(self, emails=None):
        return AccessControl(source=InMemoryAllowListSource(emails), bootstrap_email=BOOTSTRAP)

    def test_missing_record_falls_back_to_bootstrap(self):
        access = self.access()
        self.assertEqual(access.admin_emails(), [BOOTSTRAP])
        self.assertTrue(access.is_admin(BOOTSTRAP))
        self.assertFalse(access.is_admin("someone@example.com"))

    def test_membership_is_case_insensitive(self):
        self.assertTrue(is_allow_listed(" Helper@Example.com ", ["helper@example.com"]))
        self.assertFalse(is_allow_listed("", ["helper@example.com"]))

    def test_add_then_remove(self):
        access = self.access()
        self.assertEqual(access.add_admin("helper@example.com"), [BOOTSTRAP, "helper@example.com"])
        self.assertTrue(access.is_admin("helper@example.com"))

        self.assertEqual(access.remove_admin("helper@example.com"), [BOOTSTRAP])
        self.assertFalse(access.is_admin("helper@example.com"))

    def test_add_rejects_invalid_or_duplicate(self):
        access = self.access(["helper@example.com"])
        for bad in ("not-an-email", "", "HELPER@example.com", BOOTSTRAP):
            with self.assertRaisesMessage(AllowListError, "valid and unique"):
                access.add_admin(bad)
        self.assertEqual(access.admin_emails(), [BOOTSTRAP, "helper@example.com"])

    def test_bootstrap_cannot_be_removed(self):
        access = self.access(["helper@example.com"])
        with self.assertRaisesMessage(AllowListError, "Cannot remove the default admin email."):
            access.remove_admin(BOOTSTRAP.upper())
        self.assertEqual(access.admin_emails(), [BOOTSTRAP, "helper@example.com"])

    def test_stored_list_without_bootstrap_still_includes_it(self):
        access = self.access(["helper@example.com"])
        self.assertEqual(access.admin_emails()[0], BOOTSTRAP)


class AdminEmailsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = verified_user("owner", settings.BOOTSTRAP_ADMIN_EMAIL)
        self.helper = verified_user("helper", "helper@example.com")

    def test_non_admin_is_refused(self):
        self.client.force_authenticate(user=self.helper)
        self.assertEqual(self.client.get("/api/admins/").status_code, 403)
        resp = self.client.post("/api/admins/", {"email": "helper@example.com"}, format="json")
        self.assertEqual(resp.status_code, 403)

    def test_owner_grants_and_revokes_access(self):
        self.client.force_authenticate(user=self.owner)
        resp = self.client.post("/api/admins/", {"email": "helper@example.com"}, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertIn("helper@example.com", AdminAllowList.objects.get().emails)

        helper_client = APIClient()
        helper_client.force_authenticate(user=self.helper)
        self.assertEqual(helper_client.get("/api/admins/").status_code, 200)

        resp = self.client.delete("/api/admins/helper@example.com/")
        self.assertEqual(resp.status_code, 200)
        # Revocation applies on the very next request.
        self.assertEqual(helper_client.get("/api/admins/").status_code, 403)

    def test_unverified_account_on_allow_list_is_not_admin(self):
        squatter = verified_user("squatter", "Second@Example.com", verified=False)
        self.client.force_authenticate(user=self.owner)
        self.client.post("/api/admins/", {"email": "second@example.com"}, format="json")

        squatter_client = APIClient()
        squatter_client.force_authenticate(user=squatter)
        self.assertEqual(squatter_client.get("/api/admins/").status_code, 403)
        resp = squatter_client.post("/api/admins/", {"email": "attacker@example.com"}, format="json")
        self.assertEqual(resp.status_code, 403)

        AccountProfile.objects.filter(user=squatter).update(email_verified=True)
        self.assertEqual(squatter_client.get("/api/admins/").status_code, 200)

    def test_signing_up_as_bootstrap_address_grants_nothing(self):
        self.owner.delete()
        client = APIClient()
        resp = client.post("/api/auth/signup", {
            "email": settings.BOOTSTRAP_ADMIN_EMAIL, "password": "Henna-pass-2025",
        }, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertFalse(resp.data["is_admin"])

        resp = client.post("/api/admins/", {"email": "attacker@example.com"}, format="json")
        self.assertEqual(resp.status_code, 403)
        self.assertFalse(AdminAllowList.objects.exists())

    def test_default_admin_removal_rejected(self):
        self.client.force_authenticate(user=self.owner)
        resp = self.client.delete(f"/api/admins/{settings.BOOTSTRAP_ADMIN_EMAIL}/")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data["detail"], "Cannot remove the default admin email.")


class SiteSettingsTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = verified_user("owner", settings.BOOTSTRAP_ADMIN_EMAIL)

    def test_missing_document_reads_as_defaults(self):
        self.assertEqual(site_settings.get_setting("address"), {"value": ""})
        resp = self.client.get("/api/settings/contactInfo/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, {"email": "", "phone": "", "mapUrl": "", "googleMapsLink": ""})

    def test_last_write_wins_and_unknown_fields_dropped(self):
        site_settings.put_setting("address", {"value": "12 Palm Street"})
        site_settings.put_setting("address", {"value": "7 Cedar Lane", "floor": "2"})
        self.assertEqual(site_settings.get_setting("address"), {"value": "7 Cedar Lane"})

    def test_unknown_key(self):
        with self.assertRaises(KeyError):
            site_settings.get_setting("billing")
        self.assertEqual(self.client.get("/api/settings/billing/").status_code, 404)

    def test_general_is_admin_only(self):
        self.assertEqual(self.client.get("/api/settings/general/").status_code, 403)
        resp = self.client.put("/api/settings/general/", {"businessName": "Henna Studio"}, format="json")
        self.assertEqual(resp.status_code, 403)

        self.client.force_authenticate(user=self.owner)
        resp = self.client.put("/api/settings/general/", {"businessName": "Henna Studio"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            self.client.get("/api/settings/general/").data,
            {"businessName": "Henna Studio", "contactEmail": "", "phoneNumber": ""},
        )
