import shutil
import tempfile
from unittest import mock

from django.conf import settings
from django.contrib.auth.models import User
from django.core.files.storage import FileSystemStorage, default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import AccountProfile
from .models import SiteMedia
from .services import MediaError, upload_media, validate_slot

MEDIA_DIR = tempfile.mkdtemp()


def jpeg(name="photo.jpg"):
    return SimpleUploadedFile(name, b"\xff\xd8\xff\xe0fake-jpeg", content_type="image/jpeg")


def mp4(name="clip.mp4"):
    return SimpleUploadedFile(name, b"\x00\x00\x00\x18ftypmp42", content_type="video/mp4")


@override_settings(MEDIA_ROOT=MEDIA_DIR)
class SiteMediaTests(TestCase):
    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(MEDIA_DIR, ignore_errors=True)

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(username="owner", email=settings.BOOTSTRAP_ADMIN_EMAIL, password="x")
        AccountProfile.objects.create(user=self.owner, email_verified=True)

    def test_slot_rules(self):
        validate_slot("home", "best-designs", 3, SiteMedia.IMAGE)
        validate_slot("gallery", None, 57, SiteMedia.IMAGE)
        with self.assertRaises(MediaError):
            validate_slot("home", "best-designs", 4, SiteMedia.IMAGE)
        with self.assertRaises(MediaError):
            validate_slot("home", "hero-video", 0, SiteMedia.IMAGE)
        with self.assertRaises(MediaError):
            validate_slot("blog", None, 0, SiteMedia.IMAGE)
        with self.assertRaises(MediaError):
            validate_slot("home", None, 0, SiteMedia.IMAGE)

    def test_upload_replaces_item_at_same_coordinate(self):
        first = upload_media("home", "our-services", 0, jpeg("one.jpg"))
        old_name = first.file.name

        with self.captureOnCommitCallbacks(execute=True):
            second = upload_media("home", "our-services", 0, jpeg("two.jpg"))

        self.assertEqual(SiteMedia.objects.count(), 1)
        self.assertFalse(SiteMedia.objects.filter(pk=first.pk).exists())
        self.assertEqual(second.name, "home_our-services_image 0")
        self.assertEqual(second.media_type, SiteMedia.IMAGE)
        self.assertFalse(default_storage.exists(old_name))
        self.assertTrue(default_storage.exists(second.file.name))

    def test_failed_store_keeps_previous_item(self):
        first = upload_media("home", "our-services", 0, jpeg("one.jpg"))

        with mock.patch.object(FileSystemStorage, "_save", side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                with self.captureOnCommitCallbacks(execute=True):
                    upload_media("home", "our-services", 0, jpeg("two.jpg"))

        kept = SiteMedia.objects.get()
        self.assertEqual(kept.pk, first.pk)
        self.assertTrue(default_storage.exists(kept.file.name))

    def test_stored_file_keeps_extension(self):
        item = upload_media("home", "our-services", 1, jpeg("Henna.JPG"))
        self.assertTrue(item.file.name.startswith("siteMedia/home_our-services_image_1"))
        self.assertTrue(item.file.name.endswith(".jpg"))

    def test_non_media_content_type_rejected(self):
        pdf = SimpleUploadedFile("flyer.pdf", b"%PDF-1.4", content_type="application/pdf")
        with self.assertRaisesMessage(MediaError, "Unsupported file type"):
            upload_media("home", "hero-video", 0, pdf)
        self.assertFalse(SiteMedia.objects.exists())

        self.client.force_authenticate(user=self.owner)
        blob = SimpleUploadedFile("clip.bin", b"\x00\x01", content_type="application/octet-stream")
        resp = self.client.post("/api/media/", {"section": "home", "subsection": "hero-video", "index": 0, "file": blob})
        self.assertEqual(resp.status_code, 400)

    def test_video_slot(self):
        item = upload_media("home", "hero-video", 0, mp4())
        self.assertEqual(item.media_type, SiteMedia.VIDEO)
        self.assertTrue(item.url)

    def test_admin_upload_and_public_listing(self):
        self.client.force_authenticate(user=self.owner)
        resp = self.client.post("/api/media/", {"section": "gallery", "index": 2, "file": jpeg()})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["section"], "gallery")
        self.assertIsNone(resp.data["subsection"])

        resp = self.client.post("/api/media/", {"section": "home", "subsection": "hero-video", "index": 0, "file": jpeg()})
        self.assertEqual(resp.status_code, 400)

        public = APIClient()
        resp = public.get("/api/media/", {"section": "gallery"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(public.get("/api/media/", {"section": "home"}).data, [])

    def test_customers_cannot_upload_or_delete(self):
        item = upload_media("gallery", None, 0, jpeg())
        customer = User.objects.create_user(username="c", email="c@example.com", password="x")
        self.client.force_authenticate(user=customer)

        resp = self.client.post("/api/media/", {"section": "gallery", "index": 1, "file": jpeg()})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.client.delete(f"/api/media/{item.id}/").status_code, 403)

    def test_admin_delete_removes_record(self):
        item = upload_media("gallery", None, 0, jpeg())
        self.client.force_authenticate(user=self.owner)
        self.assertEqual(self.client.delete(f"/api/media/{item.id}/").status_code, 204)
        self.assertFalse(SiteMedia.objects.exists())
