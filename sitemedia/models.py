# sitemedia/models.py
from django.db import models


class SiteMedia(models.Model):
    """
    An image or video shown on a public page, bound to a slot coordinate
    (section, subsection, index, media_type). At most one item lives at a
    coordinate; uploading to an occupied one replaces it.
    """
    IMAGE = "image"
    VIDEO = "video"
    MEDIA_TYPE_CHOICES = [(IMAGE, "Image"), (VIDEO, "Video")]

    name = models.CharField(max_length=255)
    file = models.FileField(upload_to="siteMedia/")
    section = models.CharField(max_length=50)
    subsection = models.CharField(max_length=50, null=True, blank=True)
    index = models.PositiveSmallIntegerField()
    media_type = models.CharField(max_length=10, choices=MEDIA_TYPE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["section", "subsection", "index"]

    def __str__(self):
        return self.name

    @property
    def url(self):
        return self.file.url if self.file else ""
