from rest_framework import serializers
from .models import SiteMedia


class SiteMediaSerializer(serializers.ModelSerializer):
    url = serializers.CharField(read_only=True)

    class Meta:
        model = SiteMedia
        fields = ["id", "name", "url", "section", "subsection", "index", "media_type", "created_at"]
        read_only_fields = fields


class MediaUploadSerializer(serializers.Serializer):
    section = serializers.CharField()
    subsection = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    index = serializers.IntegerField(min_value=0)
    file = serializers.FileField()
