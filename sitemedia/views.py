from rest_framework import mixins, status, viewsets
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from configmgr.permissions import IsAdminOrReadOnly
from .models import SiteMedia
from .serializers import MediaUploadSerializer, SiteMediaSerializer
from .services import MediaError, delete_media, upload_media


class SiteMediaViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       mixins.CreateModelMixin,
                       mixins.DestroyModelMixin,
                       viewsets.GenericViewSet):
    """
    GET    /api/media/?section=&subsection=&media_type=   public listing
    POST   /api/media/  multipart {section, subsection?, index, file}   admin
    DELETE /api/media/{id}/                                             admin
    """
    serializer_class = SiteMediaSerializer
    permission_classes = [IsAdminOrReadOnly]
    parser_classes = [MultiPartParser, FormParser]

    def get_queryset(self):
        qs = SiteMedia.objects.all()
        params = self.request.query_params
        for param, field in (("section", "section"), ("subsection", "subsection"), ("media_type", "media_type")):
            value = (params.get(param) or "").strip()
            if value:
                qs = qs.filter(**{field: value})
        return qs.order_by("section", "subsection", "index")

    def create(self, request, *args, **kwargs):
        upload = MediaUploadSerializer(data=request.data)
        upload.is_valid(raise_exception=True)
        data = upload.validated_data
        try:
            item = upload_media(data["section"], data.get("subsection"), data["index"], data["file"])
        except MediaError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(SiteMediaSerializer(item).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        delete_media(instance)
