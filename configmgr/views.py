# configmgr/views.py
#
# Purpose:
# - Admin allow-list management (list / add / remove).
# - Singleton settings documents (address, contactInfo, general).
#
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .access_control import AccessControl, AllowListError
from .permissions import IsAllowListedAdmin, request_is_admin
from . import site_settings

logger = logging.getLogger(__name__)


class AdminEmailsView(APIView):
    """
    GET  /api/admins/            -> {"emails": [...], "bootstrap": "..."}
    POST /api/admins/ {"email"}  -> add an admin
    """
    permission_classes = [IsAllowListedAdmin]

    def get(self, request):
        access = AccessControl()
        return Response({"emails": access.admin_emails(), "bootstrap": access.bootstrap_email})

    def post(self, request):
        access = AccessControl()
        try:
            emails = access.add_admin(request.data.get("email"))
        except AllowListError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"emails": emails}, status=status.HTTP_201_CREATED)


class AdminEmailDetailView(APIView):
    """
    DELETE /api/admins/<email>/ -> remove an admin (bootstrap address refused)
    """
    permission_classes = [IsAllowListedAdmin]

    def delete(self, request, email):
        access = AccessControl()
        try:
            emails = access.remove_admin(email)
        except AllowListError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"emails": emails}, status=status.HTTP_200_OK)


class SiteSettingView(APIView):
    """
    GET /api/settings/<key>/   public for address/contactInfo, admin otherwise
    PUT /api/settings/<key>/   admin only, replaces the document
    """

    def get(self, request, key):
        if not site_settings.is_known(key):
            return Response({"detail": "Unknown settings document."}, status=status.HTTP_404_NOT_FOUND)
        if key not in site_settings.PUBLIC_KEYS and not request_is_admin(request):
            return Response({"detail": "Administrator access required."}, status=status.HTTP_403_FORBIDDEN)
        return Response(site_settings.get_setting(key))

    def put(self, request, key):
        if not site_settings.is_known(key):
            return Response({"detail": "Unknown settings document."}, status=status.HTTP_404_NOT_FOUND)
        if not request_is_admin(request):
            return Response({"detail": "Administrator access required."}, status=status.HTTP_403_FORBIDDEN)
        if not isinstance(request.data, dict):
            return Response({"detail": "Expected a JSON object."}, status=status.HTTP_400_BAD_REQUEST)
        data = site_settings.put_setting(key, request.data)
        logger.info("Settings document %s updated by %s", key, request.user.email)
        return Response(data)
