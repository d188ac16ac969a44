# booking_system/exceptions.py
#
# Purpose:
# - Project-wide DRF exception handler.
# - Domain rule violations are handled inside each view (400 with a reason);
#   this handler only catches what the views let through.
#
# Behavior:
# - DatabaseError (store unreachable, locked, etc.) -> 503 with a transient
#   message. Nothing is retried; the caller may simply try again.
# - Everything else falls back to DRF's default handler.
#
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception("Store failure in %s", view.__class__.__name__ if view else "unknown view")
        return Response(
            {"detail": "The service is temporarily unavailable. Please try again."},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return None
