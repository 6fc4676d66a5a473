# study/exceptions.py
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class StudyError(Exception):
    """Base class for errors raised by the study services."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ValidationError(StudyError):
    """Malformed or out-of-range input."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(StudyError):
    """Resource is absent or owned by another user."""
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(StudyError):
    """A datastore operation failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def study_exception_handler(exc, context):
    """
    DRF exception handler.
    - StudyError subclasses -> {"detail": ...} with their status code.
    - StorageError is logged with traceback; the client only sees a generic message.
    - Anything else goes to DRF's default handler.
    """
    if isinstance(exc, StorageError):
        view = context.get("view")
        logger.error("storage failure in %s: %s", type(view).__name__ if view else "?", exc,
                     exc_info=exc)
        return Response({"detail": "Storage operation failed."}, status=exc.status_code)
    if isinstance(exc, StudyError):
        return Response({"detail": str(exc)}, status=exc.status_code)
    return exception_handler(exc, context)
