"""
DRF exception handler for application errors.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. DRF's own exceptions
(serializer validation, authentication, 404 from get_object) keep DRF's
formatting; BaseApplicationError subclasses are rendered with to_dict()
and their status_code. The body carries "success": false like a failed
ServiceResult.
"""

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def application_exception_handler(exc, context):
    """Render BaseApplicationError as JSON; defer everything else to DRF."""
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        logger.warning(
            f"Application error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
        return Response({"success": False, **exc.to_dict()}, status=exc.status_code)

    return exception_handler(exc, context)
