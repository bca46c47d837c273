# accounts/mixins.py
# 🔒 JSON plumbing shared by both apps: body parsing, error bodies and the
#    session guard (no session → 401, nothing else runs).

import json
import logging
from functools import wraps

from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def json_error(message, status=400, **extra):
    """`{"error": message, ...}` with the given status."""
    return JsonResponse({"error": message, **extra}, status=status)


def read_json(request):
    """Decoded JSON object from the request body, or None when it is not one."""
    try:
        body = json.loads(request.body or b"null")
    except (ValueError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


class ApiLoginRequiredMixin(LoginRequiredMixin):
    """LoginRequiredMixin that answers 401 JSON instead of redirecting to a login page."""

    def handle_no_permission(self):
        logger.info("Rejected unauthenticated %s %s", self.request.method, self.request.path)
        return json_error("Unauthorized", status=401)


def api_login_required(view_func):
    """Function-view twin of ApiLoginRequiredMixin."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            logger.info("Rejected unauthenticated %s %s", request.method, request.path)
            return json_error("Unauthorized", status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped
