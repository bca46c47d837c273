# gigfin/views.py
# 🚧 Project-wide error handlers: the API speaks JSON, so errors do too.

import logging

from django.http import JsonResponse

logger = logging.getLogger(__name__)


def page_not_found_view(request, exception):  # ✅ wired up as handler404 in gigfin/urls.py
    return JsonResponse({"error": "Not found"}, status=404)


def server_error_view(request):
    logger.error("Unhandled error while serving %s %s", request.method, request.path)
    return JsonResponse({"error": "Internal server error"}, status=500)
