"""
Custom middleware for NetAdmin.
"""
import logging
import time

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class RequestTimingMiddleware(MiddlewareMixin):
    """
    Time API requests and report slow ones.

    Requests slower than ``SLOW_REQUEST_MS`` are logged as warnings and
    those slower than half of it as info; the rest go to debug.
    """

    skip_paths = [
        '/metrics/',
        '/static/',
    ]

    def process_request(self, request):
        request._timing_start = time.monotonic()
        return None

    def process_response(self, request, response):
        start = getattr(request, '_timing_start', None)
        if start is None or any(request.path.startswith(path) for path in self.skip_paths):
            return response

        elapsed_ms = (time.monotonic() - start) * 1000
        threshold = settings.DASHBOARD_SETTINGS['SLOW_REQUEST_MS']
        message = f"{request.method} {request.path} -> {response.status_code} in {elapsed_ms:.0f}ms"

        if elapsed_ms > threshold:
            logger.warning(f"Slow request: {message}")
        elif elapsed_ms > threshold / 2:
            logger.info(message)
        else:
            logger.debug(message)

        response['X-Response-Time-Ms'] = f"{elapsed_ms:.0f}"
        return response
