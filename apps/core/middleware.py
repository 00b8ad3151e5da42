import logging
import time

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class RequestLogMiddleware(MiddlewareMixin):
    """
    Logs every /api request as `METHOD path status in Nms`.
    """

    def process_request(self, request):
        request._log_started = time.monotonic()

    def process_response(self, request, response):
        if not request.path.startswith('/api'):
            return response

        started = getattr(request, '_log_started', None)
        duration_ms = int((time.monotonic() - started) * 1000) if started else 0

        line = f"{request.method} {request.path} {response.status_code} in {duration_ms}ms"
        if response.status_code >= 500:
            logger.error(line)
        else:
            logger.info(line)
        return response
