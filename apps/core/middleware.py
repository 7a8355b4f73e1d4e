import logging
from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

CALLER_HEADER = 'X-User-ID'


class CallerMiddleware(MiddlewareMixin):
    """
    Sets request.caller_id, the user a request acts on behalf of.

    Resolution order:
    - X-User-ID header, when it holds a positive integer
    - settings.DEFAULT_TASK_OWNER_ID otherwise

    A malformed header leaves caller_id as None and flags the request so
    endpoints that need a caller can reject it with a 400.
    """

    def process_request(self, request):
        request.caller_id = None
        request.caller_header_invalid = False

        header_value = request.headers.get(CALLER_HEADER)
        if header_value:
            try:
                caller_id = int(header_value)
                if caller_id < 1:
                    raise ValueError(header_value)
                request.caller_id = caller_id
            except ValueError:
                logger.warning(f"Invalid {CALLER_HEADER} header: {header_value}")
                request.caller_header_invalid = True
            return

        request.caller_id = settings.DEFAULT_TASK_OWNER_ID
