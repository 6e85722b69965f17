import logging
import re
import uuid

from django.utils.deprecation import MiddlewareMixin

from user_management.session import resolve_session

logger = logging.getLogger(__name__)

REQUEST_ID_PATTERN = re.compile(r'^[A-Za-z0-9\-]{1,64}$')


class RequestIDMiddleware(MiddlewareMixin):
    def process_request(self, request):
        incoming = request.headers.get('X-Request-ID', '')
        request_id = incoming if REQUEST_ID_PATTERN.match(incoming) else str(uuid.uuid4())
        request.id = request_id
        logger.debug(f'Request ID: {request_id} {request.method} {request.path}')

    def process_response(self, request, response):
        if hasattr(request, 'id'):
            response['X-Request-ID'] = request.id
        return response


class DashboardSessionMiddleware(MiddlewareMixin):
    """Attach the resolved dashboard session to every request"""

    def process_request(self, request):
        request.dashboard_session = resolve_session(request)
