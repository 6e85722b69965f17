# core/middleware.py
import logging
import traceback

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.http import Http404, JsonResponse
from django.shortcuts import render
from redis.exceptions import RedisError
from rest_framework import status
from rest_framework.exceptions import APIException

from core.constants import ERROR_MESSAGES
from core.exceptions import ApiUnauthorized
from user_management.guards import redirect_to_login
from user_management.session import end_session

logger = logging.getLogger(__name__)


def wants_json(request):
    return 'application/json' in request.headers.get('Accept', '') and 'text/html' not in request.headers.get('Accept', '')


class GlobalErrorHandler:
    """Last-resort handler for exceptions a view did not scope to itself"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        # Left to Django's own 404/403 handling
        if isinstance(exception, (Http404, PermissionDenied)):
            return None

        if isinstance(exception, ApiUnauthorized):
            logger.info(f"API rejected the session token on {request.path}; signing out")
            end_session(request)
            return redirect_to_login(request)

        trace = traceback.format_exc()
        logger.error(f"Unhandled exception on {request.path}: {str(exception)}\n{trace}")

        error_response = {
            'status': 'error',
            'message': ERROR_MESSAGES['GENERIC'],
        }

        if isinstance(exception, APIException):
            error_response['type'] = 'api_error'
            error_response['message'] = str(exception.detail)
            status_code = exception.status_code
        elif isinstance(exception, RedisError):
            error_response['type'] = 'cache_error'
            error_response['message'] = ERROR_MESSAGES['CACHE']
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        else:
            error_response['type'] = 'server_error'
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        if settings.DEBUG:
            error_response['debug'] = {
                'exception_type': exception.__class__.__name__,
                'traceback': trace
            }

        if wants_json(request):
            return JsonResponse(error_response, status=status_code)
        return render(request, 'errors/error.html', {'error': error_response}, status=status_code)
