from rest_framework import status
from rest_framework.exceptions import APIException


class ApiError(APIException):
    """Error returned by, or raised while talking to, the Accredit API."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'The accreditation service returned an error.'
    default_code = 'api_error'

    def __init__(self, detail=None, code=None, status_code=None, errors=None):
        super().__init__(detail, code)
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or {}

    @property
    def message(self):
        return str(self.detail)


class ApiValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Please check your input and try again.'
    default_code = 'validation_error'


class ApiUnauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Your session has expired. Please login again.'
    default_code = 'unauthorized'


class ApiForbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not authorized to perform this action.'
    default_code = 'forbidden'


class ApiNotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'The requested resource was not found.'
    default_code = 'not_found'


class ApiUnavailable(ApiError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'The accreditation service is unavailable. Please try again later.'
    default_code = 'unavailable'
