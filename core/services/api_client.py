import logging

import requests
from django.conf import settings

from core.exceptions import (
    ApiError, ApiForbidden, ApiNotFound, ApiUnauthorized, ApiUnavailable,
    ApiValidationError,
)

logger = logging.getLogger(__name__)

STATUS_EXCEPTIONS = {
    400: ApiValidationError,
    401: ApiUnauthorized,
    403: ApiForbidden,
    404: ApiNotFound,
}


def unwrap_envelope(payload):
    """Strip the API's response envelope, returning the carried data."""
    if not isinstance(payload, dict):
        return payload

    if payload.get('status') == 'error':
        raise ApiError(
            payload.get('message') or ApiError.default_detail,
            errors=payload.get('errors'),
        )

    if 'data' in payload:
        return payload['data']

    # Paginated list responses
    if 'results' in payload and 'count' in payload:
        return payload['results']

    return payload


class ApiClient:
    def __init__(self, base_url=None, access_token=None, timeout=None, session=None):
        self.base_url = (base_url or settings.ACCREDIT_API_URL).rstrip('/')
        self.timeout = timeout or settings.ACCREDIT_API_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
        })
        if access_token:
            self.session.headers['Authorization'] = f'Bearer {access_token}'

    @classmethod
    def for_session(cls, dashboard_session):
        return cls(access_token=dashboard_session.access_token)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method, path, params=None, data=None):
        url = self.url(path)
        logger.debug(f"{method} {url} params={params}")

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Accredit API unreachable for {method} {url}: {str(e)}")
            raise ApiUnavailable() from e

        return self._handle_response(method, url, response)

    def _handle_response(self, method, url, response):
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            message = None
            errors = None
            if isinstance(payload, dict):
                message = payload.get('message') or payload.get('detail') or payload.get('error')
                errors = payload.get('errors')
                if errors is None and response.status_code == 400:
                    # Bare DRF serializer errors
                    errors = {
                        key: value for key, value in payload.items()
                        if key not in ('status', 'message', 'detail', 'error')
                    }

            if response.status_code in (502, 503, 504):
                exception_class = ApiUnavailable
            else:
                exception_class = STATUS_EXCEPTIONS.get(response.status_code, ApiError)
            logger.warning(
                f"Accredit API {method} {url} failed with {response.status_code}: {message}"
            )
            raise exception_class(message, errors=errors)

        return unwrap_envelope(payload)

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, data=None, params=None):
        return self.request('POST', path, params=params, data=data)

    def put(self, path, data=None, params=None):
        return self.request('PUT', path, params=params, data=data)

    def patch(self, path, data=None, params=None):
        return self.request('PATCH', path, params=params, data=data)

    def delete(self, path, params=None):
        return self.request('DELETE', path, params=params)
