from core.services.api_client import ApiClient, unwrap_envelope
from core.services.auth import AuthService
from core.services.board import BoardService
from core.services.submission import SubmissionService
from core.services.template import TemplateService

__all__ = [
    'ApiClient',
    'AuthService',
    'BoardService',
    'SubmissionService',
    'TemplateService',
    'unwrap_envelope',
]
