import logging

from core.constants import SubmissionStatus
from core.serializers import (
    DepartmentBreakdownSerializer, SubmissionSerializer, SubmissionStatsSerializer,
    SubmissionSummarySerializer, load,
)

logger = logging.getLogger(__name__)


def _params(**values):
    return {key: value for key, value in values.items() if value not in (None, '')}


class SubmissionService:
    def __init__(self, client):
        self.client = client

    def get_submissions(self, filters=None):
        params = _params(**(filters or {}))
        return load(SubmissionSummarySerializer, self.client.get('/submissions/', params=params), many=True)

    def get_submission(self, submission_id):
        return load(SubmissionSerializer, self.client.get(f'/submissions/{submission_id}/'))

    def get_stats(self, board=None):
        """Status counts for the current academic year, optionally for one board code."""
        return load(SubmissionStatsSerializer, self.client.get('/submissions/stats/', params=_params(board=board)))

    def get_department_breakdown(self, board, academic_year=None):
        """
        Per-department completion for ``board`` (a board id).

        Without ``academic_year`` the API reports on the current year.
        """
        params = _params(board=board, academic_year=academic_year)
        return load(DepartmentBreakdownSerializer, self.client.get('/submissions/department-breakdown/', params=params))

    def transition(self, submission_id, status, reviewer, reason=''):
        """Move a submission to ``status`` on behalf of ``reviewer``."""
        payload = {
            'status': status,
            'reviewer': reviewer,
        }
        if status == SubmissionStatus.REJECTED:
            payload['rejection_reason'] = reason

        logger.info(f"Requesting transition of submission {submission_id} to {status} by reviewer {reviewer}")
        data = self.client.patch(f'/submissions/{submission_id}/', data=payload)
        return load(SubmissionSerializer, data)
