import logging

from core.exceptions import ApiError, ApiUnauthorized
from core.services import SubmissionService

logger = logging.getLogger(__name__)

FILTER_FIELDS = ('academic_year', 'board', 'status')
SEARCH_FIELDS = ('template_code', 'template_name', 'department_name', 'submitted_by_name', 'status')


class ListState:
    LOADING = 'loading'
    EMPTY = 'empty'
    READY = 'ready'
    FAILED = 'failed'


def matches_search(submission, term):
    term = (term or '').strip().lower()
    if not term:
        return True
    return any(term in str(submission.get(field) or '').lower() for field in SEARCH_FIELDS)


class SubmissionListing:
    """Submissions for the review queue, filtered by the API and searched locally"""

    def __init__(self, client, filters=None, search=''):
        self.service = SubmissionService(client)
        self.filters = {key: value for key, value in (filters or {}).items() if key in FILTER_FIELDS and value}
        self.search = (search or '').strip()
        self.state = ListState.LOADING
        self.items = []
        self.error = None

    def load(self):
        try:
            self.items = self.service.get_submissions(self.filters)
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.error(f"Failed to fetch submissions with filters {self.filters}: {e.message}")
            self.error = e.message
            self.state = ListState.FAILED
            return self.state

        self.state = ListState.READY if self.items else ListState.EMPTY
        return self.state

    @property
    def visible_items(self):
        return [item for item in self.items if matches_search(item, self.search)]

    @property
    def no_matches(self):
        """Fetched items exist but the search hides all of them"""
        return self.state == ListState.READY and not self.visible_items
