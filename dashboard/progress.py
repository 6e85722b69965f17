import logging

from core.exceptions import ApiError, ApiUnauthorized
from core.services import SubmissionService

logger = logging.getLogger(__name__)

STAT_CARDS = (
    ('pending', 'Pending Review', 'Awaiting review', 'warning'),
    ('approved', 'Approved', 'Successfully approved', 'success'),
    ('rejected', 'Rejected', 'Needs revision', 'danger'),
    ('total', 'Total Submissions', 'All submissions', 'primary'),
)


def pick_board(boards, code=None):
    """The board matching ``code``, else the first one; None without boards."""
    for board in boards:
        if code and board['code'] == code:
            return board
    return boards[0] if boards else None


class SubmissionProgress:
    """Status counts and per-department completion shown beside the review queue"""

    def __init__(self, client, boards, board_code='', academic_year=''):
        self.service = SubmissionService(client)
        self.board_code = board_code or None
        self.board = pick_board(boards, self.board_code)
        self.academic_year = academic_year or None
        self.stats = None
        self.breakdown = None
        self.breakdown_error = None

    def load(self):
        try:
            self.stats = self.service.get_stats(board=self.board_code)
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.warning(f"Submission stats unavailable: {e.message}")

        if self.board is None:
            self.breakdown_error = 'No boards available'
            return

        try:
            self.breakdown = self.service.get_department_breakdown(self.board['id'], self.academic_year)
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.warning(
                f"Department breakdown unavailable for board {self.board['code']} "
                f"and year {self.academic_year or 'current'}: {e.message}"
            )
            self.breakdown_error = e.message

    @property
    def stat_cards(self):
        stats = self.stats or {}
        return [
            {'key': key, 'title': title, 'description': description, 'tone': tone, 'value': stats.get(key, 0)}
            for key, title, description, tone in STAT_CARDS
        ]

    @property
    def selected_year(self):
        if self.academic_year:
            return self.academic_year
        year = (self.breakdown or {}).get('academic_year') or {}
        return str(year['id']) if 'id' in year else None
