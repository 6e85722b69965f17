"""
Submission review.

``ReviewWorkflow`` holds everything the review page knows about one
submission: how loading went, the action state and the notifications
raised along the way. A transition is refused while another one for the
same submission is in flight, and results that arrive after the workflow
has been left are dropped.
"""
import logging

from django.conf import settings
from django.core.cache import cache

from core.constants import REVIEWABLE_STATUSES, SubmissionStatus
from core.exceptions import ApiError, ApiNotFound, ApiUnauthorized
from core.services import SubmissionService, TemplateService
from core.utils.diff import describe_changes
from core.utils.template_structure import build_sections
from dashboard.notifications import Notification

logger = logging.getLogger(__name__)


class LoadState:
    LOADING = 'loading'
    READY = 'ready'
    NOT_FOUND = 'not_found'
    FAILED = 'failed'


class FormState:
    IDLE = 'idle'
    VALIDATING = 'validating'
    SUBMITTING = 'submitting'
    SUCCESS = 'success'
    FAILED = 'failed'


class ReviewAction:
    APPROVE = 'approve'
    REJECT = 'reject'

    TARGET_STATUS = {
        APPROVE: SubmissionStatus.APPROVED,
        REJECT: SubmissionStatus.REJECTED,
    }


def in_flight_key(submission_id):
    return f"review-in-flight:{submission_id}"


class ReviewWorkflow:
    def __init__(self, client, submission_id, reviewer):
        self.submissions = SubmissionService(client)
        self.templates = TemplateService(client)
        self.submission_id = str(submission_id)
        self.reviewer = reviewer

        self.load_state = LoadState.LOADING
        self.form_state = FormState.IDLE
        self.submission = None
        self.template = None
        self.notifications = []
        self.field_errors = {}
        self.mounted = False
        self._in_flight = False

    def __enter__(self):
        self.mounted = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.mounted = False
        return False

    def load(self):
        self.load_state = LoadState.LOADING
        try:
            submission = self.submissions.get_submission(self.submission_id)
        except ApiUnauthorized:
            raise
        except ApiNotFound:
            self.load_state = LoadState.NOT_FOUND
            return self.load_state
        except ApiError as e:
            logger.error(f"Failed to load submission {self.submission_id}: {e.message}")
            self.load_state = LoadState.FAILED
            self.notify(Notification.ERROR, 'Failed to fetch submission details')
            return self.load_state

        template = None
        try:
            template = self.templates.get_template(submission['template_code'])
        except ApiError as e:
            # Rows are still shown, keyed by their own fields
            logger.warning(
                f"Template {submission['template_code']} unavailable for submission {self.submission_id}: {e.message}"
            )

        if not self.mounted:
            logger.debug(f"Discarding load of submission {self.submission_id} after unmount")
            return self.load_state

        self.submission = submission
        self.template = template
        self.load_state = LoadState.READY
        return self.load_state

    @property
    def status(self):
        return self.submission['status'] if self.submission else None

    @property
    def is_reviewable(self):
        return self.status in REVIEWABLE_STATUSES

    @property
    def controls_enabled(self):
        return (
            self.load_state == LoadState.READY
            and self.is_reviewable
            and not self._in_flight
            and self.form_state in (FormState.IDLE, FormState.FAILED)
        )

    @property
    def sections(self):
        if not self.submission:
            return []
        metadata = self.template['metadata'] if self.template else []
        return build_sections(metadata, self.submission['data_rows'])

    @property
    def history(self):
        entries = []
        for entry in self.submission['history'] if self.submission else []:
            details = entry.get('details') or {}
            changes = details.get('changes') if isinstance(details, dict) else None
            if changes is None and (entry.get('previous_data') is not None or entry.get('new_data') is not None):
                changes = describe_changes(entry.get('previous_data') or {}, entry.get('new_data') or {})
            entries.append({**entry, 'changes': changes or []})
        return entries

    def notify(self, level, message):
        self.notifications.append(Notification(level, message))

    def approve(self):
        return self.transition(ReviewAction.APPROVE)

    def reject(self, reason=''):
        return self.transition(ReviewAction.REJECT, reason=reason)

    def transition(self, action, reason=''):
        """
        Request the status change for ``action``.

        Returns True only when this call sent the request and the API
        accepted it. A refused call sends nothing and changes nothing.
        """
        if not self.controls_enabled:
            logger.info(
                f"Ignoring {action} on submission {self.submission_id}: controls disabled ({self.form_state})"
            )
            return False

        self.form_state = FormState.VALIDATING
        self.field_errors = {}
        reason = (reason or '').strip()
        if action == ReviewAction.REJECT and not reason:
            self.field_errors['reason'] = ['Please provide a reason for rejection']
            self.form_state = FormState.IDLE
            return False

        lock_key = in_flight_key(self.submission_id)
        if not cache.add(lock_key, self.reviewer, timeout=settings.REVIEW_LOCK_TIMEOUT):
            logger.info(f"Transition for submission {self.submission_id} already in flight")
            self.form_state = FormState.IDLE
            self.notify(Notification.ERROR, 'This submission is already being reviewed')
            return False

        self._in_flight = True
        self.form_state = FormState.SUBMITTING
        try:
            result = self.submissions.transition(
                self.submission_id,
                ReviewAction.TARGET_STATUS[action],
                self.reviewer,
                reason=reason,
            )
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.warning(f"Failed to {action} submission {self.submission_id}: {e.message}")
            return self._settle(failed=True, error=e)
        finally:
            self._in_flight = False
            cache.delete(lock_key)

        return self._settle(result=result, action=action)

    def _settle(self, result=None, action=None, failed=False, error=None):
        if not self.mounted:
            logger.debug(f"Discarding transition result for submission {self.submission_id} after unmount")
            return False

        if failed:
            if isinstance(error, ApiNotFound):
                message = 'Submission no longer exists'
            else:
                message = f"Failed to update submission status: {error.message}"
            self.notify(Notification.ERROR, message)
            self.form_state = FormState.FAILED
            return False

        # Keep what the PATCH response leaves out
        self.submission = {**self.submission, **{k: v for k, v in result.items() if v not in (None, '', [])}}
        self.form_state = FormState.SUCCESS
        past_tense = 'approved' if action == ReviewAction.APPROVE else 'rejected'
        self.notify(Notification.SUCCESS, f"Submission {past_tense} successfully")
        logger.info(f"Submission {self.submission_id} {past_tense} by reviewer {self.reviewer}")
        return True
