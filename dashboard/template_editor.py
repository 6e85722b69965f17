import logging
from typing import NamedTuple

from core.constants import FormAction
from core.exceptions import ApiError, ApiNotFound, ApiUnauthorized, ApiValidationError
from core.services import TemplateService
from dashboard.forms import TemplateForm
from dashboard.notifications import Notification
from dashboard.review import FormState, LoadState

logger = logging.getLogger(__name__)


class CreateTemplate(NamedTuple):
    action: str = FormAction.CREATE


class EditTemplate(NamedTuple):
    code: str
    action: str = FormAction.EDIT


def parse_form_target(action, code=None):
    """Map the route's action and ``?code=`` onto a form target, or None."""
    code = (code or '').strip()
    if action == FormAction.CREATE:
        return CreateTemplate()
    if action == FormAction.EDIT and code:
        return EditTemplate(code)
    return None


class TemplateEditor:
    """
    Create or edit one template against the API.

    ``load_state`` tracks fetching the template being edited and
    ``form_state`` the save, the same way the review page does.
    """

    def __init__(self, client, target, boards=None):
        self.service = TemplateService(client)
        self.target = target
        self.boards = boards
        self.load_state = LoadState.LOADING
        self.form_state = FormState.IDLE
        self.template = None
        self.notifications = []
        self.form = None

    @property
    def is_edit(self):
        return isinstance(self.target, EditTemplate)

    @property
    def initial(self):
        if not self.template:
            return {'code': getattr(self.target, 'code', ''), 'metadata': []}
        return {key: self.template.get(key) for key in ('code', 'name', 'board', 'metadata')}

    @property
    def can_submit(self):
        return self.load_state == LoadState.READY and self.form_state in (FormState.IDLE, FormState.FAILED)

    def _build_form(self, data=None):
        return TemplateForm(data, initial=self.initial, boards=self.boards, editing=self.is_edit)

    def load(self):
        if not self.is_edit:
            self.load_state = LoadState.READY
            self.form = self._build_form()
            return self.load_state

        try:
            self.template = self.service.get_template(self.target.code)
        except ApiUnauthorized:
            raise
        except ApiNotFound:
            self.load_state = LoadState.NOT_FOUND
            return self.load_state
        except ApiError as e:
            logger.error(f"Failed to load template {self.target.code}: {e.message}")
            self.notifications.append(Notification(Notification.ERROR, 'Failed to load template'))
            self.load_state = LoadState.FAILED
            return self.load_state

        self.load_state = LoadState.READY
        self.form = self._build_form()
        return self.load_state

    @property
    def field_errors(self):
        if self.form is None or not self.form.is_bound:
            return {}
        return {field: list(errors) for field, errors in self.form.errors.items()}

    def check(self, data):
        """
        Validate ``data`` with what is known locally, before anything is fetched.

        Board membership is left to ``submit`` once the board list is known.
        """
        self.form_state = FormState.VALIDATING
        self.form = self._build_form(data)
        valid = self.form.validation_result().valid
        self.form_state = FormState.IDLE
        return valid

    def submit(self, data):
        """
        Validate ``data`` and send it to the API.

        Invalid input never reaches the API. Returns True on success.
        """
        if not self.can_submit:
            logger.info(f"Ignoring template {self.target.action}: form is {self.form_state}")
            return False

        self.form_state = FormState.VALIDATING
        self.form = self._build_form(data)
        result = self.form.validation_result()
        if not result.valid:
            self.form_state = FormState.IDLE
            return False

        payload = {
            'code': result.cleaned_data['code'],
            'name': result.cleaned_data['name'],
            'board': result.cleaned_data['board'],
            'metadata': result.cleaned_data['metadata'],
        }

        self.form_state = FormState.SUBMITTING
        try:
            if self.is_edit:
                template = self.service.update_template(self.target.code, payload)
            else:
                template = self.service.create_template(payload)
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.warning(f"Failed to {self.target.action} template {payload['code']}: {e.message}")
            self._apply_api_errors(e)
            self.notifications.append(
                Notification(Notification.ERROR, f"Failed to {self.target.action} template: {e.message}")
            )
            self.form_state = FormState.FAILED
            return False

        self.template = template
        self.form_state = FormState.SUCCESS
        verb = 'updated' if self.is_edit else 'created'
        self.notifications.append(Notification(Notification.SUCCESS, f"Template {verb} successfully"))
        logger.info(f"Template {template['code']} {verb}")
        return True

    def _apply_api_errors(self, error):
        if not isinstance(error, ApiValidationError):
            return
        for field, messages in (error.errors or {}).items():
            if not isinstance(messages, (list, tuple)):
                messages = [messages]
            target = field if field in self.form.fields else None
            for message in messages:
                self.form.add_error(target, str(message))
