# dashboard/views.py
import logging

from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.utils.functional import cached_property
from django.views import View
from django.views.generic import TemplateView

from core.constants import SubmissionStatus
from core.exceptions import ApiError, ApiNotFound, ApiUnauthorized
from core.services import ApiClient, BoardService, SubmissionService, TemplateService
from core.utils.excel_export import SubmissionExporter
from user_management.guards import RoleRequiredMixin
from user_management.routes import ROUTES
from .forms import ReviewActionForm
from .listing import FILTER_FIELDS, SubmissionListing
from .notifications import flash
from .progress import SubmissionProgress
from .review import LoadState, ReviewWorkflow
from .template_editor import TemplateEditor, parse_form_target

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


class DashboardViewMixin(RoleRequiredMixin):
    not_found_template_name = 'dashboard/not_found.html'

    @cached_property
    def api(self):
        return ApiClient.for_session(self.request.dashboard_session)

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        finally:
            # One client per request
            if 'api' in self.__dict__:
                self.api.close()

    def not_found(self, message):
        return render(self.request, self.not_found_template_name, {'message': message}, status=404)

    def board_options(self):
        """Boards for filter controls; empty when unavailable"""
        try:
            return BoardService(self.api).get_boards()
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.warning(f"Board list unavailable: {e.message}")
            return []

    def academic_year_options(self):
        try:
            return BoardService(self.api).get_academic_years()
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.warning(f"Academic years unavailable: {e.message}")
            return []


class HomeView(DashboardViewMixin, TemplateView):
    route = 'home'
    template_name = 'dashboard/home.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        service = BoardService(self.api)
        try:
            context['current_year'] = service.get_current_academic_year()
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.warning(f"Current academic year unavailable: {e.message}")
            context['current_year'] = None
        context['boards'] = self.board_options()
        context['cards'] = [
            ROUTES[key] for key in ('submissions', 'template_management')
            if self.request.dashboard_session.user.role in ROUTES[key].roles
        ]
        return context


class SubmissionListView(DashboardViewMixin, TemplateView):
    route = 'submissions'
    template_name = 'dashboard/submission_list.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        filters = {field: self.request.GET.get(field, '') for field in FILTER_FIELDS}
        listing = SubmissionListing(self.api, filters=filters, search=self.request.GET.get('q', ''))
        listing.load()
        boards = self.board_options()
        progress = SubmissionProgress(
            self.api,
            boards,
            board_code=filters['board'],
            academic_year=self.request.GET.get('breakdown_year', ''),
        )
        progress.load()
        context.update({
            'listing': listing,
            'progress': progress,
            'filters': filters,
            'search': listing.search,
            'boards': boards,
            'academic_years': self.academic_year_options(),
            'statuses': SubmissionStatus.choices,
        })
        return context


class SubmissionReviewView(DashboardViewMixin, View):
    route = 'submission_review'
    template_name = 'dashboard/submission_review.html'

    def workflow(self, submission_id):
        return ReviewWorkflow(self.api, submission_id, self.request.dashboard_session.user.id)

    def render_workflow(self, workflow, form=None, status=200):
        return render(self.request, self.template_name, {
            'route': ROUTES[self.route],
            'workflow': workflow,
            'submission': workflow.submission,
            'sections': workflow.sections,
            'history': workflow.history,
            'form': form or ReviewActionForm(),
        }, status=status)

    def get(self, request, submission_id):
        with self.workflow(submission_id) as workflow:
            workflow.load()
            flash(request, workflow.notifications)
            if workflow.load_state == LoadState.NOT_FOUND:
                return self.not_found('Submission not found')
            return self.render_workflow(workflow)

    def post(self, request, submission_id):
        form = ReviewActionForm(request.POST)
        with self.workflow(submission_id) as workflow:
            if workflow.load() == LoadState.NOT_FOUND:
                return self.not_found('Submission not found')
            if workflow.load_state != LoadState.READY:
                flash(request, workflow.notifications)
                return self.render_workflow(workflow, form=form, status=502)
            if not form.is_valid():
                return self.render_workflow(workflow, form=form, status=400)

            workflow.transition(form.cleaned_data['action'], reason=form.cleaned_data['reason'])
            if workflow.field_errors:
                for field, errors in workflow.field_errors.items():
                    for error in errors:
                        form.add_error(field, error)
                return self.render_workflow(workflow, form=form, status=400)

            flash(request, workflow.notifications)
        return redirect('dashboard:submission-review', submission_id=submission_id)


class SubmissionExportView(DashboardViewMixin, View):
    route = 'submission_review'

    def get(self, request, submission_id):
        try:
            submission = SubmissionService(self.api).get_submission(submission_id)
        except ApiNotFound:
            return self.not_found('Submission not found')

        try:
            template = TemplateService(self.api).get_template(submission['template_code'])
        except ApiError as e:
            logger.warning(f"Exporting submission {submission_id} without template layout: {e.message}")
            template = None

        exporter = SubmissionExporter(submission, template)
        response = HttpResponse(exporter.export(), content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{exporter.filename}"'
        return response


class TemplateListView(DashboardViewMixin, TemplateView):
    route = 'template_management'
    template_name = 'dashboard/template_list.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        board = self.request.GET.get('board', '')
        context['boards'] = self.board_options()
        context['board'] = board
        try:
            context['templates'] = TemplateService(self.api).get_templates(board=board or None)
            context['load_failed'] = False
        except ApiUnauthorized:
            raise
        except ApiError as e:
            logger.error(f"Failed to fetch templates for board {board or 'all'}: {e.message}")
            context['templates'] = []
            context['load_failed'] = True
        return context


class TemplateFormView(DashboardViewMixin, View):
    route = 'template_management'
    template_name = 'dashboard/template_form.html'

    def editor(self, action):
        target = parse_form_target(action, self.request.GET.get('code'))
        if target is None:
            return None
        return TemplateEditor(self.api, target)

    def render_editor(self, editor, status=200):
        return render(self.request, self.template_name, {
            'route': ROUTES[self.route],
            'editor': editor,
            'form': editor.form,
            'boards': editor.boards or [],
        }, status=status)

    def get(self, request, action):
        editor = self.editor(action)
        if editor is None:
            return self.not_found('Unknown template form')
        editor.boards = self.board_options()
        if editor.load() == LoadState.NOT_FOUND:
            return self.not_found('Template not found')
        flash(request, editor.notifications)
        return self.render_editor(editor, status=502 if editor.load_state == LoadState.FAILED else 200)

    def post(self, request, action):
        editor = self.editor(action)
        if editor is None:
            return self.not_found('Unknown template form')
        if not editor.check(request.POST):
            return self.render_editor(editor, status=400)

        # An unreachable board list leaves the board unchecked here; the API still validates it
        editor.boards = self.board_options() or None
        if editor.load() != LoadState.READY:
            if editor.load_state == LoadState.NOT_FOUND:
                return self.not_found('Template not found')
            flash(request, editor.notifications)
            return self.render_editor(editor, status=502)

        succeeded = editor.submit(request.POST)
        flash(request, editor.notifications)
        if succeeded:
            return redirect('dashboard:template-list')
        return self.render_editor(editor, status=400)
