import enum
import logging

from django.conf import settings
from django.http import HttpResponseRedirect
from django.shortcuts import render, resolve_url
from django.utils.http import urlencode

from user_management.routes import ROUTES

logger = logging.getLogger(__name__)


class GuardOutcome(enum.Enum):
    LOADING = 'loading'
    REDIRECT = 'redirect'
    RENDER = 'render'


def evaluate_access(session, required_roles):
    """Decide whether protected content may render for this session."""
    if session.is_resolving:
        return GuardOutcome.LOADING
    if not session.is_authenticated:
        return GuardOutcome.REDIRECT
    if session.user.role not in required_roles:
        return GuardOutcome.REDIRECT
    return GuardOutcome.RENDER


def redirect_to_login(request):
    login_url = resolve_url(settings.LOGIN_URL)
    if request.method == 'GET':
        login_url = f"{login_url}?{urlencode({'next': request.get_full_path()})}"
    return HttpResponseRedirect(login_url)


class RoleRequiredMixin:
    """
    Gate a class-based view on the viewer's role.

    Set ``route`` to a key of ``user_management.routes.ROUTES`` or give
    ``required_roles`` directly. The check runs before any handler, so no
    API call starts for a viewer who may not see the page.
    """

    route = None
    required_roles = None
    loading_template_name = 'user_management/loading.html'

    def get_required_roles(self):
        if self.required_roles is not None:
            return tuple(self.required_roles)
        return ROUTES[self.route].roles

    def dispatch(self, request, *args, **kwargs):
        session = request.dashboard_session
        outcome = evaluate_access(session, self.get_required_roles())

        if outcome is GuardOutcome.LOADING:
            return render(request, self.loading_template_name, status=202)

        if outcome is GuardOutcome.REDIRECT:
            if session.is_authenticated:
                logger.warning(
                    f"{session.user.username} ({session.user.role}) denied access to {request.path}"
                )
            return redirect_to_login(request)

        return super().dispatch(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        if self.route:
            context['route'] = ROUTES[self.route]
        return context
