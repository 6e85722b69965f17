# user_management/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views import View

from core.exceptions import ApiError
from core.services import ApiClient, AuthService
from .forms import LoginForm
from .routes import landing_page_for
from .session import end_session, start_session

logger = logging.getLogger(__name__)


class LoginView(View):
    template_name = 'user_management/login.html'

    def get_success_url(self, request, role):
        next_url = request.POST.get('next') or request.GET.get('next')
        if next_url and url_has_allowed_host_and_scheme(
            next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure()
        ):
            return next_url
        return landing_page_for(role)

    def get(self, request):
        session = request.dashboard_session
        if session.is_authenticated:
            return redirect(landing_page_for(session.user.role))
        return render(request, self.template_name, {
            'form': LoginForm(),
            'next': request.GET.get('next', ''),
        })

    def post(self, request):
        form = LoginForm(request.POST)
        context = {'form': form, 'next': request.POST.get('next', '')}
        if not form.is_valid():
            return render(request, self.template_name, context, status=400)

        try:
            with ApiClient() as client:
                result = AuthService(client).login(
                    form.cleaned_data['username'],
                    form.cleaned_data['password'],
                )
        except ApiError as e:
            logger.warning(f"Login failed for {form.cleaned_data['username']}: {e.message}")
            form.add_error(None, e.message)
            return render(request, self.template_name, context, status=e.status_code)

        start_session(request, result['user'], result['tokens'])
        messages.success(request, f"Welcome back, {request.dashboard_session.user.get_full_name()}")
        return redirect(self.get_success_url(request, result['user']['role']))


class LogoutView(View):
    http_method_names = ['post']

    def post(self, request):
        session = request.dashboard_session
        if session.refresh_token:
            try:
                with ApiClient.for_session(session) as client:
                    AuthService(client).logout(session.refresh_token)
            except ApiError as e:
                # The local session is cleared regardless
                logger.warning(f"API logout failed: {e.message}")

        end_session(request)
        messages.info(request, "You have been signed out")
        return redirect('user_management:login')
