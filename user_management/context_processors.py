from user_management.routes import navigation_for


def dashboard_session(request):
    session = getattr(request, 'dashboard_session', None)
    if session is None or not session.is_authenticated:
        return {'dashboard_user': None, 'navigation': []}
    return {
        'dashboard_user': session.user,
        'navigation': navigation_for(session.user.role),
    }
