from typing import NamedTuple, Tuple

from core.constants import UserRoles

ALL_ROLES = tuple(UserRoles.values)


class Route(NamedTuple):
    url_name: str
    roles: Tuple[str, ...]
    title: str
    description: str = ''
    # Listed in the sidebar
    nav: bool = True


ROUTES = {
    'home': Route(
        'dashboard:home',
        ALL_ROLES,
        'Dashboard',
        'Overview of your data and submissions',
    ),
    'submissions': Route(
        'dashboard:submission-list',
        (UserRoles.IQAC_DIRECTOR, UserRoles.ADMIN),
        'Submissions',
        'Review and manage submissions',
    ),
    'submission_review': Route(
        'dashboard:submission-review',
        (UserRoles.IQAC_DIRECTOR, UserRoles.ADMIN),
        'Review Submission',
        'Review and approve/reject department submission',
        nav=False,
    ),
    'template_management': Route(
        'dashboard:template-list',
        (UserRoles.IQAC_DIRECTOR, UserRoles.ADMIN),
        'Template Management',
        'Manage data collection templates',
    ),
}

DEFAULT_REDIRECT = {
    UserRoles.FACULTY.value: 'dashboard:home',
    UserRoles.IQAC_DIRECTOR.value: 'dashboard:submission-list',
    UserRoles.ADMIN.value: 'dashboard:home',
}


def navigation_for(role):
    return [route for route in ROUTES.values() if route.nav and role in route.roles]


def landing_page_for(role):
    return DEFAULT_REDIRECT.get(role, 'dashboard:home')
