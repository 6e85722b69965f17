# dashboard/tests/test_home.py
import pytest
from django.urls import reverse

from core.constants import UserRoles
from core.services import ApiClient


@pytest.mark.parametrize('role', UserRoles.values)
def test_home_renders_for_every_role(client, login, role):
    login(role)

    response = client.get(reverse('dashboard:home'))

    assert response.status_code == 200
    assert b'2023-2024' in response.content


def test_faculty_home_has_no_review_cards(client, login):
    login(UserRoles.FACULTY)

    response = client.get(reverse('dashboard:home'))

    assert b'Template Management' not in response.content
    assert b'Submissions' not in response.content


def test_home_without_current_year(client, login, api):
    api.academic_years = [{**year, 'is_current': False} for year in api.academic_years]
    login(UserRoles.ADMIN)

    response = client.get(reverse('dashboard:home'))

    assert response.status_code == 200
    assert b'not set' in response.content


def test_root_redirects_to_dashboard(client):
    response = client.get('/')
    assert response.status_code == 302
    assert response['Location'] == reverse('dashboard:home')


def test_one_api_client_per_request_is_closed(client, login, monkeypatch, submission_42):
    login(UserRoles.ADMIN)
    created, closed = [], []
    for_session = ApiClient.for_session

    def tracking_for_session(cls, session):
        api_client = for_session(session)
        created.append(api_client)
        return api_client

    monkeypatch.setattr(ApiClient, 'for_session', classmethod(tracking_for_session))
    monkeypatch.setattr(ApiClient, 'close', lambda self: closed.append(self))

    response = client.get(reverse('dashboard:submission-list'))

    assert response.status_code == 200
    assert len(created) == 1
    assert closed == created


def test_board_lookup_skips_academic_years(client, login, api):
    login(UserRoles.ADMIN)

    client.get(reverse('dashboard:home'))

    assert api.calls_to('GET', '/boards/')
    assert api.calls_to('GET', '/academic-years/') == []
