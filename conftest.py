# conftest.py
import json
import re
import time
from typing import NamedTuple

import pytest
import requests
from django.core.cache import cache
from jose import jwt

from core.constants import SubmissionStatus, UserRoles

API_URL = 'http://accredit.test/api'


def make_token(expires_in=3600, **claims):
    claims.setdefault('token_type', 'access')
    return jwt.encode({**claims, 'exp': int(time.time()) + expires_in}, 'test-secret', algorithm='HS256')


def make_user(role, username=None, **extra):
    role = str(role)
    username = username or f"{role}_user"
    return {
        'id': extra.pop('id', f"user-{username}"),
        'username': username,
        'email': f"{username}@college.edu",
        'first_name': extra.pop('first_name', username.split('_')[0].title()),
        'last_name': extra.pop('last_name', 'User'),
        'role': role,
        'department': extra.pop('department', {'id': 1, 'name': 'Computer Science', 'code': 'CS'}),
        **extra,
    }


TEMPLATE_1_1 = {
    'id': 't-1-1',
    'code': '1.1',
    'name': 'Number of programmes offered during the year',
    'board': {'id': 1, 'code': 'NAAC', 'name': 'NAAC'},
    'metadata': [
        {
            'headers': ['1.1. Number of programmes offered during the year'],
            'columns': [
                {'name': 'programme_code', 'display_name': 'Programme Code', 'type': 'single'},
                {'name': 'programme_name', 'display_name': 'Programme Name', 'type': 'single'},
            ],
        },
    ],
}


def make_submission(submission_id='42', status=SubmissionStatus.SUBMITTED, **overrides):
    submission = {
        'id': submission_id,
        'template': TEMPLATE_1_1['id'],
        'template_code': TEMPLATE_1_1['code'],
        'template_name': TEMPLATE_1_1['name'],
        'department': '1',
        'department_name': 'Computer Science',
        'academic_year': 'ay-2023',
        'academic_year_name': '2023-2024',
        'status': status,
        'submitted_by_name': 'Faculty User',
        'submitted_at': '2024-01-15T10:30:00Z',
        'verified_by': None,
        'verified_at': None,
        'rejection_reason': '',
        'data_rows': [
            {'section_index': 0, 'row_number': 1, 'data': {'programme_code': 'BCS', 'programme_name': 'Bachelor of Computer Science'}},
            {'section_index': 0, 'row_number': 2, 'data': {'programme_code': 'MBA', 'programme_name': 'Master of Business Administration'}},
        ],
        'history': [
            {
                'id': 'h-1',
                'action': 'submitted',
                'performed_by_name': 'Faculty User',
                'performed_at': '2024-01-15T10:30:00Z',
                'details': None,
            },
        ],
    }
    submission.update(overrides)
    return submission


def board_code(template):
    board = template.get('board')
    return board.get('code') if isinstance(board, dict) else board


class Call(NamedTuple):
    method: str
    path: str
    params: dict
    json: object


class FakeAccreditApi:
    """In-memory stand-in for the Accredit API, answering through requests.Session.request"""

    def __init__(self):
        self.calls = []
        self.users = {}
        self.boards = [
            {'id': 1, 'name': 'NAAC', 'code': 'NAAC', 'description': 'National Assessment and Accreditation Council', 'is_active': True},
            {'id': 2, 'name': 'NBA', 'code': 'NBA', 'description': 'National Board of Accreditation', 'is_active': True},
        ]
        self.academic_years = [
            {'id': 'ay-2023', 'name': '2023-2024', 'start_date': '2023-06-01', 'end_date': '2024-05-31', 'is_current': True, 'is_active': True},
            {'id': 'ay-2022', 'name': '2022-2023', 'start_date': '2022-06-01', 'end_date': '2023-05-31', 'is_current': False, 'is_active': True},
        ]
        self.departments = [
            {'id': 1, 'name': 'Computer Science', 'code': 'CS'},
            {'id': 2, 'name': 'Physics', 'code': 'PHY'},
        ]
        self.templates = {TEMPLATE_1_1['code']: dict(TEMPLATE_1_1)}
        self.submissions = {}
        self.overrides = {}
        self.on_request = None
        self.access_lifetime = 3600

    # Test helpers

    def add_user(self, role, password='test123', **extra):
        user = make_user(role, **extra)
        self.users[user['username']] = (password, user)
        return user

    def add_submission(self, submission):
        self.submissions[submission['id']] = submission
        return submission

    def respond(self, method, path, status=200, body=None, exc=None):
        self.overrides[(method, path)] = (status, body, exc)

    def calls_to(self, method, path=None):
        return [call for call in self.calls if call.method == method and (path is None or call.path == path)]

    # Transport

    def handle(self, method, url, params=None, json=None, **kwargs):
        path = url[len(API_URL):]
        self.calls.append(Call(method, path, params or {}, json))

        if self.on_request:
            self.on_request(method, path)

        if (method, path) in self.overrides:
            status, body, exc = self.overrides[(method, path)]
            if exc is not None:
                raise exc
        else:
            status, body = self.dispatch(method, path, params or {}, json or {})
        return self.make_response(url, status, body)

    @staticmethod
    def make_response(url, status, body):
        response = requests.Response()
        response.status_code = status
        response.url = url
        response.headers['Content-Type'] = 'application/json'
        response._content = json.dumps(body).encode() if body is not None else b''
        return response

    def dispatch(self, method, path, params, payload):
        for route_method, pattern, handler in self.ROUTES:
            match = re.fullmatch(pattern, path)
            if route_method == method and match:
                return handler(self, params, payload, *match.groups())
        return 404, {'detail': 'Not found.'}

    # Endpoints

    def _login(self, params, payload):
        password, user = self.users.get(payload.get('username'), (None, None))
        if user is None or password != payload.get('password'):
            return 401, {'status': 'error', 'message': 'Invalid credentials'}
        return 200, {'status': 'success', 'data': {
            'user': user,
            'tokens': {
                'access': make_token(self.access_lifetime, user_id=user['id']),
                'refresh': make_token(86400, user_id=user['id'], token_type='refresh'),
            },
        }}

    def _refresh(self, params, payload):
        return 200, {'access': make_token(self.access_lifetime)}

    def _logout(self, params, payload):
        return 200, {'status': 'success', 'message': 'Successfully logged out'}

    def _boards(self, params, payload):
        return 200, self.boards

    def _board(self, params, payload, code):
        for board in self.boards:
            if board['code'] == code:
                return 200, {'status': 'success', 'data': board}
        return 404, {'detail': 'Not found.'}

    def _academic_years(self, params, payload):
        return 200, {'status': 'success', 'data': self.academic_years}

    def _current_academic_year(self, params, payload):
        current = [year for year in self.academic_years if year['is_current']]
        if not current:
            return 404, {'detail': 'No current academic year'}
        return 200, {'status': 'success', 'data': current[0]}

    def _submissions(self, params, payload):
        items = [
            {key: value for key, value in submission.items() if key not in ('data_rows', 'history')}
            for submission in self.submissions.values()
            if all(str(submission.get(key)) == value for key, value in params.items() if key == 'status')
        ]
        return 200, {'status': 'success', 'data': items}

    def _stats(self, params, payload):
        statuses = [submission['status'] for submission in self.submissions.values()]
        return 200, {'status': 'success', 'data': {
            'pending': statuses.count(SubmissionStatus.SUBMITTED),
            'approved': statuses.count(SubmissionStatus.APPROVED),
            'rejected': statuses.count(SubmissionStatus.REJECTED),
            'draft': statuses.count(SubmissionStatus.DRAFT),
            'total': len(statuses),
        }}

    def _department_breakdown(self, params, payload):
        if not params.get('board'):
            return 400, {'status': 'error', 'message': 'Board ID is required'}
        board = next((board for board in self.boards if str(board['id']) == str(params['board'])), None)
        if board is None:
            return 404, {'status': 'error', 'message': 'Board not found'}
        year_id = params.get('academic_year') or next((year['id'] for year in self.academic_years if year['is_current']), None)
        year = next((year for year in self.academic_years if year['id'] == year_id), None)
        if year is None:
            return 404, {'status': 'error', 'message': 'Academic year not found'}
        templates = [template for template in self.templates.values() if board_code(template) == board['code']]

        departments = []
        for dept in self.departments:
            submissions = {
                submission['template_code']: submission for submission in self.submissions.values()
                if submission['department'] == str(dept['id']) and submission['academic_year'] == year_id
            }
            rows = []
            for template in templates:
                submission = submissions.get(template['code'])
                rows.append({
                    'code': template['code'],
                    'name': template['name'],
                    'status': submission['status'] if submission else 'pending',
                    'last_updated': submission['submitted_at'] if submission else None,
                    'submission_id': submission['id'] if submission else None,
                })
            completed = sum(1 for row in rows if row['status'] == SubmissionStatus.APPROVED)
            departments.append({
                **dept,
                'completion_rate': round(completed / len(rows) * 100, 1) if rows else 0,
                'completed_submissions': completed,
                'total_required': len(rows),
                'templates': rows,
            })

        total = sum(dept['total_required'] for dept in departments)
        completed = sum(dept['completed_submissions'] for dept in departments)
        return 200, {'status': 'success', 'data': {
            'academic_year': {'id': year['id'], 'name': year['name'], 'is_current': year['is_current']},
            'board': {'id': board['id'], 'name': board['name'], 'code': board['code']},
            'overall_completion_rate': round(completed / total * 100, 1) if total else 0,
            'completed_submissions': completed,
            'total_required_submissions': total,
            'departments': departments,
        }}

    def _submission(self, params, payload, submission_id):
        if submission_id not in self.submissions:
            return 404, {'detail': 'Not found.'}
        return 200, {'status': 'success', 'data': self.submissions[submission_id]}

    def _update_submission(self, params, payload, submission_id):
        if submission_id not in self.submissions:
            return 404, {'detail': 'Not found.'}
        submission = self.submissions[submission_id]
        submission.update({
            'status': payload['status'],
            'verified_by': payload['reviewer'],
            'verified_at': '2024-01-16T09:00:00Z',
            'rejection_reason': payload.get('rejection_reason', ''),
        })
        submission['history'].append({
            'id': f"h-{len(submission['history']) + 1}",
            'action': payload['status'],
            'performed_by_name': 'Reviewer',
            'performed_at': '2024-01-16T09:00:00Z',
            'details': None,
        })
        return 200, {'status': 'success', 'data': submission}

    def _templates(self, params, payload):
        board = params.get('board')
        items = [
            template for template in self.templates.values()
            if not board or board_code(template) == board
        ]
        return 200, {'status': 'success', 'data': items}

    def _template(self, params, payload, code):
        if code not in self.templates:
            return 404, {'detail': 'Not found.'}
        return 200, {'status': 'success', 'data': self.templates[code]}

    def _create_template(self, params, payload):
        if payload['code'] in self.templates:
            return 400, {'code': ['template with this code already exists.']}
        template = {'id': f"t-{payload['code']}", **payload}
        self.templates[payload['code']] = template
        return 201, {'status': 'success', 'data': template}

    def _update_template(self, params, payload, code):
        if code not in self.templates:
            return 404, {'detail': 'Not found.'}
        self.templates[code].update(payload)
        return 200, {'status': 'success', 'data': self.templates[code]}

    ROUTES = [
        ('POST', r'/auth/login/', _login),
        ('POST', r'/auth/token/refresh/', _refresh),
        ('POST', r'/auth/logout/', _logout),
        ('GET', r'/boards/', _boards),
        ('GET', r'/boards/([^/]+)/', _board),
        ('GET', r'/academic-years/', _academic_years),
        ('GET', r'/academic-years/current/', _current_academic_year),
        ('GET', r'/submissions/', _submissions),
        ('GET', r'/submissions/stats/', _stats),
        ('GET', r'/submissions/department-breakdown/', _department_breakdown),
        ('GET', r'/submissions/([^/]+)/', _submission),
        ('PATCH', r'/submissions/([^/]+)/', _update_submission),
        ('GET', r'/templates/', _templates),
        ('POST', r'/templates/', _create_template),
        ('GET', r'/templates/([^/]+)/', _template),
        ('PATCH', r'/templates/([^/]+)/', _update_template),
    ]


@pytest.fixture(autouse=True)
def api(monkeypatch, settings):
    settings.ACCREDIT_API_URL = API_URL
    fake = FakeAccreditApi()
    monkeypatch.setattr(
        requests.Session,
        'request',
        lambda session, method, url, **kwargs: fake.handle(method, url, **kwargs),
    )
    return fake


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def login(client, api):
    """Sign the test client in through the login view as a user with ``role``"""

    def _login(role=UserRoles.IQAC_DIRECTOR, **extra):
        user = api.add_user(role, **extra)
        response = client.post('/login/', {'username': user['username'], 'password': 'test123'})
        assert response.status_code == 302
        return user

    return _login


@pytest.fixture
def submission_42(api):
    return api.add_submission(make_submission('42'))
