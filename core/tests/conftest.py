# core/tests/conftest.py
import pytest

from core.services import ApiClient


@pytest.fixture
def client_api():
    return ApiClient(access_token='test-access-token')


@pytest.fixture
def template_1_1_3():
    return {
        "id": "t-1-1-3",
        "code": "1.1.3",
        "name": "Details of courses offered",
        "board": "NAAC",
        "metadata": [
            {
                "headers": [
                    "1.1.3 Details of courses offered by the institution that focus on employability/ entrepreneurship/ skill development during the year.",
                    "1.2.1 Details of courses introduced across all programmes offered during the year"
                ],
                "columns": [
                    {
                        "name": "course_name",
                        "display_name": "Name of the Course",
                        "type": "single"
                    },
                    {
                        "name": "course_code",
                        "display_name": "Course Code",
                        "type": "single"
                    },
                    {
                        "name": "activities",
                        "display_name": "Activities/Content with a direct bearing on Employability/ Entrepreneurship/ Skill development",
                        "type": "single"
                    },
                    {
                        "name": "document_link",
                        "display_name": "Link to the relevant document",
                        "type": "single"
                    }
                ]
            },
            {
                "headers": ["1.2.2 Value added courses"],
                "columns": [
                    {
                        "name": "course",
                        "display_name": "Course",
                        "type": "group",
                        "columns": [
                            {"name": "name", "display_name": "Name", "type": "single"},
                            {"name": "code", "display_name": "Code", "type": "single"}
                        ]
                    },
                    {
                        "name": "enrolled",
                        "display_name": "Students enrolled",
                        "type": "single"
                    }
                ]
            }
        ]
    }
