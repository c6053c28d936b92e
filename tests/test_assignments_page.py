import pytest

from client import ApiClient, ApiRequestError, Session
from db import db
from models import TaskModel, UserModel
from app import create_app
from views.assignments import AssignmentsPage


class FlaskTestResponse:
    def __init__(self, response):
        self.status_code = response.status_code
        self.ok = response.status_code < 400
        self.reason = response.status
        self.content = response.data
        self._response = response

    def json(self):
        return self._response.get_json()


class FlaskTestHttp:
    """Routes ApiClient requests into the Flask test client."""

    def __init__(self, client, base_url):
        self.client = client
        self.base_url = base_url

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = url[len(self.base_url):]
        response = self.client.open(path, method=method, json=json, query_string=params, headers=headers)
        return FlaskTestResponse(response)


@pytest.fixture
def app():
    app = create_app(db_url="sqlite:///:memory:")
    with app.app_context():
        db.create_all()
        db.session.add(UserModel(user_id=1, username='admin1', email='admin@example.com', password='hashed',
                                 role='Admin'))
        db.session.add(UserModel(user_id=2, username='volunteer2', email='vol@example.com', password='hashed'))
        db.session.add(TaskModel(task_id=5, task_name='Register guests'))
        db.session.commit()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def api(app):
    base_url = "http://api.test"
    return ApiClient(session=Session(token="t", user_id=1), base_url=base_url,
                     http=FlaskTestHttp(app.test_client(), base_url))


@pytest.fixture
def page(api):
    page = AssignmentsPage(api, api.session)
    page.mount()
    return page


def test_assignment_lifecycle_refetches_after_each_write(page):
    assert page.assignments == []

    page.new_assignment.update({"task_id": "5", "user_id": "2"})
    assert page.add_assignment()
    assert [(a["task_id"], a["user_id"], a["status"]) for a in page.assignments] == [(5, 2, "Assigned")]
    assert page.new_assignment["task_id"] == ""

    page.open_editor(page.assignments[0])
    page.selected_assignment["status"] = "Completed"
    assert page.edit_assignment()
    assert page.assignments[0]["status"] == "Completed"
    assert page.selected_assignment is None
    assert not page.is_editing

    assignment_id = page.assignments[0]["assignment_id"]
    assert page.delete_assignment(assignment_id)
    assert page.assignments == []


def test_repeated_delete_still_refetches(page, mocker):
    page.new_assignment.update({"task_id": 5, "user_id": 2})
    page.add_assignment()
    assignment_id = page.assignments[0]["assignment_id"]
    page.delete_assignment(assignment_id)

    fetch = mocker.spy(page, "fetch_assignments")
    assert not page.delete_assignment(assignment_id)
    fetch.assert_called_once()
    assert page.notice == "Failed to delete assignment."


def test_add_assignment_requires_ids(page, mocker):
    create = mocker.spy(page.api, "create_assignment")
    page.new_assignment.update({"task_id": "5", "user_id": ""})

    assert not page.add_assignment()
    create.assert_not_called()
    assert page.notice == "Task ID and User ID are required fields."


def test_add_assignment_server_error(page):
    page.new_assignment.update({"task_id": "99", "user_id": "2"})

    assert not page.add_assignment()
    assert page.notice == "Failed to add assignment: Task 99 does not exist"
    assert page.new_assignment["task_id"] == "99"


def test_submit_feedback_uses_session_user(app, page):
    page.new_assignment.update({"task_id": 5, "user_id": 2})
    page.add_assignment()

    page.open_feedback(page.assignments[0])
    assert not page.is_editing
    page.feedback = "Very helpful"
    page.rating = "5"
    assert page.submit_feedback()
    assert page.selected_assignment is None

    feedback = page.api._request("GET", "/feedback")
    assert [(f["user_id"], f["rating"], f["comment"]) for f in feedback] == [(1, 5, "Very helpful")]


def test_fetch_failure_shows_generic_notice(mocker):
    api = mocker.Mock()
    api.get_all_assignments.side_effect = ApiRequestError("down", status_code=500)
    page = AssignmentsPage(api, Session(token="t", user_id=1))

    page.mount()
    assert page.notice == "Failed to fetch assignments."
    assert not page.is_loading
