import threading

import pytest

from client import ApiRequestError, Session
from views.dashboard import Dashboard, can_mark_read, unread_count
from views.polling import Poller


@pytest.fixture
def api(mocker):
    api = mocker.Mock()
    api.get_user_assignments.return_value = [
        {"assignment_id": 10, "task_id": 1, "task_name": "Cook", "task_status": "Assigned"},
        {"assignment_id": 11, "task_id": 2, "task_name": "Drive", "task_status": "Assigned"},
    ]
    api.get_upcoming_events.return_value = [{"event_id": 4, "title": "Food drive"}]
    api.get_task_statistics.return_value = {"total_tasks": 2, "completed_tasks": 0}
    api.get_user_notifications.return_value = [
        {"notification_id": 1, "message": "a", "status": "Sent"},
        {"notification_id": 2, "message": "b", "status": "Read"},
        {"notification_id": 3, "message": "c", "status": "Sent"},
    ]
    return api


@pytest.fixture
def dashboard(api):
    dashboard = Dashboard(api, Session(token="t", user_id=5))
    yield dashboard
    dashboard.unmount()


def test_unread_count():
    notifications = [{"status": "Sent"}, {"status": "Read"}, {"status": "Sent"}]
    assert unread_count(notifications) == 2
    assert unread_count([]) == 0


def test_can_mark_read_only_unread():
    assert can_mark_read({"status": "Sent"})
    assert not can_mark_read({"status": "Read"})


def test_mount_fetches_everything(dashboard, api):
    dashboard.mount()

    api.get_user_assignments.assert_called_once_with(5)
    api.get_task_statistics.assert_called_once_with(5)
    api.get_user_notifications.assert_called_once_with(5)
    assert len(dashboard.tasks) == 2
    assert dashboard.events[0]["title"] == "Food drive"
    assert dashboard.unread_count == 2


def test_mount_without_user(api):
    dashboard = Dashboard(api, Session())
    dashboard.mount()

    assert dashboard.error == "User ID not found. Please log in again."
    api.get_user_notifications.assert_not_called()


def test_mark_as_read_updates_local_state(dashboard, api):
    dashboard.mount()

    assert dashboard.mark_as_read(1)
    api.mark_notification_as_read.assert_called_once_with(1)
    assert dashboard.unread_count == 1
    assert dashboard.notifications[0]["status"] == "Read"


def test_mark_as_read_failure_keeps_state(dashboard, api):
    dashboard.mount()
    api.mark_notification_as_read.side_effect = ApiRequestError("boom", status_code=500)

    assert not dashboard.mark_as_read(1)
    assert dashboard.unread_count == 2


def test_fetch_failure_sets_error(dashboard, api):
    api.get_user_notifications.side_effect = ApiRequestError("down")
    dashboard.fetch_notifications()
    assert dashboard.error == "Error fetching notifications"


def test_accept_and_reject_are_local_only(dashboard, api):
    dashboard.mount()

    dashboard.select_task(dashboard.tasks[0])
    dashboard.accept_task()
    assert dashboard.tasks[0]["task_status"] == "Pending"

    dashboard.select_task(dashboard.tasks[1])
    dashboard.reject_task()
    assert [t["assignment_id"] for t in dashboard.tasks] == [10]

    api.update_task.assert_not_called()
    api.delete_assignment.assert_not_called()


def test_apply_for_event_task(dashboard):
    dashboard.mount()

    task = dashboard.apply_for_event_task(4, "Serve soup")
    assert task["description"] == "Task for event ID 4: Serve soup"
    assert dashboard.tasks[-1] is task


def test_generate_certificate_needs_name(api, mocker):
    renderer = mocker.Mock(return_value=b"%PDF")
    dashboard = Dashboard(api, Session(token="t", user_id=5), certificate_renderer=renderer)

    assert dashboard.generate_certificate() is None
    renderer.assert_not_called()

    dashboard.user_name = " Ada Lovelace "
    assert dashboard.generate_certificate() == b"%PDF"
    renderer.assert_called_once_with("Ada Lovelace")


def test_unmount_stops_polling(dashboard):
    dashboard.mount()
    poller = dashboard._poller
    assert poller.running
    job = poller.scheduler.get_job("dashboard-notifications")
    assert job.trigger.interval.total_seconds() == 30

    dashboard.unmount()
    assert not poller.running
    assert dashboard._poller is None


def test_poller_calls_back_until_stopped():
    calls = []
    ticked = threading.Event()

    def tick():
        calls.append(1)
        if len(calls) >= 2:
            ticked.set()

    poller = Poller(tick, 0.05)
    poller.start()
    assert ticked.wait(5)
    poller.stop()
    assert not poller.running


def test_poller_start_is_idempotent(mocker):
    poller = Poller(mocker.Mock(), 60)
    poller.start()
    scheduler = poller.scheduler
    poller.start()
    assert poller.scheduler is scheduler
    assert len(scheduler.get_jobs()) == 1
    poller.stop()
    poller.stop()
    assert not poller.running


def test_poller_survives_failing_callback():
    ticked = threading.Event()
    calls = []

    def tick():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("flaky")
        ticked.set()

    poller = Poller(tick, 0.05)
    poller.start()
    assert ticked.wait(5)
    poller.stop()
