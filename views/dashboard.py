import logging

from client.api import ApiRequestError
from views.polling import Poller

logger = logging.getLogger(__name__)

NOTIFICATION_POLL_INTERVAL = 30


def unread_count(notifications):
    return len([n for n in notifications if n.get("status") != "Read"])


def can_mark_read(notification):
    # Sent -> Read is the only transition
    return notification.get("status") != "Read"


class Dashboard:
    """Volunteer dashboard: assigned tasks, upcoming events, stats and polled notifications."""

    def __init__(self, api, session, poll_interval=NOTIFICATION_POLL_INTERVAL, certificate_renderer=None):
        self.api = api
        self.session = session
        self.poll_interval = poll_interval
        self.certificate_renderer = certificate_renderer
        self.tasks = []
        self.events = []
        self.stats = {"total_tasks": 0, "completed_tasks": 0}
        self.notifications = []
        self.selected_task = None
        self.user_name = ""
        self.error = ""
        self._poller = None

    @property
    def user_id(self):
        return self.session.user_id

    @property
    def unread_count(self):
        return unread_count(self.notifications)

    def mount(self):
        if not self.user_id:
            self.error = "User ID not found. Please log in again."
            logger.error("User ID not found in session")
            return
        self.fetch_data()
        self.fetch_notifications()
        self._poller = Poller(self.fetch_notifications, self.poll_interval, name="dashboard-notifications")
        self._poller.start()

    def unmount(self):
        if self._poller is not None:
            self._poller.stop()
            self._poller = None

    def fetch_data(self):
        try:
            self.tasks = self.api.get_user_assignments(self.user_id)
            self.events = self.api.get_upcoming_events()
            self.stats = self.api.get_task_statistics(self.user_id)
        except ApiRequestError as e:
            logger.error("Error fetching data: %s", e)
            self.error = "Error fetching data. Please try again later."

    def fetch_notifications(self):
        try:
            self.notifications = self.api.get_user_notifications(self.user_id)
        except ApiRequestError as e:
            logger.error("Error fetching notifications: %s", e)
            self.error = "Error fetching notifications"

    def mark_as_read(self, notification_id):
        try:
            self.api.mark_notification_as_read(notification_id)
        except ApiRequestError as e:
            logger.error("Error updating notification: %s", e)
            return False
        self.notifications = [
            {**n, "status": "Read"} if n["notification_id"] == notification_id else n
            for n in self.notifications
        ]
        return True

    def select_task(self, task):
        self.selected_task = task

    # Accept, reject and apply only touch local state, there is no endpoint for them.

    def accept_task(self):
        if self.selected_task is None:
            return
        selected_id = self.selected_task["assignment_id"]
        self.tasks = [
            {**task, "task_status": "Pending"} if task["assignment_id"] == selected_id else task
            for task in self.tasks
        ]
        self.selected_task = None

    def reject_task(self):
        if self.selected_task is None:
            return
        selected_id = self.selected_task["assignment_id"]
        self.tasks = [task for task in self.tasks if task["assignment_id"] != selected_id]
        self.selected_task = None

    def apply_for_event_task(self, event_id, task_name):
        task = {
            "assignment_id": None,
            "task_id": len(self.tasks) + 1,
            "task_name": task_name,
            "description": f"Task for event ID {event_id}: {task_name}",
            "required_skills": "General",
            "task_status": "Assigned",
            "event_id": event_id,
        }
        self.tasks = [*self.tasks, task]
        return task

    def generate_certificate(self):
        if not self.user_name.strip():
            self.error = "Please enter your name before generating the certificate."
            return None
        return self.certificate_renderer(self.user_name.strip())
