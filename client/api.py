import logging
import os

import requests

from client.session import Session

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("VOLUNTEER_API_URL", "http://localhost:5000")
REQUEST_TIMEOUT = 10


class ApiRequestError(Exception):
    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ApiClient:
    """HTTP wrapper over the REST API sharing one base URL and bearer token."""

    def __init__(self, session=None, base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT, http=None):
        self.session = session if session is not None else Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def _headers(self):
        headers = {"Content-Type": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    def _request(self, method, path, json=None, params=None):
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method, url, json=json, params=params, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise ApiRequestError(str(e)) from e

        if not response.ok:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            message = (payload or {}).get("message") or response.reason or "Request failed"
            raise ApiRequestError(message, status_code=response.status_code, payload=payload)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Users

    def create_user(self, user_data):
        return self._request("POST", "/users", json=user_data)

    def login(self, username, password):
        data = self._request("POST", "/login", json={"username": username, "password": password})
        self.session.start(data["access_token"], data["user_id"], data.get("role"))
        return data

    def logout(self):
        try:
            if self.session.token:
                self._request("POST", "/logout")
        finally:
            self.session.clear()

    def get_user_by_id(self, user_id):
        return self._request("GET", f"/users/{user_id}")

    def update_user(self, user_id, user_data):
        return self._request("PUT", f"/users/{user_id}", json=user_data)

    def get_all_users(self):
        return self._request("GET", "/users/all")

    def get_volunteers(self, **filters):
        return self._request("GET", "/users/volunteers", params=filters or None)

    # Tasks

    def create_task(self, task_data):
        return self._request("POST", "/tasks", json=task_data)

    def get_all_tasks(self):
        return self._request("GET", "/tasks")

    def get_user_assignments(self, user_id):
        return self._request("GET", f"/tasks/{user_id}")

    def get_task_statistics(self, user_id):
        return self._request("GET", f"/tasks/{user_id}/statistics")

    def update_task(self, task_id, task_data):
        return self._request("PUT", f"/tasks/{task_id}", json=task_data)

    def delete_task(self, task_id):
        return self._request("DELETE", f"/tasks/{task_id}")

    # Assignments

    def get_all_assignments(self):
        return self._request("GET", "/assignments")

    def create_assignment(self, assignment_data):
        return self._request("POST", "/assignments", json=format_assignment(assignment_data))

    def update_assignment(self, assignment_id, assignment_data):
        data = format_assignment(assignment_data)
        data["status"] = data.get("status") or "Assigned"
        return self._request("PUT", f"/assignments/{assignment_id}", json=data)

    def delete_assignment(self, assignment_id):
        return self._request("DELETE", f"/assignments/{assignment_id}")

    # Notifications

    def send_notification(self, user_id, message, status="Sent"):
        return self._request(
            "POST", "/notifications", json={"user_id": user_id, "message": message, "status": status}
        )

    def get_user_notifications(self, user_id):
        return self._request("GET", f"/notifications/{user_id}")

    def mark_notification_as_read(self, notification_id):
        return self._request("PUT", f"/notifications/{notification_id}/read")

    def mark_notifications_as_read(self, notification_ids):
        return self._request(
            "PUT", "/notifications/read-multiple", json={"notification_ids": list(notification_ids)}
        )

    # Feedback and events

    def create_feedback(self, feedback_data):
        return self._request("POST", "/feedback", json=feedback_data)

    def get_upcoming_events(self):
        return self._request("GET", "/events/upcoming")


def format_assignment(assignment_data):
    """Ids as integers, only the fields the API accepts."""
    data = {
        "task_id": int(assignment_data["task_id"]),
        "user_id": int(assignment_data["user_id"]),
    }
    if assignment_data.get("status"):
        data["status"] = assignment_data["status"]
    if assignment_data.get("assigned_at"):
        data["assigned_at"] = assignment_data["assigned_at"]
    return data
