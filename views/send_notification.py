import logging

from client.api import ApiRequestError

logger = logging.getLogger(__name__)


class SendNotification:
    """Admin form for pushing a message to one user."""

    def __init__(self, api):
        self.api = api
        self.users = []
        self.user_id = ""
        self.message = ""
        self.status = "Sent"
        self.error = ""
        self.notice = None

    def load(self):
        try:
            self.users = self.api.get_all_users()
        except ApiRequestError as e:
            logger.error("Error fetching users: %s", e)
            self.error = "Failed to fetch users. Please try again."

    def reset(self):
        self.user_id = ""
        self.message = ""
        self.status = "Sent"
        self.error = ""

    def submit(self):
        if not self.user_id or not self.message:
            self.error = "User ID and Message are required"
            return False

        try:
            self.api.send_notification(int(self.user_id), self.message, self.status)
        except ApiRequestError as e:
            logger.error("Error sending notification: %s", e)
            self.error = "Failed to send notification. Please try again."
            return False

        self.reset()
        self.notice = "Notification sent successfully"
        return True
