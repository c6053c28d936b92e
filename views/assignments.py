import logging
from datetime import date

from client.api import ApiRequestError

logger = logging.getLogger(__name__)


def empty_assignment():
    return {
        "task_id": "",
        "user_id": "",
        "status": "Assigned",
        "assigned_at": date.today().isoformat(),
    }


class AssignmentsPage:
    """
    Admin table of assignments.

    Every create, update and delete re-fetches the whole list afterwards
    instead of trusting the mutation's own response, so concurrent edits by
    other admins show up too. Failures leave a generic ``notice``.
    """

    def __init__(self, api, session):
        self.api = api
        self.session = session
        self.assignments = []
        self.new_assignment = empty_assignment()
        self.selected_assignment = None
        self.is_editing = False
        self.feedback = ""
        self.rating = 1
        self.is_loading = False
        self.notice = None

    def fetch_assignments(self):
        self.is_loading = True
        try:
            self.assignments = self.api.get_all_assignments()
        except ApiRequestError as e:
            logger.error("Error fetching assignments: %s", e)
            self.notice = "Failed to fetch assignments."
        finally:
            self.is_loading = False

    def mount(self):
        self.fetch_assignments()

    # One modal serves both editing and feedback, keyed by is_editing.

    def open_editor(self, assignment):
        self.selected_assignment = dict(assignment)
        self.is_editing = True

    def open_feedback(self, assignment):
        self.selected_assignment = dict(assignment)
        self.is_editing = False
        self.feedback = ""
        self.rating = 1

    def close_modal(self):
        self.selected_assignment = None
        self.is_editing = False

    def add_assignment(self):
        if not self.new_assignment.get("task_id") or not self.new_assignment.get("user_id"):
            self.notice = "Task ID and User ID are required fields."
            return False

        try:
            self.api.create_assignment(self.new_assignment)
        except ApiRequestError as e:
            logger.error("Error creating assignment: %s", e)
            self.notice = f"Failed to add assignment: {e.message}"
            return False

        self.fetch_assignments()
        self.new_assignment = empty_assignment()
        self.notice = "New assignment has been added successfully."
        return True

    def edit_assignment(self):
        if not self.selected_assignment or not self.selected_assignment.get("assignment_id"):
            self.notice = "No assignment selected for editing."
            return False

        selected = self.selected_assignment
        update_data = {
            "task_id": selected["task_id"],
            "user_id": selected["user_id"],
            "status": selected.get("status") or "Assigned",
            "assigned_at": (selected.get("assigned_at") or "")[:10] or None,
        }
        try:
            self.api.update_assignment(selected["assignment_id"], update_data)
        except ApiRequestError as e:
            logger.error("Error updating assignment: %s", e)
            self.notice = f"Failed to update assignment: {e.message}"
            return False

        self.fetch_assignments()
        self.close_modal()
        self.new_assignment = empty_assignment()
        self.notice = "The assignment has been updated successfully."
        return True

    def delete_assignment(self, assignment_id):
        try:
            self.api.delete_assignment(assignment_id)
            self.notice = "The assignment has been deleted."
            deleted = True
        except ApiRequestError as e:
            logger.error("Error deleting assignment: %s", e)
            self.notice = "Failed to delete assignment."
            deleted = False

        # Re-fetch either way, a repeated delete still resyncs the table
        self.fetch_assignments()
        self.new_assignment = empty_assignment()
        return deleted

    def submit_feedback(self):
        if not self.selected_assignment:
            self.notice = "No assignment selected for feedback."
            return False

        try:
            self.api.create_feedback({
                "assignment_id": self.selected_assignment["assignment_id"],
                "user_id": self.session.user_id,
                "rating": int(self.rating),
                "comment": self.feedback,
            })
        except ApiRequestError as e:
            logger.error("Error submitting feedback: %s", e)
            self.notice = "Failed to submit feedback."
            return False

        self.notice = f"Feedback: {self.feedback}\nRating: {self.rating}"
        self.feedback = ""
        self.rating = 1
        self.close_modal()
        return True
