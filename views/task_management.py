import logging
from datetime import date, datetime

from client.api import ApiRequestError

logger = logging.getLogger(__name__)

STATUS_FILTERS = ["All", "Pending", "In Progress", "Completed"]


def determine_priority(required_skills):
    """More required skills means a harder task: >3 High, >1 Medium, else Low."""
    if not required_skills:
        return "Low"
    count = len(required_skills.split(","))
    if count > 3:
        return "High"
    if count > 1:
        return "Medium"
    return "Low"


def format_due_date(assigned_at):
    if not assigned_at:
        return date.today().isoformat()
    if isinstance(assigned_at, datetime):
        return assigned_at.date().isoformat()
    return datetime.fromisoformat(assigned_at.replace("Z", "+00:00")).date().isoformat()


def to_view_model(row):
    return {
        "id": row["task_id"],
        "assignment_id": row.get("assignment_id"),
        "name": row["task_name"],
        "description": row.get("description") or "No description provided",
        "status": row.get("task_status") or "Pending",
        "priority": determine_priority(row.get("required_skills")),
        "due_date": format_due_date(row.get("assigned_at")),
        "assigned_to": "You",
        "event_id": row.get("event_id"),
        "required_skills": row.get("required_skills") or "",
    }


def filter_tasks(tasks, status="All", search=""):
    search = search.lower()
    return [
        task for task in tasks
        if (status == "All" or task["status"] == status) and search in task["name"].lower()
    ]


class TaskManagement:
    def __init__(self, api, session):
        self.api = api
        self.session = session
        self.tasks = []
        self.loading = False
        self.error = None
        self.filter = "All"
        self.search = ""

    def load(self):
        self.loading = True
        try:
            rows = self.api.get_user_assignments(self.session.user_id)
            self.tasks = [to_view_model(row) for row in rows]
            self.error = None
        except ApiRequestError as e:
            logger.error("Failed to fetch user tasks: %s", e)
            self.error = e.message or "Failed to load your assigned tasks. Please try again later."
        finally:
            self.loading = False

    @property
    def visible_tasks(self):
        return filter_tasks(self.tasks, self.filter, self.search)

    def update_task(self, updated_task):
        """PUT the edit, then merge it into the list by id without re-fetching."""
        payload = {
            "task_name": updated_task["name"],
            "description": updated_task["description"],
            "required_skills": updated_task["required_skills"],
            "status": updated_task["status"],
        }
        try:
            self.api.update_task(updated_task["id"], payload)
        except ApiRequestError as e:
            logger.error("Failed to update task: %s", e)
            self.error = "Failed to update task. Please try again."
            return False

        updated_task = {**updated_task, "priority": determine_priority(updated_task["required_skills"])}
        self.tasks = [updated_task if task["id"] == updated_task["id"] else task for task in self.tasks]
        return True
