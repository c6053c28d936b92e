import logging

from client.api import ApiRequestError

logger = logging.getLogger(__name__)


def skills_of(volunteer):
    skills = volunteer.get("skills") or []
    if isinstance(skills, str):
        skills = skills.split(",")
    return [skill.strip() for skill in skills if skill and skill.strip()]


def matches(volunteer, search="", skills="", availability="", department=""):
    if search.lower() not in (volunteer.get("username") or "").lower():
        return False
    if skills and skills not in skills_of(volunteer):
        return False
    if availability and volunteer.get("availability") != availability:
        return False
    if department and volunteer.get("department") != department:
        return False
    return True


def filter_volunteers(volunteers, search="", skills="", availability="", department=""):
    return [v for v in volunteers if matches(v, search, skills, availability, department)]


class VolunteerManagement:
    def __init__(self, api):
        self.api = api
        self.volunteers = []
        self.loading = False
        self.search = ""
        self.criteria = {"skills": "", "availability": "", "department": ""}

    def load(self):
        self.loading = True
        try:
            self.volunteers = self.api.get_volunteers()
        except ApiRequestError as e:
            logger.error("Failed to fetch volunteers: %s", e)
        finally:
            self.loading = False

    @property
    def visible_volunteers(self):
        return filter_volunteers(self.volunteers, self.search, **self.criteria)
