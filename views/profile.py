import logging

from client.api import ApiRequestError

logger = logging.getLogger(__name__)

# Rendered but disabled in the form
READ_ONLY_FIELDS = ("password", "role")

AVAILABILITY_OPTIONS = ["Weekdays", "fullTime", "partTime"]


def empty_profile():
    return {
        "year": "",
        "department": "",
        "email": "",
        "phone": "",
        "skills": "",
        "interests": "",
        "availability": "Weekdays",
        "username": "",
        "role": "",
        "password": "",
    }


def build_save_payload(profile):
    """Drop the password and trim role and username before sending."""
    payload = {key: value for key, value in profile.items() if key != "password"}
    payload["username"] = profile["username"].strip()
    if profile.get("role"):
        payload["role"] = profile["role"].strip()
    return payload


class Profile:
    def __init__(self, api, session):
        self.api = api
        self.session = session
        self.profile = empty_profile()
        self.loading = False
        self.is_editing = False
        self.message = None

    def load(self):
        if not self.session.user_id:
            self.message = "User ID not found in session"
            return

        self.loading = True
        try:
            data = self.api.get_user_by_id(self.session.user_id)
        except ApiRequestError as e:
            logger.error("Fetch error: %s", e)
            self.message = "Failed to fetch profile"
            return
        finally:
            self.loading = False

        skills = data.get("skills")
        if isinstance(skills, list):
            skills = ", ".join(skills)
        self.profile = {
            "year": data.get("year") or "",
            "department": data.get("department") or "",
            "email": data.get("email") or "",
            "phone": data.get("phone") or "",
            "skills": skills or "",
            "interests": data.get("interests") or "",
            "availability": data.get("availability") or "Weekdays",
            "username": data.get("username") or "",
            "role": (data.get("role") or "").strip(),
            "password": "",
        }

    def change(self, name, value):
        if name in READ_ONLY_FIELDS:
            raise ValueError(f"{name} cannot be edited from the profile")
        self.profile[name] = value

    def save(self):
        if not self.session.user_id:
            self.message = "User ID not found in session"
            return False
        if not self.profile["username"].strip():
            self.message = "Username cannot be empty"
            return False

        try:
            self.api.update_user(self.session.user_id, build_save_payload(self.profile))
        except ApiRequestError as e:
            logger.error("Update error: %s", e)
            self.message = f"Failed to update profile: {e.message}"
            return False

        self.message = "Profile updated successfully!"
        self.is_editing = False
        return True
