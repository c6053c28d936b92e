import logging
import re

from marshmallow import EXCLUDE, Schema, ValidationError, fields

from client.api import ApiRequestError

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")

YEARS = ["1", "2", "3", "4"]
DEPARTMENTS = ["Computer Science", "Mechanical", "Electrical", "Civil"]


def validate_username(value):
    if not value:
        raise ValidationError("Name is required")
    if len(value) < 2:
        raise ValidationError("Name must be at least 2 characters")


def validate_email(value):
    if not value:
        raise ValidationError("Email is required")
    if not EMAIL_PATTERN.match(value):
        raise ValidationError("Invalid email address")


def validate_password(value):
    if not value:
        raise ValidationError("Password is required")
    if len(value) < 8:
        raise ValidationError("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", value):
        raise ValidationError("Must contain at least one uppercase letter")
    if not re.search(r"[a-z]", value):
        raise ValidationError("Must contain at least one lowercase letter")
    if not re.search(r"[0-9]", value):
        raise ValidationError("Must contain at least one number")


def validate_phone(value):
    if not value:
        raise ValidationError("Phone number is required")
    if not PHONE_PATTERN.match(value):
        raise ValidationError("Invalid phone number")


def required(message):
    def validator(value):
        if not value:
            raise ValidationError(message)
    return validator


class SignupSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.Str(validate=validate_username)
    email = fields.Str(validate=validate_email)
    password = fields.Str(validate=validate_password)
    phone = fields.Str(validate=validate_phone)
    year = fields.Str(validate=required("Year is required"))
    department = fields.Str(validate=required("Department is required"))
    role = fields.Str()


VALIDATED_FIELDS = ("username", "email", "password", "phone", "year", "department")


def validate_field(name, value):
    """First error message for one field, or "" when it is valid."""
    if name not in VALIDATED_FIELDS:
        return ""
    errors = SignupSchema(only=(name,)).validate({name: "" if value is None else str(value)})
    messages = errors.get(name)
    return messages[0] if messages else ""


def empty_form():
    return {
        "username": "",
        "email": "",
        "password": "",
        "phone": "",
        "role": "Volunteer",
        "year": "",
        "department": "",
    }


class SignupForm:
    def __init__(self, api, session):
        self.api = api
        self.session = session
        self.form_data = empty_form()
        self.errors = {}
        self.touched = set()
        self.success_message = ""
        self.error_message = ""

    def mount(self):
        # Opening signup signs out whoever was signed in
        self.session.clear()

    def change(self, name, value):
        self.form_data[name] = value
        if name in self.touched:
            self.errors[name] = validate_field(name, value)

    def blur(self, name):
        self.touched.add(name)
        self.errors[name] = validate_field(name, self.form_data.get(name))

    def validate(self):
        self.errors = {name: validate_field(name, self.form_data.get(name)) for name in VALIDATED_FIELDS}
        self.touched = set(VALIDATED_FIELDS)
        return not any(self.errors.values())

    def submit(self):
        if not self.validate():
            return False

        try:
            self.api.create_user(self.form_data)
        except ApiRequestError as e:
            logger.error("Signup failed: %s", e)
            self.error_message = e.message or "Signup failed. Please try again."
            self.success_message = ""
            return False

        self.success_message = "Account created successfully! Please log in."
        self.error_message = ""
        self.form_data = empty_form()
        self.touched = set()
        return True
