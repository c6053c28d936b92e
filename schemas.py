import re

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates

from models.notifications import NOTIFICATION_STATUSES
from models.task import TASK_STATUSES
from models.user import normalize_skills

DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class SkillsField(fields.Field):
    """Accepts a comma separated string or a list, always dumps a list."""

    def _serialize(self, value, attr, obj, **kwargs):
        return normalize_skills(value)

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, (str, list, tuple)):
            raise ValidationError("Skills must be a string or a list of strings.")
        return normalize_skills(value)


class FlexibleDateTime(fields.DateTime):
    """ISO timestamp, also taking the bare YYYY-MM-DD a date input produces."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str) and DATE_ONLY.match(value):
            value = f"{value}T00:00:00"
        return super()._deserialize(value, attr, data, **kwargs)


class UserSchema(Schema):
    user_id = fields.Int(dump_only=True)
    username = fields.Str(required=True, validate=validate.Length(min=1))
    email = fields.Str(required=True, validate=validate.Email())
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=1))
    role = fields.Str(load_default='Volunteer')
    department = fields.Str(allow_none=True)
    year = fields.Str(allow_none=True)
    skills = SkillsField(load_default=list)
    interests = fields.Str(allow_none=True)
    availability = fields.Str(allow_none=True)
    phone = fields.Str(allow_none=True)

    @validates('username')
    def validate_username(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Username cannot be empty.")


class UpdateUserSchema(Schema):
    class Meta:
        # role and password come back from the profile form and are ignored
        unknown = EXCLUDE

    username = fields.Str()
    email = fields.Str(validate=validate.Email())
    department = fields.Str(allow_none=True)
    year = fields.Str(allow_none=True)
    skills = SkillsField()
    interests = fields.Str(allow_none=True)
    availability = fields.Str(allow_none=True)
    phone = fields.Str(allow_none=True)

    @validates('username')
    def validate_username(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Username cannot be empty.")


class LoginUserSchema(Schema):
    username = fields.Str(required=True)
    password = fields.Str(required=True, load_only=True)


class TokenSchema(Schema):
    access_token = fields.Str()
    user_id = fields.Int()
    role = fields.Str()


class UserListQueryArgsSchema(Schema):
    department = fields.Str(metadata={"description": "Filter users by department"})
    availability = fields.Str(metadata={"description": "Filter users by availability"})


class TaskSchema(Schema):
    task_id = fields.Int(dump_only=True)
    task_name = fields.Str(required=True, validate=validate.Length(min=1))
    description = fields.Str(allow_none=True)
    required_skills = fields.Str(load_default='')
    status = fields.Str(load_default='Pending', validate=validate.OneOf(TASK_STATUSES))
    event_id = fields.Int(allow_none=True)
    created_at = fields.DateTime(dump_only=True)


class TaskUpdateSchema(Schema):
    task_name = fields.Str(validate=validate.Length(min=1))
    description = fields.Str(allow_none=True)
    required_skills = fields.Str()
    status = fields.Str(validate=validate.OneOf(TASK_STATUSES))
    event_id = fields.Int(allow_none=True)


class UserAssignmentSchema(Schema):
    assignment_id = fields.Int()
    task_id = fields.Int()
    task_name = fields.Str()
    description = fields.Str(allow_none=True)
    required_skills = fields.Str(allow_none=True)
    task_status = fields.Str()
    assignment_status = fields.Str()
    assigned_at = fields.DateTime()
    event_id = fields.Int(allow_none=True)


class TaskStatisticsSchema(Schema):
    total_tasks = fields.Int()
    completed_tasks = fields.Int()


class AssignmentSchema(Schema):
    assignment_id = fields.Int(dump_only=True)
    task_id = fields.Int(required=True)
    user_id = fields.Int(required=True)
    status = fields.Str(load_default='Assigned')
    assigned_at = FlexibleDateTime()


class AssignmentUpdateSchema(Schema):
    task_id = fields.Int()
    user_id = fields.Int()
    status = fields.Str(allow_none=True)
    assigned_at = FlexibleDateTime(allow_none=True)


class NotificationSchema(Schema):
    notification_id = fields.Int(dump_only=True)
    user_id = fields.Int(required=True)
    message = fields.Str(required=True, validate=validate.Length(min=1))
    status = fields.Str(load_default='Sent', validate=validate.OneOf(NOTIFICATION_STATUSES))
    sent_at = fields.DateTime(dump_only=True)


class NotificationResponseSchema(Schema):
    message = fields.Str()
    notification = fields.Nested(NotificationSchema)


class NotificationIdsSchema(Schema):
    notification_ids = fields.List(fields.Int(), required=True, validate=validate.Length(min=1))


class NotificationCountSchema(Schema):
    message = fields.Str()
    updated_count = fields.Int()


class FeedbackSchema(Schema):
    feedback_id = fields.Int(dump_only=True)
    assignment_id = fields.Int(required=True)
    user_id = fields.Int(required=True)
    rating = fields.Int(required=True, validate=validate.Range(min=1, max=5))
    comment = fields.Str(load_default='')
    created_at = fields.DateTime(dump_only=True)


class EventSchema(Schema):
    event_id = fields.Int(dump_only=True)
    title = fields.Str(required=True, validate=validate.Length(min=1))
    description = fields.Str(allow_none=True)
    date = fields.Date(required=True)
    location = fields.Str(allow_none=True)
