from sqlalchemy.orm import validates

from db import db


def normalize_skills(value):
    """Skills arrive as "a, b" or ["a", "b"]; store them as a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(skill).strip() for skill in value if str(skill).strip()]


class UserModel(db.Model):
    __tablename__ = 'users'

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(40), nullable=False, default='Volunteer')
    department = db.Column(db.String(120))
    year = db.Column(db.String(20))
    skills = db.Column(db.JSON, nullable=False, default=list)
    interests = db.Column(db.Text)
    availability = db.Column(db.String(40), default='Weekdays')
    phone = db.Column(db.String(20))

    assignments = db.relationship('AssignmentModel', back_populates='user', cascade='all, delete-orphan')
    notifications = db.relationship('NotificationModel', back_populates='user', cascade='all, delete-orphan')
    feedback = db.relationship('FeedbackModel', back_populates='user', cascade='all, delete-orphan')

    @validates('skills')
    def validate_skills(self, key, value):
        return normalize_skills(value)

    def __repr__(self):
        return f"<User user_id={self.user_id}, username={self.username}, email={self.email}, role={self.role}>"
