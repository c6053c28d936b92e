from datetime import datetime

from db import db


class AssignmentModel(db.Model):
    __tablename__ = 'assignments'

    assignment_id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('tasks.task_id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='Assigned')
    assigned_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    task = db.relationship('TaskModel', back_populates='assignments')
    user = db.relationship('UserModel', back_populates='assignments')
    feedback = db.relationship('FeedbackModel', back_populates='assignment', cascade='all, delete-orphan')
