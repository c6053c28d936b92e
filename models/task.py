from datetime import datetime

from db import db

TASK_STATUSES = ['Pending', 'In Progress', 'Completed']


class TaskModel(db.Model):
    __tablename__ = 'tasks'

    task_id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    task_name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    required_skills = db.Column(db.String(255), default='')
    status = db.Column(db.String(20), nullable=False, default='Pending')
    event_id = db.Column(db.Integer, db.ForeignKey('events.event_id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    assignments = db.relationship('AssignmentModel', back_populates='task', cascade='all, delete-orphan')
    event = db.relationship('EventModel', back_populates='tasks')
