from datetime import datetime

from db import db

NOTIFICATION_STATUSES = ['Sent', 'Read']


class NotificationModel(db.Model):
    __tablename__ = 'notifications'

    notification_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False)
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='Sent')
    sent_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship('UserModel', back_populates='notifications')
