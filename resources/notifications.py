import logging

from flask.views import MethodView
from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError, StoreError, ValidationError
from models import NotificationModel, UserModel
from resources import Blueprint
from schemas import (
    NotificationSchema, NotificationResponseSchema, NotificationIdsSchema, NotificationCountSchema
)

logger = logging.getLogger(__name__)

blp = Blueprint("notifications", __name__, description="Operations on notifications")


@blp.route("/notifications")
class NotificationList(MethodView):
    @blp.arguments(NotificationSchema)
    @blp.response(201, NotificationResponseSchema)
    def post(self, notification_data):
        notification = send_notification(**notification_data)
        return {"message": "Notification sent successfully", "notification": notification}


@blp.route("/notifications/<int:user_id>")
class UserNotifications(MethodView):
    @blp.response(200, NotificationSchema(many=True))
    def get(self, user_id):
        try:
            return NotificationModel.query \
                .filter(NotificationModel.user_id == user_id) \
                .order_by(NotificationModel.sent_at.desc(), NotificationModel.notification_id.desc()) \
                .all()
        except SQLAlchemyError as e:
            logger.exception("Get notifications error")
            raise StoreError(details=str(e))


@blp.route("/notifications/<int:notification_id>/read")
class NotificationRead(MethodView):
    @blp.response(200, NotificationResponseSchema)
    def put(self, notification_id):
        try:
            notification = db.session.get(NotificationModel, notification_id)
        except SQLAlchemyError as e:
            logger.exception("Mark as read error")
            raise StoreError(details=str(e))
        if notification is None:
            raise NotFoundError("Notification not found")

        # Read is terminal, marking twice returns the same row
        notification.status = "Read"
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Mark as read error")
            raise StoreError(details=str(e))

        return {"message": "Notification marked as read", "notification": notification}


@blp.route("/notifications/read-multiple")
class NotificationReadMultiple(MethodView):
    @blp.arguments(NotificationIdsSchema)
    @blp.response(200, NotificationCountSchema)
    def put(self, ids_data):
        notification_ids = ids_data["notification_ids"]
        try:
            updated_count = NotificationModel.query \
                .filter(NotificationModel.notification_id.in_(notification_ids)) \
                .update({NotificationModel.status: "Read"}, synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Mark multiple as read error")
            raise StoreError(details=str(e))

        if updated_count == 0:
            raise NotFoundError("No notifications found for the given IDs")

        return {"message": "Notifications marked as read", "updated_count": updated_count}


def send_notification(user_id, message, status="Sent"):
    try:
        recipient = db.session.get(UserModel, user_id)
    except SQLAlchemyError as e:
        logger.exception("Send notification error")
        raise StoreError(details=str(e))
    if recipient is None:
        raise ValidationError(f"User {user_id} does not exist")

    notification = NotificationModel(user_id=user_id, message=message, status=status)
    try:
        db.session.add(notification)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Send notification error")
        raise StoreError(details=str(e))
    return notification
