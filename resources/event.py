import logging
from datetime import date

from flask.views import MethodView
from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError, StoreError
from models import EventModel
from resources import Blueprint
from schemas import EventSchema

logger = logging.getLogger(__name__)

blp = Blueprint("events", __name__, description="Operations on events")


def get_event_or_404(event_id):
    try:
        event = db.session.get(EventModel, event_id)
    except SQLAlchemyError as e:
        logger.exception("Get event error")
        raise StoreError(details=str(e))
    if event is None:
        raise NotFoundError("Event not found")
    return event


@blp.route("/events")
class EventList(MethodView):
    @blp.arguments(EventSchema)
    @blp.response(201, EventSchema)
    def post(self, event_data):
        event = EventModel(**event_data)

        try:
            db.session.add(event)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Create event error")
            raise StoreError("Failed to create event.", details=str(e))

        return event

    @blp.response(200, EventSchema(many=True))
    def get(self):
        try:
            return EventModel.query.order_by(EventModel.date).all()
        except SQLAlchemyError as e:
            logger.exception("Get events error")
            raise StoreError(details=str(e))


@blp.route("/events/upcoming")
class UpcomingEvents(MethodView):
    @blp.response(200, EventSchema(many=True))
    def get(self):
        try:
            return EventModel.query \
                .filter(EventModel.date >= date.today()) \
                .order_by(EventModel.date) \
                .all()
        except SQLAlchemyError as e:
            logger.exception("Get upcoming events error")
            raise StoreError(details=str(e))


@blp.route("/events/<int:event_id>")
class Event(MethodView):
    @blp.response(200, EventSchema)
    def get(self, event_id):
        return get_event_or_404(event_id)

    @blp.response(204)
    def delete(self, event_id):
        event = get_event_or_404(event_id)

        try:
            db.session.delete(event)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Delete event error")
            raise StoreError("Failed to delete event.", details=str(e))
