import logging

from flask.views import MethodView
from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError, StoreError, ValidationError
from models import AssignmentModel, FeedbackModel, UserModel
from resources import Blueprint
from schemas import FeedbackSchema

logger = logging.getLogger(__name__)

blp = Blueprint("feedback", __name__, description="Feedback and ratings on assignments")


@blp.route("/feedback")
class FeedbackList(MethodView):
    @blp.arguments(FeedbackSchema)
    @blp.response(201, FeedbackSchema)
    def post(self, feedback_data):
        try:
            assignment = db.session.get(AssignmentModel, feedback_data["assignment_id"])
            author = db.session.get(UserModel, feedback_data["user_id"])
        except SQLAlchemyError as e:
            logger.exception("Create feedback error")
            raise StoreError(details=str(e))

        if assignment is None:
            raise NotFoundError("Assignment not found")
        if author is None:
            raise ValidationError(f"User {feedback_data['user_id']} does not exist")

        feedback = FeedbackModel(**feedback_data)

        try:
            db.session.add(feedback)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Create feedback error")
            raise StoreError("Failed to submit feedback.", details=str(e))

        return feedback

    @blp.response(200, FeedbackSchema(many=True))
    def get(self):
        try:
            return FeedbackModel.query.order_by(FeedbackModel.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.exception("Get feedback error")
            raise StoreError(details=str(e))


@blp.route("/feedback/assignment/<int:assignment_id>")
class AssignmentFeedback(MethodView):
    @blp.response(200, FeedbackSchema(many=True))
    def get(self, assignment_id):
        try:
            return FeedbackModel.query \
                .filter(FeedbackModel.assignment_id == assignment_id) \
                .order_by(FeedbackModel.created_at.desc()) \
                .all()
        except SQLAlchemyError as e:
            logger.exception("Get assignment feedback error")
            raise StoreError(details=str(e))
