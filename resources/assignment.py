import logging

from flask.views import MethodView
from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError, StoreError, ValidationError
from models import AssignmentModel, TaskModel, UserModel
from resources import Blueprint
from schemas import AssignmentSchema, AssignmentUpdateSchema

logger = logging.getLogger(__name__)

blp = Blueprint("assignments", __name__, description="Operations on assignments")


def get_assignment_or_404(assignment_id):
    try:
        assignment = db.session.get(AssignmentModel, assignment_id)
    except SQLAlchemyError as e:
        logger.exception("Get assignment error")
        raise StoreError(details=str(e))
    if assignment is None:
        raise NotFoundError("Assignment not found")
    return assignment


def check_references(assignment_data):
    task_id = assignment_data.get("task_id")
    user_id = assignment_data.get("user_id")
    try:
        task_missing = task_id is not None and db.session.get(TaskModel, task_id) is None
        user_missing = user_id is not None and db.session.get(UserModel, user_id) is None
    except SQLAlchemyError as e:
        logger.exception("Check assignment references error")
        raise StoreError(details=str(e))

    if task_missing:
        raise ValidationError(f"Task {task_id} does not exist")
    if user_missing:
        raise ValidationError(f"User {user_id} does not exist")


@blp.route("/assignments")
class AssignmentList(MethodView):
    @blp.arguments(AssignmentSchema)
    @blp.response(201, AssignmentSchema)
    def post(self, assignment_data):
        check_references(assignment_data)
        if assignment_data.get("assigned_at") is None:
            assignment_data.pop("assigned_at", None)

        assignment = AssignmentModel(**assignment_data)

        try:
            db.session.add(assignment)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Create assignment error")
            raise StoreError("Failed to create assignment.", details=str(e))

        logger.info("Assigned task %s to user %s", assignment.task_id, assignment.user_id)
        return assignment

    @blp.response(200, AssignmentSchema(many=True))
    def get(self):
        try:
            return AssignmentModel.query \
                .order_by(AssignmentModel.assigned_at.desc(), AssignmentModel.assignment_id.desc()) \
                .all()
        except SQLAlchemyError as e:
            logger.exception("Get assignments error")
            raise StoreError(details=str(e))


@blp.route("/assignments/<int:assignment_id>")
class Assignment(MethodView):
    @blp.response(200, AssignmentSchema)
    def get(self, assignment_id):
        return get_assignment_or_404(assignment_id)

    @blp.arguments(AssignmentUpdateSchema)
    @blp.response(200, AssignmentSchema)
    def put(self, assignment_data, assignment_id):
        assignment = get_assignment_or_404(assignment_id)
        check_references(assignment_data)

        assignment_data["status"] = assignment_data.get("status") or "Assigned"
        if assignment_data.get("assigned_at") is None:
            assignment_data.pop("assigned_at", None)

        for key, value in assignment_data.items():
            setattr(assignment, key, value)

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Update assignment error")
            raise StoreError("Failed to update assignment.", details=str(e))

        return assignment

    @blp.response(204)
    def delete(self, assignment_id):
        assignment = get_assignment_or_404(assignment_id)

        try:
            db.session.delete(assignment)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Delete assignment error")
            raise StoreError("Failed to delete assignment.", details=str(e))
