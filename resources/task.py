import logging

from flask.views import MethodView
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from db import db
from errors import NotFoundError, StoreError, ValidationError
from models import AssignmentModel, EventModel, TaskModel
from resources import Blueprint
from schemas import TaskSchema, TaskUpdateSchema, UserAssignmentSchema, TaskStatisticsSchema

logger = logging.getLogger(__name__)

blp = Blueprint("tasks", __name__, description="Operations on tasks")


def get_task_or_404(task_id):
    try:
        task = db.session.get(TaskModel, task_id)
    except SQLAlchemyError as e:
        logger.exception("Get task error")
        raise StoreError(details=str(e))
    if task is None:
        raise NotFoundError("Task not found")
    return task


def check_event(task_data):
    event_id = task_data.get("event_id")
    try:
        missing = event_id is not None and db.session.get(EventModel, event_id) is None
    except SQLAlchemyError as e:
        logger.exception("Check event error")
        raise StoreError(details=str(e))
    if missing:
        raise ValidationError(f"Event {event_id} does not exist")


@blp.route("/tasks")
class TaskList(MethodView):
    @blp.arguments(TaskSchema)
    @blp.response(201, TaskSchema)
    def post(self, task_data):
        check_event(task_data)
        task = TaskModel(**task_data)

        try:
            db.session.add(task)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Create task error")
            raise StoreError("Failed to create task due to a database error.", details=str(e))

        return task

    @blp.response(200, TaskSchema(many=True))
    def get(self):
        try:
            return TaskModel.query.order_by(TaskModel.task_id).all()
        except SQLAlchemyError as e:
            logger.exception("Get tasks error")
            raise StoreError(details=str(e))


@blp.route("/tasks/<int:user_id>")
class UserAssignments(MethodView):
    @blp.response(200, UserAssignmentSchema(many=True))
    def get(self, user_id):
        try:
            rows = db.session.query(AssignmentModel, TaskModel) \
                .join(TaskModel, AssignmentModel.task_id == TaskModel.task_id) \
                .filter(AssignmentModel.user_id == user_id) \
                .order_by(AssignmentModel.assigned_at.desc()) \
                .all()
        except SQLAlchemyError as e:
            logger.exception("Get user assignments error")
            raise StoreError(details=str(e))

        return [
            {
                "assignment_id": assignment.assignment_id,
                "task_id": task.task_id,
                "task_name": task.task_name,
                "description": task.description,
                "required_skills": task.required_skills,
                "task_status": task.status,
                "assignment_status": assignment.status,
                "assigned_at": assignment.assigned_at,
                "event_id": task.event_id,
            }
            for assignment, task in rows
        ]


@blp.route("/tasks/<int:user_id>/statistics")
class TaskStatistics(MethodView):
    @blp.response(200, TaskStatisticsSchema)
    def get(self, user_id):
        try:
            total, completed = db.session.query(
                func.count(AssignmentModel.assignment_id),
                func.count(AssignmentModel.assignment_id).filter(TaskModel.status == "Completed"),
            ).join(TaskModel, AssignmentModel.task_id == TaskModel.task_id) \
                .filter(AssignmentModel.user_id == user_id) \
                .one()
        except SQLAlchemyError as e:
            logger.exception("Get task statistics error")
            raise StoreError(details=str(e))
        return {"total_tasks": total, "completed_tasks": completed}


@blp.route("/tasks/<int:task_id>", methods=["PUT", "DELETE"])
class Task(MethodView):
    @blp.arguments(TaskUpdateSchema)
    @blp.response(200, TaskSchema)
    def put(self, task_data, task_id):
        task = get_task_or_404(task_id)
        check_event(task_data)

        for key, value in task_data.items():
            setattr(task, key, value)

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Update task error")
            raise StoreError("Failed to update task due to a database error.", details=str(e))

        return task

    @blp.response(204)
    def delete(self, task_id):
        task = get_task_or_404(task_id)

        try:
            db.session.delete(task)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Delete task error")
            raise StoreError("Failed to delete task due to a database error.", details=str(e))
