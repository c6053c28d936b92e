from flask_admin import Admin
from flask_admin.contrib.sqla import ModelView

from models import AssignmentModel, EventModel, FeedbackModel, NotificationModel, TaskModel, UserModel
from db import db


class UserAdminView(ModelView):
    column_exclude_list = ['password']
    form_excluded_columns = ['password', 'skills', 'assignments', 'notifications', 'feedback']


class TaskAdminView(ModelView):
    form_excluded_columns = ['assignments']


def setup_admin(app):
    admin = Admin(app, name="Volunteer Hub")
    admin.add_view(UserAdminView(UserModel, db))
    admin.add_view(TaskAdminView(TaskModel, db))
    admin.add_view(ModelView(AssignmentModel, db))
    admin.add_view(ModelView(NotificationModel, db))
    admin.add_view(ModelView(FeedbackModel, db))
    admin.add_view(ModelView(EventModel, db))
    return admin
