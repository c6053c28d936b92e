from models.user import UserModel
from models.event import EventModel
from models.task import TaskModel
from models.assignment import AssignmentModel
from models.notifications import NotificationModel
from models.feedback import FeedbackModel
