from views.assignments import AssignmentsPage
from views.dashboard import Dashboard
from views.profile import Profile
from views.send_notification import SendNotification
from views.signup import SignupForm
from views.task_management import TaskManagement
from views.volunteers import VolunteerManagement
