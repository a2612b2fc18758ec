# Import every model module so Base.metadata knows all tables
from sustainable_cities.modules.auth.models import User  # noqa: F401
from sustainable_cities.modules.reports.models import Report  # noqa: F401
from sustainable_cities.modules.forum.models import ForumThread, ForumComment  # noqa: F401
from sustainable_cities.modules.invites.models import WorkerInvite  # noqa: F401
from sustainable_cities.modules.notifications.models import Notification  # noqa: F401
from sustainable_cities.modules.admin.models import AuditLog  # noqa: F401
