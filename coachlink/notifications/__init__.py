from coachlink.notifications.schemas import Notification, NotificationPage
from coachlink.notifications.service import NotificationService

__all__ = ["Notification", "NotificationPage", "NotificationService"]
