from .notification_sender import EmailNotificationSender

__all__ = ["EmailNotificationSender"]
