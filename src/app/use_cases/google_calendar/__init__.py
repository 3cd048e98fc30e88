"""Use cases do canal Google Calendar."""

from app.use_cases.google_calendar.handle_notification import (
    HandleNotificationUseCase,
    IntakePolicy,
    NotificationAck,
)

__all__ = ["HandleNotificationUseCase", "IntakePolicy", "NotificationAck"]
