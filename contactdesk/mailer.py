"""Outgoing notifications.

Mail is not delivered anywhere: each message is appended to the
``email_logs`` table instead.
"""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import EmailLog, Task, User

WELCOME_SUBJECT = "Welcome to Contact & Task Management System!"


def send_email(db: Session, to_email: str, subject: str, body: str) -> EmailLog | None:
    """
    Record an outgoing email.

    A failure to store the record is logged and rolled back; it must not
    fail the operation that triggered the notification.

    Args:
        db (Session): Database session.
        to_email (str): Recipient address.
        subject (str): Message subject.
        body (str): Plain-text body.

    Returns:
        EmailLog | None: Stored log entry, or ``None`` if it could not be saved.
    """
    entry = EmailLog(to_email=to_email, subject=subject, body=body)
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Email log error for {}", to_email)
        return None
    logger.info("Email queued to {}: {}", to_email, subject)
    return entry


def send_welcome_email(db: Session, user: User) -> EmailLog | None:
    return send_email(
        db,
        user.email,
        WELCOME_SUBJECT,
        f"Hello {user.full_name}, your account has been created successfully.",
    )


def send_task_created_email(db: Session, user: User, task: Task) -> EmailLog | None:
    status = task.status.value
    return send_email(
        db,
        user.email,
        f"New Task Created: {task.title}",
        f'A new task titled "{task.title}" has been assigned to you '
        f"with status: {status}.",
    )
