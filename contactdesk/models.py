"""Database models for the ContactDesk API.

This module defines SQLAlchemy ORM models used by the application.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, enum.Enum):
    """Lifecycle states of a task."""

    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class AuditMixin:
    """Id of the user who created the row and of the last one to change it."""

    created_by = Column(Integer, nullable=False)
    updated_by = Column(Integer, nullable=False)


class User(AuditMixin, TimestampMixin, Base):
    """
    SQLAlchemy model representing an application user.

    A user owns contacts and tasks. ``full_name`` is derived from the
    first and last name and must only be changed through :meth:`set_names`.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    full_name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(10), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    #: Contacts owned by the user
    contacts = relationship(
        "Contact",
        back_populates="owner",
        cascade="all, delete",
        passive_deletes=True,
    )
    #: Tasks owned by the user
    tasks = relationship(
        "Task",
        back_populates="owner",
        cascade="all, delete",
        passive_deletes=True,
    )

    def set_names(self, first_name: str, last_name: str) -> None:
        """Set both name parts and recompute ``full_name``."""
        self.first_name = first_name
        self.last_name = last_name
        self.full_name = f"{first_name} {last_name}"


class Contact(AuditMixin, TimestampMixin, Base):
    """
    SQLAlchemy model representing a contact entry.

    Each contact belongs to exactly one user and must have
    a unique contact number per owner.
    """

    __tablename__ = "contacts"
    __table_args__ = (
        UniqueConstraint("user_id", "contact_number", name="uq_user_contact_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    contact_number = Column(String(20), nullable=False)
    contact_email = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)

    #: Identifier of the owning user
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    owner = relationship("User", back_populates="contacts")
    addresses = relationship(
        "Address",
        back_populates="contact",
        cascade="all, delete",
        passive_deletes=True,
    )
    tasks = relationship(
        "Task",
        back_populates="contact",
        cascade="all, delete",
        passive_deletes=True,
    )


class Address(AuditMixin, TimestampMixin, Base):
    """Postal address attached to a contact."""

    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    contact_id = Column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False, default="India")

    contact = relationship("Contact", back_populates="addresses")


class Task(AuditMixin, TimestampMixin, Base):
    """A to-do item owned by a user and linked to one of their contacts."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_id = Column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(TaskStatus, name="task_status", native_enum=False, validate_strings=True),
        nullable=False,
        default=TaskStatus.pending,
    )
    due_date = Column(Date, nullable=True)

    owner = relationship("User", back_populates="tasks")
    contact = relationship("Contact", back_populates="tasks")

    @property
    def contact_number(self) -> str | None:
        return self.contact.contact_number if self.contact is not None else None


class EmailLog(Base):
    """Append-only record of an outgoing notification."""

    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True)
    to_email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    sent_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
