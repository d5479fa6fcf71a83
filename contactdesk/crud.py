"""CRUD operations for users, contacts, addresses and tasks.

This module contains database interaction logic isolated from FastAPI
route handlers. Every lookup of a user-owned row is scoped by the owner's
id; a row that does not match is reported as :class:`Forbidden` whether
it belongs to someone else or does not exist at all.
"""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from . import models, schemas
from .errors import Conflict, Forbidden

DEFAULT_COUNTRY = "India"


def create_user(
    db: Session, user_in: schemas.UserCreate, hashed_password: str
) -> models.User:
    """
    Create and persist a new user.

    Email is checked before phone so the caller learns which field
    collided.

    Args:
        db (Session): SQLAlchemy database session.
        user_in (UserCreate): Incoming user data, email already lowercased.
        hashed_password (str): Securely hashed password.

    Raises:
        Conflict: If the email or the phone number is already registered.

    Returns:
        User: Newly created user instance.
    """
    if get_user_by_email(db, user_in.email) is not None:
        raise Conflict("Email already exists")
    if get_user_by_phone(db, user_in.phone) is not None:
        raise Conflict("Phone already exists")

    user = models.User(
        email=user_in.email,
        phone=user_in.phone,
        hashed_password=hashed_password,
        created_by=0,
        updated_by=0,
    )
    user.set_names(user_in.first_name, user_in.last_name)
    db.add(user)
    try:
        # the author of a user row is the user itself, known only after insert
        db.flush()
        user.created_by = user.updated_by = user.id
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User already exists")
    db.refresh(user)
    return user


def get_user_by_email(db: Session, email: str) -> models.User | None:
    """
    Retrieve a user by email address.

    Args:
        db (Session): Database session.
        email (str): User email, compared case-insensitively.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.email == email.lower())
    ).scalar_one_or_none()


def get_user_by_phone(db: Session, phone: str) -> models.User | None:
    return db.execute(
        select(models.User).where(models.User.phone == phone)
    ).scalar_one_or_none()


def get_user_by_id(db: Session, user_id: int) -> models.User | None:
    """
    Retrieve a user by primary key.

    Args:
        db (Session): Database session.
        user_id (int): User identifier.

    Returns:
        User | None: User if found, otherwise ``None``.
    """
    return db.execute(
        select(models.User).where(models.User.id == user_id)
    ).scalar_one_or_none()


def update_user_names(
    db: Session, user: models.User, first_name: str, last_name: str
) -> models.User:
    """Rename a user, keeping ``full_name`` in step."""
    user.set_names(first_name, last_name)
    user.updated_by = user.id
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: models.User) -> None:
    """
    Delete a user together with everything the account owns.

    Args:
        db (Session): Database session.
        user (User): User to delete.
    """
    db.delete(user)
    db.commit()
    logger.info("Deleted user {}", user.id)


def get_owned_contact(db: Session, contact_id: int, user: models.User) -> models.Contact:
    """
    Retrieve a contact that belongs to ``user``.

    Args:
        db (Session): Database session.
        contact_id (int): Contact identifier.
        user (User): Expected owner.

    Raises:
        Forbidden: If no contact with this id belongs to the user.

    Returns:
        Contact: The owned contact.
    """
    contact = db.execute(
        select(models.Contact).where(
            models.Contact.id == contact_id,
            models.Contact.user_id == user.id,
        )
    ).scalar_one_or_none()
    if contact is None:
        raise Forbidden("Contact does not belong to this user")
    return contact


def _contact_number_taken(
    db: Session, user: models.User, contact_number: str, exclude_id: int | None = None
) -> bool:
    stmt = select(models.Contact.id).where(
        models.Contact.user_id == user.id,
        models.Contact.contact_number == contact_number,
    )
    if exclude_id is not None:
        stmt = stmt.where(models.Contact.id != exclude_id)
    return db.execute(stmt).first() is not None


def _commit_contact(db: Session, contact: models.Contact) -> models.Contact:
    db.add(contact)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Contact number already exists for this user")
    db.refresh(contact)
    return contact


def get_contacts(db: Session, user: models.User) -> list[models.Contact]:
    """
    Retrieve all contacts of the given user, newest first.

    Args:
        db (Session): Database session.
        user (User): Contact owner.

    Returns:
        list[Contact]: List of contacts.
    """
    stmt = (
        select(models.Contact)
        .where(models.Contact.user_id == user.id)
        .order_by(models.Contact.created_at.desc(), models.Contact.id.desc())
    )
    return list(db.scalars(stmt).all())


def create_contact(
    db: Session, contact_in: schemas.ContactCreate, user: models.User
) -> models.Contact:
    """
    Create a new contact owned by the given user.

    Args:
        db (Session): Database session.
        contact_in (ContactCreate): Contact data.
        user (User): Owner of the contact.

    Raises:
        Conflict: If the user already has a contact with this number.

    Returns:
        Contact: Newly created contact.
    """
    if _contact_number_taken(db, user, contact_in.contact_number):
        raise Conflict("Contact number already exists for this user")

    contact = models.Contact(
        **contact_in.model_dump(),
        user_id=user.id,
        created_by=user.id,
        updated_by=user.id,
    )
    return _commit_contact(db, contact)


def update_contact(
    db: Session,
    contact: models.Contact,
    contact_in: schemas.ContactUpdate,
    user: models.User,
) -> models.Contact:
    """
    Replace the fields of an owned contact.

    Args:
        db (Session): Database session.
        contact (Contact): Contact instance, already ownership-checked.
        contact_in (ContactUpdate): New field values.
        user (User): Contact owner.

    Raises:
        Conflict: If another contact of the user already has the new number.

    Returns:
        Contact: Updated contact.
    """
    if _contact_number_taken(db, user, contact_in.contact_number, exclude_id=contact.id):
        raise Conflict("Contact number already exists for this user")

    for key, value in contact_in.model_dump().items():
        setattr(contact, key, value)
    contact.updated_by = user.id
    return _commit_contact(db, contact)


def delete_contact(db: Session, contact: models.Contact) -> None:
    """
    Delete a contact along with its addresses and tasks.

    Args:
        db (Session): Database session.
        contact (Contact): Contact to delete.
    """
    db.delete(contact)
    db.commit()


def get_owned_address(
    db: Session, address_id: int, contact_id: int, user: models.User
) -> models.Address:
    """
    Retrieve an address of one of the user's contacts.

    Args:
        db (Session): Database session.
        address_id (int): Address identifier.
        contact_id (int): Contact the address must be attached to.
        user (User): Expected owner of the contact.

    Raises:
        Forbidden: If the address is missing, attached to another contact,
            or the contact belongs to someone else.

    Returns:
        Address: The owned address.
    """
    address = db.execute(
        select(models.Address)
        .join(models.Contact, models.Address.contact_id == models.Contact.id)
        .where(
            models.Address.id == address_id,
            models.Address.contact_id == contact_id,
            models.Contact.user_id == user.id,
        )
    ).scalar_one_or_none()
    if address is None:
        raise Forbidden("Address does not belong to this user")
    return address


def get_addresses(db: Session, contact: models.Contact) -> list[models.Address]:
    stmt = (
        select(models.Address)
        .where(models.Address.contact_id == contact.id)
        .order_by(models.Address.created_at.desc(), models.Address.id.desc())
    )
    return list(db.scalars(stmt).all())


def _address_fields(address_in: schemas.AddressBase) -> dict:
    fields = address_in.model_dump()
    fields["country"] = fields.get("country") or DEFAULT_COUNTRY
    return fields


def create_address(
    db: Session,
    contact: models.Contact,
    address_in: schemas.AddressCreate,
    user: models.User,
) -> models.Address:
    """
    Attach a new address to an owned contact.

    Args:
        db (Session): Database session.
        contact (Contact): Parent contact, already ownership-checked.
        address_in (AddressCreate): Address data.
        user (User): Acting user, recorded as author.

    Returns:
        Address: Newly created address.
    """
    address = models.Address(
        **_address_fields(address_in),
        contact_id=contact.id,
        created_by=user.id,
        updated_by=user.id,
    )
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def update_address(
    db: Session,
    address: models.Address,
    address_in: schemas.AddressUpdate,
    user: models.User,
) -> models.Address:
    for key, value in _address_fields(address_in).items():
        setattr(address, key, value)
    address.updated_by = user.id
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


def delete_address(db: Session, address: models.Address) -> None:
    db.delete(address)
    db.commit()


def get_owned_task(db: Session, task_id: int, user: models.User) -> models.Task:
    """
    Retrieve a task that belongs to ``user``.

    Args:
        db (Session): Database session.
        task_id (int): Task identifier.
        user (User): Expected owner.

    Raises:
        Forbidden: If no task with this id belongs to the user.

    Returns:
        Task: The owned task.
    """
    task = db.execute(
        select(models.Task)
        .options(joinedload(models.Task.contact))
        .where(models.Task.id == task_id, models.Task.user_id == user.id)
    ).scalar_one_or_none()
    if task is None:
        raise Forbidden("Task does not belong to this user")
    return task


def get_tasks(
    db: Session, user: models.User, status: models.TaskStatus | None = None
) -> list[models.Task]:
    """
    Retrieve the user's tasks, newest first.

    Args:
        db (Session): Database session.
        user (User): Task owner.
        status (TaskStatus | None): Only return tasks in this status.

    Returns:
        list[Task]: Matching tasks with their contact loaded.
    """
    stmt = (
        select(models.Task)
        .options(joinedload(models.Task.contact))
        .where(models.Task.user_id == user.id)
    )
    if status is not None:
        stmt = stmt.where(models.Task.status == status)
    stmt = stmt.order_by(models.Task.created_at.desc(), models.Task.id.desc())
    return list(db.scalars(stmt).all())


def create_task(
    db: Session, task_in: schemas.TaskCreate, user: models.User
) -> models.Task:
    """
    Create a task linked to one of the user's contacts.

    Args:
        db (Session): Database session.
        task_in (TaskCreate): Task data.
        user (User): Task owner.

    Raises:
        Forbidden: If ``task_in.contact_id`` is not one of the user's contacts.

    Returns:
        Task: Newly created task.
    """
    get_owned_contact(db, task_in.contact_id, user)

    fields = task_in.model_dump()
    fields["status"] = fields["status"] or models.TaskStatus.pending
    task = models.Task(
        **fields, user_id=user.id, created_by=user.id, updated_by=user.id
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(
    db: Session, task: models.Task, task_in: schemas.TaskUpdate, user: models.User
) -> models.Task:
    """
    Replace the fields of an owned task.

    The target contact is ownership-checked again, so a task can never be
    moved onto a contact of another user. An omitted status keeps the
    current one.

    Args:
        db (Session): Database session.
        task (Task): Task instance, already ownership-checked.
        task_in (TaskUpdate): New field values.
        user (User): Task owner.

    Raises:
        Forbidden: If the new contact does not belong to the user.

    Returns:
        Task: Updated task.
    """
    contact = get_owned_contact(db, task_in.contact_id, user)

    fields = task_in.model_dump()
    fields.pop("contact_id")
    if fields["status"] is None:
        fields.pop("status")
    for key, value in fields.items():
        setattr(task, key, value)
    task.contact = contact
    task.updated_by = user.id
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task: models.Task) -> None:
    db.delete(task)
    db.commit()
