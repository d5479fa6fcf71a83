"""Contact management routes for the ContactDesk API."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from . import crud, schemas
from .auth import get_current_user
from .database import get_db
from .models import User

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


@router.get("", response_model=List[schemas.ContactOut])
def list_contacts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Retrieve the contacts belonging to the current user, newest first.

    Args:
        db (Session): Database session.
        current_user (User): Authenticated user.

    Returns:
        list[ContactOut]: List of contacts.
    """
    return crud.get_contacts(db, current_user)


@router.post("", response_model=schemas.ContactOut, status_code=status.HTTP_201_CREATED)
def create_contact(
    contact_in: schemas.ContactCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a new contact owned by the current user.

    Args:
        contact_in (ContactCreate): Contact input data.
        db (Session): Database session.
        current_user (User): Authenticated user.

    Raises:
        Conflict: If the user already has a contact with this number.

    Returns:
        ContactOut: Created contact.
    """
    return crud.create_contact(db, contact_in, current_user)


@router.get("/{contact_id}", response_model=schemas.ContactOut)
def get_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Retrieve a single contact by ID for the current user.

    Raises:
        Forbidden: If the contact does not belong to the user.
    """
    return crud.get_owned_contact(db, contact_id, current_user)


@router.put("/{contact_id}", response_model=schemas.ContactOut)
def update_contact(
    contact_id: int,
    contact_in: schemas.ContactUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Replace an existing contact.

    Args:
        contact_id (int): Contact identifier.
        contact_in (ContactUpdate): New field values.
        db (Session): Database session.
        current_user (User): Authenticated user.

    Raises:
        Forbidden: If the contact does not belong to the user.
        Conflict: If the new number is used by another of the user's contacts.

    Returns:
        ContactOut: Updated contact.
    """
    contact = crud.get_owned_contact(db, contact_id, current_user)
    return crud.update_contact(db, contact, contact_in, current_user)


@router.delete("/{contact_id}", response_model=schemas.Message)
def remove_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a contact owned by the current user, with its addresses and tasks.

    Raises:
        Forbidden: If the contact does not belong to the user.
    """
    contact = crud.get_owned_contact(db, contact_id, current_user)
    crud.delete_contact(db, contact)
    return {"message": "Contact deleted successfully"}
