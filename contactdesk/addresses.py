"""Routes for the addresses nested under a contact."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from . import crud, schemas
from .auth import get_current_user
from .database import get_db
from .models import User

router = APIRouter(prefix="/api/contacts/{contact_id}/addresses", tags=["addresses"])


@router.get("", response_model=List[schemas.AddressOut])
def list_addresses(
    contact_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the addresses of one of the caller's contacts, newest first."""
    contact = crud.get_owned_contact(db, contact_id, current_user)
    return crud.get_addresses(db, contact)


@router.post("", response_model=schemas.AddressOut, status_code=status.HTTP_201_CREATED)
def create_address(
    contact_id: int,
    address_in: schemas.AddressCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Attach an address to one of the caller's contacts.

    ``country`` defaults to India when omitted.
    """
    contact = crud.get_owned_contact(db, contact_id, current_user)
    return crud.create_address(db, contact, address_in, current_user)


@router.put("/{address_id}", response_model=schemas.AddressOut)
def update_address(
    contact_id: int,
    address_id: int,
    address_in: schemas.AddressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    address = crud.get_owned_address(db, address_id, contact_id, current_user)
    return crud.update_address(db, address, address_in, current_user)


@router.delete("/{address_id}", response_model=schemas.Message)
def remove_address(
    contact_id: int,
    address_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    address = crud.get_owned_address(db, address_id, contact_id, current_user)
    crud.delete_address(db, address)
    return {"message": "Address deleted successfully"}
