"""User-related routes for the ContactDesk API."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import crud, schemas
from .auth import get_current_user
from .database import get_db
from .models import User

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=schemas.UserOut)
def read_me(current_user: User = Depends(get_current_user)):
    """
    Retrieve details of the currently authenticated user.

    Args:
        current_user (User): Authenticated user obtained from JWT token.

    Returns:
        UserOut: User profile information.
    """
    return current_user


@router.put("/me", response_model=schemas.UserOut)
def update_me(
    user_in: schemas.UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Rename the authenticated user.

    ``full_name`` is recomputed from the new first and last name.

    Args:
        user_in (UserUpdate): New first and last name.
        current_user (User): Authenticated user.
        db (Session): Database session.

    Returns:
        UserOut: Updated profile.
    """
    return crud.update_user_names(db, current_user, user_in.first_name, user_in.last_name)


@router.delete("/me", response_model=schemas.Message)
def delete_me(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete the authenticated user's account.

    Contacts, their addresses and all tasks of the user are removed with
    it. Tokens already issued stay valid until they expire but no longer
    resolve to a user.
    """
    crud.delete_user(db, current_user)
    return {"message": "User deleted successfully"}
