import re
from datetime import date
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
)

from .models import TaskStatus

PHONE_RE = re.compile(r"^[0-9]{10}$")

# free-text input is trimmed; passwords are not
StrippedStr = Annotated[str, StringConstraints(strip_whitespace=True)]


class RequestModel(BaseModel):
    """Base for request bodies: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class ResponseModel(BaseModel):
    """Base for responses built from ORM objects."""

    model_config = ConfigDict(from_attributes=True)


class UserCreate(RequestModel):
    """Payload for registering a new user."""

    first_name: StrippedStr = Field(min_length=1, max_length=100)
    last_name: StrippedStr = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: StrippedStr
    password: str = Field(min_length=8)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("phone")
    @classmethod
    def ten_digit_phone(cls, value: str) -> str:
        if not PHONE_RE.match(value):
            raise ValueError("Phone must be exactly 10 digits")
        return value


class LoginRequest(RequestModel):
    """Credentials submitted to the login endpoint."""

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class UserUpdate(RequestModel):
    """Payload for renaming the caller; ``full_name`` follows."""

    first_name: StrippedStr = Field(min_length=1, max_length=100)
    last_name: StrippedStr = Field(min_length=1, max_length=100)


class RegisterOut(BaseModel):
    message: str
    user_id: int


class UserPublic(ResponseModel):
    """User fields returned alongside a token."""

    id: int
    full_name: str
    email: EmailStr


class UserOut(UserPublic):
    """Response schema for the caller's profile."""

    first_name: str
    last_name: str
    phone: str
    created_by: int
    updated_by: int


class Token(BaseModel):
    """JWT token response schema."""

    token: str
    token_type: str = "bearer"
    user: UserPublic


class TokenData(BaseModel):
    """Claims read back from a verified token."""

    user_id: int
    email: str
    scope: str = "access"


class ContactBase(RequestModel):
    """Shared fields for contact payloads."""

    contact_number: StrippedStr = Field(min_length=1, max_length=20)
    contact_email: Optional[EmailStr] = None
    note: Optional[StrippedStr] = None


class ContactCreate(ContactBase):
    """Schema for creating a new contact."""

    pass


class ContactUpdate(ContactBase):
    """Schema for replacing a contact."""

    pass


class ContactOut(ResponseModel):
    """Schema for returning a contact."""

    id: int
    user_id: int
    contact_number: str
    contact_email: Optional[str] = None
    note: Optional[str] = None
    created_by: int
    updated_by: int


class AddressBase(RequestModel):
    """Shared fields for address payloads."""

    address_line1: StrippedStr = Field(min_length=1, max_length=255)
    address_line2: Optional[StrippedStr] = Field(default=None, max_length=255)
    city: StrippedStr = Field(min_length=1, max_length=100)
    state: StrippedStr = Field(min_length=1, max_length=100)
    pincode: StrippedStr = Field(min_length=1, max_length=20)
    country: Optional[StrippedStr] = Field(default=None, max_length=100)


class AddressCreate(AddressBase):
    pass


class AddressUpdate(AddressBase):
    pass


class AddressOut(ResponseModel):
    id: int
    contact_id: int
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    pincode: str
    country: str
    created_by: int
    updated_by: int


class TaskBase(RequestModel):
    """Shared fields for task payloads."""

    contact_id: int
    title: StrippedStr = Field(min_length=1, max_length=255)
    description: Optional[StrippedStr] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None


class TaskCreate(TaskBase):
    """Schema for creating a task; status defaults to ``pending``."""

    pass


class TaskUpdate(TaskBase):
    """Schema for replacing a task; an omitted status is left unchanged."""

    pass


class TaskOut(ResponseModel):
    id: int
    user_id: int
    contact_id: int
    contact_number: Optional[str] = None
    title: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: Optional[date] = None
    created_by: int
    updated_by: int


class Message(BaseModel):
    message: str
