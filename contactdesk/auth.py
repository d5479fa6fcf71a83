"""Authentication and authorization related routes and helpers."""

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from loguru import logger
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import crud, mailer, schemas
from .core import Settings
from .database import get_db
from .errors import Unauthorized
from .models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
# checked in place of a real hash when the email is unknown
DUMMY_PASSWORD_HASH = pwd_context.hash("contactdesk-no-such-user")
bearer_scheme = HTTPBearer(auto_error=False)
router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""
    return request.app.state.settings


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a plain password with its hashed value."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate a password hash using the configured context."""
    return pwd_context.hash(password)


def create_access_token(
    user: User, settings: Settings, expires_delta: timedelta | None = None
) -> str:
    """
    Create a signed JWT access token for ``user``.

    The token carries the user id and email and expires after
    ``ACCESS_TOKEN_EXPIRE_MINUTES`` unless ``expires_delta`` is given.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {
        "sub": str(user.id),
        "user_id": user.id,
        "email": user.email,
        "scope": "access",
        "exp": expire,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> schemas.TokenData:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        Unauthorized: If the token is malformed, expired, signed with another
            key, or not an access token.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid or expired token")

    user_id = payload.get("user_id")
    email = payload.get("email")
    if user_id is None or email is None or payload.get("scope") != "access":
        raise Unauthorized("Invalid or expired token")
    return schemas.TokenData(user_id=user_id, email=email, scope="access")


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Check credentials.

    Unknown email and wrong password raise the same error so that the
    response does not reveal which accounts exist, neither by its body
    nor by how long the password check takes.
    """
    user = crud.get_user_by_email(db, email)
    hashed_password = user.hashed_password if user is not None else DUMMY_PASSWORD_HASH
    password_ok = verify_password(password, hashed_password)
    if user is None or not password_ok:
        logger.warning("Failed login attempt for {}", email)
        raise Unauthorized("Invalid credentials")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """Dependency that returns the authenticated user from the bearer token."""

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("Access token required")
    token_data = decode_access_token(credentials.credentials, settings)
    user = crud.get_user_by_id(db, token_data.user_id)
    if user is None:
        raise Unauthorized("Invalid or expired token")
    return user


@router.post(
    "/register", response_model=schemas.RegisterOut, status_code=status.HTTP_201_CREATED
)
def register(user_in: schemas.UserCreate, db: Session = Depends(get_db)):
    """Register a new user and record a welcome email."""

    hashed_password = get_password_hash(user_in.password)
    user = crud.create_user(db, user_in, hashed_password)
    logger.info("Registered user {} ({})", user.id, user.email)
    mailer.send_welcome_email(db, user)
    return schemas.RegisterOut(message="User registered successfully", user_id=user.id)


@router.post("/login", response_model=schemas.Token)
def login(
    credentials: schemas.LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Authenticate user and return a short-lived access token."""

    user = authenticate_user(db, credentials.email, credentials.password)
    token = create_access_token(user, settings)
    return schemas.Token(token=token, user=schemas.UserPublic.model_validate(user))
