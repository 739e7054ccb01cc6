"""Password hashing, JWT tokens and the authentication routes."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from .config import Settings
from .database import Database
from .dependencies import get_db, get_settings, success
from .errors import AuthenticationError, BadRequestError, ForbiddenError

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = "Not authorized to access this resource"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, settings: Settings) -> str:
    """Sign a token carrying the user id, valid for ``jwt_expire_days``."""
    expire = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expire_days)
    return jwt.encode(
        {"id": user_id, "exp": expire},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str, settings: Settings) -> str:
    """
    Verify a token and return the user id it carries.

    Raises:
        AuthenticationError: If the token is expired, malformed or unsigned
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired") from None
    except JWTError:
        raise AuthenticationError("Invalid token") from None

    user_id = payload.get("id")
    if not user_id:
        raise AuthenticationError("Invalid token")
    return user_id


def _resolve_user(token: str, db: Database, settings: Settings) -> dict[str, Any]:
    user = db.get_user(decode_token(token, settings))
    if user is None:
        raise AuthenticationError("User not found")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Resolve the user from an ``Authorization: Bearer`` header."""
    if credentials is None:
        raise AuthenticationError(NOT_AUTHORIZED)
    return _resolve_user(credentials.credentials, db, settings)


async def get_download_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token: Optional[str] = Query(None),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Like get_current_user, but also accepts ``?token=`` for file links."""
    if credentials is not None:
        return _resolve_user(credentials.credentials, db, settings)
    if not token:
        raise AuthenticationError(NOT_AUTHORIZED)
    return _resolve_user(token, db, settings)


async def require_admin(user: dict = Depends(get_current_user)) -> dict[str, Any]:
    if user.get("role") != "admin":
        raise ForbiddenError("Admin role required")
    return user


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create an account and return a token."""
    if not body.name or not body.email or not body.password:
        raise BadRequestError("Name, email and password are required")

    if db.get_user_by_email(body.email):
        raise BadRequestError("A user with this email already exists")

    user = db.create_user(body.name, body.email, hash_password(body.password))
    return success(
        {"id": user["id"], "name": user["name"], "email": user["email"]},
        token=create_access_token(user["id"], settings),
    )


@router.post("/login")
async def login(
    body: LoginRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = db.get_user_by_email(body.email)
    if user is None or not verify_password(body.password, user["password"]):
        logger.info(f"Failed login for {body.email}")
        raise AuthenticationError("Invalid credentials")

    return success(
        {"id": user["id"], "name": user["name"], "email": user["email"]},
        token=create_access_token(user["id"], settings),
    )


@router.get("/me")
async def me(user: dict = Depends(get_current_user)):
    return success(user)
