"""Authentication service for JWT, password and reset-token handling."""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Query, Session, undefer

from src.config import get_settings
from src.models.enums import Role
from src.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

# bcrypt only reads this many bytes of input
MAX_PASSWORD_BYTES = 72


class InvalidTokenError(Exception):
    """Raised when an access token cannot be trusted."""


@dataclass(frozen=True)
class ResetToken:
    """A freshly generated password-reset credential.

    Only ``token_hash`` and ``expires_at`` are stored; ``plain_token`` is sent
    to the user once and then forgotten.
    """

    plain_token: str
    token_hash: str
    expires_at: datetime


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against its hash. Never raises.

    bcrypt ignores everything past the first 72 bytes, so longer candidates
    are rejected outright instead of matching on their prefix.
    """
    if not plain_password or not hashed_password:
        return False
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expiration_minutes)
    now = datetime.now(UTC)
    to_encode = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """Decode a JWT token and return the user id it was issued for.

    Bad signatures, malformed tokens and expired tokens all raise
    InvalidTokenError with no further detail.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError("Invalid token") from e


def hash_reset_token(plain_token: str) -> str:
    return hashlib.sha256(plain_token.encode("utf-8")).hexdigest()


def generate_reset_token(now: datetime | None = None) -> ResetToken:
    """Generate a one-time password-reset token."""
    now = now or datetime.now(UTC)
    plain_token = secrets.token_hex(20)
    return ResetToken(
        plain_token=plain_token,
        token_hash=hash_reset_token(plain_token),
        expires_at=now + timedelta(minutes=settings.reset_token_expire_minutes),
    )


def issue_reset_token(user: User, now: datetime | None = None) -> str:
    """Store a new reset token hash on the user and return the plain token.

    The caller is responsible for committing the session.
    """
    reset = generate_reset_token(now)
    user.reset_password_token = reset.token_hash
    user.reset_password_expire = reset.expires_at
    logger.info(f"Issued password reset token for user {user.id}")
    return reset.plain_token


def clear_reset_token(user: User) -> None:
    user.reset_password_token = None
    user.reset_password_expire = None


def reset_token_query(db: Session, plain_token: str, now: datetime) -> Query:
    """Select the unexpired holder of a reset token, locking the row.

    The lock is held until the caller commits, so concurrent redemptions of
    one token are serialized and only the first succeeds.
    """
    return (
        db.query(User)
        .filter(
            User.reset_password_token == hash_reset_token(plain_token),
            User.reset_password_expire > now,
        )
        .with_for_update()
    )


def find_user_by_reset_token(
    db: Session, plain_token: str, now: datetime | None = None
) -> User | None:
    """Find the user holding an unexpired reset token.

    Wrong and expired tokens are indistinguishable: both return None.
    """
    return reset_token_query(db, plain_token, now or datetime.now(UTC)).first()


def get_user_by_email(db: Session, email: str, include_password: bool = False) -> User | None:
    """Get a user by email."""
    query = db.query(User)
    if include_password:
        query = query.options(undefer(User.password_hash))
    return query.filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int, include_password: bool = False) -> User | None:
    """Get a user by id."""
    query = db.query(User)
    if include_password:
        query = query.options(undefer(User.password_hash))
    return query.filter(User.id == user_id).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password.

    Unknown emails still pay for a hash comparison so that response timing
    does not reveal which accounts exist.
    """
    user = get_user_by_email(db, email, include_password=True)
    if not user:
        pwd_context.dummy_verify()
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(
    db: Session,
    name: str,
    email: str,
    password_hash: str,
    role: Role = Role.USER,
) -> User:
    """Create a new user from an already hashed password."""
    user = User(name=name, email=email, password_hash=password_hash, role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} with role {user.role}")
    return user
