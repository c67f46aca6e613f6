"""
User directory and token store.

Users are looked up by normalized email; AuthSession rows bind an opaque
64-hex-char bearer token to a user until it expires or is revoked.
"""
import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import config
from app.core.errors import (
    EmailTakenError,
    InvalidCredentialsError,
    PasswordMismatchError,
    WeakPasswordError,
)
from app.core.security import (
    as_utc,
    generate_session_token,
    hash_password,
    utcnow,
    verify_password,
)
from app.db.models.auth_session import AuthSession
from app.db.models.user import User

logger = logging.getLogger(__name__)

# Checked against when the email is unknown so both login failures cost one bcrypt round
_dummy_password_hash: Optional[str] = None


def _get_dummy_password_hash() -> str:
    global _dummy_password_hash
    if _dummy_password_hash is None:
        _dummy_password_hash = hash_password(secrets.token_hex(16))
    return _dummy_password_hash


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def find_auth_session(db: Session, token: str) -> Optional[AuthSession]:
    return db.query(AuthSession).filter(AuthSession.token == token).first()


def is_expired(auth_session: AuthSession) -> bool:
    return as_utc(auth_session.expires_at) < utcnow()


# ============================================
# Token store
# ============================================

def issue_token(db: Session, user_id: int, commit: bool = True) -> AuthSession:
    """
    Create a new AuthSession for the user.

    Other tokens held by the same user stay valid.
    """
    now = utcnow()
    auth_session = AuthSession(
        user_id=user_id,
        token=generate_session_token(),
        created_at=now,
        expires_at=now + timedelta(days=config.SESSION_TTL_DAYS),
    )
    db.add(auth_session)
    if commit:
        db.commit()
        db.refresh(auth_session)
    return auth_session


def revoke_token(db: Session, token: str) -> bool:
    """Delete the AuthSession for this token. Returns False if it did not exist."""
    auth_session = find_auth_session(db, token)
    if auth_session is None:
        return False
    user_id = auth_session.user_id
    db.delete(auth_session)
    db.commit()
    logger.info(f"Signed out: user_id={user_id}")
    return True


def reap_expired_tokens(db: Session) -> int:
    """Delete every expired AuthSession and return how many were removed."""
    deleted = (
        db.query(AuthSession)
        .filter(AuthSession.expires_at < utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info(f"Reaped {deleted} expired auth sessions")
    return deleted


# ============================================
# Registration / login
# ============================================

def register_user(
    db: Session,
    email: str,
    password: str,
    confirm_password: str,
    name: Optional[str] = None,
) -> Tuple[User, AuthSession]:
    """
    Create a user and sign them in.

    Raises:
        WeakPasswordError: password shorter than MIN_PASSWORD_LENGTH
        PasswordMismatchError: password and confirmation differ
        EmailTakenError: a user with this email already exists
    """
    if len(password) < config.MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(
            f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters long"
        )
    if password != confirm_password:
        raise PasswordMismatchError()

    normalized = normalize_email(email)
    if find_user_by_email(db, normalized):
        logger.info(f"Registration rejected, email taken: {normalized}")
        raise EmailTakenError()

    user = User(
        email=normalized,
        password_hash=hash_password(password),
        name=name.strip() if name and name.strip() else None,
    )
    try:
        db.add(user)
        db.flush()
        auth_session = issue_token(db, user.id, commit=False)
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        logger.info(f"Registration rejected, email taken: {normalized}")
        raise EmailTakenError()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    db.refresh(auth_session)

    logger.info(f"User registered: user_id={user.id}, email={user.email}")
    return user, auth_session


def login_user(db: Session, email: str, password: str) -> Tuple[User, AuthSession]:
    """
    Verify credentials and issue a fresh token.

    Raises:
        InvalidCredentialsError: unknown email or wrong password (indistinguishable)
    """
    user = find_user_by_email(db, email)
    if user is None:
        verify_password(password, _get_dummy_password_hash())
        password_ok = False
    else:
        password_ok = verify_password(password, user.password_hash)
    if not password_ok:
        logger.info(f"Login failed: email={normalize_email(email)}")
        raise InvalidCredentialsError()

    auth_session = issue_token(db, user.id)
    logger.info(f"Login succeeded: user_id={user.id}")
    return user, auth_session
