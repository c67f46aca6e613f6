from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.errors import TokenExpiredError, UnauthenticatedError
from app.db.session import SessionLocal
from app.db.models.user import User
from app.services.auth_service import find_auth_session, is_expired

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


class AuthGate:
    """
    Resolves a bearer token to its owning User.

    Read paths leave expired tokens in place; mutating paths pass
    reap_expired=True so the stale row is removed on the way out.
    """

    def __init__(self, db: Session):
        self.db = db

    def authenticate(self, token: Optional[str], reap_expired: bool = False) -> User:
        if not token:
            raise UnauthenticatedError()

        auth_session = find_auth_session(self.db, token)
        if auth_session is None:
            raise UnauthenticatedError()

        if is_expired(auth_session):
            if reap_expired:
                self.db.delete(auth_session)
                self.db.commit()
            raise TokenExpiredError()

        user = self.db.get(User, auth_session.user_id)
        if user is None:
            raise UnauthenticatedError()
        return user


def get_auth_gate(db: Session = Depends(get_db)) -> AuthGate:
    return AuthGate(db)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    gate: AuthGate = Depends(get_auth_gate),
) -> User:
    """Get current User from the bearer token (read-only path)."""
    return gate.authenticate(token)


def get_current_user_for_write(
    token: Optional[str] = Depends(oauth2_scheme),
    gate: AuthGate = Depends(get_auth_gate),
) -> User:
    """Get current User for a mutating request; expired tokens are reaped."""
    return gate.authenticate(token, reap_expired=True)
