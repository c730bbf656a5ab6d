from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from backoffice.db.session import SessionLocal
from backoffice.db.models import User
from backoffice.core.security import decode_token
from backoffice.core.roles.cache import RoleListingCache

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

_role_cache: Optional[RoleListingCache] = None


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_role_cache() -> RoleListingCache:
    """Process-wide role listing cache."""
    global _role_cache
    if _role_cache is None:
        _role_cache = RoleListingCache()
    return _role_cache


def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(oauth2_scheme),
) -> User:
    """
    Get the current authenticated user from a JWT token.

    Inactive users are returned as-is; the access gate denies them with a
    reason instead of failing authentication.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token:
        user_id = decode_token(token)
        if user_id:
            user = db.query(User).filter(User.id == user_id).first()
            if user:
                return user

    raise credentials_exception
