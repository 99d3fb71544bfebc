from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from hotel_events.core.config import settings
from hotel_events.core.security import decode_token
from hotel_events.db.session import get_db
from hotel_events.models.user import User, RoleName

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    subject = decode_token(token)
    if subject is None or not subject.isdigit():
        raise credentials_exception
    user = db.query(User).filter(User.id == int(subject)).first()
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")
    return user


def require_roles(*roles: RoleName) -> Callable[..., User]:
    """Dependency factory: the current user must hold at least one of ``roles``."""

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.has_role(*roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return current_user

    return checker


get_current_guest = require_roles(RoleName.GUEST)
get_current_manager = require_roles(RoleName.GENERAL_MANAGER)
get_current_staff = require_roles(
    RoleName.GENERAL_MANAGER, RoleName.EVENT_COORDINATOR, RoleName.RECEPTIONIST,
)
