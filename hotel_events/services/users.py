import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from hotel_events.core.exceptions import (
    ConflictError, InvalidStateError, NotFoundError, ValidationError,
)
from hotel_events.core.security import get_password_hash, verify_password
from hotel_events.models.user import User, Role, RoleName

logger = logging.getLogger(__name__)


def _role_value(role_name) -> str:
    return getattr(role_name, "value", role_name)


def _require(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{label} cannot be empty")
    return value.strip()


def ensure_roles(db: Session, names: Iterable[str]) -> int:
    """Create any missing roles; returns how many were added."""
    existing = {name for (name,) in db.query(Role.name).all()}
    missing = [n for n in names if n not in existing]
    for name in missing:
        db.add(Role(name=name))
    if missing:
        db.commit()
    return len(missing)


def get_role(db: Session, role_name) -> Role:
    role = db.query(Role).filter(Role.name == _role_value(role_name)).first()
    if not role:
        raise NotFoundError("Role not found")
    return role


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    phone: Optional[str] = None,
    role_name=RoleName.GUEST,
) -> User:
    """Register an account. New accounts start with a single role, GUEST unless given."""
    username = _require(username, "Username")
    email = _require(email, "Email")
    _require(password, "Password")
    first_name = _require(first_name, "First name")
    last_name = _require(last_name, "Last name")

    if db.query(User.id).filter(User.username == username).first():
        raise ConflictError("Username already exists")
    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError("Email already exists")

    user = User(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        is_active=True,
    )
    user.roles.append(get_role(db, role_name))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created successfully: %s", username)
    return user


def authenticate(db: Session, login: str, password: str) -> Optional[User]:
    """Look the account up by username or email and check the password."""
    user = db.query(User).filter((User.username == login) | (User.email == login)).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def users_by_role(db: Session, role_name) -> List[User]:
    return (
        db.query(User)
        .join(User.roles)
        .filter(Role.name == _role_value(role_name), User.is_active == True)  # noqa: E712
        .order_by(User.id)
        .all()
    )


def list_users(db: Session, active_only: bool = False, search: Optional[str] = None) -> List[User]:
    query = db.query(User)
    if active_only:
        query = query.filter(User.is_active == True)  # noqa: E712
    if search:
        pattern = f"%{search}%"
        query = query.filter(User.first_name.ilike(pattern) | User.last_name.ilike(pattern))
    return query.order_by(User.id).all()


def assign_role(db: Session, user_id: int, role_name) -> User:
    user = get_user(db, user_id)
    role = get_role(db, role_name)
    if role not in user.roles:
        user.roles.append(role)
        db.commit()
        db.refresh(user)
        logger.info("Role %s assigned to user: %s", role.name, user.username)
    return user


def remove_role(db: Session, user_id: int, role_name) -> User:
    user = get_user(db, user_id)
    name = _role_value(role_name)
    remaining = [r for r in user.roles if r.name != name]
    if len(remaining) == len(user.roles):
        return user
    if not remaining:
        raise InvalidStateError("A user must keep at least one role")
    user.roles = remaining
    db.commit()
    db.refresh(user)
    logger.info("Role %s removed from user: %s", name, user.username)
    return user


def set_active(db: Session, user_id: int, active: bool) -> User:
    user = get_user(db, user_id)
    user.is_active = active
    db.commit()
    db.refresh(user)
    logger.info("User %s: %s", "activated" if active else "deactivated", user.username)
    return user


def update_profile(
    db: Session,
    user: User,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    phone: Optional[str] = None,
) -> User:
    if first_name is not None:
        user.first_name = _require(first_name, "First name")
    if last_name is not None:
        user.last_name = _require(last_name, "Last name")
    if phone is not None:
        user.phone = phone
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user_id: int, new_password: str) -> User:
    _require(new_password, "Password")
    user = get_user(db, user_id)
    user.password_hash = get_password_hash(new_password)
    db.commit()
    db.refresh(user)
    logger.info("Password changed successfully for user: %s", user.username)
    return user


def activate_user(db: Session, user_id: int) -> User:
    return set_active(db, user_id, True)


def deactivate_user(db: Session, user_id: int) -> User:
    return set_active(db, user_id, False)
