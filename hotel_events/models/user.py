import enum
from sqlalchemy import Column, String, Boolean, DateTime, func, Integer, ForeignKey, Table
from sqlalchemy.orm import relationship
from hotel_events.db.session import Base

class RoleName(str, enum.Enum):
    GUEST = "GUEST"
    GENERAL_MANAGER = "GENERAL_MANAGER"
    EVENT_COORDINATOR = "EVENT_COORDINATOR"
    CATERING_TEAM_LEADER = "CATERING_TEAM_LEADER"
    MARKETING_EXECUTIVE = "MARKETING_EXECUTIVE"
    RECEPTIONIST = "RECEPTIONIST"


STAFF_ROLES = (
    RoleName.GENERAL_MANAGER,
    RoleName.EVENT_COORDINATOR,
    RoleName.CATERING_TEAM_LEADER,
    RoleName.MARKETING_EXECUTIVE,
    RoleName.RECEPTIONIST,
)

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(255), nullable=True)

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    roles = relationship("Role", secondary=user_roles, lazy="selectin")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def role_names(self) -> list[str]:
        return sorted(role.name for role in self.roles)

    def has_role(self, *names) -> bool:
        wanted = {getattr(n, "value", n) for n in names}
        return any(role.name in wanted for role in self.roles)
