from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..core.db import Base


class AppUser(Base):
    __tablename__ = "AppUser"

    UserID            = Column(Integer, primary_key=True, autoincrement=True)
    Username          = Column(String(50),  nullable=False, unique=True)
    HashedPassword    = Column(String(255), nullable=False)
    FirstName         = Column(String(100), nullable=False)
    LastName          = Column(String(100), nullable=False)
    Email             = Column(String(200), nullable=False, unique=True)
    IsAdmin           = Column(Boolean,     nullable=False, default=False)
    TicketPermissions = Column(Boolean,     nullable=False, default=False)

    machines = relationship("Machine", back_populates="user")
    tickets  = relationship("MaintenanceTicket", back_populates="user")
    reset_codes = relationship(
        "PasswordResetCode",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def FullName(self) -> str:
        return f"{self.FirstName} {self.LastName}".strip()


class PasswordResetCode(Base):
    __tablename__ = "PasswordResetCode"

    CodeID    = Column(Integer, primary_key=True, autoincrement=True)
    UserID    = Column(Integer, ForeignKey("AppUser.UserID", ondelete="CASCADE"), nullable=False)
    Code      = Column(String(12), nullable=False)
    CreatedAt = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    ExpiresAt = Column(DateTime, nullable=False)
    Used      = Column(Boolean,  nullable=False, default=False)
    Attempts  = Column(Integer,  nullable=False, default=0)

    user = relationship("AppUser", back_populates="reset_codes")
