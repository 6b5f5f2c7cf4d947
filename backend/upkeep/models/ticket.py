from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, CheckConstraint, func, text
from sqlalchemy.orm import relationship
from ..core.db import Base
from ..domain.constants import TICKET_STATUSES


class MaintenanceTicket(Base):
    __tablename__ = "MaintenanceTicket"

    TicketID             = Column(Integer, primary_key=True, autoincrement=True)
    MachineID            = Column(Integer, ForeignKey("Machine.MachineID", ondelete="SET NULL"))
    UserID               = Column(Integer, ForeignKey("AppUser.UserID", ondelete="SET NULL"))
    Title                = Column(String(200),  nullable=False)
    Description          = Column(String(2000), nullable=False)
    Status_s             = Column(String(20),   nullable=False, server_default=text("'pending'"), default="pending")
    CompletionNotes      = Column(String(2000))
    ScheduledDate        = Column(DateTime, nullable=False)
    CompletedDate        = Column(DateTime)
    CreatedAt            = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    UpdatedAt            = Column(DateTime, nullable=False, server_default=func.current_timestamp(),
                                  onupdate=func.current_timestamp())
    Critical             = Column(Boolean, nullable=False, default=False)
    CategoryID           = Column(Integer, ForeignKey("MachineCategory.CategoryID", ondelete="SET NULL"))
    InterventionExternal = Column(Boolean)

    __table_args__ = (
        CheckConstraint(
            "Status_s in (" + ",".join(f"'{s}'" for s in TICKET_STATUSES) + ")",
            name="CK_Ticket_Status",
        ),
    )

    machine  = relationship("Machine", back_populates="tickets")
    user     = relationship("AppUser", back_populates="tickets")
    category = relationship("MachineCategory", back_populates="tickets")
