from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from ..core.db import Base
from ..domain.constants import INTERVAL_TYPES


class Checklist(Base):
    __tablename__ = "Checklist"

    ChecklistID        = Column(Integer, primary_key=True, autoincrement=True)
    MachineID          = Column(Integer, ForeignKey("Machine.MachineID", ondelete="CASCADE"))
    MachineGroupID     = Column(Integer, ForeignKey("MachineGroup.MachineGroupID", ondelete="SET NULL"))
    Title              = Column(String(200), nullable=False)
    IntervalType       = Column(String(20),  nullable=False)
    CustomIntervalDays = Column(Integer)
    CreatedAt          = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    UpdatedAt          = Column(DateTime, nullable=False, server_default=func.current_timestamp(),
                                onupdate=func.current_timestamp())
    LastPerformedDate  = Column(DateTime)
    NextPlannedDate    = Column(DateTime)
    Status_s           = Column(String(20))

    __table_args__ = (
        CheckConstraint(
            "IntervalType in (" + ",".join(f"'{s}'" for s in INTERVAL_TYPES) + ")",
            name="CK_Checklist_Interval",
        ),
    )

    machine = relationship("Machine", back_populates="checklists")
    items = relationship(
        "ChecklistItem", back_populates="checklist",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="ChecklistItem.ItemID",
    )
    completions = relationship("ChecklistCompletion", back_populates="checklist", passive_deletes=True)


class ChecklistItem(Base):
    __tablename__ = "ChecklistItem"

    ItemID      = Column(Integer, primary_key=True, autoincrement=True)
    ChecklistID = Column(Integer, ForeignKey("Checklist.ChecklistID", ondelete="CASCADE"))
    Description = Column(String(500), nullable=False)
    Completed   = Column(Boolean, nullable=False, default=False)

    checklist = relationship("Checklist", back_populates="items")


class ChecklistCompletion(Base):
    __tablename__ = "ChecklistCompletion"

    CompletionID   = Column(Integer, primary_key=True, autoincrement=True)
    ChecklistID    = Column(Integer, ForeignKey("Checklist.ChecklistID", ondelete="SET NULL"))
    MachineID      = Column(Integer, ForeignKey("Machine.MachineID", ondelete="SET NULL"))
    UserID         = Column(Integer, ForeignKey("AppUser.UserID", ondelete="SET NULL"))
    CompletionDate = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    Notes          = Column(String(1000))
    Status_s       = Column(String(20))

    checklist = relationship("Checklist", back_populates="completions")
    user      = relationship("AppUser")
    items = relationship(
        "ChecklistItemCompletion", back_populates="completion",
        cascade="all, delete-orphan", passive_deletes=True,
    )


class ChecklistItemCompletion(Base):
    __tablename__ = "ChecklistItemCompletion"

    ItemCompletionID = Column(Integer, primary_key=True, autoincrement=True)
    CompletionID     = Column(Integer, ForeignKey("ChecklistCompletion.CompletionID", ondelete="CASCADE"))
    ItemID           = Column(Integer, ForeignKey("ChecklistItem.ItemID", ondelete="CASCADE"))
    Completed        = Column(Boolean, nullable=False, default=False)

    completion = relationship("ChecklistCompletion", back_populates="items")
    item       = relationship("ChecklistItem")
