from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, CheckConstraint, text
from sqlalchemy.orm import relationship
from ..core.db import Base
from ..domain.constants import MACHINE_STATUSES


class MachineGroup(Base):
    __tablename__ = "MachineGroup"

    MachineGroupID = Column(Integer, primary_key=True, autoincrement=True)
    Name           = Column(String(200), nullable=False)
    Description    = Column(String(1000))
    SupplierID     = Column(Integer, ForeignKey("Supplier.SupplierID", ondelete="SET NULL"))
    HasAccessories = Column(Boolean, nullable=False, default=False)

    supplier = relationship("Supplier", back_populates="machine_groups")
    machines = relationship("Machine", back_populates="machine_group")


class Machine(Base):
    __tablename__ = "Machine"

    MachineID             = Column(Integer, primary_key=True, autoincrement=True)
    Name                  = Column(String(200), nullable=False)
    Description           = Column(String(1000))
    Location              = Column(String(200), nullable=False)
    SAPNumber             = Column(String(50),  nullable=False, unique=True)
    SerialNumber          = Column(String(100), nullable=False, unique=True)
    UserID                = Column(Integer, ForeignKey("AppUser.UserID", ondelete="SET NULL"))
    Status_s              = Column(String(30),  nullable=False, server_default=text("'active'"), default="active")
    SupplierID            = Column(Integer, ForeignKey("Supplier.SupplierID", ondelete="SET NULL"))
    HasGenericAccessories = Column(Boolean, nullable=False, default=False)
    HasSpecialAccessories = Column(Boolean, nullable=False, default=False)
    MachineGroupID        = Column(Integer, ForeignKey("MachineGroup.MachineGroupID", ondelete="SET NULL"))
    MachineClass          = Column(String(50))

    __table_args__ = (
        CheckConstraint(
            "Status_s in (" + ",".join(f"'{s}'" for s in MACHINE_STATUSES) + ")",
            name="CK_Machine_Status",
        ),
    )

    user          = relationship("AppUser", back_populates="machines")
    supplier      = relationship("Supplier", back_populates="machines")
    machine_group = relationship("MachineGroup", back_populates="machines")

    # 1 makine -> N kayıt; makine silinince bunlar da gider
    documents = relationship(
        "MachineDocument", back_populates="machine",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    checklists = relationship(
        "Checklist", back_populates="machine",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    generic_accessories = relationship(
        "GenericAccessory", back_populates="machine",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    special_accessories = relationship(
        "SpecialAccessory", back_populates="machine",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    spare_parts = relationship(
        "SparePart", back_populates="machine",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    categories = relationship(
        "MachineCategory", back_populates="machine",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    # Ticket geçmişi kalır (MachineID -> NULL)
    tickets = relationship("MaintenanceTicket", back_populates="machine", passive_deletes=True)


class MachineCategory(Base):
    __tablename__ = "MachineCategory"

    CategoryID = Column(Integer, primary_key=True, autoincrement=True)
    MachineID  = Column(Integer, ForeignKey("Machine.MachineID", ondelete="CASCADE"), nullable=False)
    Name       = Column(String(200), nullable=False)

    machine = relationship("Machine", back_populates="categories")
    tickets = relationship("MaintenanceTicket", back_populates="category", passive_deletes=True)
