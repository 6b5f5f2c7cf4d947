from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from ..core.db import Base


class SpecialAccessory(Base):
    __tablename__ = "SpecialAccessory"

    AccessoryID       = Column(Integer, primary_key=True, autoincrement=True)
    MachineID         = Column(Integer, ForeignKey("Machine.MachineID", ondelete="CASCADE"))
    MachineGroupID    = Column(Integer, ForeignKey("MachineGroup.MachineGroupID", ondelete="SET NULL"))
    QualificationDate = Column(DateTime)
    Name              = Column(String(200), nullable=False)
    Length            = Column(Integer)
    Diameter          = Column(Integer)
    Angle             = Column(Integer)
    Quantity          = Column(Integer, nullable=False, default=1)
    Notes             = Column(String(1000))

    machine = relationship("Machine", back_populates="special_accessories")


class GenericAccessory(Base):
    __tablename__ = "GenericAccessory"

    AccessoryID    = Column(Integer, primary_key=True, autoincrement=True)
    MachineID      = Column(Integer, ForeignKey("Machine.MachineID", ondelete="CASCADE"))
    MachineGroupID = Column(Integer, ForeignKey("MachineGroup.MachineGroupID", ondelete="SET NULL"))
    Name           = Column(String(200), nullable=False)
    Quantity       = Column(Integer, nullable=False, default=1)
    Notes          = Column(String(1000))

    machine = relationship("Machine", back_populates="generic_accessories")
