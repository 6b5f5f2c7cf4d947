from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..core.db import Base


class Supplier(Base):
    __tablename__ = "Supplier"

    SupplierID  = Column(Integer, primary_key=True, autoincrement=True)
    Name        = Column(String(200), nullable=False)
    Website     = Column(String(300))
    Email       = Column(String(200))
    PhoneNumber = Column(String(50))

    machines       = relationship("Machine", back_populates="supplier")
    machine_groups = relationship("MachineGroup", back_populates="supplier")
