from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from ..core.db import Base


class SparePart(Base):
    __tablename__ = "SparePart"

    SparePartID  = Column(Integer, primary_key=True, autoincrement=True)
    MachineID    = Column(Integer, ForeignKey("Machine.MachineID", ondelete="CASCADE"))
    Name         = Column(String(200), nullable=False)
    PartNumber   = Column(String(100), nullable=False, unique=True)
    Quantity     = Column(Integer, nullable=False, default=1)
    ReorderLevel = Column(Integer, nullable=False, default=1)
    Location     = Column(String(200))
    Supplier     = Column(String(200))

    __table_args__ = (
        CheckConstraint("Quantity >= 0", name="CK_SparePart_Quantity"),
    )

    machine = relationship("Machine", back_populates="spare_parts")
