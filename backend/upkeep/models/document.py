from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from ..core.db import Base


class MachineDocument(Base):
    __tablename__ = "MachineDocument"

    DocumentID     = Column(Integer, primary_key=True, autoincrement=True)
    MachineID      = Column(Integer, ForeignKey("Machine.MachineID", ondelete="CASCADE"))
    MachineGroupID = Column(Integer, ForeignKey("MachineGroup.MachineGroupID", ondelete="SET NULL"))
    DocumentName   = Column(String(300), nullable=False)
    DocumentType   = Column(String(20))
    DocumentPath   = Column(String(1000), nullable=False)

    machine = relationship("Machine", back_populates="documents")
