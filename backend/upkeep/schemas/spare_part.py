from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SparePartCreate(BaseModel):
    MachineID: Optional[int] = None
    Name: str = Field(min_length=1, max_length=200)
    PartNumber: str = Field(min_length=1, max_length=100)
    Quantity: int = Field(default=1, ge=0)
    ReorderLevel: int = Field(default=1, ge=1)
    Location: Optional[str] = None
    Supplier: Optional[str] = None


class SparePartUpdate(BaseModel):
    MachineID: Optional[int] = None
    Name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    PartNumber: Optional[str] = Field(default=None, min_length=1, max_length=100)
    Quantity: Optional[int] = Field(default=None, ge=0)
    ReorderLevel: Optional[int] = Field(default=None, ge=1)
    Location: Optional[str] = None
    Supplier: Optional[str] = None


class SparePartRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    SparePartID: int
    MachineID: Optional[int]
    Name: str
    PartNumber: str
    Quantity: int
    ReorderLevel: int
    Location: Optional[str]
    Supplier: Optional[str]
