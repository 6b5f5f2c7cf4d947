from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

from .user import UserRead

MachineStatusLiteral = Literal["active", "has problems", "under maintenance", "inactive"]


# ---- Suppliers ----
class SupplierCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    Website: Optional[str] = None
    Email: Optional[str] = None
    PhoneNumber: Optional[str] = None


class SupplierUpdate(BaseModel):
    Name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    Website: Optional[str] = None
    Email: Optional[str] = None
    PhoneNumber: Optional[str] = None


class SupplierRead(SupplierCreate):
    model_config = ConfigDict(from_attributes=True)
    SupplierID: int


# ---- Machines ----
class MachineCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    Description: Optional[str] = None
    Location: str = Field(min_length=1, max_length=200)
    SAPNumber: str = Field(min_length=1, max_length=50)
    SerialNumber: str = Field(min_length=1, max_length=100)
    UserID: Optional[int] = None
    Status_s: MachineStatusLiteral = "active"
    SupplierID: Optional[int] = None
    HasGenericAccessories: bool = False
    HasSpecialAccessories: bool = False
    MachineGroupID: Optional[int] = None
    MachineClass: Optional[str] = None


class MachineUpdate(BaseModel):
    Name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    Description: Optional[str] = None
    Location: Optional[str] = None
    SAPNumber: Optional[str] = None
    SerialNumber: Optional[str] = None
    UserID: Optional[int] = None
    Status_s: Optional[MachineStatusLiteral] = None
    SupplierID: Optional[int] = None
    HasGenericAccessories: Optional[bool] = None
    HasSpecialAccessories: Optional[bool] = None
    MachineGroupID: Optional[int] = None
    MachineClass: Optional[str] = None


class MachineRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    MachineID: int
    Name: str
    Description: Optional[str]
    Location: str
    SAPNumber: str
    SerialNumber: str
    UserID: Optional[int]
    Status_s: str
    SupplierID: Optional[int]
    HasGenericAccessories: bool
    HasSpecialAccessories: bool
    MachineGroupID: Optional[int]
    MachineClass: Optional[str]


# ---- Machine groups ----
class GroupMachineIn(BaseModel):
    SAPNumber: str = Field(min_length=1, max_length=50)
    SerialNumber: str = Field(min_length=1, max_length=100)
    Location: str = Field(min_length=1, max_length=200)
    UserID: Optional[int] = None
    MachineClass: Optional[str] = None


class MachineGroupCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    Description: Optional[str] = None
    SupplierID: Optional[int] = None
    HasAccessories: bool = False
    machines: List[GroupMachineIn] = Field(default_factory=list)


class MachineGroupUpdate(BaseModel):
    Name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    Description: Optional[str] = None
    SupplierID: Optional[int] = None
    HasAccessories: Optional[bool] = None


class MachineGroupRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    MachineGroupID: int
    Name: str
    Description: Optional[str]
    SupplierID: Optional[int]
    HasAccessories: bool


class MachineGroupDetail(MachineGroupRead):
    machines: List[MachineRead] = Field(default_factory=list)


class MachineDetail(MachineRead):
    user: Optional[UserRead] = None
    supplier: Optional[SupplierRead] = None
    machine_group: Optional[MachineGroupRead] = None


# ---- Categories ----
class CategoryCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    CategoryID: int
    MachineID: int
    Name: str


# ---- Accessories ----
class GenericAccessoryIn(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    Quantity: int = Field(default=1, ge=0)
    Notes: Optional[str] = None


class GenericAccessoryRead(GenericAccessoryIn):
    model_config = ConfigDict(from_attributes=True)
    AccessoryID: int
    MachineID: Optional[int]
    MachineGroupID: Optional[int]


class SpecialAccessoryIn(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    QualificationDate: Optional[datetime] = None
    Length: Optional[int] = None
    Diameter: Optional[int] = None
    Angle: Optional[int] = None
    Quantity: int = Field(default=1, ge=0)
    Notes: Optional[str] = None


class SpecialAccessoryRead(SpecialAccessoryIn):
    model_config = ConfigDict(from_attributes=True)
    AccessoryID: int
    MachineID: Optional[int]
    MachineGroupID: Optional[int]


# ---- Documents ----
class DocumentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    DocumentID: int
    MachineID: Optional[int]
    MachineGroupID: Optional[int]
    DocumentName: str
    DocumentType: Optional[str]
    DocumentPath: str


class SyncResult(BaseModel):
    added: int
    removed: int
