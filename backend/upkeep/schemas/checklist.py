# upkeep/schemas/checklist.py
from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator

IntervalLiteral = Literal["daily", "weekly", "monthly", "semi", "annually", "custom"]


class ChecklistItemIn(BaseModel):
    Description: str = Field(min_length=1, max_length=500)
    Completed: bool = False


class ChecklistItemRead(ChecklistItemIn):
    model_config = ConfigDict(from_attributes=True)
    ItemID: int
    ChecklistID: Optional[int]


class ChecklistCreate(BaseModel):
    MachineID: Optional[int] = None
    MachineGroupID: Optional[int] = None
    Title: str = Field(min_length=1, max_length=200)
    IntervalType: IntervalLiteral
    CustomIntervalDays: Optional[int] = Field(default=None, ge=1)
    LastCompletedDate: Optional[datetime] = None
    items: List[ChecklistItemIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def _custom_needs_days(self):
        if self.IntervalType == "custom" and not self.CustomIntervalDays:
            raise ValueError("CustomIntervalDays is required for custom intervals")
        if self.MachineID is None and self.MachineGroupID is None:
            raise ValueError("MachineID or MachineGroupID is required")
        return self


class ChecklistUpdate(BaseModel):
    Title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    IntervalType: Optional[IntervalLiteral] = None
    CustomIntervalDays: Optional[int] = Field(default=None, ge=1)
    LastCompletedDate: Optional[datetime] = None
    # Verilirse madde listesi tamamen değişir
    items: Optional[List[ChecklistItemIn]] = None


class ChecklistRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    ChecklistID: int
    MachineID: Optional[int]
    MachineGroupID: Optional[int]
    Title: str
    IntervalType: str
    CustomIntervalDays: Optional[int]
    CreatedAt: datetime
    UpdatedAt: datetime
    LastPerformedDate: Optional[datetime]
    NextPlannedDate: Optional[datetime]
    Status_s: Optional[str]
    items: List[ChecklistItemRead] = Field(default_factory=list)


class ItemToggle(BaseModel):
    Completed: bool


class ChecklistCompleteIn(BaseModel):
    MachineID: Optional[int] = None
    Notes: Optional[str] = None


class ItemCompletionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    ItemCompletionID: int
    ItemID: Optional[int]
    Completed: bool


class CompletionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    CompletionID: int
    ChecklistID: Optional[int]
    MachineID: Optional[int]
    UserID: Optional[int]
    CompletionDate: datetime
    Notes: Optional[str]
    Status_s: Optional[str]
    items: List[ItemCompletionRead] = Field(default_factory=list)


class NotifyIn(BaseModel):
    days: int = Field(default=7, ge=0, le=365)
