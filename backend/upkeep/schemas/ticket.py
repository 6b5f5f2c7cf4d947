from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

TicketStatusLiteral = Literal["pending", "in progress", "late", "completed", "completed late"]


class TicketCreate(BaseModel):
    MachineID: int
    UserID: Optional[int] = None
    Title: str = Field(min_length=1, max_length=200)
    Description: str = Field(min_length=1, max_length=2000)
    Status_s: TicketStatusLiteral = "pending"
    ScheduledDate: datetime
    Critical: bool = False
    CategoryID: Optional[int] = None


class TicketUpdate(BaseModel):
    MachineID: Optional[int] = None
    UserID: Optional[int] = None
    Title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    Description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    Status_s: Optional[TicketStatusLiteral] = None
    ScheduledDate: Optional[datetime] = None
    Critical: Optional[bool] = None
    CategoryID: Optional[int] = None


class TicketAssign(BaseModel):
    UserID: int


class TicketComplete(BaseModel):
    CompletionNotes: Optional[str] = None
    External: bool = False


class TicketRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    TicketID: int
    MachineID: Optional[int]
    UserID: Optional[int]
    Title: str
    Description: str
    Status_s: TicketStatusLiteral
    CompletionNotes: Optional[str]
    ScheduledDate: datetime
    CompletedDate: Optional[datetime]
    CreatedAt: datetime
    UpdatedAt: datetime
    Critical: bool
    CategoryID: Optional[int]
    InterventionExternal: Optional[bool]


class ReportIn(BaseModel):
    problem: str = ""
    solution: str = ""
    notes: Optional[str] = None
    save_to_documents: bool = False
    email: bool = False
