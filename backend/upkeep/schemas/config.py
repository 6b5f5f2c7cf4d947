from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class ConfigUpdate(BaseModel):
    databasePath: Optional[str] = None
    uploadFolderPath: Optional[str] = None
    smtpServer: Optional[str] = None
    smtpPort: Optional[int] = Field(default=None, ge=1, le=65535)
    smtpSecure: Optional[bool] = None
    smtpTLS: Optional[bool] = None
    smtpUsername: Optional[str] = None
    # Boş bırakılırsa kayıtlı parola korunur
    smtpPassword: Optional[str] = None
    emailFrom: Optional[str] = None


class TestEmailIn(BaseModel):
    to: EmailStr
