"""Wire models for the /process endpoint and service utilities."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProcessRequest(BaseModel):
    """Incoming chat message.

    Both fields are optional at parse time so missing input is reported
    as the service's own 400 error rather than a schema validation error.
    """
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class SessionSnapshot(BaseModel):
    """Copy of the session fields exposed to the caller."""
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    id: str
    user_name: Optional[str] = Field(default=None, alias="userName")
    user_phone: Optional[str] = Field(default=None, alias="userPhone")
    user_email: Optional[str] = Field(default=None, alias="userEmail")
    model_interest: Optional[str] = Field(default=None, alias="modelInterest")
    surface_ha: Optional[int] = Field(default=None, alias="surfaceHA")
    messages: int = 0
    stage: str


class Needs(BaseModel):
    """External work the caller must do for this turn."""
    model_config = ConfigDict(populate_by_name=True)

    sheets: bool = False
    pinecone: bool = False
    save_lead: bool = Field(default=False, alias="saveLead")


class LookupInfo(BaseModel):
    """Which external lookup the sentinel response stands for."""
    kind: str
    model: str


class ProcessResponse(BaseModel):
    """Result of processing one chat message."""
    response: str
    session: SessionSnapshot
    needs: Needs
    intent: str
    model: Optional[str] = None
    lookup: Optional[LookupInfo] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class ResetResponse(BaseModel):
    cleared: int


class HealthResponse(BaseModel):
    status: str = "OK"
    name: str
    version: str
    endpoints: list[str] = Field(default_factory=list)
    timestamp: datetime
