from typing import List, Any, Optional
from pydantic import BaseModel, ConfigDict, Field

class Rule(BaseModel):
    """A violated rule carried in an alert record"""
    id: Optional[Any] = None
    message: Optional[Any] = None
    severity: Optional[Any] = None

    model_config = ConfigDict(extra="allow")  # Allow additional fields

class AlertRecord(BaseModel):
    """Fields extracted from the ``record`` object of an alert payload"""
    timestamp: Optional[Any] = None
    request_id: Optional[Any] = None
    message: Optional[Any] = None
    source_ip: Optional[Any] = None
    source_port: Optional[Any] = None
    destination_ip: Optional[Any] = None
    destination_port: Optional[Any] = None
    path: Optional[Any] = None
    rules: List[Rule] = Field(default_factory=list)

class OutboundMessage(BaseModel):
    """Body posted to the chat webhook"""
    text: str

class ForwardResult(BaseModel):
    """Outcome of a single webhook dispatch"""
    success: bool
    status_code: Optional[int] = None
    message: str
    error: Optional[str] = None
    target_url: Optional[str] = None
