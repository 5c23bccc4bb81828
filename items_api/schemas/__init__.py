# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from typing import Any, Optional

from pydantic import BaseModel

# Item field contents are opaque: anything JSON, null included.


class ItemCreate(BaseModel):
    location: Any = None
    contacts: Any = None
    image: Any = None
    call_logs: Any = None
    sms: Any = None


class ItemUpdate(BaseModel):
    name: Any = None
    description: Any = None


class ItemUpdated(BaseModel):
    id: Any
    name: Any = None
    description: Any = None


class ConnectionStatus(BaseModel):
    status: str
    message: str
    timestamp: str
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
