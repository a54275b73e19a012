from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime

class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    status: Optional[str] = "pending"
    priority: Optional[str] = "low"

class TaskUpdate(BaseModel):
    # Full replacement: anything omitted is written back as NULL
    title: str
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None

class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    status: Optional[str]
    created_at: Optional[datetime]
    priority: Optional[str]

    class Config:
        from_attributes = True

class DeleteResponse(BaseModel):
    success: bool

class ErrorResponse(BaseModel):
    error: str

class ValidationErrorResponse(BaseModel):
    error: str
    detail: List[Dict[str, Any]]
