# app/schemas/common.py
from pydantic import BaseModel
from typing import Optional

class ErrorResponse(BaseModel):
    success: bool = False
    error: str

class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str

class DatabaseCheckResponse(BaseModel):
    success: bool
    message: str
    hasData: Optional[bool] = None
