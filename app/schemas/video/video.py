# app/schemas/video.py
from pydantic import BaseModel
from typing import Any, Dict, Optional

class StreamTokenRequest(BaseModel):
    userId: str
    userName: str
    role: Optional[str] = "user"

class StreamTokenResponse(BaseModel):
    success: bool = True
    token: str
    apiKey: str

class CallDetailsResponse(BaseModel):
    success: bool = True
    call: Dict[str, Any]
