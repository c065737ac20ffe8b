from datetime import datetime

from pydantic import BaseModel, Field


class Claims(BaseModel):
    """Verified identity of the caller"""
    subject_id: str = Field(..., description="User identifier (JWT 'sub')")
    username: str = Field(default="", description="Login name")
    is_admin: bool = Field(default=False, description="Admin privileges flag")
    expires_at: datetime = Field(..., description="Token expiry (UTC)")

    class Config:
        frozen = True
