"""
Catalog entry models and request schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AppPayload(BaseModel):
    """Schema for creating or replacing a catalog entry"""
    title: str = Field(..., min_length=1, description="Display title")
    url: str = Field(..., min_length=1, description="Address the entry points to")
    image: Optional[str] = Field(None, description="Icon or image reference")
    healthpath: Optional[str] = Field(None, description="URL probed by the health proxy")


class App(AppPayload):
    """Catalog entry as stored in the apps table"""
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
