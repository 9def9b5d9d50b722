from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """User as returned by the API; the password digest is not part of it"""
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "first_name": "Ana",
                "last_name": "Lopez",
                "email": "ana@x.com",
                "birthday": "1990-05-17",
                "created_at": "2026-01-03T10:30:00",
                "updated_at": "2026-01-03T10:30:00",
            }
        },
    )

    id: int = Field(description="Unique user identifier")
    first_name: str = Field(description="Given name")
    last_name: str = Field(description="Family name")
    email: str = Field(description="Unique email address")
    birthday: Optional[date] = Field(default=None, description="Date of birth")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last modification timestamp")
