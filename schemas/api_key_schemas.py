from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ApiKeyCreate(BaseModel):
    # Blank values are rejected by the key store, not here
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=320)


class ApiKeyIssued(BaseModel):
    apiKey: str
    name: str
    email: str
    created: datetime
