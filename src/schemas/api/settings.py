from typing import List, Optional

from pydantic import BaseModel, Field
from src.schemas.ai import AIProvider, ProviderStatus


class AISettingsResponse(BaseModel):
    selected: AIProvider
    providers: List[ProviderStatus]


class AISettingsUpdate(BaseModel):
    """Store a key and/or model for a provider, optionally making it the active one."""

    provider: AIProvider
    api_key: Optional[str] = Field(None, description="New API key; an empty string removes the stored key")
    model: Optional[str] = Field(None, description="Model override; an empty string restores the default")
    select: bool = Field(True, description="Make this provider the active one")


class KeyValidationRequest(BaseModel):
    provider: AIProvider
    api_key: str = Field(..., min_length=1)
    model: Optional[str] = None


class KeyValidationResponse(BaseModel):
    provider: AIProvider
    valid: bool
