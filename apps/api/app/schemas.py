from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, List, Optional, Literal

from app.modules.portal.domain.models import SyncStatus

# ==================== AUTH ====================

class UserLogin(BaseModel):
    email: str
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: "UserResponse"

class UserResponse(BaseModel):
    id: int
    email: str
    full_name: Optional[str]
    is_admin: bool
    created_at: datetime

    class Config:
        from_attributes = True


# ==================== PORTAL CREDENTIALS ====================

ServiceType = Literal["hair", "spa"]


class PortalCredentialUpsertRequest(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=1024, repr=False)
    service_type: Optional[ServiceType] = None


class PortalCredentialMetadataResponse(BaseModel):
    username: str
    service_type: Optional[ServiceType] = None
    last_updated: Optional[datetime] = None
    last_used: Optional[datetime] = None


class PortalLoginCredentialsResponse(BaseModel):
    username: str
    password: str
    service_type: Optional[ServiceType] = None


# ==================== PORTAL SESSION ====================

class PortalSessionSaveRequest(BaseModel):
    cookies: List[dict[str, Any]]


class PortalSessionSavedResponse(BaseModel):
    expires_at: datetime


class PortalSessionResponse(BaseModel):
    cookies: List[dict[str, Any]]


# ==================== SYNC STATUS ====================

class SyncStatusUpdateRequest(BaseModel):
    status: SyncStatus


class SyncStatusResponse(BaseModel):
    user_id: int
    status: SyncStatus


TokenResponse.model_rebuild()
