from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.models import PortalCredential, User
from app.modules.auth.adapters.api.dependencies import get_current_user
from app.modules.portal import (
    CredentialsNotConfigured,
    CredentialsUnreadable,
    InvalidCredentialsInput,
    PortalCredentialService,
    PortalSessionService,
    SyncStatusRegistry,
    sync_status_registry,
)
from app.schemas import (
    PortalCredentialMetadataResponse,
    PortalCredentialUpsertRequest,
    PortalLoginCredentialsResponse,
    PortalSessionResponse,
    PortalSessionSaveRequest,
    PortalSessionSavedResponse,
    SyncStatusResponse,
    SyncStatusUpdateRequest,
)
from app.shared.infrastructure.database import get_db

router = APIRouter(prefix="/portal", tags=["portal"])


def get_credential_service(db: Session = Depends(get_db)) -> PortalCredentialService:
    return PortalCredentialService(db)


def get_session_service(db: Session = Depends(get_db)) -> PortalSessionService:
    return PortalSessionService(db)


def get_sync_status_registry() -> SyncStatusRegistry:
    return sync_status_registry


def _to_metadata_response(record: PortalCredential) -> PortalCredentialMetadataResponse:
    return PortalCredentialMetadataResponse(
        username=record.username,
        service_type=record.service_type,
        last_updated=record.updated_at,
        last_used=record.last_used_at,
    )


# ==================== CREDENTIALS ====================

@router.get("/credentials", response_model=PortalCredentialMetadataResponse)
async def get_credentials(
    current_user: User = Depends(get_current_user),
    service: PortalCredentialService = Depends(get_credential_service),
):
    """Stored portal login without the password."""
    record = service.get_metadata(current_user.id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No credentials found")
    return _to_metadata_response(record)


@router.put("/credentials", response_model=PortalCredentialMetadataResponse)
async def save_credentials(
    request: PortalCredentialUpsertRequest,
    current_user: User = Depends(get_current_user),
    service: PortalCredentialService = Depends(get_credential_service),
):
    try:
        record = service.save_credentials(
            user_id=current_user.id,
            username=request.username,
            password=request.password,
            service_type=request.service_type,
        )
    except InvalidCredentialsInput as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return _to_metadata_response(record)


@router.delete("/credentials", status_code=status.HTTP_204_NO_CONTENT)
async def delete_credentials(
    current_user: User = Depends(get_current_user),
    service: PortalCredentialService = Depends(get_credential_service),
):
    if not service.delete_credentials(current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No credentials found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/credentials/login", response_model=PortalLoginCredentialsResponse)
async def get_login_credentials(
    current_user: User = Depends(get_current_user),
    service: PortalCredentialService = Depends(get_credential_service),
):
    """Decrypted login handed to the portal automation."""
    try:
        credentials = service.get_login_credentials(current_user.id)
    except CredentialsNotConfigured:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No credentials found")
    except CredentialsUnreadable:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Stored portal password cannot be decrypted. Save the credentials again.",
        )
    return PortalLoginCredentialsResponse(
        username=credentials.username,
        password=credentials.password,
        service_type=credentials.service_type,
    )


# ==================== SESSION ====================

@router.put("/session", response_model=PortalSessionSavedResponse)
async def save_session(
    request: PortalSessionSaveRequest,
    current_user: User = Depends(get_current_user),
    service: PortalSessionService = Depends(get_session_service),
):
    record = service.save_session(current_user.id, request.cookies)
    return PortalSessionSavedResponse(expires_at=record.expires_at)


@router.get("/session", response_model=PortalSessionResponse)
async def get_session(
    current_user: User = Depends(get_current_user),
    service: PortalSessionService = Depends(get_session_service),
):
    cookies = service.load_session(current_user.id)
    if cookies is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active portal session")
    return PortalSessionResponse(cookies=cookies)


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    current_user: User = Depends(get_current_user),
    service: PortalSessionService = Depends(get_session_service),
):
    service.delete_session(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================== SYNC STATUS ====================

@router.get("/sync-status", response_model=SyncStatusResponse)
async def get_sync_status(
    current_user: User = Depends(get_current_user),
    registry: SyncStatusRegistry = Depends(get_sync_status_registry),
):
    return SyncStatusResponse(user_id=current_user.id, status=registry.get_status(current_user.id))


@router.put("/sync-status", response_model=SyncStatusResponse)
async def set_sync_status(
    request: SyncStatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    registry: SyncStatusRegistry = Depends(get_sync_status_registry),
):
    status_value = registry.set_status(current_user.id, request.status)
    return SyncStatusResponse(user_id=current_user.id, status=status_value)


@router.delete("/sync-status", status_code=status.HTTP_204_NO_CONTENT)
async def clear_sync_status(
    current_user: User = Depends(get_current_user),
    registry: SyncStatusRegistry = Depends(get_sync_status_registry),
):
    registry.clear_status(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
