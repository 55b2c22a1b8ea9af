"""User registration and listing endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from usage_backend.dependencies import get_registration_service
from usage_backend.schemas.usage import RegisterRequest, RegisterResponse, UsersResponse
from usage_backend.services import RegistrationService
from usage_backend.utils.exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])

ALREADY_REGISTERED_MESSAGE = "User already registered"


@router.post("/register", response_model=RegisterResponse, response_model_exclude_none=True)
async def register_user(
    payload: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
):
    """Register a user. Repeat registrations return the stored record with a message."""
    try:
        user, created = await service.register(
            user_id=payload.id,
            username=payload.username,
            email=payload.email,
            registered_at=payload.registered_at,
            version=payload.version,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail={"error": "missing_required_fields", "fields": exc.missing_fields},
        ) from exc
    except PersistenceError as exc:
        logger.error(f"Registration error: {exc}")
        raise HTTPException(status_code=500, detail="registration_failed") from exc

    if created:
        return RegisterResponse(success=True, user=user)
    return RegisterResponse(message=ALREADY_REGISTERED_MESSAGE, user=user)


@router.get("/users", response_model=UsersResponse)
async def list_users(service: RegistrationService = Depends(get_registration_service)):
    """Return all registered users (admin view)."""
    return UsersResponse(users=await service.list_users())
